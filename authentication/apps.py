import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class AuthenticationConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "authentication"

    def ready(self):
        """
        Initialize OpenTelemetry tracing for the API process.
        """
        try:
            from django.conf import settings

            from authentication.infra.observability.tracing import setup_tracing

            setup_tracing(
                service_name="bazaar-backend",
                otlp_endpoint=getattr(settings, "OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4318/v1/traces"),
                enable=getattr(settings, "OTEL_TRACING_ENABLED", False),
            )
        except Exception as e:
            logger.warning(f"Failed to initialize OpenTelemetry tracing: {e}")
