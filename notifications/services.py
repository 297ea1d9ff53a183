"""
NotificationService - per-user notification inbox

Writing is best-effort: ``emit`` runs in its own savepoint and never raises,
so a failed insert cannot roll back the order or moderation change that
triggered it.
"""

import logging
from typing import Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction

from marketplace.infra.observability.metrics import notification_emit_failures
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, paginate, service_err, service_ok

from .models import Notification

User = get_user_model()
logger = logging.getLogger(__name__)


class NotificationService(BaseService):
    """
    Service for creating and managing user notifications.
    """

    def emit(
        self,
        user,
        notification_type: str,
        title: str,
        message: str,
        related_order=None,
        related_product=None,
        metadata: Optional[dict] = None,
    ) -> Optional[Notification]:
        """
        Store a notification for ``user``.

        Returns:
            The created Notification, or None if it could not be stored.
        """
        try:
            with transaction.atomic():
                notification = Notification.objects.create(
                    user=user,
                    type=notification_type,
                    title=title[:100],
                    message=message[:500],
                    related_order=related_order,
                    related_product=related_product,
                    metadata=metadata or {},
                )
            self.logger.debug(f"Notification {notification.id} ({notification_type}) stored for user {user.pk}")
            return notification
        except Exception as e:
            notification_emit_failures.labels(type=notification_type).inc()
            self.logger.error(
                f"Failed to store {notification_type} notification for user {getattr(user, 'pk', None)}: {e}",
                exc_info=True,
            )
            return None

    @BaseService.log_performance
    def list_notifications(
        self, user: User, unread_only: bool = False, page: int = 1, page_size: int = None
    ) -> ServiceResult[dict]:
        """
        List a user's notifications, newest first.

        Returns:
            ServiceResult with {"notifications", "pagination", "unread_count"}
        """
        page_size = page_size or getattr(settings, "NOTIFICATIONS_PAGE_SIZE", 20)

        try:
            queryset = Notification.objects.filter(user=user)
            if unread_only:
                queryset = queryset.filter(is_read=False)

            notifications, pagination = paginate(queryset.order_by("-created_at"), page, page_size)
            unread_count = Notification.objects.filter(user=user, is_read=False).count()

            return service_ok({"notifications": notifications, "pagination": pagination, "unread_count": unread_count})

        except Exception as e:
            self.logger.error(f"Error listing notifications for user {user.id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def get_counts(self, user: User) -> ServiceResult[dict]:
        try:
            queryset = Notification.objects.filter(user=user)
            return service_ok(
                {"unread_count": queryset.filter(is_read=False).count(), "total_count": queryset.count()}
            )
        except Exception as e:
            self.logger.error(f"Error counting notifications for user {user.id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def mark_as_read(self, notification_id, user: User) -> ServiceResult[Notification]:
        try:
            notification = Notification.objects.get(id=notification_id)

            if notification.user_id != user.pk:
                return service_err(
                    ErrorCodes.NOT_NOTIFICATION_OWNER, "You can only mark your own notifications as read"
                )

            if not notification.is_read:
                notification.is_read = True
                notification.save(update_fields=["is_read"])

            return service_ok(notification)

        except Notification.DoesNotExist:
            return service_err(ErrorCodes.NOTIFICATION_NOT_FOUND, "Notification not found")
        except Exception as e:
            self.logger.error(f"Error marking notification {notification_id} as read: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def mark_all_as_read(self, user: User) -> ServiceResult[int]:
        try:
            updated = Notification.objects.filter(user=user, is_read=False).update(is_read=True)
            self.logger.info(f"Marked {updated} notifications as read for user {user.id}")
            return service_ok(updated)
        except Exception as e:
            self.logger.error(f"Error marking notifications as read for user {user.id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def delete_notification(self, notification_id, user: User) -> ServiceResult[bool]:
        try:
            notification = Notification.objects.get(id=notification_id)

            if notification.user_id != user.pk:
                return service_err(ErrorCodes.NOT_NOTIFICATION_OWNER, "You can only delete your own notifications")

            notification.delete()
            return service_ok(True)

        except Notification.DoesNotExist:
            return service_err(ErrorCodes.NOTIFICATION_NOT_FOUND, "Notification not found")
        except Exception as e:
            self.logger.error(f"Error deleting notification {notification_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def delete_all(self, user: User) -> ServiceResult[int]:
        try:
            deleted, _ = Notification.objects.filter(user=user).delete()
            self.logger.info(f"Deleted {deleted} notifications for user {user.id}")
            return service_ok(deleted)
        except Exception as e:
            self.logger.error(f"Error deleting notifications for user {user.id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))
