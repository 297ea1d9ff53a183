"""
Base classes and utilities for the service layer.

This module provides the ServiceResult pattern (inspired by Rust's Result type)
and BaseService class for all marketplace services.
"""

import logging
import time
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

from django.core.paginator import EmptyPage, Paginator

T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    A result type that encapsulates success or failure from service operations.

    Expected failures (missing rows, illegal transitions, validation) are
    returned, not raised, so views can translate them into HTTP responses.

    Attributes:
        ok: True if operation succeeded, False otherwise
        value: The success value (present if ok=True)
        error: Error code (present if ok=False)
        error_detail: Human-readable error message (present if ok=False)
        error_data: Extra structured context for the caller (e.g. valid transitions)

    Examples:
        >>> result = service_ok(order)
        >>> if result.ok:
        ...     return Response({"order": result.value}, 200)

        >>> result = service_err("order_not_found", "Order 123 not found")
        >>> print(result.error)  # "order_not_found"
    """

    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_detail: Optional[str] = None
    error_data: Optional[Dict[str, Any]] = None

    def to_dict(self) -> dict:
        """
        Convert to dictionary for JSON serialization.

        Returns:
            Dictionary with 'success' and either 'data' or 'error'/'detail'
        """
        if self.ok:
            return {"success": True, "data": self.value}
        body = {"success": False, "error": self.error, "detail": self.error_detail}
        if self.error_data:
            body.update(self.error_data)
        return body


def service_ok(value: T) -> ServiceResult[T]:
    """
    Create a successful ServiceResult.

    Args:
        value: The success value

    Returns:
        ServiceResult with ok=True and the value
    """
    return ServiceResult(ok=True, value=value)


def service_err(error: str, error_detail: str = "", **error_data) -> ServiceResult:
    """
    Create a failed ServiceResult.

    Args:
        error: Error code (e.g., "product_not_found", "invalid_transition")
        error_detail: Human-readable error message
        **error_data: Optional structured context returned alongside the error

    Returns:
        ServiceResult with ok=False and error information

    Example:
        >>> return service_err("invalid_transition", msg, valid_transitions=["delivered"])
    """
    return ServiceResult(ok=False, error=error, error_detail=error_detail or error, error_data=error_data or None)


class BaseService:
    """
    Base class for all services providing common functionality.

    Provides:
    - Logging with class name
    - Performance timing decorator

    Usage:
        class OrderService(BaseService):
            def __init__(self, inventory_service):
                super().__init__()
                self.inventory_service = inventory_service

            @BaseService.log_performance
            def get_order(self, order_id, user):
                self.logger.info(f"Fetching order {order_id}")
    """

    def __init__(self):
        """Initialize base service with logger."""
        self.logger = logging.getLogger(self.__class__.__module__ + "." + self.__class__.__name__)

    @staticmethod
    def log_performance(func: Callable) -> Callable:
        """
        Decorator to log performance of service methods.

        Logs execution time and any errors that occur.

        Example:
            @BaseService.log_performance
            def expensive_operation(self):
                ...
        """

        @wraps(func)
        def wrapper(self, *args, **kwargs):
            start_time = time.time()
            method_name = f"{self.__class__.__name__}.{func.__name__}"

            try:
                self.logger.debug(f"{method_name} started")
                result = func(self, *args, **kwargs)
                elapsed_time = (time.time() - start_time) * 1000  # Convert to ms

                # Log based on result type
                if isinstance(result, ServiceResult):
                    if result.ok:
                        self.logger.info(f"{method_name} completed successfully in {elapsed_time:.2f}ms")
                    else:
                        self.logger.warning(
                            f"{method_name} failed with error '{result.error}' in {elapsed_time:.2f}ms"
                        )
                else:
                    self.logger.info(f"{method_name} completed in {elapsed_time:.2f}ms")

                return result

            except Exception as e:
                elapsed_time = (time.time() - start_time) * 1000
                self.logger.error(
                    f"{method_name} raised exception after {elapsed_time:.2f}ms: {str(e)}",
                    exc_info=True,
                )
                raise

        return wrapper


# Common error codes for marketplace services
class ErrorCodes:
    """Standard error codes used across marketplace services."""

    # Product errors
    PRODUCT_NOT_FOUND = "product_not_found"
    PRODUCT_NOT_APPROVED = "product_not_approved"
    INVALID_QUANTITY = "invalid_quantity"

    # Order errors
    ORDER_NOT_FOUND = "order_not_found"
    ORDER_CANNOT_CANCEL = "order_cannot_cancel"
    INVALID_TRANSITION = "invalid_transition"
    INVALID_CURRENT_STATUS = "invalid_current_status"

    # Inventory errors
    INSUFFICIENT_STOCK = "insufficient_stock"

    # Notification errors
    NOTIFICATION_NOT_FOUND = "notification_not_found"

    # Review errors
    REVIEW_NOT_FOUND = "review_not_found"
    DUPLICATE_REVIEW = "duplicate_review"

    # Saved item errors
    SAVED_ITEM_NOT_FOUND = "saved_item_not_found"
    ALREADY_SAVED = "already_saved"

    # Permission errors
    PERMISSION_DENIED = "permission_denied"
    NOT_ORDER_OWNER = "not_order_owner"
    NOT_ORDER_SELLER = "not_order_seller"
    NOT_NOTIFICATION_OWNER = "not_notification_owner"
    NOT_PRODUCT_OWNER = "not_product_owner"
    NOT_REVIEW_OWNER = "not_review_owner"
    NOT_SAVED_ITEM_OWNER = "not_saved_item_owner"

    # Validation errors
    VALIDATION_ERROR = "validation_error"

    # Internal errors
    INTERNAL_ERROR = "internal_error"


def paginate(queryset, page: int = 1, page_size: int = 20):
    """
    Slice an ordered queryset into one page with Django's Paginator.

    Returns:
        Tuple of (items on the page, pagination block). Pages past the end
        are empty rather than clamped.
    """
    page = max(int(page or 1), 1)
    page_size = max(int(page_size or 1), 1)

    paginator = Paginator(queryset, page_size)
    try:
        items = list(paginator.page(page).object_list)
    except EmptyPage:
        items = []

    total_pages = paginator.num_pages if paginator.count else 0
    pagination = {
        "current_page": page,
        "total_pages": total_pages,
        "total_count": paginator.count,
        "page_size": page_size,
        "has_next": page < total_pages,
        "has_prev": page > 1,
    }
    return items, pagination
