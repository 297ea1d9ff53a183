from rest_framework import status
from rest_framework.response import Response

from marketplace.services import ErrorCodes, ServiceResult


ERROR_STATUS = {
    ErrorCodes.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.INVALID_QUANTITY: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.PRODUCT_NOT_APPROVED: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.INSUFFICIENT_STOCK: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.INVALID_TRANSITION: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.INVALID_CURRENT_STATUS: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.ORDER_CANNOT_CANCEL: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.DUPLICATE_REVIEW: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.ALREADY_SAVED: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.PRODUCT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.ORDER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.NOTIFICATION_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.REVIEW_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.SAVED_ITEM_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.PERMISSION_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorCodes.NOT_ORDER_OWNER: status.HTTP_403_FORBIDDEN,
    ErrorCodes.NOT_ORDER_SELLER: status.HTTP_403_FORBIDDEN,
    ErrorCodes.NOT_NOTIFICATION_OWNER: status.HTTP_403_FORBIDDEN,
    ErrorCodes.NOT_PRODUCT_OWNER: status.HTTP_403_FORBIDDEN,
    ErrorCodes.NOT_REVIEW_OWNER: status.HTTP_403_FORBIDDEN,
    ErrorCodes.NOT_SAVED_ITEM_OWNER: status.HTTP_403_FORBIDDEN,
}


def error_response(result: ServiceResult) -> Response:
    """Translate a failed ServiceResult into its HTTP response; unknown codes are 500s."""
    http_status = ERROR_STATUS.get(result.error, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response(result.to_dict(), status=http_status)


def validation_error_response(errors) -> Response:
    return Response(
        {"success": False, "error": ErrorCodes.VALIDATION_ERROR, "detail": "Validation failed", "errors": errors},
        status=status.HTTP_400_BAD_REQUEST,
    )
