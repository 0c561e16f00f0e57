"""
Custom domain exceptions for consistent error handling.

These exceptions are mapped to the standard error envelope by the
HTTPException handler in main.py. Payment verification outcomes are NOT
exceptions (see domain.enums.VerificationResult).
"""
from fastapi import HTTPException, status


class DomainError(HTTPException):
    """Base class for all domain-specific errors."""
    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST, details: dict | None = None):
        super().__init__(status_code=status_code, detail=message)
        self.message = message
        self.details = details or {}


class NotFoundError(DomainError):
    """Resource not found (404)."""
    def __init__(self, resource_type: str, identifier: str, details: dict | None = None):
        message = f"{resource_type} not found: {identifier}"
        super().__init__(message, status_code=status.HTTP_404_NOT_FOUND, details=details)


class ValidationError(DomainError):
    """Validation error (400)."""
    def __init__(self, message: str, field: str | None = None, details: dict | None = None):
        if field:
            message = f"Validation error on {field}: {message}"
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST, details=details)


class UnauthorizedError(DomainError):
    """Unauthorized access (401)."""
    def __init__(self, message: str = "Unauthorized", details: dict | None = None):
        super().__init__(message, status_code=status.HTTP_401_UNAUTHORIZED, details=details)


class PermissionDeniedError(DomainError):
    """Permission denied (403)."""
    def __init__(self, message: str = "Permission denied", details: dict | None = None):
        super().__init__(message, status_code=status.HTTP_403_FORBIDDEN, details=details)


class ConflictError(DomainError):
    """Resource conflict (409)."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, status_code=status.HTTP_409_CONFLICT, details=details)


class DuplicateOrderIdError(ConflictError):
    """The gateway handed out an order id the ledger already holds (409)."""
    def __init__(self, order_id: str):
        super().__init__(f"Order id already recorded: {order_id}", details={"orderId": order_id})
        self.order_id = order_id


class PayloadTooLargeError(DomainError):
    """Uploaded payload exceeds the configured limit (413)."""
    def __init__(self, limit_bytes: int):
        super().__init__(
            f"Upload exceeds {limit_bytes} bytes",
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            details={"limitBytes": limit_bytes},
        )


class GatewayError(DomainError):
    """Remote payment-order creation failed (502). Never retried."""
    def __init__(self, message: str = "Payment gateway request failed", details: dict | None = None):
        super().__init__(message, status_code=status.HTTP_502_BAD_GATEWAY, details=details)


class UpstreamServiceError(DomainError):
    """A proxied third-party API failed (502)."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, status_code=status.HTTP_502_BAD_GATEWAY, details=details)


class ServiceUnavailableError(DomainError):
    """Feature not configured on this deployment (503)."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, status_code=status.HTTP_503_SERVICE_UNAVAILABLE, details=details)
