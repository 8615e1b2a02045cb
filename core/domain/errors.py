"""
Domain error taxonomy.

Raised by ledgers and adapters; the API layer maps each class to an HTTP
status code. Gateway rejections are NOT errors - they surface as
``PaymentStatus.FAILED`` on the order.
"""


class DomainError(Exception):
    """Base class for all expected business failures."""

    default_message = "Domain error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DomainError):
    """Malformed or incomplete input, or an illegal state transition."""

    default_message = "Validation failed"


class WebhookSignatureError(ValidationError):
    """Provider webhook payload failed signature verification."""

    default_message = "Webhook signature verification failed"


class NotFound(DomainError):
    """Referenced entity does not exist (or is not visible to the caller)."""

    default_message = "Resource not found"


class Forbidden(DomainError):
    """Caller is authenticated but not allowed to touch this resource."""

    default_message = "Not authorized to access this resource"


class Unauthorized(DomainError):
    """No caller identity was supplied."""

    default_message = "Authentication required"


class Conflict(DomainError):
    """Unique constraint violated (duplicate order code, RMA, payment id)."""

    default_message = "Resource already exists"


class DuplicateOrderCode(Conflict):
    """Order code already taken; the caller may allocate another."""

    default_message = "Order code already exists"


class ConcurrencyError(Conflict):
    """Raised when concurrent modification detected."""

    default_message = "Resource was modified concurrently"


class ServiceUnavailable(DomainError):
    """Payment provider not configured, disabled, or unreachable."""

    default_message = "Service unavailable"


class BadGateway(DomainError):
    """Payment provider answered with an error or timed out."""

    default_message = "Payment provider error"

    def __init__(self, message: str | None = None, provider_response: dict | None = None):
        super().__init__(message)
        self.provider_response = provider_response or {}
