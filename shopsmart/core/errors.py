"""
Error taxonomy for order operations.

Every failure of an order, cart or payment operation is raised as one of these
exceptions. The API layer renders them as ``ErrorResponse`` bodies with the
matching HTTP status; nothing is retried.
"""
from typing import Optional


class OrderServiceError(Exception):
    """Base class for failures scoped to a single request."""

    status_code: int = 500
    error: str = "OrderServiceError"

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class BadRequestError(OrderServiceError):
    """Malformed, missing or invalid input."""

    status_code = 400
    error = "BadRequest"


class ForbiddenError(OrderServiceError):
    """The acting principal has no authority over the order."""

    status_code = 403
    error = "Forbidden"


class NotFoundError(OrderServiceError):
    """The order, product or cart does not exist."""

    status_code = 404
    error = "NotFound"


class InvalidStateError(OrderServiceError):
    """The transition is not legal from the current state."""

    status_code = 409
    error = "InvalidState"

    def __init__(self, message: str, current: Optional[str] = None, expected: Optional[str] = None):
        detail = None
        if current is not None or expected is not None:
            detail = f"current: {current or 'none'}, expected: {expected or 'none'}"
        super().__init__(message, detail)
        self.current = current
        self.expected = expected
