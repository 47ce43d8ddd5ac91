"""Exception types raised by budgetbuddy."""

from typing import Any


class BudgetBuddyError(Exception):
    """Base class for all budgetbuddy errors."""


class UnauthenticatedError(BudgetBuddyError):
    """Raised when a user-scoped call is made without a valid session."""


class ValidationError(BudgetBuddyError):
    """Raised when form input fails client-side validation."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class ParseError(BudgetBuddyError):
    """Raised when a backend payload matches none of the known shapes."""


class NetworkError(BudgetBuddyError):
    """Raised when no response was received from the backend."""


class ApiError(BudgetBuddyError):
    """Raised for any non-2xx response from the backend."""

    def __init__(self, status: int, message: str, payload: Any = None) -> None:
        super().__init__(f"HTTP {status}: {message}")
        self.status = status
        self.message = message
        self.payload = payload

    @property
    def suppress_notification(self) -> bool:
        """Whether the boundary should keep this error out of notifications."""
        return False


class BadRequestError(ApiError):
    """400: usually an analytics endpoint whose preconditions are not met."""

    @property
    def suppress_notification(self) -> bool:
        return True


class AuthenticationError(ApiError):
    """401: the token was rejected and the session has been cleared."""


class NotFoundError(ApiError):
    """404: the resource does not exist (yet)."""

    @property
    def suppress_notification(self) -> bool:
        return True


class ServerError(ApiError):
    """5xx: the backend failed."""


def error_for_status(status: int, message: str, payload: Any = None) -> ApiError:
    """Build the ApiError subclass matching an HTTP status code."""
    if status == 400:
        return BadRequestError(status, message, payload)
    if status == 401:
        return AuthenticationError(status, message, payload)
    if status == 404:
        return NotFoundError(status, message, payload)
    if status >= 500:
        return ServerError(status, message, payload)
    return ApiError(status, message, payload)


def is_retryable(error: BaseException) -> bool:
    """Return True if a failed query may be attempted again."""
    if isinstance(error, (UnauthenticatedError, ValidationError, ParseError)):
        return False
    if isinstance(error, ApiError):
        return not isinstance(error, (AuthenticationError, BadRequestError, NotFoundError))
    return True
