"""
Custom exceptions for consistent error reporting.

Every failure a screen can run into is mapped to one of these, and
`describe_error` turns it into the text shown in a notification.
"""

from typing import Any, Dict, Optional


NO_RESPONSE_MESSAGE = "No response from server. Please check your connection."


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, error_code: str, status_code: int = 500, details: Dict[str, Any] = None):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class FormValidationError(AppException):
    """Raised when a draft fails its required-field rules before submission."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message=message,
            error_code="ERR_VALIDATION",
            status_code=422,
            details={"field": field} if field else {}
        )


class TransportError(AppException):
    """Raised when the request never produced a response."""

    def __init__(self, message: str = NO_RESPONSE_MESSAGE, details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code="ERR_TRANSPORT",
            status_code=0,
            details=details
        )


class BackendError(AppException):
    """Raised for non-2xx responses. Carries the decoded response body."""

    def __init__(self, status_code: int, data: Any = None, error_code: str = "ERR_BACKEND"):
        self.data = data
        self.backend_message = extract_message(data)
        super().__init__(
            message=self.backend_message or f"Server error (Status: {status_code})",
            error_code=error_code,
            status_code=status_code,
            details={"response": data} if data is not None else {}
        )

    @property
    def response(self) -> Dict[str, Any]:
        return {"status": self.status_code, "data": self.data}


class AuthenticationError(BackendError):
    """Raised for authentication failures (HTTP 401)."""

    def __init__(self, data: Any = None):
        super().__init__(status_code=401, data=data, error_code="ERR_AUTH_001")


class ResourceNotFoundError(BackendError):
    """Raised when the requested record does not exist (HTTP 404)."""

    def __init__(self, data: Any = None):
        super().__init__(status_code=404, data=data, error_code="ERR_NOT_FOUND_001")


class MalformedExportError(BackendError):
    """Raised when an export endpoint answers with a JSON error instead of a file."""

    def __init__(self, status_code: int, data: Any = None):
        super().__init__(status_code=status_code, data=data, error_code="ERR_EXPORT_001")


def extract_message(data: Any) -> Optional[str]:
    """Pull the human readable message out of a backend error body."""
    if not isinstance(data, dict):
        return None
    for key in ("message", "error"):
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def describe_error(exc: Exception, fallback: str) -> str:
    """
    Notification text for a failed action.

    Backend messages are shown verbatim, transport failures get the
    no-response text and everything else falls back to `fallback`.
    """
    if isinstance(exc, BackendError):
        return exc.backend_message or fallback
    if isinstance(exc, AppException):
        return exc.message or fallback
    return fallback
