"""
Custom Exceptions for the LearnLink client
==========================================

Every failure a screen can show the user derives from LearnLinkError:

1. NetworkError     - the API could not be reached
2. ApiError         - the API answered with an error status or success=false
3. ValidationError  - a form failed a client-side check before sending

Usage:
    from learnlink.exceptions import ApiError, ValidationError

    if not form.email:
        raise ValidationError("Please fill in all required fields", field="email")

    try:
        await api.parent.cancel_booking(booking_id)
    except ApiError as e:
        logger.warning(f"Cancel failed: {e}")
        raise
"""

from typing import Optional, Any, Dict


class LearnLinkError(Exception):
    """Base exception for all LearnLink client errors"""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


# ============================================
# Transport Errors
# ============================================

class NetworkError(LearnLinkError):
    """The API could not be reached (connect failure, timeout, broken response)"""

    def __init__(self, message: str = "Cannot connect to server. Is the API running?",
                 cause: Optional[str] = None):
        details = {"cause": cause} if cause else {}
        super().__init__(message, code="NETWORK_ERROR", details=details)


# ============================================
# API-reported Errors
# ============================================

class ApiError(LearnLinkError):
    """The API reported a failure"""

    def __init__(
        self,
        message: str,
        status_code: int = 0,
        payload: Optional[Any] = None
    ):
        super().__init__(
            message,
            code="API_ERROR",
            details={"status_code": status_code}
        )
        self.status_code = status_code
        self.payload = payload


class AuthenticationError(LearnLinkError):
    """Login failed or the stored token cannot be used"""

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, code="AUTH_FAILED")


class InvalidTokenError(AuthenticationError):
    """Token could not be decoded"""

    def __init__(self):
        super().__init__("Invalid token")
        self.code = "INVALID_TOKEN"


class NotAuthenticatedError(LearnLinkError):
    """An action needs a session but nobody is logged in"""

    def __init__(self, message: str = "Please log in to continue"):
        super().__init__(message, code="NOT_AUTHENTICATED")


# ============================================
# Client-side Errors
# ============================================

class ValidationError(LearnLinkError):
    """Input validation failed before anything was sent"""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)
        self.field = field


class InvalidFileTypeError(ValidationError):
    """Upload is not an accepted file type"""

    def __init__(self, file_type: str, allowed: str = "image"):
        super().__init__(f"Please select an {allowed} file (got {file_type or 'unknown type'})", field="image")
        self.code = "INVALID_FILE_TYPE"


class FileTooLargeError(ValidationError):
    """Upload exceeds the size limit"""

    def __init__(self, size_mb: float, max_mb: float):
        super().__init__(f"File size must be less than {max_mb:g}MB (got {size_mb:.1f}MB)", field="image")
        self.code = "FILE_TOO_LARGE"


class RouteNotFoundError(LearnLinkError):
    """No screen is registered for a path"""

    def __init__(self, path: str):
        super().__init__(
            f"Page not found: {path}",
            code="ROUTE_NOT_FOUND",
            details={"path": path}
        )
