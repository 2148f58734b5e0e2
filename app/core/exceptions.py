"""
Custom exceptions for the application
"""


class BaseAppException(Exception):
    """Base application exception"""
    def __init__(self, message: str, details: str = None):
        self.message = message
        self.details = details
        super().__init__(self.message)


class NotFoundError(BaseAppException):
    """Raised when a resource is not found"""
    pass


class ValidationError(BaseAppException):
    """Raised when validation fails"""
    def __init__(self, message: str, details: str = None, error_code: str = None):
        super().__init__(message, details)
        self.error_code = error_code


class AuthenticationError(BaseAppException):
    """Raised when authentication fails"""
    pass


class AuthorizationError(BaseAppException):
    """Raised when authorization fails"""
    pass


class ConflictError(BaseAppException):
    """Raised when a resource already exists (e.g. duplicate email)"""
    pass


class ExternalServiceError(BaseAppException):
    """Raised when external service calls fail"""
    def __init__(self, message: str, details: str = None, unavailable: bool = False):
        super().__init__(message, details)
        # True when the provider is not configured at all (503) rather than failing (502)
        self.unavailable = unavailable


class DatabaseError(BaseAppException):
    """Raised when database operations fail"""
    pass


_STATUS_CODES = {
    ValidationError: 400,
    AuthenticationError: 401,
    AuthorizationError: 403,
    NotFoundError: 404,
    ConflictError: 409,
    DatabaseError: 500,
}


def status_code_for(exc: BaseAppException) -> int:
    """HTTP status an application exception is surfaced as."""
    if isinstance(exc, ExternalServiceError):
        return 503 if exc.unavailable else 502
    for exc_type, code in _STATUS_CODES.items():
        if isinstance(exc, exc_type):
            return code
    return 500
