"""
Custom exception classes for the application.

All custom exceptions inherit from base AppException for consistent error handling.
"""


class AppException(Exception):
    """
    Base application exception.

    All custom exceptions should inherit from this class.

    Attributes:
        message: Error message
        code: Error code
        status_code: HTTP status code
    """

    def __init__(
        self,
        message: str,
        code: str = "APP_ERROR",
        status_code: int = 500
    ):
        """
        Initialize AppException.

        Args:
            message: Error message
            code: Error code
            status_code: HTTP status code
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(self.message)


# Authentication Exceptions

class TokenExpiredError(AppException):
    """JWT token has expired."""

    def __init__(self, message: str = "Token has expired"):
        super().__init__(message=message, code="TOKEN_EXPIRED", status_code=401)


class InvalidTokenError(AppException):
    """Invalid JWT token."""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message=message, code="INVALID_TOKEN", status_code=401)


# Validation Exceptions

class ValidationError(AppException):
    """Validation error."""

    def __init__(self, message: str = "Validation failed"):
        super().__init__(message=message, code="VALIDATION_ERROR", status_code=422)


class InvalidParametersError(AppException):
    """Calculation input is non-numeric, out of domain or a zero divisor."""

    def __init__(self, message: str = "Invalid calculation parameters"):
        super().__init__(message=message, code="INVALID_PARAMETERS", status_code=400)


# Resource Exceptions

class AccountNotFoundError(AppException):
    """Account not found (or not owned by the requesting user)."""

    def __init__(self, message: str = "Account not found"):
        super().__init__(message=message, code="ACCOUNT_NOT_FOUND", status_code=404)


# External Service Exceptions

class RateProviderUnavailableError(AppException):
    """Exchange rate provider unreachable or returned unusable data."""

    def __init__(self, message: str = "Exchange rate provider unavailable"):
        super().__init__(message=message, code="RATE_PROVIDER_UNAVAILABLE", status_code=503)


# Database Exceptions

class PersistenceFailureError(AppException):
    """A write failed and the whole unit of work was rolled back. Safe to retry."""

    def __init__(self, message: str = "Failed to persist changes, please retry"):
        super().__init__(message=message, code="PERSISTENCE_FAILURE", status_code=503)


