"""Custom exceptions for the application."""

from enum import Enum
from typing import Optional


class EVotingException(Exception):
    """Base exception for all e-voting errors."""
    def __init__(self, message: str, status_code: int = 400, reason: str = "error"):
        self.message = message
        self.status_code = status_code
        self.reason = reason
        super().__init__(self.message)


# Configuration Exceptions
class ConfigurationError(EVotingException):
    """Missing or malformed startup configuration."""
    def __init__(self, message: str):
        super().__init__(message, status_code=500, reason="configuration_error")


# Authentication Exceptions
class AuthenticationError(EVotingException):
    """Request could not be authenticated.

    ``reason`` is a stable machine-readable code: ``missing_token``,
    ``invalid_token``, ``token_expired``, ``invalid_user`` or
    ``authentication_required``.
    """
    def __init__(self, message: str = "Authentication required", reason: str = "authentication_required"):
        super().__init__(message, status_code=401, reason=reason)


class InvalidCredentialsError(EVotingException):
    """Invalid email or password."""
    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message, status_code=401, reason="invalid_credentials")


class InvalidOtpError(EVotingException):
    """OTP is wrong, expired or exhausted."""
    def __init__(self, message: str = "Invalid or expired verification code"):
        super().__init__(message, status_code=400, reason="invalid_otp")


# Authorization Exceptions
class AuthorizationError(EVotingException):
    """Authenticated identity lacks the required role."""
    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(message, status_code=403, reason="forbidden")


# Resource Exceptions
class ResourceNotFoundError(EVotingException):
    """Resource not found."""
    def __init__(self, resource: str, id: str):
        super().__init__(f"{resource} with id {id} not found", status_code=404, reason="not_found")


class EmailAlreadyExistsError(EVotingException):
    """Email already registered."""
    def __init__(self, message: str = "Email already exists"):
        super().__init__(message, status_code=409, reason="email_exists")


class InvalidInputError(EVotingException):
    """Invalid input data."""
    def __init__(self, message: str):
        super().__init__(message, status_code=400, reason="invalid_input")


class RecoveryDisabledError(EVotingException):
    """Admin recovery is not configured on this deployment."""
    def __init__(self, message: str = "Admin recovery is disabled"):
        super().__init__(message, status_code=503, reason="recovery_disabled")


# Store Exceptions
class StoreUnavailableError(EVotingException):
    """Database transport failure while serving a request."""
    def __init__(self, message: str = "Service temporarily unavailable"):
        super().__init__(message, status_code=503, reason="store_unavailable")


class ConnectionFault(str, Enum):
    """Classified cause of a database connection failure."""
    CONNECTION_REFUSED = "connection_refused"
    ACCESS_DENIED = "access_denied"
    HOST_UNRESOLVABLE = "host_unresolvable"
    TIMED_OUT = "timed_out"
    CONFIGURATION = "configuration_error"
    UNKNOWN = "unknown"


class DatabaseConnectionError(EVotingException):
    """Database probe failed; ``fault`` carries the classified cause."""
    def __init__(self, fault: ConnectionFault, original: Optional[BaseException] = None):
        detail = str(original) if original is not None else fault.value
        super().__init__(
            f"Database connection failed ({fault.value}): {detail}",
            status_code=503,
            reason=fault.value,
        )
        self.fault = fault
        self.original_error = original
