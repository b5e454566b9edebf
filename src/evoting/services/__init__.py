"""Business logic services."""

from .auth_service import AuthService
from .otp_service import LoggingOtpSender, OtpSender, OtpService
from .recovery_service import RecoveryService

__all__ = [
    "AuthService",
    "LoggingOtpSender",
    "OtpSender",
    "OtpService",
    "RecoveryService",
]
