"""Repository layer for data access."""

from .base import BaseRepository
from .user_repository import UserRepository
from .otp_repository import OtpRepository
from .audit_repository import AuditLogRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "OtpRepository",
    "AuditLogRepository",
]
