"""Database models for the e-voting backend."""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import (
    CHAR,
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    TypeDecorator,
)
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
    relationship,
)


# Roles and statuses are stored as plain strings
ROLE_ADMIN = "ADMIN"
ROLE_OFFICER = "OFFICER"
ROLE_CANDIDATE = "CANDIDATE"
ROLE_VOTER = "VOTER"
ROLES = (ROLE_ADMIN, ROLE_OFFICER, ROLE_CANDIDATE, ROLE_VOTER)

STATUS_ACTIVE = "ACTIVE"
STATUS_INACTIVE = "INACTIVE"
STATUS_SUSPENDED = "SUSPENDED"
STATUS_PENDING = "PENDING"
STATUSES = (STATUS_ACTIVE, STATUS_INACTIVE, STATUS_SUSPENDED, STATUS_PENDING)


class GUID(TypeDecorator):
    """Platform-independent GUID type.

    Stored as CHAR(36) on MySQL and SQLite.
    """
    impl = CHAR(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and isinstance(value, UUID):
            return str(value)
        return value

    def process_result_value(self, value, dialect):
        if value is not None:
            if not isinstance(value, UUID):
                return UUID(value)
        return value


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class User(Base):
    """Administrators, officers, candidates and voters."""

    __tablename__ = "users"

    id: Mapped[UUID] = mapped_column(
        GUID(), primary_key=True, default=uuid4
    )
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), default=ROLE_VOTER, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default=STATUS_PENDING, nullable=False)
    email_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    otp_verifications: Mapped[list["OtpVerification"]] = relationship(
        "OtpVerification", back_populates="user", cascade="all, delete-orphan"
    )


class OtpVerification(Base):
    """One-time code issued to a user; only the bcrypt hash is kept."""

    __tablename__ = "otp_verifications"

    id: Mapped[UUID] = mapped_column(GUID(), primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    code_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    attempts: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    consumed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    user: Mapped["User"] = relationship("User", back_populates="otp_verifications")


class AuditLog(Base):
    """Append-only record of administrative actions."""

    __tablename__ = "audit_logs"

    id: Mapped[UUID] = mapped_column(GUID(), primary_key=True, default=uuid4)
    actor_type: Mapped[str] = mapped_column(String(20), nullable=False)  # 'system', 'user'
    actor_id: Mapped[Optional[UUID]] = mapped_column(GUID(), nullable=True)
    action: Mapped[str] = mapped_column(String(100), nullable=False)
    entity: Mapped[str] = mapped_column(String(100), nullable=False)
    entity_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    payload: Mapped[Optional[str]] = mapped_column(Text, nullable=True)  # JSON
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


async def init_db(engine: AsyncEngine) -> None:
    """Create all tables on ``engine``."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
