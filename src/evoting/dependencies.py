"""Dependency injection for FastAPI endpoints."""

from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from .connection import DatabaseService
from .core.config import Settings
from .database import AuditLog, OtpVerification, User
from .gates import Identity, RoleSpec, TokenGate, authorize
from .repositories import AuditLogRepository, OtpRepository, UserRepository
from .services import AuthService, OtpSender, OtpService, RecoveryService


# Application state
def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> DatabaseService:
    return request.app.state.database


def get_token_gate(request: Request) -> TokenGate:
    return request.app.state.token_gate


def get_otp_sender(request: Request) -> OtpSender:
    return request.app.state.otp_sender


# Database session dependency
async def get_session(
    database: DatabaseService = Depends(get_database),
) -> AsyncGenerator[AsyncSession, None]:
    """Get database session."""
    async with database.session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


# Repository dependencies
async def get_user_repository(
    session: AsyncSession = Depends(get_session)
) -> UserRepository:
    """Get UserRepository instance."""
    return UserRepository(User, session)


async def get_otp_repository(
    session: AsyncSession = Depends(get_session)
) -> OtpRepository:
    """Get OtpRepository instance."""
    return OtpRepository(OtpVerification, session)


async def get_audit_repository(
    session: AsyncSession = Depends(get_session)
) -> AuditLogRepository:
    """Get AuditLogRepository instance."""
    return AuditLogRepository(AuditLog, session)


# Service dependencies
async def get_auth_service(
    user_repo: UserRepository = Depends(get_user_repository),
    settings: Settings = Depends(get_settings),
) -> AuthService:
    """Get AuthService instance."""
    return AuthService(
        user_repo,
        secret=settings.JWT_SECRET,
        expires_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
        algorithm=settings.JWT_ALGORITHM,
    )


async def get_otp_service(
    user_repo: UserRepository = Depends(get_user_repository),
    otp_repo: OtpRepository = Depends(get_otp_repository),
    sender: OtpSender = Depends(get_otp_sender),
    settings: Settings = Depends(get_settings),
) -> OtpService:
    """Get OtpService instance."""
    return OtpService(
        user_repo,
        otp_repo,
        sender,
        expiry_seconds=settings.OTP_EXPIRY_SECONDS,
        max_attempts=settings.MAX_OTP_ATTEMPTS,
    )


async def get_recovery_service(
    user_repo: UserRepository = Depends(get_user_repository),
    audit_repo: AuditLogRepository = Depends(get_audit_repository),
    settings: Settings = Depends(get_settings),
) -> RecoveryService:
    """Get RecoveryService instance."""
    return RecoveryService(user_repo, audit_repo, settings.ADMIN_RECOVERY_KEY)


# Authentication dependencies
async def get_current_identity(
    request: Request,
    gate: TokenGate = Depends(get_token_gate),
    user_repo: UserRepository = Depends(get_user_repository),
) -> Identity:
    """
    Resolve the caller from the bearer token.

    Raises:
        AuthenticationError: token missing/invalid/expired or user inactive
        StoreUnavailableError: identity lookup failed in transport
    """
    return await gate.authenticate(request.headers, user_repo.get_identity)


def require_roles(*roles: RoleSpec):
    """Dependency factory: authenticated identity whose role is in ``roles``."""
    gate = authorize(*roles)

    async def dependency(
        identity: Identity = Depends(get_current_identity),
    ) -> Identity:
        return gate.check(identity)

    return dependency
