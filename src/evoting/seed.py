"""Database seed: bootstrap the election administrator."""

from dataclasses import dataclass

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from .core.config import Settings
from .core.exceptions import ConfigurationError
from .core.security import hash_password
from .database import AuditLog, ROLE_ADMIN, STATUS_ACTIVE, User
from .repositories import AuditLogRepository, UserRepository


@dataclass
class SeedResult:
    admin_email: str
    admin_created: bool
    deleted_users: int


async def seed_database(session: AsyncSession, settings: Settings) -> SeedResult:
    """
    Upsert the administrator from ``ADMIN_EMAIL``/``ADMIN_PASSWORD`` and
    remove every non-admin account.

    Positions, candidates and voters are never seeded; they must go through
    the admin endpoints.

    Raises:
        ConfigurationError: admin credentials are not configured
    """
    if not settings.ADMIN_EMAIL or not settings.ADMIN_PASSWORD:
        raise ConfigurationError(
            "ADMIN_EMAIL and ADMIN_PASSWORD must be set to seed the administrator."
        )

    user_repo = UserRepository(User, session)
    audit_repo = AuditLogRepository(AuditLog, session)

    deleted = await user_repo.delete_non_admins()
    logger.info(f"Deleted {deleted} non-admin users")

    email = settings.ADMIN_EMAIL.lower()
    password_hash = hash_password(settings.ADMIN_PASSWORD)
    admin = await user_repo.get_by_email(email)

    if admin:
        admin = await user_repo.update(
            admin.id,
            password_hash=password_hash,
            name=settings.ADMIN_NAME,
            role=ROLE_ADMIN,
            status=STATUS_ACTIVE,
            email_verified=True,
        )
        created = False
    else:
        admin = await user_repo.create(
            email=email,
            password_hash=password_hash,
            name=settings.ADMIN_NAME,
            role=ROLE_ADMIN,
            status=STATUS_ACTIVE,
            email_verified=True,
        )
        created = True
    logger.info(f"Created/updated administrator: {admin.email}")

    await audit_repo.record(
        action="SEED_DATABASE",
        entity="system",
        actor_type="system",
        payload={"adminCreated": created, "adminEmail": admin.email},
    )

    return SeedResult(admin_email=admin.email, admin_created=created, deleted_users=deleted)
