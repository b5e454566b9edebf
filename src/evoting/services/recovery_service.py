"""Administrator account recovery."""

import secrets
from typing import Optional

from loguru import logger

from ..repositories.user_repository import UserRepository
from ..repositories.audit_repository import AuditLogRepository
from ..core.security import hash_password
from ..core.exceptions import InvalidCredentialsError, RecoveryDisabledError
from ..schemas.auth import RecoveryInstructions
from ..database import ROLE_ADMIN, STATUS_ACTIVE, User


RECOVERY_STEPS = [
    "Obtain the ADMIN_RECOVERY_KEY configured on the server.",
    "POST /api/admin/recover with recovery_key, email and new_password.",
    "The administrator account is reactivated (or created) with the new password.",
    "Log in through /api/auth/login and rotate ADMIN_RECOVERY_KEY.",
]


class RecoveryService:
    """Resets the administrator account with a shared recovery key."""

    def __init__(
        self,
        user_repo: UserRepository,
        audit_repo: AuditLogRepository,
        recovery_key: Optional[str],
    ):
        self.user_repo = user_repo
        self.audit_repo = audit_repo
        self.recovery_key = recovery_key

    def instructions(self) -> RecoveryInstructions:
        return RecoveryInstructions(
            enabled=bool(self.recovery_key),
            steps=RECOVERY_STEPS,
        )

    async def recover(
        self,
        recovery_key: str,
        email: str,
        new_password: str,
        name: Optional[str] = None,
    ) -> User:
        """
        Reset or create the administrator account.

        Raises:
            RecoveryDisabledError: no recovery key is configured
            InvalidCredentialsError: wrong key, or the email belongs to a
                non-admin account
        """
        if not self.recovery_key:
            raise RecoveryDisabledError()

        if not secrets.compare_digest(recovery_key.encode(), self.recovery_key.encode()):
            logger.warning("Admin recovery attempted with an invalid key")
            raise InvalidCredentialsError("Invalid recovery key")

        user = await self.user_repo.get_by_email(email)
        if user and user.role != ROLE_ADMIN:
            raise InvalidCredentialsError("Invalid recovery key")

        if user:
            updates = {
                "password_hash": hash_password(new_password),
                "status": STATUS_ACTIVE,
                "email_verified": True,
            }
            if name:
                updates["name"] = name
            user = await self.user_repo.update(user.id, **updates)
            created = False
        else:
            user = await self.user_repo.create(
                email=email.lower(),
                password_hash=hash_password(new_password),
                name=name or "Election Administrator",
                role=ROLE_ADMIN,
                status=STATUS_ACTIVE,
                email_verified=True,
            )
            created = True

        await self.audit_repo.record(
            action="ADMIN_RECOVERY",
            entity="user",
            actor_type="system",
            entity_id=str(user.id),
            payload={"email": user.email, "created": created},
        )
        logger.warning(f"Administrator account {user.email} recovered")
        return user
