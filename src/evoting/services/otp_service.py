"""One-time code verification."""

from datetime import datetime, timedelta
from typing import Protocol

from loguru import logger

from ..repositories.user_repository import UserRepository
from ..repositories.otp_repository import OtpRepository
from ..core.security import generate_otp, hash_password, verify_password
from ..core.exceptions import InvalidOtpError
from ..database import STATUS_ACTIVE, STATUS_PENDING, User


class OtpSender(Protocol):
    """Delivers a code to a user."""

    async def send(self, email: str, code: str) -> None: ...


class LoggingOtpSender:
    """Writes codes to the debug log instead of delivering them."""

    async def send(self, email: str, code: str) -> None:
        logger.debug(f"OTP for {email}: {code}")


class OtpService:
    """Issues and confirms hashed one-time codes."""

    def __init__(
        self,
        user_repo: UserRepository,
        otp_repo: OtpRepository,
        sender: OtpSender,
        expiry_seconds: int = 600,
        max_attempts: int = 5,
    ):
        self.user_repo = user_repo
        self.otp_repo = otp_repo
        self.sender = sender
        self.expiry_seconds = expiry_seconds
        self.max_attempts = max_attempts

    async def request_otp(self, email: str) -> None:
        """
        Issue a fresh code, replacing any outstanding one.

        Unknown emails are ignored silently so callers cannot probe accounts.
        """
        user = await self.user_repo.get_by_email(email)
        if not user:
            logger.info("OTP requested for unknown email")
            return

        await self.otp_repo.consume_all(user.id)

        code = generate_otp()
        await self.otp_repo.create(
            user_id=user.id,
            code_hash=hash_password(code),
            expires_at=datetime.utcnow() + timedelta(seconds=self.expiry_seconds),
            attempts=0,
        )
        await self.sender.send(user.email, code)
        logger.info(f"OTP issued for user {user.id}")

    async def confirm(self, email: str, code: str) -> User:
        """
        Check a code; on success mark the email verified and activate a
        pending account.

        Raises:
            InvalidOtpError: unknown email, no outstanding code, expired,
                too many attempts or wrong code
        """
        user = await self.user_repo.get_by_email(email)
        if not user:
            raise InvalidOtpError()

        otp = await self.otp_repo.get_latest_active(user.id)
        if not otp:
            raise InvalidOtpError()

        if otp.expires_at < datetime.utcnow() or otp.attempts >= self.max_attempts:
            await self.otp_repo.consume_all(user.id)
            await self.otp_repo.session.commit()
            raise InvalidOtpError()

        if not verify_password(code, otp.code_hash):
            # Committed here so the request rollback keeps the attempt
            await self.otp_repo.update(otp.id, attempts=otp.attempts + 1)
            await self.otp_repo.session.commit()
            raise InvalidOtpError()

        await self.otp_repo.update(otp.id, consumed_at=datetime.utcnow())

        updates = {"email_verified": True}
        if user.status == STATUS_PENDING:
            updates["status"] = STATUS_ACTIVE
        return await self.user_repo.update(user.id, **updates)
