"""OTP verification repository."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import select, update

from .base import BaseRepository
from ..database import OtpVerification


class OtpRepository(BaseRepository[OtpVerification]):
    """Repository for one-time verification codes."""

    async def get_latest_active(self, user_id: UUID) -> Optional[OtpVerification]:
        """Newest unconsumed code for a user, expired or not."""
        result = await self.session.execute(
            select(OtpVerification)
            .where(
                OtpVerification.user_id == user_id,
                OtpVerification.consumed_at.is_(None),
            )
            .order_by(OtpVerification.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def consume_all(self, user_id: UUID) -> None:
        """Mark every outstanding code for a user as used."""
        await self.session.execute(
            update(OtpVerification)
            .where(
                OtpVerification.user_id == user_id,
                OtpVerification.consumed_at.is_(None),
            )
            .values(consumed_at=datetime.utcnow())
        )
