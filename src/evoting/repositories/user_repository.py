"""User repository with authentication queries."""

from typing import Optional
from uuid import UUID

from sqlalchemy import delete, select

from .base import BaseRepository
from ..database import ROLE_ADMIN, User
from ..gates import Identity


class UserRepository(BaseRepository[User]):
    """Repository for User operations."""

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address (case-insensitive)."""
        result = await self.session.execute(
            select(User).where(User.email == email.lower())
        )
        return result.scalar_one_or_none()

    async def email_exists(self, email: str) -> bool:
        """Check if email is already registered."""
        result = await self.session.execute(
            select(User.id).where(User.email == email.lower())
        )
        return result.scalar_one_or_none() is not None

    async def get_identity(self, user_id: UUID) -> Optional[Identity]:
        """Point read of the columns the token gate needs."""
        result = await self.session.execute(
            select(User.id, User.email, User.name, User.role, User.status)
            .where(User.id == user_id)
        )
        row = result.one_or_none()
        if row is None:
            return None
        return Identity.model_validate(dict(row._mapping))

    async def get_admins(self) -> list[User]:
        """Get all admin users."""
        result = await self.session.execute(
            select(User).where(User.role == ROLE_ADMIN)
        )
        return list(result.scalars().all())

    async def delete_non_admins(self) -> int:
        """Delete every user whose role is not ADMIN; returns the count."""
        result = await self.session.execute(
            delete(User).where(User.role != ROLE_ADMIN)
        )
        return result.rowcount or 0
