"""Audit log repository."""

import json
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import select

from .base import BaseRepository
from ..database import AuditLog


class AuditLogRepository(BaseRepository[AuditLog]):
    """Repository for the append-only audit trail."""

    async def record(
        self,
        action: str,
        entity: str,
        actor_type: str = "user",
        actor_id: Optional[UUID] = None,
        entity_id: Optional[str] = None,
        payload: Optional[dict[str, Any]] = None,
    ) -> AuditLog:
        """Append an audit entry."""
        return await self.create(
            actor_type=actor_type,
            actor_id=actor_id,
            action=action,
            entity=entity,
            entity_id=entity_id,
            payload=json.dumps(payload) if payload is not None else None,
        )

    async def get_by_action(self, action: str) -> list[AuditLog]:
        result = await self.session.execute(
            select(AuditLog)
            .where(AuditLog.action == action)
            .order_by(AuditLog.created_at)
        )
        return list(result.scalars().all())
