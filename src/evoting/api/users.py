"""User management endpoints."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from ..core.exceptions import InvalidInputError, ResourceNotFoundError
from ..database import ROLE_ADMIN, ROLE_OFFICER
from ..dependencies import (
    get_audit_repository,
    get_auth_service,
    get_user_repository,
    require_roles,
)
from ..gates import Identity
from ..repositories import AuditLogRepository, UserRepository
from ..schemas.user import Role, Status, UserCreate, UserResponse, UserStatusUpdate
from ..services import AuthService


router = APIRouter(prefix="/users", tags=["Users"])

require_admin = require_roles(ROLE_ADMIN)
require_staff = require_roles([ROLE_ADMIN, ROLE_OFFICER])


@router.get("", response_model=list[UserResponse])
async def list_users(
    role: Optional[Role] = None,
    user_status: Optional[Status] = Query(None, alias="status"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    _: Identity = Depends(require_admin),
    user_repo: UserRepository = Depends(get_user_repository),
):
    """List users, optionally filtered by role and status."""
    users = await user_repo.get_multi(skip=skip, limit=limit, role=role, status=user_status)
    return [UserResponse.model_validate(u) for u in users]


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    data: UserCreate,
    admin: Identity = Depends(require_admin),
    auth_service: AuthService = Depends(get_auth_service),
    audit_repo: AuditLogRepository = Depends(get_audit_repository),
):
    """Create an officer, candidate, voter or another admin."""
    user = await auth_service.create_user(
        email=data.email,
        password=data.password,
        name=data.name,
        role=data.role,
        status=data.status,
    )
    await audit_repo.record(
        action="CREATE_USER",
        entity="user",
        actor_id=admin.id,
        entity_id=str(user.id),
        payload={"role": user.role, "status": user.status},
    )
    return UserResponse.model_validate(user)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: UUID,
    _: Identity = Depends(require_staff),
    user_repo: UserRepository = Depends(get_user_repository),
):
    user = await user_repo.get(user_id)
    if not user:
        raise ResourceNotFoundError("User", str(user_id))
    return UserResponse.model_validate(user)


@router.patch("/{user_id}/status", response_model=UserResponse)
async def update_user_status(
    user_id: UUID,
    update: UserStatusUpdate,
    admin: Identity = Depends(require_admin),
    user_repo: UserRepository = Depends(get_user_repository),
    audit_repo: AuditLogRepository = Depends(get_audit_repository),
):
    """
    Activate, deactivate or suspend a user.

    Takes effect on the user's next request, since identities are never cached.
    """
    if user_id == admin.id:
        raise InvalidInputError("Administrators cannot change their own status")

    user = await user_repo.update(user_id, status=update.status)
    if not user:
        raise ResourceNotFoundError("User", str(user_id))

    await audit_repo.record(
        action="UPDATE_USER_STATUS",
        entity="user",
        actor_id=admin.id,
        entity_id=str(user.id),
        payload={"status": update.status},
    )
    return UserResponse.model_validate(user)
