"""Admin recovery endpoints (public, guarded by the recovery key)."""

from fastapi import APIRouter, Depends

from ..dependencies import get_recovery_service
from ..schemas.auth import AdminRecoveryRequest, RecoveryInstructions
from ..schemas.user import UserResponse
from ..services import RecoveryService


router = APIRouter(prefix="/admin", tags=["Admin Recovery"])


@router.get("/instructions", response_model=RecoveryInstructions)
async def get_recovery_instructions(
    recovery_service: RecoveryService = Depends(get_recovery_service),
):
    return recovery_service.instructions()


@router.post("/recover", response_model=UserResponse)
async def recover_admin(
    request: AdminRecoveryRequest,
    recovery_service: RecoveryService = Depends(get_recovery_service),
):
    """
    Reset (or recreate) the administrator account.

    Disabled with 503 unless ADMIN_RECOVERY_KEY is configured.
    """
    user = await recovery_service.recover(
        recovery_key=request.recovery_key,
        email=request.email,
        new_password=request.new_password,
        name=request.name,
    )
    return UserResponse.model_validate(user)
