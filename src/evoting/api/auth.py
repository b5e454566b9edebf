"""Authentication API endpoints."""

from fastapi import APIRouter, Depends

from ..dependencies import get_auth_service, get_current_identity
from ..gates import Identity
from ..schemas.auth import LoginRequest, TokenResponse
from ..schemas.user import IdentityResponse
from ..services import AuthService


router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=TokenResponse)
async def login(
    request: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Login with email and password.

    Only ACTIVE accounts receive a token.
    """
    return await auth_service.login(email=request.email, password=request.password)


@router.get("/me", response_model=IdentityResponse)
async def get_current_user_info(
    identity: Identity = Depends(get_current_identity),
):
    """
    Get the authenticated caller.

    Requires valid access token in Authorization header.
    """
    return IdentityResponse.model_validate(identity)
