"""OTP verification endpoints (public)."""

from fastapi import APIRouter, Depends, status

from ..dependencies import get_otp_service
from ..schemas.auth import OtpConfirm, OtpRequest
from ..schemas.user import UserResponse, VerificationResponse
from ..services import OtpService


router = APIRouter(prefix="/verify", tags=["Verification"])


@router.post("/request-otp", status_code=status.HTTP_202_ACCEPTED)
async def request_otp(
    request: OtpRequest,
    otp_service: OtpService = Depends(get_otp_service),
):
    """
    Send a one-time code to the given email.

    Always returns 202 to prevent email enumeration.
    """
    await otp_service.request_otp(request.email)

    return {
        "message": "If the email is registered, a verification code has been sent"
    }


@router.post("/confirm", response_model=VerificationResponse)
async def confirm_otp(
    request: OtpConfirm,
    otp_service: OtpService = Depends(get_otp_service),
):
    """Confirm a one-time code."""
    user = await otp_service.confirm(request.email, request.code)
    return VerificationResponse(
        message="Email verified",
        user=UserResponse.model_validate(user),
    )
