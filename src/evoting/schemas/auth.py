"""Authentication schemas."""

from pydantic import BaseModel, EmailStr, Field


class TokenResponse(BaseModel):
    """JWT token response."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds


class LoginRequest(BaseModel):
    """Login request."""
    email: EmailStr
    password: str


class OtpRequest(BaseModel):
    """Request a one-time verification code."""
    email: EmailStr


class OtpConfirm(BaseModel):
    """Confirm a one-time verification code."""
    email: EmailStr
    code: str = Field(min_length=6, max_length=6, pattern=r"^\d{6}$")


class AdminRecoveryRequest(BaseModel):
    """Admin account recovery."""
    recovery_key: str
    email: EmailStr
    new_password: str = Field(min_length=8)
    name: str | None = None


class RecoveryInstructions(BaseModel):
    """Public admin recovery instructions."""
    enabled: bool
    steps: list[str]
