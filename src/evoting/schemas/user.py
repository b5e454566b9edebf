"""User schemas."""

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


Role = Literal["ADMIN", "OFFICER", "CANDIDATE", "VOTER"]
Status = Literal["ACTIVE", "INACTIVE", "SUSPENDED", "PENDING"]


class UserCreate(BaseModel):
    """User creation schema (admin only)."""
    email: EmailStr
    password: str = Field(min_length=8)
    name: str = Field(min_length=1, max_length=255)
    role: Role = "VOTER"
    status: Status = "PENDING"


class UserStatusUpdate(BaseModel):
    """Status change."""
    status: Status


class UserResponse(BaseModel):
    """User response schema."""
    id: UUID
    email: str
    name: str
    role: str
    status: str
    email_verified: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class IdentityResponse(BaseModel):
    """The caller's resolved identity."""
    id: UUID
    email: str
    name: str
    role: str
    status: str

    class Config:
        from_attributes = True


class VerificationResponse(BaseModel):
    """Result of a confirmed OTP."""
    message: str
    user: UserResponse
