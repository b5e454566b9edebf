"""Security utilities for authentication."""

import functools
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

import bcrypt
import jwt
from pydantic import BaseModel, ValidationError

from .exceptions import AuthenticationError


JWT_ALGORITHM = "HS256"
BCRYPT_ROUNDS = 12


class TokenPayload(BaseModel):
    """JWT token payload."""
    sub: str  # User ID
    role: str
    type: str  # "access"
    exp: int  # Expiration timestamp
    iat: int  # Issued at timestamp


def hash_password(password: str) -> str:
    """Hash password using bcrypt."""
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    try:
        return bcrypt.checkpw(
            plain_password.encode('utf-8'),
            hashed_password.encode('utf-8')
        )
    except ValueError:
        return False


@functools.lru_cache(maxsize=1)
def dummy_password_hash() -> str:
    """Hash of a random secret, checked when no account matches a login."""
    return hash_password(secrets.token_urlsafe(16))


def generate_otp(length: int = 6) -> str:
    """Generate a numeric one-time code."""
    return "".join(str(secrets.randbelow(10)) for _ in range(length))


def create_access_token(
    user_id: UUID,
    role: str,
    secret: str,
    expires_minutes: int = 60,
    algorithm: str = JWT_ALGORITHM,
    now: Optional[datetime] = None,
) -> str:
    """
    Create a signed access token.

    Args:
        user_id: User UUID, stored in ``sub``
        role: User role at issue time (informational only, never trusted)
        secret: Shared signing secret
        expires_minutes: Token lifetime
        now: Issue time, defaults to the current UTC time

    Returns:
        Encoded JWT token
    """
    now = now or datetime.now(timezone.utc)
    exp = now + timedelta(minutes=expires_minutes)

    payload = {
        "sub": str(user_id),
        "role": role,
        "type": "access",
        "exp": int(exp.timestamp()),
        "iat": int(now.timestamp()),
    }

    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_access_token(token: str, secret: str, algorithm: str = JWT_ALGORITHM) -> TokenPayload:
    """
    Decode and verify an access token.

    Raises:
        AuthenticationError: ``token_expired`` when the signature is valid but
            ``exp`` has passed, ``invalid_token`` for every other failure.
    """
    try:
        payload = TokenPayload(**jwt.decode(token, secret, algorithms=[algorithm]))
    except jwt.ExpiredSignatureError as e:
        raise AuthenticationError("Token expired", reason="token_expired") from e
    except (jwt.InvalidTokenError, ValidationError) as e:
        raise AuthenticationError("Invalid token", reason="invalid_token") from e

    if payload.type != "access":
        raise AuthenticationError("Invalid token", reason="invalid_token")

    return payload
