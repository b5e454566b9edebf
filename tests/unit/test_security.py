"""
Unit tests for password hashing and access tokens.
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import jwt
import pytest

from evoting.core.exceptions import AuthenticationError
from evoting.core.security import (
    create_access_token,
    decode_access_token,
    generate_otp,
    hash_password,
    verify_password,
)


SECRET = "test_secret_key_12345"


def test_hash_and_verify_password():
    """Hashes verify and never equal the plain text."""
    hashed = hash_password("correct horse")

    assert hashed != "correct horse"
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong horse", hashed)


def test_verify_password_with_corrupt_hash():
    assert verify_password("anything", "not-a-bcrypt-hash") is False


def test_access_token_claims():
    """Test token creation and decoding."""
    user_id = uuid4()
    before = int(datetime.now(timezone.utc).timestamp())

    token = create_access_token(user_id, "OFFICER", SECRET, expires_minutes=30)
    payload = decode_access_token(token, SECRET)

    assert payload.sub == str(user_id)
    assert payload.role == "OFFICER"
    assert payload.type == "access"
    assert before <= payload.iat
    assert abs(payload.exp - payload.iat - 30 * 60) <= 1


def test_expired_token():
    issued = datetime.now(timezone.utc) - timedelta(minutes=10)
    token = create_access_token(uuid4(), "VOTER", SECRET, expires_minutes=5, now=issued)

    with pytest.raises(AuthenticationError) as exc_info:
        decode_access_token(token, SECRET)

    assert exc_info.value.reason == "token_expired"


def test_token_wrong_secret():
    token = create_access_token(uuid4(), "VOTER", "secret1")

    with pytest.raises(AuthenticationError) as exc_info:
        decode_access_token(token, "secret2")

    assert exc_info.value.reason == "invalid_token"


def test_token_missing_claims():
    token = jwt.encode({"sub": str(uuid4())}, SECRET, algorithm="HS256")

    with pytest.raises(AuthenticationError) as exc_info:
        decode_access_token(token, SECRET)

    assert exc_info.value.reason == "invalid_token"


def test_non_access_token_rejected():
    now = int(datetime.now(timezone.utc).timestamp())
    token = jwt.encode(
        {"sub": str(uuid4()), "role": "VOTER", "type": "refresh", "exp": now + 600, "iat": now},
        SECRET,
        algorithm="HS256",
    )

    with pytest.raises(AuthenticationError) as exc_info:
        decode_access_token(token, SECRET)

    assert exc_info.value.reason == "invalid_token"


def test_generate_otp():
    codes = {generate_otp() for _ in range(20)}

    assert all(len(code) == 6 and code.isdigit() for code in codes)
    assert len(codes) > 1
