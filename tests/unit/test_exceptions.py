"""Unit tests for exception hierarchy."""

import pytest
from evoting.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    ConnectionFault,
    DatabaseConnectionError,
    EmailAlreadyExistsError,
    EVotingException,
    InvalidCredentialsError,
    ResourceNotFoundError,
    StoreUnavailableError,
)


def test_evoting_exception_base():
    """Test base exception defaults."""
    exc = EVotingException("test error")
    assert exc.message == "test error"
    assert exc.status_code == 400
    assert exc.reason == "error"
    assert str(exc) == "test error"


def test_authentication_error_reason():
    exc = AuthenticationError("Token expired", reason="token_expired")

    assert exc.status_code == 401
    assert exc.reason == "token_expired"


def test_resource_not_found_error():
    """Test resource not found message."""
    exc = ResourceNotFoundError("User", "1234")

    assert exc.status_code == 404
    assert "User" in str(exc)
    assert "1234" in str(exc)


def test_database_connection_error():
    """Test classified connection error."""
    original = ConnectionRefusedError(111, "Connection refused")
    exc = DatabaseConnectionError(ConnectionFault.CONNECTION_REFUSED, original)

    assert exc.fault is ConnectionFault.CONNECTION_REFUSED
    assert exc.original_error is original
    assert exc.reason == "connection_refused"
    assert exc.status_code == 503
    assert "Connection refused" in str(exc)


def test_database_connection_error_without_original():
    exc = DatabaseConnectionError(ConnectionFault.TIMED_OUT)

    assert exc.original_error is None
    assert "timed_out" in str(exc)


@pytest.mark.parametrize("exc, status", [
    (ConfigurationError("bad"), 500),
    (InvalidCredentialsError(), 401),
    (AuthorizationError(), 403),
    (EmailAlreadyExistsError(), 409),
    (StoreUnavailableError(), 503),
])
def test_exception_inheritance(exc, status):
    """Test exception hierarchy."""
    assert isinstance(exc, EVotingException)
    assert exc.status_code == status


def test_authorization_is_not_authentication():
    assert not issubclass(AuthorizationError, AuthenticationError)
    assert not issubclass(AuthenticationError, AuthorizationError)
