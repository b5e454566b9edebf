"""Request authentication and role checks.

``TokenGate`` turns request headers into an ``Identity``; ``RoleGate`` checks
that identity against an allow-list. Both raise typed exceptions from
``core.exceptions`` instead of touching the request.
"""

from typing import Awaitable, Callable, Iterable, Mapping, Optional, Union
from uuid import UUID

from loguru import logger
from pydantic import BaseModel
from sqlalchemy.exc import InterfaceError, OperationalError

from .core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    StoreUnavailableError,
)
from .core.security import JWT_ALGORITHM, decode_access_token


BEARER_PREFIX = "Bearer "

# Failures of the store itself, as opposed to "no such user"
STORE_TRANSPORT_ERRORS = (OperationalError, InterfaceError, OSError, TimeoutError)


class Identity(BaseModel):
    """Snapshot of the user making the current request."""

    id: UUID
    email: str
    name: str
    role: str
    status: str

    class Config:
        frozen = True
        from_attributes = True


IdentityLoader = Callable[[UUID], Awaitable[Optional[Identity]]]


def _header(headers: Mapping[str, str], name: str) -> Optional[str]:
    value = headers.get(name)
    if value is not None:
        return value
    return next((v for k, v in headers.items() if k.lower() == name), None)


class TokenGate:
    """Verifies ``Authorization: Bearer <jwt>`` and resolves an active identity."""

    def __init__(
        self,
        secret: str,
        algorithm: str = JWT_ALGORITHM,
        header: str = "authorization",
    ):
        self.secret = secret
        self.algorithm = algorithm
        self.header = header.lower()

    def extract_token(self, headers: Mapping[str, str]) -> str:
        """Return the raw token or raise ``missing_token``."""
        value = _header(headers, self.header)
        if not value or not value.startswith(BEARER_PREFIX):
            raise AuthenticationError("No token provided", reason="missing_token")

        token = value[len(BEARER_PREFIX):].strip()
        if not token:
            raise AuthenticationError("No token provided", reason="missing_token")
        return token

    async def authenticate(
        self,
        headers: Mapping[str, str],
        load_identity: IdentityLoader,
    ) -> Identity:
        """
        Authenticate a request.

        Raises:
            AuthenticationError: ``missing_token``, ``invalid_token``,
                ``token_expired`` or ``invalid_user``. Missing and inactive
                users produce the same error.
            StoreUnavailableError: the identity lookup failed in transport
        """
        token = self.extract_token(headers)
        payload = decode_access_token(token, self.secret, self.algorithm)

        try:
            user_id = UUID(payload.sub)
        except ValueError as e:
            raise AuthenticationError("Invalid token", reason="invalid_token") from e

        try:
            identity = await load_identity(user_id)
        except STORE_TRANSPORT_ERRORS as e:
            logger.error(f"Identity lookup failed: {e}")
            raise StoreUnavailableError() from e

        if identity is None or identity.status != "ACTIVE":
            raise AuthenticationError("Invalid or inactive user", reason="invalid_user")

        return identity


RoleSpec = Union[str, Iterable["RoleSpec"]]


def _flatten_roles(roles: Iterable[RoleSpec]):
    for role in roles:
        if isinstance(role, str):
            yield role
        else:
            yield from _flatten_roles(role)


class RoleGate:
    """Allows identities whose role is in a fixed set."""

    def __init__(self, roles: Iterable[RoleSpec]):
        self.allowed_roles = frozenset(_flatten_roles(roles))

    def check(self, identity: Optional[Identity]) -> Identity:
        if identity is None:
            raise AuthenticationError("Authentication required")
        if identity.role not in self.allowed_roles:
            raise AuthorizationError()
        return identity


def authorize(*roles: RoleSpec) -> RoleGate:
    """Build a ``RoleGate``; nested groupings of roles are flattened."""
    return RoleGate(roles)
