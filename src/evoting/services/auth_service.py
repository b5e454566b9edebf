"""Authentication service."""

from ..repositories.user_repository import UserRepository
from ..core.security import (
    create_access_token,
    dummy_password_hash,
    hash_password,
    verify_password,
)
from ..core.exceptions import EmailAlreadyExistsError, InvalidCredentialsError
from ..schemas.auth import TokenResponse
from ..database import STATUS_ACTIVE, STATUS_PENDING, ROLE_VOTER, User


class AuthService:
    """Password login and account creation."""

    def __init__(
        self,
        user_repo: UserRepository,
        secret: str,
        expires_minutes: int = 60,
        algorithm: str = "HS256",
    ):
        self.user_repo = user_repo
        self.secret = secret
        self.expires_minutes = expires_minutes
        self.algorithm = algorithm

    def issue_token(self, user: User) -> TokenResponse:
        access_token = create_access_token(
            user_id=user.id,
            role=user.role,
            secret=self.secret,
            expires_minutes=self.expires_minutes,
            algorithm=self.algorithm,
        )
        return TokenResponse(
            access_token=access_token,
            token_type="bearer",
            expires_in=self.expires_minutes * 60,
        )

    async def login(self, email: str, password: str) -> TokenResponse:
        """Login and return an access token.

        Unknown email, wrong password and inactive account all raise the same
        error, and each path runs one bcrypt check.
        """
        user = await self.user_repo.get_by_email(email)

        if not user:
            verify_password(password, dummy_password_hash())
            raise InvalidCredentialsError()

        if not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()

        if user.status != STATUS_ACTIVE:
            raise InvalidCredentialsError()

        return self.issue_token(user)

    async def create_user(
        self,
        email: str,
        password: str,
        name: str,
        role: str = ROLE_VOTER,
        status: str = STATUS_PENDING,
        email_verified: bool = False,
    ) -> User:
        """Create a user with a hashed password."""
        if await self.user_repo.email_exists(email):
            raise EmailAlreadyExistsError(f"Email {email} already registered")

        return await self.user_repo.create(
            email=email.lower(),
            password_hash=hash_password(password),
            name=name,
            role=role,
            status=status,
            email_verified=email_verified,
        )
