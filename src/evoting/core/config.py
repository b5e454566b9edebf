"""Configuration for the e-voting backend."""

from typing import Optional

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings

from .exceptions import ConfigurationError


# Local development origins accepted by CORS in every environment
DEFAULT_ALLOWED_ORIGINS = (
    "http://localhost:3000",  # React
    "http://localhost:5173",  # Vite
    "http://localhost:3063",
)


class Settings(BaseSettings):
    """Backend configuration settings.

    ``DATABASE_URL`` and ``JWT_SECRET`` have no defaults: a deployment without
    them must not start.
    """

    # Database
    DATABASE_URL: str
    DB_POOL_SIZE: int = 10
    DB_CONNECT_TIMEOUT: int = 10

    # Tokens
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # HTTP
    ENVIRONMENT: str = "development"
    HOST: str = "localhost"
    PORT: int = 5000
    FRONTEND_URL: Optional[str] = None
    LOG_LEVEL: str = "INFO"

    # OTP verification
    OTP_EXPIRY_SECONDS: int = 600
    MAX_OTP_ATTEMPTS: int = 5

    # Administrator bootstrap and recovery
    ADMIN_EMAIL: Optional[str] = None
    ADMIN_PASSWORD: Optional[str] = None
    ADMIN_NAME: str = "Election Administrator"
    ADMIN_RECOVERY_KEY: Optional[str] = None

    class Config:
        env_file = ".env"
        extra = "ignore"

    @field_validator("DATABASE_URL", "JWT_SECRET")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be empty")
        return value

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def allowed_origins(self) -> list[str]:
        origins = list(DEFAULT_ALLOWED_ORIGINS)
        if self.FRONTEND_URL:
            origins.append(self.FRONTEND_URL.rstrip("/"))
        return origins


def load_settings(**overrides) -> Settings:
    """Load settings from the environment, failing with ConfigurationError."""
    try:
        return Settings(**overrides)
    except ValidationError as e:
        missing = ", ".join(
            ".".join(str(part) for part in err["loc"]) for err in e.errors()
        )
        raise ConfigurationError(f"Invalid configuration: {missing}") from e
