"""
Unit tests for settings loading.
"""

import pytest

from evoting.core.config import DEFAULT_ALLOWED_ORIGINS, Settings, load_settings
from evoting.core.exceptions import ConfigurationError


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("DATABASE_URL", "JWT_SECRET", "ENVIRONMENT", "FRONTEND_URL"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    settings = load_settings(
        _env_file=None,
        DATABASE_URL="mysql://u:p@db/votes",
        JWT_SECRET="s",
    )

    assert settings.PORT == 5000
    assert settings.DB_POOL_SIZE == 10
    assert settings.OTP_EXPIRY_SECONDS == 600
    assert settings.MAX_OTP_ATTEMPTS == 5
    assert settings.ADMIN_RECOVERY_KEY is None
    assert not settings.is_production


def test_reads_environment(clean_env):
    clean_env.setenv("DATABASE_URL", "mysql://u:p@db/votes")
    clean_env.setenv("JWT_SECRET", "from-env")
    clean_env.setenv("ENVIRONMENT", "Production")

    settings = load_settings(_env_file=None)

    assert settings.JWT_SECRET == "from-env"
    assert settings.is_production


@pytest.mark.parametrize("missing", ["DATABASE_URL", "JWT_SECRET"])
def test_missing_required_setting(clean_env, missing):
    values = {"DATABASE_URL": "mysql://u:p@db/votes", "JWT_SECRET": "s"}
    del values[missing]

    with pytest.raises(ConfigurationError) as exc_info:
        load_settings(_env_file=None, **values)

    assert missing in exc_info.value.message


def test_blank_secret_rejected(clean_env):
    with pytest.raises(ConfigurationError):
        load_settings(_env_file=None, DATABASE_URL="mysql://u:p@db/votes", JWT_SECRET="  ")


def test_allowed_origins_include_frontend():
    settings = Settings(
        _env_file=None,
        DATABASE_URL="mysql://u:p@db/votes",
        JWT_SECRET="s",
        FRONTEND_URL="https://vote.example.org/",
    )

    assert settings.allowed_origins[:len(DEFAULT_ALLOWED_ORIGINS)] == list(DEFAULT_ALLOWED_ORIGINS)
    assert settings.allowed_origins[-1] == "https://vote.example.org"
