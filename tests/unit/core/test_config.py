"""Unit tests for application settings."""

import pytest
from pydantic import ValidationError

from orgmanager.config import Settings


class TestSettings:
    """Tests for Settings defaults and validation."""

    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.jwt_algorithm == "HS256"
        assert settings.access_token_expire_minutes == 15
        assert settings.refresh_token_expire_days == 7
        assert settings.rotate_refresh_tokens is False
        assert settings.bcrypt_rounds == 12
        assert settings.min_password_length == 6
        assert settings.tenant_namespace_prefix == "org_"

    def test_async_database_url(self):
        settings = Settings(
            _env_file=None, database_url="postgresql://u:p@db:5432/master_db"
        )

        assert settings.async_database_url.startswith("postgresql+asyncpg://")
        assert settings.async_database_url.endswith("/master_db")

    def test_short_secret_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, secret_key="too-short")

    def test_default_secret_rejected_in_production(self):
        settings = Settings(_env_file=None, environment="production")

        with pytest.raises(ValueError, match="SECRET_KEY"):
            _ = settings.is_production

    def test_production_with_real_secret(self):
        settings = Settings(
            _env_file=None, environment="production", secret_key="s" * 40
        )

        assert settings.is_production is True
        assert settings.is_development is False

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("ROTATE_REFRESH_TOKENS", "true")
        monkeypatch.setenv("TENANT_NAMESPACE_PREFIX", "tenant_")

        settings = Settings(_env_file=None)

        assert settings.rotate_refresh_tokens is True
        assert settings.tenant_namespace_prefix == "tenant_"
