"""Tests for settings validation."""

import pytest
from pydantic import ValidationError

from sitecms.config import DEFAULT_JWT_SECRET, Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("ENVIRONMENT", "AUTH_JWT_SECRET", "AI_PROVIDER", "AI_API_KEY", "ADMIN_ROLES"):
        monkeypatch.delenv(name, raising=False)


@pytest.mark.unit
class TestSettings:
    def test_defaults(self) -> None:
        config = Settings(_env_file=None)

        assert config.environment == "development"
        assert config.ai_provider == "disabled"
        assert config.admin_roles == {"ADMIN", "OWNER"}
        assert config.site_name == "Website"
        assert config.is_production is False

    def test_production_requires_real_secret(self) -> None:
        with pytest.raises(ValidationError, match="AUTH_JWT_SECRET"):
            Settings(_env_file=None, environment="production")

    def test_production_with_secret(self) -> None:
        config = Settings(_env_file=None, environment="production", auth_jwt_secret="s3cr3t")

        assert config.is_production is True
        assert config.auth_jwt_secret != DEFAULT_JWT_SECRET

    def test_enabled_assistant_requires_key(self) -> None:
        with pytest.raises(ValidationError, match="AI_API_KEY"):
            Settings(_env_file=None, ai_provider="openai")

    def test_lists_are_parsed_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ADMIN_ROLES", "admin, editor ,")
        monkeypatch.setenv("CORS_ORIGINS", "https://site.example.com, https://admin.example.com")

        config = Settings(_env_file=None)

        assert config.admin_roles == {"ADMIN", "EDITOR"}
        assert config.cors_origins == ["https://site.example.com", "https://admin.example.com"]
