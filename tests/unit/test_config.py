"""
Unit tests for configuration.
"""

import pytest
from pydantic import ValidationError

from shared.config import Settings, WarrantyServiceSettings, settings
from shared.config.settings import Environment, LogLevel


class TestWarrantyServiceSettings:
    """Tests for WarrantyServiceSettings."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("WARRANTY_API_URL", raising=False)
        monkeypatch.delenv("WARRANTY_TIMEOUT_SECONDS", raising=False)

        config = WarrantyServiceSettings()

        assert config.api_url == "https://server1.eport.ws"
        assert config.batch_size == 10
        assert config.default_duration_months == 12
        assert config.timeout_seconds == 15.0

    def test_environment_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WARRANTY_API_URL", "https://warranty.example.com/")
        monkeypatch.setenv("WARRANTY_BATCH_SIZE", "4")

        config = WarrantyServiceSettings()

        assert config.base_url == "https://warranty.example.com"
        assert config.batch_size == 4


class TestSettings:
    """Tests for the root Settings."""

    def test_test_environment_is_active(self) -> None:
        assert settings.environment == Environment.TESTING
        assert settings.is_testing is True
        assert settings.warranty.base_url == "http://warranty.test"

    def test_log_level_is_uppercased(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "debug")

        assert Settings().log_level == LogLevel.DEBUG

    def test_bootstrap_disabled_without_credentials(self) -> None:
        assert settings.bootstrap.enabled is False

    def test_production_requires_jwt_secret(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.delenv("JWT_SECRET_KEY", raising=False)

        with pytest.raises(ValidationError):
            Settings()

    def test_production_with_jwt_secret(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("JWT_SECRET_KEY", "a-real-production-signing-key-of-some-length")

        assert Settings().is_production is True
