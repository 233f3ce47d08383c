"""Unit tests for configuration management."""
import pytest
from pydantic import ValidationError
from athenacli.config import DEFAULT_RESULT_PATH_TEMPLATE, Settings, get_settings


class TestSettings:
    """Test Settings configuration class."""

    def test_settings_has_default_values(self, monkeypatch):
        """Test Settings provides default values where applicable."""
        for name in ("AWS_REGION", "QUERY_TIMEOUT_SECONDS", "POLL_INTERVAL_SECONDS",
                     "RESULT_PATH_TEMPLATE", "ATHENA_DATABASE", "ATHENA_WORKGROUP"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.APP_NAME == "athenacli"
        assert settings.AWS_REGION == "eu-central-1"
        assert settings.QUERY_TIMEOUT_SECONDS == 3600.0
        assert settings.POLL_INTERVAL_SECONDS == 0.5
        assert settings.RESULT_PATH_TEMPLATE == DEFAULT_RESULT_PATH_TEMPLATE
        assert settings.ATHENA_DATABASE is None

    def test_settings_can_override_region(self, monkeypatch):
        """Test Settings loads AWS_REGION from environment."""
        monkeypatch.setenv("AWS_REGION", "us-west-2")

        settings = Settings(_env_file=None)

        assert settings.AWS_REGION == "us-west-2"

    def test_settings_parses_timeout(self, monkeypatch):
        """Test numeric settings are parsed from strings."""
        monkeypatch.setenv("QUERY_TIMEOUT_SECONDS", "90")

        settings = Settings(_env_file=None)

        assert settings.QUERY_TIMEOUT_SECONDS == 90.0

    def test_settings_rejects_invalid_timeout(self, monkeypatch):
        """Test a non-numeric timeout fails validation."""
        monkeypatch.setenv("QUERY_TIMEOUT_SECONDS", "soon")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_get_settings_returns_cached_instance(self):
        """Test get_settings returns cached Settings instance."""
        settings1 = get_settings()
        settings2 = get_settings()

        assert settings1 is settings2
