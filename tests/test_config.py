"""Tests for application configuration management."""

import os
import tempfile
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from drawdown.config import (
    Settings,
    get_global_settings,
    get_settings,
    reset_global_settings,
)


class TestSettings:
    """Test cases for Settings class."""

    def test_settings_loads_from_env_file(self):
        """Test that settings can load from a .env file."""
        with tempfile.NamedTemporaryFile(mode="w", suffix=".env", delete=False) as f:
            f.write("APP_ENV=production\n")
            f.write("SECRET_KEY=test-secret-key-123\n")
            f.write("LOG_LEVEL=DEBUG\n")
            f.write("DEFAULT_PROJECTION_YEARS=40\n")
            temp_env_file = f.name

        try:
            with patch.dict(os.environ, {}, clear=True):
                settings = Settings(_env_file=temp_env_file)

                assert settings.app_env == "production"
                assert settings.secret_key == "test-secret-key-123"
                assert settings.log_level == "DEBUG"
                assert settings.default_projection_years == 40
        finally:
            os.unlink(temp_env_file)

    def test_missing_secret_key_raises_exception(self):
        """Test that missing SECRET_KEY raises ValidationError."""
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValidationError) as exc_info:
                Settings(_env_file=None)

            assert "SECRET_KEY" in str(exc_info.value)

    def test_placeholder_secret_key_raises_exception(self):
        """Test that placeholder SECRET_KEY raises ValidationError."""
        with patch.dict(
            os.environ,
            {"SECRET_KEY": "your-secret-key-here-change-in-production"},
            clear=True,
        ):
            with pytest.raises(ValidationError) as exc_info:
                Settings(_env_file=None)

            assert "SECRET_KEY must be set to a secure value" in str(exc_info.value)

    def test_app_env_validation(self):
        """Test APP_ENV validation."""
        with patch.dict(
            os.environ,
            {"SECRET_KEY": "valid-secret-key-123", "APP_ENV": "invalid-env"},
            clear=True,
        ):
            with pytest.raises(ValidationError) as exc_info:
                Settings(_env_file=None)

            assert "APP_ENV must be one of" in str(exc_info.value)

    def test_log_level_validation(self):
        """Test LOG_LEVEL validation."""
        with patch.dict(
            os.environ,
            {"SECRET_KEY": "valid-secret-key-123", "LOG_LEVEL": "INVALID_LEVEL"},
            clear=True,
        ):
            with pytest.raises(ValidationError) as exc_info:
                Settings(_env_file=None)

            assert "LOG_LEVEL must be one of" in str(exc_info.value)

    def test_log_level_case_insensitive(self):
        """Test that LOG_LEVEL is case insensitive."""
        with patch.dict(
            os.environ,
            {"SECRET_KEY": "valid-secret-key-123", "LOG_LEVEL": "debug"},
            clear=True,
        ):
            settings = Settings(_env_file=None)
            assert settings.log_level == "DEBUG"

    @pytest.mark.parametrize(
        "name,value",
        [
            ("DEFAULT_PROJECTION_YEARS", "0"),
            ("DEFAULT_PROJECTION_YEARS", "51"),
            ("DEFAULT_TAXABLE_ACCOUNT_TAX_RATE", "0.75"),
        ],
    )
    def test_projection_default_bounds(self, name, value):
        """Test that projection defaults respect the engine's domain."""
        with patch.dict(
            os.environ, {"SECRET_KEY": "valid-secret-key-123", name: value}, clear=True
        ):
            with pytest.raises(ValidationError):
                Settings(_env_file=None)

    def test_default_values(self):
        """Test default values when environment variables are not set."""
        with patch.dict(os.environ, {"SECRET_KEY": "valid-secret-key-123"}, clear=True):
            settings = Settings(_env_file=None)

            assert settings.app_env == "development"
            assert settings.flask_app == "wsgi.py"
            assert settings.flask_env == "development"
            assert settings.log_level == "INFO"
            assert settings.default_taxable_account_tax_rate == 0.15
            assert settings.default_projection_years == 30
            assert settings.default_income_inflation_adjusted is False

    def test_get_settings_function(self):
        """Test the get_settings function."""
        with patch.dict(os.environ, {"SECRET_KEY": "valid-secret-key-123"}, clear=True):
            settings = get_settings()
            assert isinstance(settings, Settings)
            assert settings.secret_key == "valid-secret-key-123"

    def test_global_settings_cached_until_reset(self):
        """Test the global settings lifecycle."""
        with patch.dict(os.environ, {"SECRET_KEY": "first-secret-key"}, clear=True):
            first = get_global_settings()
        with patch.dict(os.environ, {"SECRET_KEY": "second-secret-key"}, clear=True):
            assert get_global_settings() is first
            reset_global_settings()
            assert get_global_settings().secret_key == "second-secret-key"
