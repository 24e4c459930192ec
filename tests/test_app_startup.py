"""Tests for Flask application startup with configuration."""

import logging
import os
from unittest.mock import patch

import pytest

from drawdown import create_app
from drawdown.config import reset_global_settings


class TestAppStartup:
    """Test cases for Flask application startup."""

    def test_app_creation_with_valid_config(self):
        """Test that app creates successfully with valid configuration."""
        reset_global_settings()

        with patch.dict(os.environ, {"SECRET_KEY": "valid-secret-key-123"}, clear=True):
            app = create_app()

            assert app is not None
            assert app.config["SECRET_KEY"] == "valid-secret-key-123"
            assert "health" in app.blueprints
            assert "projection" in app.blueprints

    def test_app_creation_fails_with_placeholder_secret_key(self):
        """Test that app creation fails with placeholder SECRET_KEY."""
        reset_global_settings()

        with patch.dict(
            os.environ,
            {"SECRET_KEY": "your-secret-key-here-change-in-production"},
            clear=True,
        ):
            with pytest.raises(Exception) as exc_info:
                create_app()

            assert "SECRET_KEY must be set to a secure value" in str(exc_info.value)

    def test_app_debug_mode_based_on_environment(self):
        """Test that debug mode is set based on APP_ENV."""
        reset_global_settings()
        with patch.dict(
            os.environ,
            {"SECRET_KEY": "valid-secret-key-123", "APP_ENV": "development"},
            clear=True,
        ):
            app = create_app()
            assert app.config["DEBUG"] is True

        reset_global_settings()
        with patch.dict(
            os.environ,
            {"SECRET_KEY": "valid-secret-key-123", "APP_ENV": "production"},
            clear=True,
        ):
            app = create_app()
            assert app.config["DEBUG"] is False

    def test_config_name_overrides_environment(self):
        """Test that an explicit config name wins over APP_ENV."""
        reset_global_settings()
        with patch.dict(
            os.environ,
            {"SECRET_KEY": "valid-secret-key-123", "APP_ENV": "production"},
            clear=True,
        ):
            app = create_app("testing")
            assert app.config["TESTING"] is True
            assert app.config["DEBUG"] is False

    def test_log_level_applied(self):
        """Test that LOG_LEVEL configures the package logger."""
        reset_global_settings()
        with patch.dict(
            os.environ,
            {"SECRET_KEY": "valid-secret-key-123", "LOG_LEVEL": "warning"},
            clear=True,
        ):
            app = create_app()

        assert logging.getLogger("drawdown").level == logging.WARNING
        assert app.logger.level == logging.WARNING
