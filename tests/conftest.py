"""
Pytest configuration and shared fixtures for the drawdown planner tests.
"""

import os

import pytest

# Settings require a secret key; tests that exercise it patch the environment
os.environ.setdefault("SECRET_KEY", "test-secret-key-123")

from drawdown import create_app  # noqa: E402
from drawdown.config import reset_global_settings  # noqa: E402
from drawdown.models import ProjectionParameters  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_settings():
    """Make every test read settings from its own environment."""
    reset_global_settings()
    yield
    reset_global_settings()


@pytest.fixture
def app():
    """Create a Flask application for testing."""
    return create_app("testing")


@pytest.fixture
def client(app):
    """Create a Flask test client."""
    return app.test_client()


@pytest.fixture
def base_params():
    """Keyword arguments for a typical three-account retiree."""
    return {
        "annual_return_rate": 0.05,
        "annual_inflation_rate": 0.03,
        "initial_yearly_spend": 60000.0,
        "effective_tax_rate": 0.15,
        "starting_tax_deferred_balance": 500000.0,
        "starting_tax_free_balance": 200000.0,
        "starting_taxable_balance": 300000.0,
        "projection_years": 30,
    }


@pytest.fixture
def make_params(base_params):
    """Factory building ProjectionParameters from base_params plus overrides."""

    def _make(**overrides):
        return ProjectionParameters(**{**base_params, **overrides})

    return _make
