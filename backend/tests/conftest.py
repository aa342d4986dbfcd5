"""
Shared fixtures.

Every test runs against an explicit Settings object; nothing is read from the
real environment and no remote service is contacted.
"""

import pytest
from fastapi.testclient import TestClient

from minutes.config import Settings, get_settings


@pytest.fixture()
def settings():
    """Fully configured settings (all three remote capabilities present)."""
    return Settings(
        anthropic_api_key="test-anthropic-key",
        openai_api_key="test-openai-key",
        email_user="sender@example.com",
        email_pass="test-app-password",
    )


@pytest.fixture()
def make_client():
    """Return a factory building a TestClient bound to the given settings."""
    from minutes.main import app

    def _make(settings: Settings) -> TestClient:
        app.dependency_overrides[get_settings] = lambda: settings
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()


@pytest.fixture()
def client(make_client, settings):
    return make_client(settings)
