"""
Pytest configuration: adds src/ to the path so all modules can be imported.
"""

import sys
import os

import pytest

# Add the src directory so Lambda modules can be imported without packaging
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

# Pre-import handler modules so @patch decorators can resolve dotted paths
import sync_campaigns.handler  # noqa: F401
import scheduled_sync.handler  # noqa: F401
import callable_sync.handler  # noqa: F401

from common.config import InstantlyConfig  # noqa: E402


@pytest.fixture
def instantly_env(monkeypatch):
    """Minimal environment for handlers that build their own config."""
    monkeypatch.setenv("INSTANTLY_API_KEY", "test-api-key")
    monkeypatch.setenv("INSTANTLY_API_BASE_URL", "https://api.instantly.test/api/v2")


@pytest.fixture
def config():
    """Config with the production delays so sleep assertions are meaningful."""
    return InstantlyConfig(
        api_key="test-api-key",
        base_url="https://api.instantly.test/api/v2",
    )
