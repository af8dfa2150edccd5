"""
Global pytest configuration and fixtures.
"""

import pytest

REFINERY_ENV_VARS = ("REFINERY_DEBUG", "REFINERY_LOG_LEVEL", "REFINERY_LOG_FILE")


@pytest.fixture(autouse=True)
def clean_refinery_env(monkeypatch):
    """Start every test without REFINERY_* settings.

    Each variable is set and then deleted so monkeypatch restores the
    original state even when a test loads a .env file that defines it.
    """
    for name in REFINERY_ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    yield
