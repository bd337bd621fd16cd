"""Shared test configuration."""

import pytest

from aiostorex import configure, reset_settings


@pytest.fixture(autouse=True)
def diagnostics_enabled():
    """Run every test with development diagnostics on, regardless of the environment."""
    configure(env="development", diagnostics=True)
    yield
    reset_settings()


@pytest.fixture
def store_warnings(caplog):
    """Return a callable listing the diagnostic messages logged so far."""
    def messages():
        return [record.getMessage() for record in caplog.records if record.name == "aiostorex"]
    return messages
