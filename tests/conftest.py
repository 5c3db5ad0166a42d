"""Shared pytest fixtures."""

import pytest

from rescue_match.logging.context import clear_log_context
from rescue_match.persistence import close_database


@pytest.fixture(autouse=True)
def clean_log_context():
    """Clear logging context before and after each test."""
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def mock_env_vars(monkeypatch, tmp_path):
    """Provide a clean, valid set of environment variables."""
    for name in ("LOG_LEVEL", "DATABASE_URL", "ENVIRONMENT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'test.db'}")
    monkeypatch.setenv("ENVIRONMENT", "test")
    return monkeypatch


@pytest.fixture
def memory_database():
    """Initialize an in-memory database for the duration of a test."""
    from rescue_match.persistence import init_database

    init_database("sqlite:///:memory:")
    yield
    close_database()
