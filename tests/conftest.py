# tests/conftest.py
"""
Shared fixtures and test settings.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock

import pytest

# Set environment before any ridebook module builds its settings
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-with-enough-length-for-hs256")
os.environ.setdefault("DB_PASSWORD", "test_password")
os.environ.setdefault("ENVIRONMENT", "test")

from fakes import FakeDatabase, FakeStore  # noqa: E402


# =============================================================================
# CONFIG FIXTURES
# =============================================================================

@pytest.fixture(scope="session")
def project_root() -> Path:
    """Project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture(scope="session")
def config_path(project_root: Path) -> Path:
    """Path to the config file."""
    return project_root / "config" / "config.json"


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """Config values for tests."""
    return {
        "PROJECT_NAME": "ridebook_test",
        "VERSION": "1.0.0-test",
        "DEBUG": True,
        "ENVIRONMENT": "test",
        "APP_HOST": "127.0.0.1",
        "APP_PORT": 3100,
        "LOG_LEVEL": "DEBUG",
        "LOG_TO_FILE": False,
        "LOG_FORMAT": "json",
        "DB_HOST": "localhost",
        "DB_PORT": 5432,
        "DB_NAME": "ridebook_test",
        "DB_USER": "postgres",
        "DB_MIN_POOL_SIZE": 2,
        "DB_MAX_POOL_SIZE": 5,
        "DB_COMMAND_TIMEOUT": 30,
        "JWT_ALGORITHM": "HS256",
        "TOKEN_TTL_HOURS": 2,
        "BASE_FARE": 3.0,
        "FARE_PER_KM": 1.5,
        "MIN_DISTANCE_KM": 2.0,
        "MAX_DISTANCE_KM": 4.0,
        "CURRENCY": "EUR",
        "REQUIRE_ONLINE_DRIVER": True,
    }


# =============================================================================
# INFRASTRUCTURE FIXTURES
# =============================================================================

@pytest.fixture
def mock_db() -> AsyncMock:
    """Mocked database manager."""
    db = AsyncMock()
    db.fetchrow = AsyncMock(return_value=None)
    db.fetch = AsyncMock(return_value=[])
    db.execute = AsyncMock(return_value="INSERT 0 1")
    db.fetchval = AsyncMock(return_value=None)
    return db


@pytest.fixture
def store() -> FakeStore:
    """Empty in-memory tables."""
    return FakeStore()


@pytest.fixture
def fake_db(store: FakeStore) -> FakeDatabase:
    """Transactional in-memory database over ``store``."""
    return FakeDatabase(store)
