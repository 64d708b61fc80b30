"""Integration test fixtures for database tests.

These fixtures require a running PostgreSQL instance with the catalog
migrations applied (``alembic upgrade head``). Use docker-compose for testing.
"""

import os
import socket

import pytest
from pydantic import SecretStr

from infrastructure.settings import DatabaseSettings


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (requires database)",
    )


@pytest.fixture(scope="session")
def integration_db_settings() -> DatabaseSettings:
    """Database settings for integration tests.

    Override with environment variables:
        DESIGNAUTO_DB_HOST, DESIGNAUTO_DB_PORT, etc.

    Skips every dependent test when nothing listens on the configured port.
    """
    settings = DatabaseSettings(
        host=os.getenv("DESIGNAUTO_DB_HOST", "localhost"),
        port=int(os.getenv("DESIGNAUTO_DB_PORT", "5432")),
        database=os.getenv("DESIGNAUTO_DB_DATABASE", "designauto"),
        username=os.getenv("DESIGNAUTO_DB_USERNAME", "designauto"),
        password=SecretStr(
            os.getenv("DESIGNAUTO_DB_PASSWORD", "designauto_dev_password")
        ),
    )
    try:
        with socket.create_connection((settings.host, settings.port), timeout=1):
            pass
    except OSError:
        pytest.skip(f"PostgreSQL is not reachable at {settings.host}:{settings.port}")
    return settings
