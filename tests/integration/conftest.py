import os
import uuid
from collections.abc import Generator
from typing import Any

import psycopg
import pytest

from datavalidator.config.settings import Settings
from datavalidator.database.connection import close_pool, get_connection, init_pool
from datavalidator.database.repositories.job_repository import PostgresJobStorage


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "datavalidator_test")
    return Settings(job_storage="postgres", db_connect_timeout_seconds=3)


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
    except Exception as e:
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run.")
    try:
        PostgresJobStorage().ensure_schema()
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def job_id(integration_pool: None) -> Generator[str, None, None]:
    """A fresh job id whose row is deleted after the test."""
    value = f"it-{uuid.uuid4()}"
    yield value
    with get_connection() as conn:
        conn.execute("DELETE FROM validation_jobs WHERE job_id = %s", (value,))
        conn.commit()
