from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

import psycopg
from psycopg.conninfo import make_conninfo
from psycopg_pool import ConnectionPool, PoolTimeout

from datavalidator.config.settings import Settings
from datavalidator.logging.logger import Log

_pool: ConnectionPool | None = None


def init_pool(settings: Settings) -> None:
    """Initialize the global connection pool from settings.

    Sized so every job execution context can hold a connection. Fails with
    ``PoolTimeout`` when no connection opens within
    ``db_connect_timeout_seconds``.
    """
    global _pool  # noqa: PLW0603
    conninfo = make_conninfo(
        "",
        host=settings.db_host,
        port=settings.db_port,
        dbname=settings.db_database,
        user=settings.db_username,
        password=settings.db_password,
    )
    pool = ConnectionPool(
        conninfo,
        min_size=1,
        max_size=max(2, settings.max_parallel_jobs + 1),
        name="datavalidator",
        open=True,
    )
    try:
        pool.wait(timeout=settings.db_connect_timeout_seconds)
    except PoolTimeout:
        pool.close()
        raise
    _pool = pool
    Log.info(f"Connected to {settings.db_host}:{settings.db_port}/{settings.db_database}")


def close_pool() -> None:
    """Close the global connection pool."""
    global _pool  # noqa: PLW0603
    if _pool is not None:
        _pool.close()
        _pool = None


@contextmanager
def get_connection() -> Generator[psycopg.Connection[Any], None, None]:
    """Yield a connection from the pool. Caller manages commit/rollback."""
    if _pool is None:
        raise RuntimeError("Connection pool not initialized. Call init_pool() first.")
    with _pool.connection() as conn:
        yield conn
