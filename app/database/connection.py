from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

import psycopg
from psycopg.conninfo import make_conninfo
from psycopg_pool import ConnectionPool

from app.config.settings import Settings

_pool: ConnectionPool | None = None


def build_conninfo(settings: Settings, **extra: Any) -> str:
    """Build a libpq connection string for the card database."""
    return make_conninfo(
        host=settings.db_host,
        port=settings.db_port,
        dbname=settings.db_database,
        user=settings.db_username,
        password=settings.db_password,
        connect_timeout=settings.db_connect_timeout_seconds,
        application_name="cardscan",
        **extra,
    )


def init_pool(settings: Settings) -> None:
    """Open the card-storage pool and wait until it holds a live connection.

    Raises:
        psycopg_pool.PoolTimeout: if the database is unreachable.
    """
    global _pool  # noqa: PLW0603
    pool = ConnectionPool(
        build_conninfo(settings),
        min_size=1,
        max_size=settings.db_pool_max_size,
        open=True,
    )
    try:
        pool.wait(timeout=settings.db_connect_timeout_seconds)
    except Exception:
        pool.close()
        raise
    _pool = pool


def close_pool() -> None:
    """Close the global connection pool."""
    global _pool  # noqa: PLW0603
    if _pool is not None:
        _pool.close()
        _pool = None


@contextmanager
def get_connection() -> Generator[psycopg.Connection[Any], None, None]:
    """Yield a pooled connection. Caller manages commit/rollback."""
    if _pool is None:
        raise RuntimeError("Connection pool not initialized. Call init_pool() first.")
    with _pool.connection() as conn:
        yield conn
