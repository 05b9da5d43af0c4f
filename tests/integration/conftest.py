import os
from collections.abc import Generator
from pathlib import Path
from typing import Any

import psycopg
import pytest
from psycopg_pool import PoolTimeout

from app.config.settings import Settings
from app.database.connection import close_pool, get_connection, init_pool

_SCHEMA_PATH = Path(__file__).resolve().parents[2] / "app" / "database" / "schema.sql"


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "cardscan_test")
    os.environ.setdefault("DB_CONNECT_TIMEOUT_SECONDS", "3")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
    except (PoolTimeout, psycopg.Error) as e:
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run.")
    with get_connection() as conn:
        conn.execute(_SCHEMA_PATH.read_text(encoding="utf-8"))
        conn.commit()
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def integration_cleanup(integration_pool: None) -> Generator[list[int], None, None]:
    """Collects business_cards ids to delete after the test."""
    card_ids: list[int] = []
    yield card_ids
    if not card_ids:
        return
    with get_connection() as conn:
        with conn.cursor() as cur:
            cur.execute("DELETE FROM business_cards WHERE id = ANY(%s)", (card_ids,))
        conn.commit()
