import os
import uuid
from collections.abc import Generator

import pytest

from scanhook.config.settings import Settings
from scanhook.database.connection import close_pool, get_connection, init_pool
from scanhook.database.repositories.scan_repository import PostgresScanStore


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "scanhook_test")
    os.environ.setdefault("DB_POOL_TIMEOUT_SECONDS", "3")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        PostgresScanStore().create_schema()
    except Exception as e:
        close_pool()
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run.")
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def pg_store(integration_pool: None) -> PostgresScanStore:
    return PostgresScanStore()


@pytest.fixture
def seed_scan(pg_store: PostgresScanStore) -> Generator[str, None, None]:
    scan_id = f"it-{uuid.uuid4()}"
    pg_store.create_scan(scan_id)
    yield scan_id
    with get_connection() as conn:
        conn.execute("DELETE FROM scans WHERE scan_id = %s", (scan_id,))
        conn.commit()
