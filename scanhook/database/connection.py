from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

import psycopg
from psycopg.conninfo import make_conninfo
from psycopg_pool import ConnectionPool, PoolTimeout

from scanhook.config.settings import Settings
from scanhook.database.exceptions import ScanStoreError

APPLICATION_NAME = "scanhook"

_pool: ConnectionPool | None = None


def build_conninfo(settings: Settings) -> str:
    """Render the libpq connection string; values are quoted as needed."""
    return make_conninfo(
        host=settings.db_host,
        port=settings.db_port,
        dbname=settings.db_database,
        user=settings.db_username,
        password=settings.db_password,
        application_name=APPLICATION_NAME,
    )


def init_pool(settings: Settings) -> None:
    """Open the process-wide pool; fails fast if no connection can be made."""
    global _pool  # noqa: PLW0603
    if _pool is not None:
        return
    pool = ConnectionPool(
        build_conninfo(settings),
        min_size=1,
        max_size=settings.db_pool_max_size,
        timeout=settings.db_pool_timeout_seconds,
        name=APPLICATION_NAME,
        open=False,
    )
    try:
        pool.open(wait=True, timeout=settings.db_pool_timeout_seconds)
    except PoolTimeout as exc:
        pool.close()
        raise ScanStoreError(
            f"Could not reach PostgreSQL at {settings.db_host}:{settings.db_port}"
        ) from exc
    _pool = pool


def close_pool() -> None:
    global _pool  # noqa: PLW0603
    if _pool is not None:
        _pool.close()
        _pool = None


@contextmanager
def get_connection() -> Generator[psycopg.Connection[Any], None, None]:
    """Yield a pooled connection. Caller manages commit/rollback."""
    if _pool is None:
        raise ScanStoreError("Connection pool not initialized. Call init_pool() first.")
    try:
        with _pool.connection() as conn:
            yield conn
    except PoolTimeout as exc:
        raise ScanStoreError("Timed out waiting for a database connection") from exc
