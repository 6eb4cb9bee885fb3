from scanhook.config.settings import Settings
from scanhook.database.connection import init_pool
from scanhook.database.repositories.base import BaseScanStore
from scanhook.database.repositories.memory_scan_store import InMemoryScanStore
from scanhook.database.repositories.scan_repository import PostgresScanStore


class ScanStoreFactory:
    """Creates the scan store backend selected in settings."""

    BACKENDS: tuple[str, ...] = ("memory", "postgres")

    @classmethod
    def create(cls, settings: Settings) -> BaseScanStore:
        backend = settings.scan_store.lower()
        if backend == "memory":
            return InMemoryScanStore()
        if backend == "postgres":
            init_pool(settings)
            store = PostgresScanStore()
            store.create_schema()
            return store
        raise ValueError(
            f"Unknown scan store '{backend}'. Choose from: {list(cls.BACKENDS)}"
        )
