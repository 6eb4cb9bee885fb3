from typing import Any
from unittest.mock import MagicMock

import pytest

from scanhook.copyleaks.client_base import BaseExportClient
from scanhook.database.repositories.memory_scan_store import InMemoryScanStore
from scanhook.webhooks.export_trigger import ExportTrigger
from scanhook.webhooks.handlers import WebhookHandlers


@pytest.fixture()
def store() -> InMemoryScanStore:
    """In-memory store holding one registered pending scan, `scan-1`."""
    store = InMemoryScanStore()
    store.create_scan("scan-1")
    return store


@pytest.fixture()
def export_client() -> MagicMock:
    return MagicMock(spec=BaseExportClient)


@pytest.fixture()
def handlers(store: InMemoryScanStore, export_client: MagicMock) -> WebhookHandlers:
    return WebhookHandlers(store, ExportTrigger(store, export_client))


@pytest.fixture()
def completed_payload() -> dict[str, Any]:
    """A minimal `completed` status callback with a single internet result."""
    return {
        "results": {
            "internet": [{"id": "r1", "url": "u", "title": "t"}],
            "score": {"aggregatedScore": 42},
        },
        "scannedDocument": {"totalWords": 100},
    }
