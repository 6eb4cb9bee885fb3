"""Example export client.

Use this module for local development and tests where no provider account
is available. It records each export request and makes no network calls.
"""

from scanhook.copyleaks.client_base import BaseExportClient
from scanhook.logging.logger import Log


class ExampleExportClient(BaseExportClient):
    """Export client that only remembers what it was asked to export."""

    def __init__(self) -> None:
        self.exports: list[tuple[str, list[str]]] = []

    def export_results(self, scan_id: str, result_ids: list[str]) -> None:
        self.exports.append((scan_id, list(result_ids)))
        Log.info("Example export recorded", scan_id=scan_id, results=len(result_ids))
