from dataclasses import dataclass

from scanhook.copyleaks.client_base import BaseExportClient
from scanhook.database.models import ScanRecord
from scanhook.database.repositories.base import BaseScanStore

OUTCOME_STARTED = "started"
OUTCOME_SKIPPED = "skipped"
OUTCOME_FAILED = "failed"


@dataclass(frozen=True)
class ExportOutcome:
    """What happened when a completion callback evaluated the export latch."""

    status: str
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.status == OUTCOME_FAILED


class ExportTrigger:
    """Start the provider's bulk export at most once per scan.

    The latch is set before the call and never reset. A failed call is
    reported as an outcome, whatever the client raised, and is not retried
    here.
    """

    def __init__(self, store: BaseScanStore, client: BaseExportClient) -> None:
        self._store = store
        self._client = client

    def evaluate(self, record: ScanRecord, result_ids: list[str]) -> ExportOutcome:
        if not result_ids or record.export_started:
            return ExportOutcome(OUTCOME_SKIPPED)
        if not self._store.mark_export_started(record.scan_id):
            return ExportOutcome(OUTCOME_SKIPPED)
        try:
            self._client.export_results(record.scan_id, result_ids)
        except Exception as exc:
            return ExportOutcome(OUTCOME_FAILED, error=str(exc) or type(exc).__name__)
        return ExportOutcome(OUTCOME_STARTED)
