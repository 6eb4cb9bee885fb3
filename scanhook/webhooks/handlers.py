from typing import Any

from scanhook.database.models import STATUS_COMPLETED, STATUS_ERROR, ScanRecord
from scanhook.database.repositories.base import BaseScanStore
from scanhook.extraction.payload import dig
from scanhook.extraction.text_extractor import extract_text
from scanhook.logging.logger import Log
from scanhook.webhooks.export_trigger import OUTCOME_STARTED, ExportTrigger
from scanhook.webhooks.models import (
    STATUS_KIND_COMPLETED,
    STATUS_KIND_CREDITS_CHECKED,
    STATUS_KIND_ERROR,
    WebhookAck,
)


class WebhookHandlers:
    """Fold provider callbacks into scan records.

    Every handler first resolves the scan. Unknown scans are acknowledged as
    ignored without touching the store. Handlers are safe to replay: the
    provider retries any callback that did not get a response.
    """

    def __init__(self, store: BaseScanStore, export_trigger: ExportTrigger) -> None:
        self._store = store
        self._export_trigger = export_trigger

    def handle_status(self, status: str, scan_id: str, payload: Any) -> WebhookAck:
        record = self._resolve(scan_id, "Received webhook for unknown scan", status=status)
        if record is None:
            return WebhookAck.ignored()

        if status == STATUS_KIND_COMPLETED:
            self._apply_completed(record, payload)
        elif status == STATUS_KIND_ERROR:
            self._store.update_status(
                scan_id, STATUS_ERROR, {"message": dig(payload, "error")}
            )
            Log.warning("Provider reported scan error", scan_id=scan_id)
        elif status == STATUS_KIND_CREDITS_CHECKED:
            self._store.update_status(
                scan_id, record.status, {"credits": dig(payload, "credits")}
            )
        else:
            Log.debug("Ignoring status callback kind", scan_id=scan_id, status=status)

        return WebhookAck.received()

    def handle_new_result(self, scan_id: str, payload: Any) -> WebhookAck:
        if self._resolve(scan_id, "New result for unknown scan") is None:
            return WebhookAck.ignored()

        self._store.append_result(scan_id, payload)
        return WebhookAck.received()

    def handle_result_export(
        self, scan_id: str, result_id: str, payload: Any
    ) -> WebhookAck:
        record = self._resolve(
            scan_id, "Result export for unknown scan", result_id=result_id
        )
        if record is None:
            return WebhookAck.ignored()

        self._store.store_exported_result(scan_id, result_id, payload)
        self._store.upsert_result_metadata(
            scan_id,
            result_id,
            {"matchPercentage": dig(payload, "matchPercentage") or 0},
        )
        return WebhookAck.received()

    def handle_crawled(self, scan_id: str, payload: Any) -> WebhookAck:
        if self._resolve(scan_id, "Crawled webhook for unknown scan") is None:
            return WebhookAck.ignored()

        extracted = extract_text(payload)
        self._store.store_crawled(scan_id, payload, extracted)
        if extracted is None:
            Log.warning("Unable to extract text from crawled payload", scan_id=scan_id)

        return WebhookAck.received(extractedText=extracted is not None)

    def handle_pdf(self, scan_id: str, payload: Any) -> WebhookAck:
        if self._resolve(scan_id, "PDF webhook for unknown scan") is None:
            return WebhookAck.ignored()

        self._store.store_pdf(scan_id, payload)
        return WebhookAck.received()

    def handle_export_completed(self, scan_id: str) -> WebhookAck:
        if self._resolve(scan_id, "Export completion for unknown scan") is None:
            return WebhookAck.ignored()

        self._store.mark_export_completed(scan_id)
        Log.info("Export batch completed", scan_id=scan_id)
        return WebhookAck.received()

    def _resolve(self, scan_id: str, message: str, **context: object) -> ScanRecord | None:
        record = self._store.get(scan_id)
        if record is None:
            Log.warning(message, scan_id=scan_id, **context)
        return record

    def _apply_completed(self, record: ScanRecord, payload: Any) -> None:
        scan_id = record.scan_id
        internet = dig(payload, "results", "internet")
        if not isinstance(internet, list):
            internet = []

        self._store.update_status(
            scan_id,
            STATUS_COMPLETED,
            {
                "totalResults": len(internet),
                "score": dig(payload, "results", "score", "aggregatedScore") or 0,
                "totalWords": dig(payload, "scannedDocument", "totalWords") or 0,
            },
        )

        result_ids: list[str] = []
        for result in internet:
            result_id = dig(result, "id")
            if not result_id:
                Log.warning("Skipping completion result without id", scan_id=scan_id)
                continue
            result_ids.append(result_id)

            # An earlier export callback may already carry the percentage.
            fields = {
                "url": result.get("url") or "",
                "title": result.get("title") or "",
            }
            if result.get("matchPercentage"):
                fields["matchPercentage"] = result["matchPercentage"]
            self._store.upsert_result_metadata(
                scan_id, result_id, fields, defaults={"matchPercentage": 0}
            )

        outcome = self._export_trigger.evaluate(record, result_ids)
        if outcome.failed:
            Log.error("Failed to initiate export", scan_id=scan_id, error=outcome.error)
        elif outcome.status == OUTCOME_STARTED:
            Log.info(
                "Export initiated from completion webhook",
                scan_id=scan_id,
                results=len(result_ids),
            )
