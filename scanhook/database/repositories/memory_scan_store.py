import copy
import threading
from collections.abc import Generator
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Any

from scanhook.database.models import CrawledDocument, ScanRecord, resolve_status
from scanhook.database.repositories.base import BaseScanStore


class InMemoryScanStore(BaseScanStore):
    """Process-local scan store. One lock per scan id serializes mutations."""

    def __init__(self) -> None:
        self._records: dict[str, ScanRecord] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def create_scan(self, scan_id: str) -> ScanRecord:
        with self._registry_lock:
            record = self._records.get(scan_id)
            if record is None:
                now = datetime.now(UTC)
                record = ScanRecord(scan_id=scan_id, created_at=now, updated_at=now)
                self._records[scan_id] = record
                self._locks[scan_id] = threading.Lock()
            return copy.deepcopy(record)

    def get(self, scan_id: str) -> ScanRecord | None:
        with self._locked(scan_id) as record:
            if record is None:
                return None
            return copy.deepcopy(record)

    def update_status(
        self, scan_id: str, status: str, summary_patch: dict[str, Any]
    ) -> None:
        with self._mutating(scan_id) as record:
            if record is None:
                return
            record.status = resolve_status(record.status, status)
            record.summary.update(copy.deepcopy(summary_patch))

    def upsert_result_metadata(
        self,
        scan_id: str,
        result_id: str,
        fields: dict[str, Any],
        defaults: dict[str, Any] | None = None,
    ) -> None:
        with self._mutating(scan_id) as record:
            if record is None:
                return
            entry = record.result_metadata.setdefault(result_id, {})
            for key, value in (defaults or {}).items():
                entry.setdefault(key, value)
            entry.update(fields)

    def append_result(self, scan_id: str, raw_payload: Any) -> None:
        with self._mutating(scan_id) as record:
            if record is None:
                return
            record.results.append(copy.deepcopy(raw_payload))

    def mark_export_started(self, scan_id: str) -> bool:
        with self._mutating(scan_id) as record:
            if record is None or record.export_started:
                return False
            record.export_started = True
            return True

    def mark_export_completed(self, scan_id: str) -> None:
        with self._mutating(scan_id) as record:
            if record is None:
                return
            record.export_completed = True

    def store_crawled(
        self, scan_id: str, raw_payload: Any, extracted_text: str | None
    ) -> None:
        with self._mutating(scan_id) as record:
            if record is None:
                return
            record.crawled = CrawledDocument(
                raw_payload=copy.deepcopy(raw_payload),
                extracted_text=extracted_text,
            )

    def store_pdf(self, scan_id: str, raw_payload: Any) -> None:
        with self._mutating(scan_id) as record:
            if record is None:
                return
            record.pdf = copy.deepcopy(raw_payload)

    def store_exported_result(
        self, scan_id: str, result_id: str, raw_payload: Any
    ) -> None:
        with self._mutating(scan_id) as record:
            if record is None:
                return
            record.exported_results[result_id] = copy.deepcopy(raw_payload)

    @contextmanager
    def _locked(self, scan_id: str) -> Generator[ScanRecord | None, None, None]:
        with self._registry_lock:
            lock = self._locks.get(scan_id)
        if lock is None:
            yield None
            return
        with lock:
            yield self._records.get(scan_id)

    @contextmanager
    def _mutating(self, scan_id: str) -> Generator[ScanRecord | None, None, None]:
        with self._locked(scan_id) as record:
            yield record
            if record is not None:
                record.updated_at = datetime.now(UTC)
