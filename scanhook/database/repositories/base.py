from abc import ABC, abstractmethod
from typing import Any

from scanhook.database.models import ScanRecord


class BaseScanStore(ABC):
    """Contract for scan state storage keyed by scan identifier.

    Every mutating operation is a silent no-op for unknown scan ids. `get` is
    the existence check callers perform first. Implementations must make each
    operation atomic per scan id; `mark_export_started` in particular is a
    check-and-set that exactly one concurrent caller wins.
    """

    @abstractmethod
    def create_scan(self, scan_id: str) -> ScanRecord:
        """Register a pending scan. Existing records are returned unchanged."""

    @abstractmethod
    def get(self, scan_id: str) -> ScanRecord | None:
        """Return a snapshot of the record, or None if the scan is unknown."""

    @abstractmethod
    def update_status(
        self, scan_id: str, status: str, summary_patch: dict[str, Any]
    ) -> None:
        """Merge `summary_patch` into the summary and apply `status` if allowed."""

    @abstractmethod
    def upsert_result_metadata(
        self,
        scan_id: str,
        result_id: str,
        fields: dict[str, Any],
        defaults: dict[str, Any] | None = None,
    ) -> None:
        """Merge `fields` into the metadata entry for `result_id`.

        `defaults` only fill keys the entry does not have yet.
        """

    @abstractmethod
    def append_result(self, scan_id: str, raw_payload: Any) -> None: ...

    @abstractmethod
    def mark_export_started(self, scan_id: str) -> bool:
        """Latch the export flag. True only for the call that flipped it."""

    @abstractmethod
    def mark_export_completed(self, scan_id: str) -> None: ...

    @abstractmethod
    def store_crawled(
        self, scan_id: str, raw_payload: Any, extracted_text: str | None
    ) -> None: ...

    @abstractmethod
    def store_pdf(self, scan_id: str, raw_payload: Any) -> None: ...

    @abstractmethod
    def store_exported_result(
        self, scan_id: str, result_id: str, raw_payload: Any
    ) -> None: ...

    def close(self) -> None:
        """Release backend resources. Default: nothing to release."""
