from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

STATUS_PENDING = "pending"
STATUS_COMPLETED = "completed"
STATUS_ERROR = "error"


def resolve_status(current: str, requested: str) -> str:
    """Return the status a record ends up with when `requested` is applied.

    Only pending scans move; re-asserting the current status is a no-op.
    """
    if current == STATUS_PENDING:
        return requested
    return current


@dataclass
class CrawledDocument:
    """Last crawled version of the scanned document."""

    raw_payload: Any
    extracted_text: str | None = None


@dataclass
class ScanRecord:
    """Lifecycle state of one provider scan."""

    scan_id: str
    status: str = STATUS_PENDING
    summary: dict[str, Any] = field(default_factory=dict)
    export_started: bool = False
    export_completed: bool = False
    result_metadata: dict[str, dict[str, Any]] = field(default_factory=dict)
    results: list[Any] = field(default_factory=list)
    exported_results: dict[str, Any] = field(default_factory=dict)
    crawled: CrawledDocument | None = None
    pdf: Any = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
