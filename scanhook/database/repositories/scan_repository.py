from typing import Any

from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from scanhook.database.connection import close_pool, get_connection
from scanhook.database.models import (
    STATUS_PENDING,
    CrawledDocument,
    ScanRecord,
)
from scanhook.database.repositories.base import BaseScanStore

_SELECT_COLUMNS = """
    scan_id, status, summary, export_started, export_completed,
    result_metadata, results, exported_results, crawled, pdf,
    created_at, updated_at
"""


class PostgresScanStore(BaseScanStore):
    """Database operations for the scans table.

    Each mutation is a single UPDATE so the read-modify-write happens inside
    PostgreSQL under the row lock; no client-side merge is ever written back.
    """

    def create_schema(self) -> None:
        """Create the scans table if it does not exist yet."""
        with get_connection() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS scans (
                    scan_id TEXT PRIMARY KEY,
                    status TEXT NOT NULL DEFAULT 'pending',
                    summary JSONB NOT NULL DEFAULT '{}'::jsonb,
                    export_started BOOLEAN NOT NULL DEFAULT FALSE,
                    export_completed BOOLEAN NOT NULL DEFAULT FALSE,
                    result_metadata JSONB NOT NULL DEFAULT '{}'::jsonb,
                    results JSONB NOT NULL DEFAULT '[]'::jsonb,
                    exported_results JSONB NOT NULL DEFAULT '{}'::jsonb,
                    crawled JSONB,
                    pdf JSONB,
                    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
                )
                """
            )
            conn.commit()

    def create_scan(self, scan_id: str) -> ScanRecord:
        with get_connection() as conn:
            conn.execute(
                """
                INSERT INTO scans (scan_id, status)
                VALUES (%s, %s)
                ON CONFLICT (scan_id) DO NOTHING
                """,
                (scan_id, STATUS_PENDING),
            )
            conn.commit()
        record = self.get(scan_id)
        if record is None:
            raise RuntimeError(f"Scan {scan_id} vanished right after insert")
        return record

    def get(self, scan_id: str) -> ScanRecord | None:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_SELECT_COLUMNS} FROM scans WHERE scan_id = %s",
                    (scan_id,),
                )
                row = cur.fetchone()

        if row is None:
            return None

        crawled = row["crawled"]
        return ScanRecord(
            scan_id=row["scan_id"],
            status=row["status"],
            summary=row["summary"],
            export_started=row["export_started"],
            export_completed=row["export_completed"],
            result_metadata=row["result_metadata"],
            results=row["results"],
            exported_results=row["exported_results"],
            crawled=(
                CrawledDocument(
                    raw_payload=crawled.get("rawPayload"),
                    extracted_text=crawled.get("extractedText"),
                )
                if crawled is not None
                else None
            ),
            pdf=row["pdf"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def update_status(
        self, scan_id: str, status: str, summary_patch: dict[str, Any]
    ) -> None:
        self._execute(
            """
            UPDATE scans
            SET status = CASE WHEN status = %s THEN %s ELSE status END,
                summary = summary || %s,
                updated_at = NOW()
            WHERE scan_id = %s
            """,
            (STATUS_PENDING, status, Jsonb(summary_patch), scan_id),
        )

    def upsert_result_metadata(
        self,
        scan_id: str,
        result_id: str,
        fields: dict[str, Any],
        defaults: dict[str, Any] | None = None,
    ) -> None:
        self._execute(
            """
            UPDATE scans
            SET result_metadata = jsonb_set(
                    result_metadata,
                    ARRAY[%s::text],
                    %s || COALESCE(result_metadata -> %s::text, '{}'::jsonb) || %s
                ),
                updated_at = NOW()
            WHERE scan_id = %s
            """,
            (result_id, Jsonb(defaults or {}), result_id, Jsonb(fields), scan_id),
        )

    def append_result(self, scan_id: str, raw_payload: Any) -> None:
        self._execute(
            """
            UPDATE scans
            SET results = results || jsonb_build_array(%s::jsonb),
                updated_at = NOW()
            WHERE scan_id = %s
            """,
            (Jsonb(raw_payload), scan_id),
        )

    def mark_export_started(self, scan_id: str) -> bool:
        rowcount = self._execute(
            """
            UPDATE scans
            SET export_started = TRUE, updated_at = NOW()
            WHERE scan_id = %s AND export_started = FALSE
            """,
            (scan_id,),
        )
        return rowcount == 1

    def mark_export_completed(self, scan_id: str) -> None:
        self._execute(
            """
            UPDATE scans
            SET export_completed = TRUE, updated_at = NOW()
            WHERE scan_id = %s
            """,
            (scan_id,),
        )

    def store_crawled(
        self, scan_id: str, raw_payload: Any, extracted_text: str | None
    ) -> None:
        self._execute(
            """
            UPDATE scans
            SET crawled = %s, updated_at = NOW()
            WHERE scan_id = %s
            """,
            (
                Jsonb({"rawPayload": raw_payload, "extractedText": extracted_text}),
                scan_id,
            ),
        )

    def store_pdf(self, scan_id: str, raw_payload: Any) -> None:
        self._execute(
            """
            UPDATE scans
            SET pdf = %s, updated_at = NOW()
            WHERE scan_id = %s
            """,
            (Jsonb(raw_payload), scan_id),
        )

    def store_exported_result(
        self, scan_id: str, result_id: str, raw_payload: Any
    ) -> None:
        self._execute(
            """
            UPDATE scans
            SET exported_results = jsonb_set(exported_results, ARRAY[%s::text], %s),
                updated_at = NOW()
            WHERE scan_id = %s
            """,
            (result_id, Jsonb(raw_payload), scan_id),
        )

    def close(self) -> None:
        close_pool()

    def _execute(self, sql: str, params: tuple[Any, ...]) -> int:
        """Run one statement in its own transaction and return the rowcount."""
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                rowcount = cur.rowcount
            conn.commit()
        return rowcount
