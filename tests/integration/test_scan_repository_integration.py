from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

from scanhook.database.models import STATUS_COMPLETED, STATUS_ERROR
from scanhook.database.repositories.scan_repository import PostgresScanStore
from scanhook.webhooks.export_trigger import ExportTrigger
from scanhook.webhooks.handlers import WebhookHandlers


class TestPostgresScanStore:
    def test_create_is_idempotent(self, pg_store: PostgresScanStore, seed_scan: str) -> None:
        pg_store.append_result(seed_scan, {"id": "r1"})

        record = pg_store.create_scan(seed_scan)

        assert record.results == [{"id": "r1"}]

    def test_status_moves_only_from_pending(
        self, pg_store: PostgresScanStore, seed_scan: str
    ) -> None:
        pg_store.update_status(seed_scan, STATUS_ERROR, {"message": "boom"})
        pg_store.update_status(seed_scan, STATUS_COMPLETED, {"credits": 4})

        record = pg_store.get(seed_scan)
        assert record is not None
        assert record.status == STATUS_ERROR
        assert record.summary == {"message": "boom", "credits": 4}

    def test_metadata_upsert_merges(
        self, pg_store: PostgresScanStore, seed_scan: str
    ) -> None:
        pg_store.upsert_result_metadata(seed_scan, "r1", {"matchPercentage": 55})
        pg_store.upsert_result_metadata(
            seed_scan, "r1", {"url": "u", "title": "t"}, defaults={"matchPercentage": 0}
        )

        record = pg_store.get(seed_scan)
        assert record is not None
        assert record.result_metadata == {
            "r1": {"url": "u", "title": "t", "matchPercentage": 55}
        }

    def test_export_latch_has_one_winner(
        self, pg_store: PostgresScanStore, seed_scan: str
    ) -> None:
        with ThreadPoolExecutor(max_workers=4) as pool:
            wins = list(pool.map(lambda _: pg_store.mark_export_started(seed_scan), range(4)))

        assert wins.count(True) == 1

    def test_artifacts_round_trip(self, pg_store: PostgresScanStore, seed_scan: str) -> None:
        pg_store.store_crawled(seed_scan, {"content": "c"}, "c")
        pg_store.store_pdf(seed_scan, {"pdf": "data"})
        pg_store.store_exported_result(seed_scan, "r1", {"statistics": {"identical": 3}})
        pg_store.mark_export_completed(seed_scan)

        record = pg_store.get(seed_scan)
        assert record is not None
        assert record.crawled is not None
        assert record.crawled.extracted_text == "c"
        assert record.pdf == {"pdf": "data"}
        assert record.exported_results == {"r1": {"statistics": {"identical": 3}}}
        assert record.export_completed is True


class TestHandlersOnPostgres:
    def test_duplicate_completion_exports_once(
        self, pg_store: PostgresScanStore, seed_scan: str
    ) -> None:
        export_client = MagicMock()
        handlers = WebhookHandlers(pg_store, ExportTrigger(pg_store, export_client))
        payload = {"results": {"internet": [{"id": "r1", "url": "u", "title": "t"}]}}

        handlers.handle_status("completed", seed_scan, payload)
        handlers.handle_status("completed", seed_scan, payload)

        record = pg_store.get(seed_scan)
        assert record is not None
        assert record.status == STATUS_COMPLETED
        assert record.export_started is True
        export_client.export_results.assert_called_once_with(seed_scan, ["r1"])
