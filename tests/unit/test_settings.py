import pytest
from pydantic import ValidationError

from scanhook.config.settings import Settings


class TestSettingsDefaults:
    def test_default_app_env(self) -> None:
        s = Settings()
        assert s.app_env == "dev"

    def test_default_port(self) -> None:
        s = Settings()
        assert s.port == 3000

    def test_default_scan_store(self) -> None:
        s = Settings()
        assert s.scan_store == "memory"

    def test_default_export_provider(self) -> None:
        s = Settings()
        assert s.export_provider == "copyleaks"

    def test_default_copyleaks_urls(self) -> None:
        s = Settings()
        assert s.copyleaks_identity_url == "https://id.copyleaks.com"
        assert s.copyleaks_api_url == "https://api.copyleaks.com"

    def test_default_export_max_retries(self) -> None:
        s = Settings()
        assert s.copyleaks_export_max_retries == 3


class TestSettingsFromEnv:
    def test_loads_app_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_ENV", "production")
        s = Settings()
        assert s.app_env == "production"

    def test_loads_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        s = Settings()
        assert s.log_level == "DEBUG"

    def test_loads_webhook_base_url(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WEBHOOK_BASE_URL", "https://hooks.example.com")
        s = Settings()
        assert s.webhook_base_url == "https://hooks.example.com"

    def test_loads_pdf_report_flag(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("COPYLEAKS_EXPORT_PDF_REPORT", "false")
        s = Settings()
        assert s.copyleaks_export_pdf_report is False

    def test_loads_db_port(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_PORT", "5433")
        s = Settings()
        assert s.db_port == 5433

    def test_loads_db_pool_timeout(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_POOL_TIMEOUT_SECONDS", "2.5")
        s = Settings()
        assert s.db_pool_timeout_seconds == 2.5


class TestSettingsValidation:
    def test_invalid_port_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PORT", "not_a_number")
        with pytest.raises(ValidationError):
            Settings()

    def test_invalid_timeout_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("COPYLEAKS_TIMEOUT_SECONDS", "abc")
        with pytest.raises(ValidationError):
            Settings()
