from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    host: str = "0.0.0.0"
    port: int = 3000

    scan_store: str = "memory"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "scanhook"
    db_username: str = "scanhook"
    db_password: str = "secret"
    db_pool_max_size: int = 10
    db_pool_timeout_seconds: float = 10.0

    export_provider: str = "copyleaks"

    copyleaks_email: str = ""
    copyleaks_api_key: str = ""
    copyleaks_identity_url: str = "https://id.copyleaks.com"
    copyleaks_api_url: str = "https://api.copyleaks.com"
    copyleaks_timeout_seconds: int = 30
    copyleaks_export_max_retries: int = 3
    copyleaks_export_pdf_report: bool = True

    webhook_base_url: str = "http://localhost:3000"
