import uvicorn

from scanhook.config.settings import Settings
from scanhook.copyleaks.exceptions import ExportError
from scanhook.copyleaks.factory import ExportClientFactory
from scanhook.database.factory import ScanStoreFactory
from scanhook.logging.logger import Log
from scanhook.server.app import create_app


def main() -> None:
    """Entry point: settings -> store -> export client -> serve webhooks."""
    settings = Settings()
    Log.configure(settings.log_level)

    store = ScanStoreFactory.create(settings)
    export_client = ExportClientFactory.create(settings)

    try:
        export_client.login()
    except ExportError as exc:
        Log.error("Failed to authenticate with export provider", error=str(exc))
        if settings.app_env == "production":
            export_client.close()
            store.close()
            raise SystemExit(1) from exc

    app = create_app(store, export_client)
    Log.info(
        "Webhook service listening",
        port=settings.port,
        env=settings.app_env,
        webhook_base_url=settings.webhook_base_url,
    )
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
