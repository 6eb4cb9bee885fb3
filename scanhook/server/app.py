from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from scanhook.copyleaks.client_base import BaseExportClient
from scanhook.database.repositories.base import BaseScanStore
from scanhook.logging.logger import Log
from scanhook.webhooks.export_trigger import ExportTrigger
from scanhook.webhooks.handlers import WebhookHandlers
from scanhook.webhooks.router import router as webhook_router


def create_app(store: BaseScanStore, export_client: BaseExportClient) -> FastAPI:
    """Build the webhook application around an initialized store and client.

    The app owns both collaborators from here on and releases them at shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        Log.info("Webhook service started")
        try:
            yield
        finally:
            export_client.close()
            store.close()
            Log.info("Cleanup completed")

    app = FastAPI(title="scanhook", lifespan=lifespan)
    app.state.webhook_handlers = WebhookHandlers(
        store, ExportTrigger(store, export_client)
    )
    app.include_router(webhook_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.exception_handler(Exception)
    async def internal_error(request: Request, exc: Exception) -> JSONResponse:
        Log.error(
            "Unhandled error while processing webhook",
            path=request.url.path,
            error=repr(exc),
        )
        return JSONResponse(status_code=500, content={"error": "internal_error"})

    return app
