import json
from collections.abc import Callable
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from scanhook.logging.logger import Log
from scanhook.webhooks.handlers import WebhookHandlers
from scanhook.webhooks.models import WebhookAck

router = APIRouter(prefix="/webhooks")


def get_handlers(request: Request) -> WebhookHandlers:
    return request.app.state.webhook_handlers


async def read_payload(request: Request) -> Any:
    """Decode the JSON body. Missing or malformed bodies become an empty payload."""
    raw = await request.body()
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except ValueError:
        Log.warning("Webhook body is not valid JSON", path=request.url.path)
        return {}


async def _respond(handler: Callable[..., WebhookAck], *args: Any) -> JSONResponse:
    # Handlers hit the store and the provider synchronously.
    ack = await run_in_threadpool(handler, *args)
    return JSONResponse(status_code=ack.status_code, content=ack.body)


@router.post("/status/{status}/{scan_id}")
async def status_webhook(
    status: str,
    scan_id: str,
    payload: Any = Depends(read_payload),
    handlers: WebhookHandlers = Depends(get_handlers),
) -> JSONResponse:
    return await _respond(handlers.handle_status, status, scan_id, payload)


@router.post("/new-result/{scan_id}")
async def new_result_webhook(
    scan_id: str,
    payload: Any = Depends(read_payload),
    handlers: WebhookHandlers = Depends(get_handlers),
) -> JSONResponse:
    return await _respond(handlers.handle_new_result, scan_id, payload)


@router.post("/export/{scan_id}/results/{result_id}")
async def result_export_webhook(
    scan_id: str,
    result_id: str,
    payload: Any = Depends(read_payload),
    handlers: WebhookHandlers = Depends(get_handlers),
) -> JSONResponse:
    return await _respond(handlers.handle_result_export, scan_id, result_id, payload)


@router.post("/export/{scan_id}/crawled")
async def crawled_webhook(
    scan_id: str,
    payload: Any = Depends(read_payload),
    handlers: WebhookHandlers = Depends(get_handlers),
) -> JSONResponse:
    return await _respond(handlers.handle_crawled, scan_id, payload)


@router.post("/export/{scan_id}/pdf")
async def pdf_webhook(
    scan_id: str,
    payload: Any = Depends(read_payload),
    handlers: WebhookHandlers = Depends(get_handlers),
) -> JSONResponse:
    return await _respond(handlers.handle_pdf, scan_id, payload)


@router.post("/export/{scan_id}/completed")
async def export_completed_webhook(
    scan_id: str,
    handlers: WebhookHandlers = Depends(get_handlers),
) -> JSONResponse:
    return await _respond(handlers.handle_export_completed, scan_id)
