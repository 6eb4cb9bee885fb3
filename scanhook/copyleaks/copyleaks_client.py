import threading
import uuid
from typing import Any

import httpx

from scanhook.copyleaks.client_base import BaseExportClient
from scanhook.copyleaks.exceptions import (
    ExportAuthenticationError,
    ExportNetworkError,
    ExportRequestError,
)
from scanhook.logging.logger import Log


class CopyleaksClient(BaseExportClient):
    """Copyleaks REST client: account login and bulk result export.

    The export request tells Copyleaks where to POST each artifact. Those
    URLs point back at this service's webhook routes under `webhook_base_url`.
    """

    def __init__(
        self,
        *,
        email: str,
        api_key: str,
        identity_url: str,
        api_url: str,
        webhook_base_url: str,
        timeout_seconds: int,
        max_retries: int = 3,
        include_pdf_report: bool = True,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._email = email
        self._api_key = api_key
        self._identity_url = identity_url.rstrip("/")
        self._api_url = api_url.rstrip("/")
        self._webhook_base_url = webhook_base_url.rstrip("/")
        self._max_retries = max_retries
        self._include_pdf_report = include_pdf_report
        self._client = http_client or httpx.Client(timeout=timeout_seconds)
        self._token: str | None = None
        self._token_lock = threading.Lock()

    def login(self) -> None:
        try:
            response = self._client.post(
                f"{self._identity_url}/v3/account/login/api",
                json={"email": self._email, "key": self._api_key},
            )
        except httpx.HTTPError as exc:
            raise ExportNetworkError(f"Copyleaks login network error: {exc}") from exc

        if response.status_code != httpx.codes.OK:
            raise ExportAuthenticationError(
                f"Copyleaks login rejected with status {response.status_code}"
            )
        try:
            body = response.json()
        except ValueError as exc:
            raise ExportAuthenticationError(
                "Copyleaks login returned a non-JSON body"
            ) from exc
        token = body.get("access_token") if isinstance(body, dict) else None
        if not token:
            raise ExportAuthenticationError("Copyleaks login returned no access token")
        with self._token_lock:
            self._token = token
        Log.info("Copyleaks authentication ready")

    def export_results(self, scan_id: str, result_ids: list[str]) -> None:
        if self._token is None:
            self.login()

        export_id = uuid.uuid4().hex
        response = self._post_export(scan_id, export_id, result_ids)
        if response.status_code == httpx.codes.UNAUTHORIZED:
            Log.warning("Copyleaks token rejected, logging in again", scan_id=scan_id)
            self.login()
            response = self._post_export(scan_id, export_id, result_ids)

        if response.is_error:
            raise ExportRequestError(
                f"Copyleaks export rejected with status {response.status_code}",
                status_code=response.status_code,
            )
        Log.info(
            "Copyleaks export requested",
            scan_id=scan_id,
            export_id=export_id,
            results=len(result_ids),
        )

    def build_export_request(
        self, scan_id: str, result_ids: list[str]
    ) -> dict[str, Any]:
        """Build the export body routing every artifact to our webhooks."""
        export_base = f"{self._webhook_base_url}/webhooks/export/{scan_id}"
        body: dict[str, Any] = {
            "results": [
                {
                    "id": result_id,
                    "verb": "POST",
                    "endpoint": f"{export_base}/results/{result_id}",
                }
                for result_id in result_ids
            ],
            "crawledVersion": {"verb": "POST", "endpoint": f"{export_base}/crawled"},
            "completionWebhook": f"{export_base}/completed",
            "maxRetries": self._max_retries,
        }
        if self._include_pdf_report:
            body["pdfReport"] = {"verb": "POST", "endpoint": f"{export_base}/pdf"}
        return body

    def close(self) -> None:
        self._client.close()

    def _post_export(
        self, scan_id: str, export_id: str, result_ids: list[str]
    ) -> httpx.Response:
        try:
            return self._client.post(
                f"{self._api_url}/v3/downloads/{scan_id}/export/{export_id}",
                json=self.build_export_request(scan_id, result_ids),
                headers={"Authorization": f"Bearer {self._token}"},
            )
        except httpx.HTTPError as exc:
            raise ExportNetworkError(f"Copyleaks export network error: {exc}") from exc
