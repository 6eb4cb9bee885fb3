from scanhook.config.settings import Settings
from scanhook.copyleaks.client_base import BaseExportClient
from scanhook.copyleaks.copyleaks_client import CopyleaksClient
from scanhook.copyleaks.example_client import ExampleExportClient


class ExportClientFactory:
    """Creates the configured outbound export client."""

    PROVIDERS: tuple[str, ...] = ("copyleaks", "example")

    @classmethod
    def create(cls, settings: Settings) -> BaseExportClient:
        provider = settings.export_provider.lower()
        if provider == "example":
            return ExampleExportClient()
        if provider == "copyleaks":
            return CopyleaksClient(
                email=settings.copyleaks_email,
                api_key=settings.copyleaks_api_key,
                identity_url=settings.copyleaks_identity_url,
                api_url=settings.copyleaks_api_url,
                webhook_base_url=settings.webhook_base_url,
                timeout_seconds=settings.copyleaks_timeout_seconds,
                max_retries=settings.copyleaks_export_max_retries,
                include_pdf_report=settings.copyleaks_export_pdf_report,
            )
        raise ValueError(
            f"Unknown export provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
        )
