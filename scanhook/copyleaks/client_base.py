from abc import ABC, abstractmethod


class BaseExportClient(ABC):
    """Contract for outbound provider clients that start bulk result exports."""

    def login(self) -> None:
        """Authenticate with the provider. Default: no authentication needed."""

    @abstractmethod
    def export_results(self, scan_id: str, result_ids: list[str]) -> None:
        """Ask the provider to deliver the detailed data for `result_ids`.

        Raises:
            ExportError: if the provider could not be asked.
        """

    def close(self) -> None:
        """Release network resources. Default: nothing to release."""
