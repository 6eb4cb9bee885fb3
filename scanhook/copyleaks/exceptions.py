class ExportError(Exception):
    """Raised when the provider export call fails."""


class ExportAuthenticationError(ExportError):
    """Raised when the provider rejects the account credentials."""


class ExportNetworkError(ExportError):
    """Raised when the provider cannot be reached or times out."""


class ExportRequestError(ExportError):
    """Raised when the provider answers an export request with a non-2xx status."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code
