class ScanStoreError(Exception):
    """Raised when the scan store cannot serve a request."""
