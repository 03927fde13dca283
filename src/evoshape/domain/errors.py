"""Domain error types."""


class StorageError(Exception):
    """Raised by repositories when the database rejects an operation."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class PushProviderError(Exception):
    """Raised when the push provider rejects or fails a request."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class UpstreamError(Exception):
    """Raised when a third-party catalog API returns a failure."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
