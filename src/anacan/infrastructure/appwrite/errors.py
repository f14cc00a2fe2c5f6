"""Errors raised by the remote schema service client."""


class AppwriteError(Exception):
    """Raised when the remote service rejects a request.

    Attributes:
        message: Error message returned by the service.
        code: HTTP status code (0 for transport failures).
        type: Machine readable error type, e.g. ``collection_already_exists``.
    """

    def __init__(self, message: str, code: int = 0, type: str | None = None) -> None:
        self.message = message
        self.code = code
        self.type = type
        super().__init__(message)

    @property
    def is_conflict(self) -> bool:
        """The resource already exists."""
        return self.code == 409

    @property
    def is_not_found(self) -> bool:
        return self.code == 404


class AppwriteNetworkError(AppwriteError):
    """Raised when the request never got a response (reset, DNS, timeout)."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code=0, type="network_error")
