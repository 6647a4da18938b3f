"""Transport-level exceptions raised by the gateway client."""

from .base import DomainException


class NetworkError(DomainException):
    """
    Raised when a call to the system of record fails in transport.

    No ledger effect is guaranteed to have happened or not happened:
    callers must re-fetch order state before deciding to retry.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(
            message=message,
            code="NETWORK_ERROR",
        )
        self.status_code = status_code


class NetworkTimeoutError(NetworkError):
    """Raised when a call to the system of record times out."""

    def __init__(self):
        super().__init__(
            message="Gateway request timed out",
            status_code=None,
        )
        self.code = "NETWORK_TIMEOUT"
