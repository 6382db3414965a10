"""Errors raised by implementations of the Canvelete API interfaces."""


class ApiError(Exception):
    """Base class for failures talking to the Canvelete API."""


class HttpError(ApiError):
    """Raised when the API answers with a non-2xx status.

    `message` is the server's ``error`` (or ``message``) field when the body
    carries one, otherwise ``HTTP <status>``.
    """

    def __init__(self, status: int, message: str | None = None) -> None:
        self.status = status
        self.message = message or f"HTTP {status}"
        super().__init__(self.message)


class ApiConnectionError(ApiError):
    """Raised when the request never produced an HTTP response."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Could not reach {url}: {reason}")
        self.url = url
        self.reason = reason
