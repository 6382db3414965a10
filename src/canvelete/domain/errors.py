"""Domain-layer error definitions."""

# ============================================================================
#                           General domain errors
# ============================================================================


class CanveleteError(Exception):
    """Base class for application errors that are reported to the user."""


class ValidationError(CanveleteError, ValueError):
    """Raised when required arguments are missing or malformed.

    Validation always happens before any network call is made.
    """


class DataParseError(CanveleteError):
    """Raised when JSON input from a file or a flag cannot be parsed."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"Invalid JSON in {source}: {reason}")
        self.source = source
        self.reason = reason


class NotFoundError(CanveleteError):
    """Raised when a named profile or configuration key does not exist."""

    def __init__(self, kind: str, key: str, available: list[str] | None = None) -> None:
        message = f"{kind.capitalize()} {key!r} not found"
        if available:
            message += f" (available: {', '.join(available)})"
        super().__init__(message)
        self.kind = kind
        self.key = key
        self.available = list(available or [])


class NotAuthenticatedError(CanveleteError):
    """Raised when a command needs an API key and none can be resolved."""

    def __init__(self) -> None:
        super().__init__(
            "Not authenticated. Run 'canvelete auth login' "
            "or set the CANVELETE_API_KEY environment variable."
        )


# ============================================================================
#                           Render job errors
# ============================================================================


class RenderTimeoutError(CanveleteError, TimeoutError):
    """Raised when an async render job does not finish within the timeout."""

    def __init__(self, job_id: str, timeout_ms: int, last_status: str | None) -> None:
        super().__init__(
            f"Render job {job_id} did not finish within {timeout_ms / 1000:g}s"
            + (f" (last status: {last_status})" if last_status else "")
        )
        self.job_id = job_id
        self.timeout_ms = timeout_ms
        self.last_status = last_status
