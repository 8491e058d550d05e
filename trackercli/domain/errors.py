"""Error taxonomy for the tracker request pipeline.

Leaf errors are raised where a failure is first detected. They are then
wrapped with more context as they cross component boundaries:
RequestExecutor -> TrackerRequestService (InitiationFailedError) ->
FetchService (FetchFailedError). The inner error stays reachable through
`.cause` and the `__cause__` chain.
"""

from typing import Optional


class TrackerError(Exception):
    """Base class for every error raised by the pipeline."""


class InvalidIndexerError(TrackerError):
    """Raised when an indexer name has no known API base."""
    def __init__(self, indexer: str):
        self.indexer = indexer
        super().__init__(f"invalid indexer: {indexer!r}")


class RateLimitedError(TrackerError):
    """Raised when the indexer's limiter has no token available right now."""
    def __init__(self, indexer: str):
        self.indexer = indexer
        super().__init__(f"{indexer}: too many requests")


class LimiterUnavailableError(TrackerError):
    """Raised when no rate limiter is configured for an indexer."""
    def __init__(self, indexer: str):
        self.indexer = indexer
        super().__init__(f"could not get rate limiter for indexer: {indexer}")


class TransportError(TrackerError):
    """Network-level failure (DNS, refused connection, TLS, body read)."""
    def __init__(self, endpoint: str, original_exception: Optional[BaseException] = None, message: Optional[str] = None):
        self.endpoint = endpoint
        self.original_exception = original_exception
        super().__init__(message or f"error making HTTP request to {endpoint}: {original_exception}")


class RequestTimeoutError(TransportError):
    """The request did not complete within the fixed timeout."""
    def __init__(self, endpoint: str, timeout: float, original_exception: Optional[BaseException] = None):
        self.timeout = timeout
        super().__init__(
            endpoint,
            original_exception,
            message=f"request to {endpoint} timed out after {timeout:g}s",
        )


class DecodeError(TrackerError):
    """The response body is not a JSON object."""
    def __init__(self, endpoint: str, detail: str):
        self.endpoint = endpoint
        super().__init__(f"could not decode response from {endpoint}: {detail}")


class APIError(TrackerError):
    """The API answered with a non-success status."""
    def __init__(self, indexer: str, message: Optional[str]):
        self.indexer = indexer
        self.message = message or ""
        super().__init__(f"API error from {indexer}: {self.message}")


class CredentialError(TrackerError):
    """No usable API key could be resolved for a request."""


class _WrappingError(TrackerError):
    """Base for errors that add context around an inner TrackerError."""
    def __init__(self, message: str, cause: Exception):
        self.cause = cause
        super().__init__(f"{message}: {cause}")

    @property
    def root_cause(self) -> Exception:
        """The innermost wrapped error."""
        error: Exception = self.cause
        while isinstance(error, _WrappingError):
            error = error.cause
        return error


class InitiationFailedError(_WrappingError):
    """A request to a specific endpoint failed."""
    def __init__(self, endpoint: str, cause: Exception):
        self.endpoint = endpoint
        super().__init__(f"request failed for endpoint {endpoint}", cause)


class FetchFailedError(_WrappingError):
    """Fetching data for an (action, id) pair failed."""
    def __init__(self, action: str, torrent_id: int, indexer: str, cause: Exception):
        self.action = action
        self.torrent_id = torrent_id
        self.indexer = indexer
        super().__init__(f"error fetching {action} data for ID {torrent_id} from {indexer}", cause)
