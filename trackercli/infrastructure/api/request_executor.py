"""Executes a single rate-gated GET against a tracker API.

Takes a fully formed endpoint, checks the indexer's limiter, sends the
request with the API key in the Authorization header, reads and decodes the
JSON envelope and validates its status. One attempt per call, never retried.
"""

import json
import logging
import socket
import threading
import time
from typing import Callable, List, Optional

import requests

from trackercli.domain.errors import (
    APIError,
    DecodeError,
    RateLimitedError,
    RequestTimeoutError,
    TrackerError,
    TransportError,
)
from trackercli.domain.events.api_events import (
    ApiCallDenied,
    ApiCallFailed,
    ApiCallInitiated,
    ApiCallSucceeded,
    DomainEvent,
)
from trackercli.domain.interfaces.rate_limiter import RateLimiter
from trackercli.domain.models.tracker import ResponseData

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 10.0
READ_CHUNK_SIZE = 16 * 1024

EventListener = Callable[[DomainEvent], None]


def _interrupt_response(response: requests.Response, expired: threading.Event, endpoint: str) -> None:
    """Shuts down the socket under a streaming response so a blocked read returns."""
    expired.set()
    connection = getattr(getattr(response, "raw", None), "connection", None)
    sock = getattr(connection, "sock", None)
    if sock is None:
        return
    logger.debug(f"Deadline reached, shutting down connection to {endpoint}")
    try:
        sock.shutdown(socket.SHUT_RDWR)
    except OSError as e:
        # Already closed by the server or the reader
        logger.debug(f"Connection to {endpoint} already closed: {e}")


class RequestExecutor:
    """Performs one HTTP GET per call, bounded by a fixed timeout."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        event_listener: Optional[EventListener] = None,
    ):
        """Initializes the executor.

        Args:
            session: HTTP session to send requests with. A new one is created if None.
            timeout: Upper bound in seconds for the whole request, from send to last body byte.
            event_listener: Optional callback receiving the API call events.
        """
        self.session = session or requests.Session()
        self.timeout = timeout
        self.event_listener = event_listener
        logger.debug(f"RequestExecutor initialized with timeout={self.timeout}s")

    def _dispatch_event(self, event: DomainEvent) -> None:
        logger.debug(f"EVENT: {event}")
        if self.event_listener is not None:
            self.event_listener(event)

    def make_request(self, endpoint: str, api_key: str, limiter: RateLimiter, indexer: str) -> ResponseData:
        """Sends a GET to `endpoint` and returns the validated envelope.

        A limiter token is consumed before anything else, and stays consumed
        even if the request then fails.

        Raises:
            RateLimitedError: No token available; no request was sent.
            RequestTimeoutError: The request exceeded the timeout.
            TransportError: Network or body read failure.
            DecodeError: The body is not a JSON object.
            APIError: The envelope's status is not "success".
        """
        if not limiter.allow():
            logger.warning(f"{indexer}: Too many requests")
            self._dispatch_event(ApiCallDenied(indexer=indexer, endpoint=endpoint))
            raise RateLimitedError(indexer)

        self._dispatch_event(ApiCallInitiated(indexer=indexer, endpoint=endpoint))
        start_time = time.perf_counter()
        try:
            body = self._fetch_body(endpoint, api_key)
            response_data = self._decode(endpoint, body)
            if not response_data.is_success:
                logger.warning(f"API error from {indexer}: {response_data.error}")
                raise APIError(indexer, response_data.error)
        except TrackerError as e:
            latency_ms = (time.perf_counter() - start_time) * 1000
            self._dispatch_event(ApiCallFailed(
                indexer=indexer,
                endpoint=endpoint,
                error_type=type(e).__name__,
                error_message=str(e),
                latency_ms=latency_ms,
            ))
            raise

        latency_ms = (time.perf_counter() - start_time) * 1000
        self._dispatch_event(ApiCallSucceeded(indexer=indexer, endpoint=endpoint, latency_ms=latency_ms))
        return response_data

    def _fetch_body(self, endpoint: str, api_key: str) -> bytes:
        """Sends the request and reads the whole body before the deadline.

        The socket read timeout restarts with every byte received, so a
        watchdog shuts the connection down once the deadline passes; a read
        blocked on a trickling server then returns and the call fails with
        RequestTimeoutError.
        """
        deadline = time.monotonic() + self.timeout
        headers = {"Authorization": api_key}
        try:
            response = self.session.get(endpoint, headers=headers, timeout=self.timeout, stream=True)
        except requests.exceptions.Timeout as e:
            logger.error(f"Request to {endpoint} timed out: {e}")
            raise RequestTimeoutError(endpoint, self.timeout, e) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Request to {endpoint} failed: {e}")
            raise TransportError(endpoint, e) from e

        logger.debug(f"Received HTTP {response.status_code} from {endpoint}")
        expired = threading.Event()
        watchdog = threading.Timer(
            max(deadline - time.monotonic(), 0.0), _interrupt_response, args=(response, expired, endpoint)
        )
        watchdog.daemon = True
        watchdog.start()
        chunks: List[bytes] = []
        try:
            for chunk in response.iter_content(chunk_size=READ_CHUNK_SIZE):
                if expired.is_set() or time.monotonic() > deadline:
                    raise RequestTimeoutError(endpoint, self.timeout)
                chunks.append(chunk)
            if expired.is_set():
                # The shutdown can end a body without a length as a clean EOF
                raise RequestTimeoutError(endpoint, self.timeout)
        except RequestTimeoutError:
            logger.error(f"Reading response from {endpoint} exceeded {self.timeout}s")
            raise
        except requests.exceptions.RequestException as e:
            # requests reports a read timeout while streaming as a ConnectionError
            if expired.is_set() or time.monotonic() >= deadline:
                logger.error(f"Reading response from {endpoint} timed out: {e}")
                raise RequestTimeoutError(endpoint, self.timeout, e) from e
            logger.error(f"Reading response from {endpoint} failed: {e}")
            raise TransportError(endpoint, e) from e
        finally:
            watchdog.cancel()
            response.close()
        return b"".join(chunks)

    def _decode(self, endpoint: str, body: bytes) -> ResponseData:
        try:
            decoded = json.loads(body)
        except (ValueError, RecursionError) as e:
            # RecursionError: nesting deeper than the decoder can follow
            logger.error(f"Failed to decode response from {endpoint}: {type(e).__name__}: {e}")
            raise DecodeError(endpoint, str(e) or type(e).__name__) from e
        if not isinstance(decoded, dict):
            logger.error(f"Unexpected JSON type from {endpoint}: {type(decoded).__name__}")
            raise DecodeError(endpoint, f"expected a JSON object, got {type(decoded).__name__}")
        return ResponseData.from_dict(decoded)

    def close(self) -> None:
        """Closes the underlying HTTP session."""
        self.session.close()
