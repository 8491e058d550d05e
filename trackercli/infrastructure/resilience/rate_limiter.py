import time
import logging
from threading import Lock
from typing import Callable, Dict, Optional, Tuple

from trackercli.domain.interfaces.rate_limiter import RateLimiter, RateLimiterRegistry

logger = logging.getLogger(__name__)

# Configuration Constants (overridable per indexer through settings)
DEFAULT_MAX_REQUESTS = 5
DEFAULT_TIMEFRAME_SECONDS = 10


class TokenBucketRateLimiter(RateLimiter):
    """Thread-safe token bucket with a non-blocking admission check."""

    def __init__(
        self,
        capacity: int = DEFAULT_MAX_REQUESTS,
        refill_rate: float = DEFAULT_MAX_REQUESTS / DEFAULT_TIMEFRAME_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initializes the bucket full.

        Args:
            capacity: Maximum number of tokens (burst size).
            refill_rate: Tokens added per second.
            clock: Monotonic time source in seconds.
        """
        if capacity <= 0 or refill_rate <= 0:
            raise ValueError("Capacity and refill rate must be positive.")

        self.capacity = capacity
        self.refill_rate = refill_rate
        self.tokens = float(capacity)
        self._clock = clock
        self.last_refill = clock()
        self._lock = Lock()
        logger.info(f"TokenBucketRateLimiter initialized: capacity={self.capacity}, refill_rate={self.refill_rate:.3f}/s.")

    @classmethod
    def per_timeframe(
        cls,
        max_requests: int,
        timeframe_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> "TokenBucketRateLimiter":
        """Builds a bucket allowing `max_requests` per `timeframe_seconds` on average."""
        if timeframe_seconds <= 0:
            raise ValueError("Timeframe must be positive.")
        return cls(capacity=max_requests, refill_rate=max_requests / timeframe_seconds, clock=clock)

    def _refill(self, now: float) -> None:
        elapsed = now - self.last_refill
        if elapsed > 0:
            self.tokens = min(self.capacity, self.tokens + elapsed * self.refill_rate)
            self.last_refill = now

    def allow(self) -> bool:
        """Takes one token if available. Never waits."""
        with self._lock:
            self._refill(self._clock())
            if self.tokens >= 1:
                self.tokens -= 1
                return True
            return False


class InMemoryRateLimiterRegistry(RateLimiterRegistry):
    """Holds one long-lived limiter per configured indexer."""

    def __init__(self, limits: Dict[str, Tuple[int, float]]):
        """Initializes the registry.

        Args:
            limits: indexer -> (max requests, timeframe seconds). Indexers absent
                from this mapping have no limiter.
        """
        self.limits = dict(limits)
        self._limiters: Dict[str, TokenBucketRateLimiter] = {}
        self._lock = Lock()

    def get_limiter(self, indexer: str) -> Optional[RateLimiter]:
        with self._lock:
            limiter = self._limiters.get(indexer)
            if limiter is None:
                limit = self.limits.get(indexer)
                if limit is None:
                    logger.warning(f"No rate limit configured for indexer: {indexer}")
                    return None
                max_requests, timeframe_seconds = limit
                limiter = TokenBucketRateLimiter.per_timeframe(max_requests, timeframe_seconds)
                self._limiters[indexer] = limiter
            return limiter
