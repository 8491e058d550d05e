"""Interfaces for per-indexer admission control.

The pipeline only ever asks a limiter whether a token is available right
now; creating and owning limiters is the registry's job.
"""

import abc
from typing import Optional


class RateLimiter(abc.ABC):
    """A non-blocking admission check."""

    @abc.abstractmethod
    def allow(self) -> bool:
        """Consumes one token if available.

        Returns:
            True if the request may proceed, False if the caller is over the limit.
        """
        pass


class RateLimiterRegistry(abc.ABC):
    """Maps an indexer name to its long-lived limiter."""

    @abc.abstractmethod
    def get_limiter(self, indexer: str) -> Optional[RateLimiter]:
        """Returns the limiter for `indexer`, or None if none is configured."""
        pass
