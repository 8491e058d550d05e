"""Interface for the response cache.

Defines the contract for storing and retrieving decoded response envelopes.
Entries are scoped per indexer: the same key under two indexers refers to
two different entries. Expiry is owned by the implementation.
"""

import abc
from typing import Optional

from ..models.common import CacheKey
from ..models.tracker import ResponseData


class CacheService(abc.ABC):
    """Abstract Base Class for response caching."""

    @abc.abstractmethod
    def check_cache(self, key: CacheKey, indexer: str) -> Optional[ResponseData]:
        """Retrieves a cached envelope.

        Args:
            key: The cache key (see `make_cache_key`).
            indexer: The indexer scope of the entry.

        Returns:
            The cached envelope, or None on a miss.
        """
        pass

    @abc.abstractmethod
    def cache_response_data(self, key: CacheKey, indexer: str, response_data: ResponseData) -> None:
        """Stores an envelope under `key` in the `indexer` scope."""
        pass

    @abc.abstractmethod
    def clear(self, level: str = 'all') -> None:
        """Clears the cache.

        Args:
            level: The cache level(s) to clear ('l1', 'l2', 'all').
        """
        pass
