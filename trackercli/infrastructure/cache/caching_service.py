"""Concrete implementation of the response Caching Service.

Manages an L1 (in-memory, LRU-bounded) cache and an optional L2 (diskcache)
cache so responses survive across CLI runs. Every entry is scoped by indexer.
L2 stores the plain envelope dict, not the dataclass.
"""

import hashlib
import logging
from collections import OrderedDict
from pathlib import Path
from threading import Lock
from typing import Optional, Union

import diskcache as dc

from trackercli.domain.interfaces.cache import CacheService
from trackercli.domain.models.common import CacheKey
from trackercli.domain.models.tracker import ResponseData

logger = logging.getLogger(__name__)

# --- Cache Configuration ---
DEFAULT_L1_MAX_ITEMS = 1024
# L2 entries never expire unless a TTL is configured
DEFAULT_L2_TTL_SECONDS = None

CACHE_LEVELS = ('l1', 'l2', 'all')


class CachingService(CacheService):
    """Two-level response cache (L1: memory, L2: disk, optional)."""

    def __init__(
        self,
        cache_dir: Optional[Union[str, Path]] = None,
        l1_max_items: int = DEFAULT_L1_MAX_ITEMS,
        l2_ttl: Optional[int] = DEFAULT_L2_TTL_SECONDS,
    ):
        """Initializes the CachingService.

        Args:
            cache_dir: Directory for the L2 disk cache. L2 is disabled if None.
            l1_max_items: Maximum number of entries kept in memory.
            l2_ttl: Expiry in seconds for L2 entries, None for no expiry.
        """
        self.l1_max_items = l1_max_items
        self.l2_ttl = l2_ttl
        self._memory_cache: "OrderedDict[str, ResponseData]" = OrderedDict()
        self._lock = Lock()

        self.disk_cache: Optional[dc.Cache] = None
        if cache_dir is not None:
            try:
                self.disk_cache = dc.Cache(str(cache_dir), timeout=1)
                logger.info(f"Initialized L2 disk cache at: {self.disk_cache.directory} with TTL: {self.l2_ttl}")
            except Exception as e:
                logger.error(f"Failed to initialize L2 disk cache at {cache_dir}: {e}", exc_info=True)
                self.disk_cache = None

        logger.info(f"Initialized L1 in-memory cache with size: {self.l1_max_items}")

    def _generate_key(self, key: CacheKey, indexer: str) -> str:
        """Generates the storage key for `key` in the `indexer` scope."""
        key_string = "|".join([indexer, key])
        return hashlib.sha256(key_string.encode('utf-8')).hexdigest()

    # --- L1 Cache Operations ---
    def _get_from_memory(self, storage_key: str) -> Optional[ResponseData]:
        with self._lock:
            value = self._memory_cache.get(storage_key)
            if value is not None:
                self._memory_cache.move_to_end(storage_key)
            return value

    def _put_in_memory(self, storage_key: str, value: ResponseData) -> None:
        with self._lock:
            self._memory_cache[storage_key] = value
            self._memory_cache.move_to_end(storage_key)
            while len(self._memory_cache) > self.l1_max_items:
                lru_key, _ = self._memory_cache.popitem(last=False)
                logger.debug(f"L1 Cache EVICTED key (LRU): {lru_key[:10]}...")

    # --- L2 Cache Operations ---
    def _get_from_disk(self, storage_key: str) -> Optional[ResponseData]:
        if self.disk_cache is None:
            return None
        try:
            value = self.disk_cache.get(storage_key, default=None)
        except Exception as e:
            logger.error(f"Error getting from L2 cache (key: {storage_key[:10]}...): {e}", exc_info=True)
            return None
        if not isinstance(value, dict):
            return None
        return ResponseData.from_dict(value)

    def _put_in_disk(self, storage_key: str, value: ResponseData) -> None:
        if self.disk_cache is None:
            return
        try:
            self.disk_cache.set(storage_key, value.to_dict(), expire=self.l2_ttl)
        except Exception as e:
            logger.error(f"Error putting into L2 cache (key: {storage_key[:10]}...): {e}", exc_info=True)

    # --- CacheService Interface Implementation ---
    def check_cache(self, key: CacheKey, indexer: str) -> Optional[ResponseData]:
        storage_key = self._generate_key(key, indexer)

        value = self._get_from_memory(storage_key)
        if value is not None:
            logger.debug(f"L1 Cache HIT for [{indexer}] {key}")
            return value

        value = self._get_from_disk(storage_key)
        if value is not None:
            logger.debug(f"L2 Cache HIT for [{indexer}] {key}")
            self._put_in_memory(storage_key, value)
            return value

        logger.debug(f"Cache MISS for [{indexer}] {key}")
        return None

    def cache_response_data(self, key: CacheKey, indexer: str, response_data: ResponseData) -> None:
        storage_key = self._generate_key(key, indexer)
        self._put_in_memory(storage_key, response_data)
        self._put_in_disk(storage_key, response_data)
        logger.debug(f"Cache PUT for [{indexer}] {key}")

    def clear(self, level: str = 'all') -> None:
        """Clears the cache.

        Args:
            level: Which cache level to clear ('l1', 'l2', 'all'). Defaults to 'all'.
        """
        if level not in CACHE_LEVELS:
            raise ValueError(f"Invalid cache level '{level}'. Choose one of: {', '.join(CACHE_LEVELS)}.")

        if level in ('l1', 'all'):
            with self._lock:
                self._memory_cache.clear()
            logger.info("Cleared L1 (in-memory) cache.")

        if level in ('l2', 'all') and self.disk_cache is not None:
            count = self.disk_cache.clear()
            logger.info(f"Cleared L2 (disk) cache. Removed {count} items.")

    def close(self) -> None:
        """Closes the L2 cache, if open."""
        if self.disk_cache is not None:
            self.disk_cache.close()
