"""Defines common Value Objects used across the request pipeline.

These are plain strings/ints at runtime; NewType gives them semantic names
in signatures (an indexer name is not an endpoint, an API key is not a
cache key).
"""

from typing import NewType

# === Tracker Context ===
Indexer = NewType("Indexer", str)            # e.g. 'redacted', 'ops'
Action = NewType("Action", str)              # ajax.php action, e.g. 'torrent'
ApiBase = NewType("ApiBase", str)            # Base URL of an indexer's ajax.php
Endpoint = NewType("Endpoint", str)          # Fully formed query URL
ApiKey = NewType("ApiKey", str)              # Raw Authorization header value

# === Caching Context ===
CacheKey = NewType("CacheKey", str)          # '<action>ID <id>', scoped per indexer by the store

SUCCESS_STATUS = "success"


def make_cache_key(action: str, torrent_id: int) -> CacheKey:
    """Builds the cache key for an (action, id) pair."""
    return CacheKey(f"{action}ID {torrent_id}")
