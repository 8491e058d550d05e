"""Caching Service Implementation.

Provides the concrete CacheService: an in-memory L1 and an optional
diskcache-backed L2, both scoped per indexer.
Bounded Context: Cache Management
"""
