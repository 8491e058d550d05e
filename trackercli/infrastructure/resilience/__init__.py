"""API Resilience Implementations.

Contains the token bucket rate limiter and the per-indexer limiter registry.
Bounded Context: API Resilience
"""
