"""Domain Events related to tracker API calls.

Emitted by the RequestExecutor for each attempt: denied by the limiter,
initiated, succeeded, or failed.
"""

from dataclasses import dataclass, field
import time
from typing import Optional


@dataclass
class DomainEvent:
    """Base class for domain events."""
    pass


@dataclass
class ApiCallDenied(DomainEvent):
    """Event triggered when the limiter refuses a call (no HTTP request made)."""
    indexer: str
    endpoint: str
    timestamp: float = field(default_factory=time.time)


@dataclass
class ApiCallInitiated(DomainEvent):
    """Event triggered when an HTTP request is about to be sent."""
    indexer: str
    endpoint: str
    timestamp: float = field(default_factory=time.time)


@dataclass
class ApiCallSucceeded(DomainEvent):
    """Event triggered when a call returned a success envelope."""
    indexer: str
    endpoint: str
    latency_ms: float
    timestamp: float = field(default_factory=time.time)


@dataclass
class ApiCallFailed(DomainEvent):
    """Event triggered when a call failed after the request was sent."""
    indexer: str
    endpoint: str
    error_type: str
    error_message: str
    latency_ms: Optional[float] = None
    timestamp: float = field(default_factory=time.time)
