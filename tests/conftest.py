import json
from typing import Any, Callable, Dict, Optional
from unittest.mock import MagicMock

import pytest
import requests
from typer.testing import CliRunner

from trackercli.domain.interfaces.rate_limiter import RateLimiter, RateLimiterRegistry
from trackercli.infrastructure.config.settings import clear_test_config

TORRENT_SUCCESS_BODY: Dict[str, Any] = {
    "status": "success",
    "response": {
        "torrent": {"id": 42, "release_name": "Foo &amp; Bar", "username": "alice"},
    },
}


@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()


@pytest.fixture(autouse=True)
def reset_test_config():
    """Drops any set_config_for_testing overrides after each test."""
    yield
    clear_test_config()


@pytest.fixture
def make_response() -> Callable[..., MagicMock]:
    """Factory for stub requests.Response objects carrying a given body."""
    def _make(body: Any, status_code: int = 200) -> MagicMock:
        if isinstance(body, (dict, list)):
            body = json.dumps(body)
        if isinstance(body, str):
            body = body.encode("utf-8")
        response = MagicMock(spec=requests.Response)
        response.status_code = status_code
        response.iter_content.return_value = [body]
        return response
    return _make


@pytest.fixture
def mock_session(make_response) -> MagicMock:
    """A stub HTTP session answering every GET with a successful torrent envelope."""
    session = MagicMock(spec=requests.Session)
    session.get.return_value = make_response(TORRENT_SUCCESS_BODY)
    return session


@pytest.fixture
def allowing_limiter() -> MagicMock:
    limiter = MagicMock(spec=RateLimiter)
    limiter.allow.return_value = True
    return limiter


@pytest.fixture
def denying_limiter() -> MagicMock:
    limiter = MagicMock(spec=RateLimiter)
    limiter.allow.return_value = False
    return limiter


@pytest.fixture
def limiter_registry(allowing_limiter) -> MagicMock:
    registry = MagicMock(spec=RateLimiterRegistry)
    registry.get_limiter.return_value = allowing_limiter
    return registry


class StaticRegistry(RateLimiterRegistry):
    """Registry returning a fixed limiter per indexer, None for the rest."""

    def __init__(self, limiters: Dict[str, RateLimiter]):
        self.limiters = limiters

    def get_limiter(self, indexer: str) -> Optional[RateLimiter]:
        return self.limiters.get(indexer)
