from unittest.mock import MagicMock

import pytest

from trackercli.core.services.fetch_service import FetchService
from trackercli.core.services.request_service import TrackerRequestService
from trackercli.domain.errors import (
    APIError,
    CredentialError,
    FetchFailedError,
    InitiationFailedError,
    InvalidIndexerError,
    LimiterUnavailableError,
    RateLimitedError,
)
from trackercli.domain.interfaces.credentials import CredentialProvider
from trackercli.domain.models.tracker import RequestData
from trackercli.infrastructure.api.request_executor import RequestExecutor
from trackercli.infrastructure.cache.caching_service import CachingService
from trackercli.infrastructure.resilience.rate_limiter import InMemoryRateLimiterRegistry

REQUEST_DATA = RequestData(indexer="redacted", api_key="secret-key")


@pytest.fixture
def cache_service():
    return CachingService()


@pytest.fixture
def registry():
    return InMemoryRateLimiterRegistry({"redacted": (10, 10.0), "ops": (5, 10.0)})


@pytest.fixture
def mock_credentials():
    provider = MagicMock(spec=CredentialProvider)
    provider.get_api_key.return_value = "secret-key"
    return provider


@pytest.fixture
def fetch_service(cache_service, mock_credentials, registry, mock_session):
    request_service = TrackerRequestService(registry, RequestExecutor(session=mock_session))
    return FetchService(cache_service, mock_credentials, request_service)


def test_miss_fetches_and_caches(fetch_service: FetchService, cache_service: CachingService, mock_session: MagicMock):
    response_data = fetch_service.fetch_response_data(REQUEST_DATA, 42, "torrent")

    assert response_data.is_success
    args, _ = mock_session.get.call_args
    assert args == ("https://redacted.sh/ajax.php?action=torrent&id=42",)
    assert cache_service.check_cache("torrentID 42", "redacted") == response_data


def test_second_fetch_is_served_from_cache(fetch_service: FetchService, mock_session: MagicMock, mock_credentials: MagicMock):
    first = fetch_service.fetch_response_data(REQUEST_DATA, 42, "torrent")
    second = fetch_service.fetch_response_data(REQUEST_DATA, 42, "torrent")

    assert second == first
    mock_session.get.assert_called_once()
    mock_credentials.get_api_key.assert_called_once()


def test_cache_hit_skips_limiter(fetch_service: FetchService, cache_service: CachingService, mock_session: MagicMock, registry):
    registry.limits = {}  # any network attempt would now fail
    cache_service.cache_response_data("torrentID 7", "redacted", MagicMock(name="cached-envelope"))

    result = fetch_service.fetch_response_data(REQUEST_DATA, 7, "torrent")

    assert result is cache_service.check_cache("torrentID 7", "redacted")
    mock_session.get.assert_not_called()


def test_cache_is_scoped_by_indexer(fetch_service: FetchService, mock_session: MagicMock):
    fetch_service.fetch_response_data(REQUEST_DATA, 42, "torrent")
    fetch_service.fetch_response_data(RequestData(indexer="ops", api_key="k"), 42, "torrent")

    assert mock_session.get.call_count == 2
    args, _ = mock_session.get.call_args
    assert args == ("https://orpheus.network/ajax.php?action=torrent&id=42",)


def test_explicit_api_base_is_used(fetch_service: FetchService, mock_session: MagicMock):
    fetch_service.fetch_response_data(REQUEST_DATA, 1, "torrent", api_base="http://localhost:8080/ajax.php")

    args, _ = mock_session.get.call_args
    assert args == ("http://localhost:8080/ajax.php?action=torrent&id=1",)


def test_failure_is_wrapped_and_not_cached(
    fetch_service: FetchService,
    cache_service: CachingService,
    mock_session: MagicMock,
    make_response,
):
    mock_session.get.return_value = make_response({"status": "failure", "error": "bad id parameter"})

    with pytest.raises(FetchFailedError) as exc_info:
        fetch_service.fetch_response_data(REQUEST_DATA, 42, "torrent")

    error = exc_info.value
    assert isinstance(error.cause, InitiationFailedError)
    assert isinstance(error.root_cause, APIError)
    assert error.root_cause.message == "bad id parameter"
    assert (error.action, error.torrent_id, error.indexer) == ("torrent", 42, "redacted")
    assert cache_service.check_cache("torrentID 42", "redacted") is None

    # not cached, so the next call goes to the network again
    mock_session.get.return_value = make_response({"status": "success", "response": {}})
    assert fetch_service.fetch_response_data(REQUEST_DATA, 42, "torrent").is_success
    assert mock_session.get.call_count == 2


def test_credential_error_happens_before_network(fetch_service: FetchService, mock_credentials: MagicMock, mock_session: MagicMock):
    mock_credentials.get_api_key.side_effect = CredentialError("no API key")

    with pytest.raises(FetchFailedError) as exc_info:
        fetch_service.fetch_response_data(RequestData(indexer="redacted"), 42, "torrent")

    assert isinstance(exc_info.value.cause, CredentialError)
    mock_session.get.assert_not_called()


def test_unknown_indexer(fetch_service: FetchService, mock_session: MagicMock):
    with pytest.raises(FetchFailedError) as exc_info:
        fetch_service.fetch_response_data(RequestData(indexer="btn", api_key="k"), 42, "torrent")

    assert isinstance(exc_info.value.cause, InvalidIndexerError)
    mock_session.get.assert_not_called()


def test_indexer_without_limiter(fetch_service: FetchService, registry):
    registry.limits.pop("ops")

    with pytest.raises(FetchFailedError) as exc_info:
        fetch_service.fetch_response_data(RequestData(indexer="ops", api_key="k"), 42, "torrent")

    assert isinstance(exc_info.value.cause, LimiterUnavailableError)


def test_exhausted_limiter_fails_fast(cache_service, mock_credentials, mock_session):
    registry = InMemoryRateLimiterRegistry({"redacted": (2, 3600.0)})
    request_service = TrackerRequestService(registry, RequestExecutor(session=mock_session))
    fetch_service = FetchService(cache_service, mock_credentials, request_service)

    fetch_service.fetch_response_data(REQUEST_DATA, 1, "torrent")
    fetch_service.fetch_response_data(REQUEST_DATA, 2, "torrent")
    with pytest.raises(FetchFailedError) as exc_info:
        fetch_service.fetch_response_data(REQUEST_DATA, 3, "torrent")

    assert isinstance(exc_info.value.root_cause, RateLimitedError)
    assert mock_session.get.call_count == 2
    # already cached ids are still served
    assert fetch_service.fetch_response_data(REQUEST_DATA, 1, "torrent").is_success
