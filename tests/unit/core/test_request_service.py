import logging
from unittest.mock import MagicMock

import pytest

from trackercli.core.services.request_service import TrackerRequestService, build_endpoint
from trackercli.domain.errors import (
    APIError,
    InitiationFailedError,
    LimiterUnavailableError,
    RateLimitedError,
)
from trackercli.domain.models.tracker import ResponseData
from trackercli.infrastructure.api.request_executor import RequestExecutor

API_BASE = "https://redacted.sh/ajax.php"


@pytest.fixture
def mock_executor():
    executor = MagicMock(spec=RequestExecutor)
    executor.make_request.return_value = ResponseData.from_dict({
        "status": "success",
        "response": {"torrent": {"id": 42, "release_name": "Foo &amp; Bar", "username": "alice"}},
    })
    return executor


@pytest.fixture
def request_service(limiter_registry: MagicMock, mock_executor: MagicMock):
    return TrackerRequestService(limiter_registry=limiter_registry, executor=mock_executor)


def test_build_endpoint():
    assert build_endpoint(API_BASE, "torrent", 42) == "https://redacted.sh/ajax.php?action=torrent&id=42"


def test_build_endpoint_encodes_action():
    assert build_endpoint(API_BASE, "a&id=1", 2) == "https://redacted.sh/ajax.php?action=a%26id%3D1&id=2"


def test_request_goes_through_indexer_limiter(
    request_service: TrackerRequestService,
    limiter_registry: MagicMock,
    mock_executor: MagicMock,
    allowing_limiter: MagicMock,
):
    response_data = request_service.initiate_api_request(42, "torrent", "secret-key", API_BASE, "redacted")

    limiter_registry.get_limiter.assert_called_once_with("redacted")
    mock_executor.make_request.assert_called_once_with(
        "https://redacted.sh/ajax.php?action=torrent&id=42", "secret-key", allowing_limiter, "redacted"
    )
    assert response_data is mock_executor.make_request.return_value


def test_missing_limiter(request_service: TrackerRequestService, limiter_registry: MagicMock, mock_executor: MagicMock):
    limiter_registry.get_limiter.return_value = None

    with pytest.raises(LimiterUnavailableError):
        request_service.initiate_api_request(42, "torrent", "secret-key", API_BASE, "redacted")

    mock_executor.make_request.assert_not_called()


@pytest.mark.parametrize("leaf", [RateLimitedError("redacted"), APIError("redacted", "bad id parameter")])
def test_executor_errors_are_wrapped_with_endpoint(request_service: TrackerRequestService, mock_executor: MagicMock, leaf):
    mock_executor.make_request.side_effect = leaf

    with pytest.raises(InitiationFailedError) as exc_info:
        request_service.initiate_api_request(42, "torrent", "secret-key", API_BASE, "redacted")

    assert exc_info.value.cause is leaf
    assert exc_info.value.__cause__ is leaf
    assert exc_info.value.endpoint == "https://redacted.sh/ajax.php?action=torrent&id=42"


def test_torrent_release_is_logged_unescaped(request_service: TrackerRequestService, caplog):
    with caplog.at_level(logging.DEBUG, logger="trackercli.core.services.request_service"):
        response_data = request_service.initiate_api_request(42, "torrent", "secret-key", API_BASE, "redacted")

    assert "[redacted] Checking release: Foo & Bar - (Uploader: alice) (TorrentID: 42)" in caplog.text
    assert response_data.response["torrent"]["release_name"] == "Foo &amp; Bar"


def test_other_actions_log_no_release(request_service: TrackerRequestService, caplog):
    with caplog.at_level(logging.DEBUG, logger="trackercli.core.services.request_service"):
        request_service.initiate_api_request(42, "torrentgroup", "secret-key", API_BASE, "redacted")

    assert "Checking release" not in caplog.text
