"""Application Service for issuing tracker API queries.

Builds the `?action=<action>&id=<id>` endpoint, picks the indexer's rate
limiter and hands the request to the RequestExecutor. This is the only place
that knows the query-parameter shape of the API.
"""

import logging
from urllib.parse import quote

from trackercli.domain.errors import InitiationFailedError, LimiterUnavailableError, TrackerError
from trackercli.domain.interfaces.rate_limiter import RateLimiterRegistry
from trackercli.domain.models.common import Endpoint
from trackercli.domain.models.tracker import ResponseData
from trackercli.infrastructure.api.request_executor import RequestExecutor

logger = logging.getLogger(__name__)


def build_endpoint(api_base: str, action: str, torrent_id: int) -> Endpoint:
    """Builds the query URL for an (action, id) pair.

    The action is percent-encoded; ordinary action names are unchanged.
    """
    return Endpoint(f"{api_base}?action={quote(action, safe='')}&id={int(torrent_id)}")


class TrackerRequestService:
    """Issues one rate-limited query per call. Nothing is retried here."""

    def __init__(self, limiter_registry: RateLimiterRegistry, executor: RequestExecutor):
        self.limiter_registry = limiter_registry
        self.executor = executor

    def initiate_api_request(
        self,
        torrent_id: int,
        action: str,
        api_key: str,
        api_base: str,
        indexer: str,
    ) -> ResponseData:
        """Queries `api_base` for `action` on `torrent_id`.

        Raises:
            LimiterUnavailableError: No limiter is configured for the indexer.
            InitiationFailedError: The executor failed; the original error is in `.cause`.
        """
        limiter = self.limiter_registry.get_limiter(indexer)
        if limiter is None:
            raise LimiterUnavailableError(indexer)

        endpoint = build_endpoint(api_base, action, torrent_id)
        try:
            response_data = self.executor.make_request(endpoint, api_key, limiter, indexer)
        except TrackerError as e:
            wrapped = InitiationFailedError(endpoint, e)
            logger.error(f"API request initiation error: {wrapped}")
            raise wrapped from e

        if action == "torrent":
            torrent = response_data.torrent()
            if torrent is not None:
                logger.debug(
                    f"[{indexer}] Checking release: {torrent.display_name} - "
                    f"(Uploader: {torrent.username}) (TorrentID: {torrent_id})"
                )

        return response_data
