"""Application Service for cache-first fetching of tracker data.

Cached envelopes are returned as-is with no freshness check; expiry is
entirely up to the cache implementation. Only successful responses are ever
cached, so a failed fetch is retried against the live API next time.
"""

import logging
from typing import Optional

from trackercli.domain.errors import FetchFailedError, TrackerError
from trackercli.domain.interfaces.cache import CacheService
from trackercli.domain.interfaces.credentials import CredentialProvider
from trackercli.domain.models.common import make_cache_key
from trackercli.domain.models.tracker import RequestData, ResponseData
from trackercli.core.services.request_service import TrackerRequestService
from trackercli.infrastructure.api.endpoints import determine_api_base

logger = logging.getLogger(__name__)


class FetchService:
    """Wraps TrackerRequestService with a per-indexer response cache."""

    def __init__(
        self,
        cache_service: CacheService,
        credential_provider: CredentialProvider,
        request_service: TrackerRequestService,
    ):
        self.cache_service = cache_service
        self.credential_provider = credential_provider
        self.request_service = request_service

    def fetch_response_data(
        self,
        request_data: RequestData,
        torrent_id: int,
        action: str,
        api_base: Optional[str] = None,
    ) -> ResponseData:
        """Returns the envelope for (action, id), from cache when possible.

        Args:
            request_data: Indexer and credential context of the request.
            torrent_id: Numeric id to query.
            action: API action name (e.g. 'torrent').
            api_base: Base URL to query; resolved from the indexer if None.

        Raises:
            FetchFailedError: Nothing was cached. `.cause` is a CredentialError
                (raised before any network activity), an InvalidIndexerError,
                a LimiterUnavailableError or an InitiationFailedError.
        """
        indexer = request_data.indexer
        cache_key = make_cache_key(action, torrent_id)
        cached_data = self.cache_service.check_cache(cache_key, indexer)
        if cached_data is not None:
            return cached_data

        try:
            api_key = self.credential_provider.get_api_key(request_data)
            if api_base is None:
                api_base = determine_api_base(indexer)
            response_data = self.request_service.initiate_api_request(torrent_id, action, api_key, api_base, indexer)
        except TrackerError as e:
            wrapped = FetchFailedError(action, torrent_id, indexer, e)
            logger.error(f"Data fetching error: {wrapped}")
            raise wrapped from e

        self.cache_service.cache_response_data(cache_key, indexer, response_data)
        return response_data
