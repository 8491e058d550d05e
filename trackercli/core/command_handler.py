"""Command Handler: Orchestrates CLI command execution.

Receives commands from the main entry point (main.py) and delegates the work
to FetchService and the cache. Each requested id is fetched as its own unit
of work in a worker thread; failures are reported per id and never stop the
rest of the batch.
"""

import asyncio
import logging
from typing import List, Optional, Sequence, Tuple, Union

from trackercli.core.services.fetch_service import FetchService
from trackercli.domain.errors import TrackerError
from trackercli.domain.interfaces.cache import CacheService
from trackercli.domain.interfaces.user_interface import UserInterface
from trackercli.domain.models.tracker import RequestData, ResponseData
from trackercli.infrastructure.api.endpoints import determine_api_base, known_indexers

logger = logging.getLogger(__name__)

FetchOutcome = Tuple[int, Union[ResponseData, TrackerError]]


class CommandHandler:
    """Handles incoming commands and delegates to appropriate services."""

    def __init__(
        self,
        fetch_service: FetchService,
        cache_service: CacheService,
        ui: UserInterface,
    ):
        """Initializes the CommandHandler with required services."""
        self.fetch_service = fetch_service
        self.cache_service = cache_service
        self.ui = ui

    async def _fetch_one(self, request_data: RequestData, torrent_id: int, action: str, api_base: str) -> FetchOutcome:
        try:
            response_data = await asyncio.to_thread(
                self.fetch_service.fetch_response_data, request_data, torrent_id, action, api_base
            )
            return torrent_id, response_data
        except TrackerError as e:
            return torrent_id, e

    async def fetch_many(
        self,
        request_data: RequestData,
        torrent_ids: Sequence[int],
        action: str,
        api_base: Optional[str] = None,
    ) -> List[FetchOutcome]:
        """Fetches every id concurrently. Outcomes keep the order of `torrent_ids`."""
        base = api_base or determine_api_base(request_data.indexer)
        return list(await asyncio.gather(
            *(self._fetch_one(request_data, torrent_id, action, base) for torrent_id in torrent_ids)
        ))

    async def handle_fetch(
        self,
        indexer: str,
        torrent_ids: Sequence[int],
        action: str = "torrent",
        credential_ref: Optional[str] = None,
    ) -> bool:
        """Handles the 'fetch' command.

        Returns:
            True if every id was fetched successfully.
        """
        logger.info(f"Handling 'fetch' command: indexer={indexer}, action={action}, ids={list(torrent_ids)}")
        request_data = RequestData(indexer=indexer, credential_ref=credential_ref)
        try:
            outcomes = await self.fetch_many(request_data, torrent_ids, action)
        except TrackerError as e:
            logger.error(f"Fetch command failed: {e}")
            self.ui.display_error(f"Fetch failed: {e}")
            return False

        results = [(torrent_id, outcome) for torrent_id, outcome in outcomes if isinstance(outcome, ResponseData)]
        failures = [(torrent_id, outcome) for torrent_id, outcome in outcomes if not isinstance(outcome, ResponseData)]

        if results:
            self.ui.display_results(indexer, action, results)
        for torrent_id, error in failures:
            self.ui.display_error(f"ID {torrent_id}: {error}")
        if failures:
            self.ui.display_warning(f"{len(failures)} of {len(outcomes)} request(s) failed.")
        return not failures

    def handle_list_indexers(self) -> None:
        """Handles the 'indexers' command."""
        for indexer, api_base in sorted(known_indexers().items()):
            self.ui.display_info(f"{indexer}: {api_base}")

    def handle_clear_cache(self, level: str) -> bool:
        """Handles the 'clear-cache' command."""
        logger.info(f"Handling 'clear-cache' command for level: {level}")
        try:
            self.cache_service.clear(level)
        except ValueError as e:
            self.ui.display_error(str(e))
            return False
        self.ui.display_info(f"Cache level '{level}' cleared successfully.")
        return True
