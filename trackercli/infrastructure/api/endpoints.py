"""Fixed API base URLs for the supported indexers."""

import logging
from typing import Dict

from trackercli.domain.errors import InvalidIndexerError
from trackercli.domain.models.common import ApiBase

logger = logging.getLogger(__name__)

API_ENDPOINT_BASE_REDACTED = ApiBase("https://redacted.sh/ajax.php")
API_ENDPOINT_BASE_ORPHEUS = ApiBase("https://orpheus.network/ajax.php")

# Adding an indexer means adding it here (and giving it a rate limit in settings).
API_BASES: Dict[str, ApiBase] = {
    "redacted": API_ENDPOINT_BASE_REDACTED,
    "ops": API_ENDPOINT_BASE_ORPHEUS,
}


def determine_api_base(indexer: str) -> ApiBase:
    """Returns the API base URL for `indexer`.

    Raises:
        InvalidIndexerError: If the indexer is not known.
    """
    try:
        return API_BASES[indexer]
    except KeyError:
        raise InvalidIndexerError(indexer) from None


def known_indexers() -> Dict[str, ApiBase]:
    """Returns a copy of the indexer -> base URL mapping."""
    return dict(API_BASES)
