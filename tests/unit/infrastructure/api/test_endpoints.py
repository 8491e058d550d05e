import pytest

from trackercli.domain.errors import InvalidIndexerError
from trackercli.infrastructure.api import endpoints
from trackercli.infrastructure.api.endpoints import (
    API_ENDPOINT_BASE_ORPHEUS,
    API_ENDPOINT_BASE_REDACTED,
    determine_api_base,
    known_indexers,
)


def test_known_indexers_resolve_to_fixed_bases():
    assert determine_api_base("redacted") == API_ENDPOINT_BASE_REDACTED == "https://redacted.sh/ajax.php"
    assert determine_api_base("ops") == API_ENDPOINT_BASE_ORPHEUS == "https://orpheus.network/ajax.php"


@pytest.mark.parametrize("indexer", ["", "Redacted", "OPS", "btn", " redacted"])
def test_unknown_indexer_is_rejected(indexer):
    with pytest.raises(InvalidIndexerError) as exc_info:
        determine_api_base(indexer)
    assert exc_info.value.indexer == indexer


def test_known_indexers_returns_a_copy():
    mapping = known_indexers()
    mapping["btn"] = "https://example.invalid"
    assert "btn" not in endpoints.API_BASES
