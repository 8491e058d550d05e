"""Domain models for tracker API requests and responses.

Includes the request context, the decoded response envelope and the
action-specific payload variants (torrent, torrent group).
"""

import html
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union

from .common import Indexer, SUCCESS_STATUS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestData:
    """Context for one logical fetch: which indexer, and how to find its key."""
    indexer: Indexer
    credential_ref: Optional[str] = None  # Settings key holding the API key
    api_key: Optional[str] = None  # Explicit key, takes precedence over credential_ref


def _as_int(value: Any) -> Optional[int]:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


@dataclass
class Torrent:
    """A single torrent record as returned by the tracker."""
    torrent_id: Optional[int]
    release_name: str  # Raw, may contain HTML entities
    username: str
    media: Optional[str] = None
    format: Optional[str] = None
    encoding: Optional[str] = None
    size: Optional[int] = None
    file_count: Optional[int] = None

    @property
    def display_name(self) -> str:
        """Release name with HTML entities unescaped, for logs and display only."""
        return html.unescape(self.release_name)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Torrent":
        return cls(
            torrent_id=_as_int(data.get("id")),
            release_name=str(data.get("release_name") or ""),
            username=str(data.get("username") or ""),
            media=data.get("media"),
            format=data.get("format"),
            encoding=data.get("encoding"),
            size=_as_int(data.get("size")),
            file_count=_as_int(data.get("fileCount")),
        )


@dataclass
class TorrentGroup:
    """A torrent group (release) record."""
    group_id: Optional[int]
    name: str
    year: Optional[int] = None
    record_label: Optional[str] = None
    catalogue_number: Optional[str] = None
    category_name: Optional[str] = None

    @property
    def display_name(self) -> str:
        return html.unescape(self.name)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TorrentGroup":
        return cls(
            group_id=_as_int(data.get("id")),
            name=str(data.get("name") or ""),
            year=_as_int(data.get("year")),
            record_label=data.get("recordLabel"),
            catalogue_number=data.get("catalogueNumber"),
            category_name=data.get("categoryName"),
        )


# --- Payload Variants (keyed by action) ---

@dataclass
class TorrentResponse:
    """Payload of `action=torrent`."""
    torrent: Optional[Torrent] = None
    group: Optional[TorrentGroup] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TorrentResponse":
        torrent = data.get("torrent")
        group = data.get("group")
        return cls(
            torrent=Torrent.from_dict(torrent) if isinstance(torrent, dict) else None,
            group=TorrentGroup.from_dict(group) if isinstance(group, dict) else None,
        )


@dataclass
class TorrentGroupResponse:
    """Payload of `action=torrentgroup`."""
    group: Optional[TorrentGroup] = None
    torrents: List[Torrent] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TorrentGroupResponse":
        group = data.get("group")
        torrents = data.get("torrents")
        if not isinstance(torrents, list):
            torrents = []
        return cls(
            group=TorrentGroup.from_dict(group) if isinstance(group, dict) else None,
            torrents=[Torrent.from_dict(t) for t in torrents if isinstance(t, dict)],
        )


Payload = Union[TorrentResponse, TorrentGroupResponse, Dict[str, Any]]

PAYLOAD_DECODERS: Dict[str, Callable[[Dict[str, Any]], Payload]] = {
    "torrent": TorrentResponse.from_dict,
    "torrentgroup": TorrentGroupResponse.from_dict,
}


@dataclass
class ResponseData:
    """The decoded API response envelope.

    `response` keeps the payload exactly as received; variants are decoded
    on demand by `payload_for` so the envelope round-trips unchanged.
    """
    status: str
    error: Optional[str] = None
    response: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return self.status == SUCCESS_STATUS

    def payload_for(self, action: str) -> Payload:
        """Decodes the payload into the variant registered for `action`.

        Unknown actions get the raw payload dict back.
        """
        decoder = PAYLOAD_DECODERS.get(action)
        if decoder is None:
            logger.debug(f"No payload decoder for action '{action}', returning raw payload.")
            return self.response
        return decoder(self.response)

    def torrent(self) -> Optional[Torrent]:
        """Shortcut for the torrent record of a `torrent` action response."""
        payload = self.payload_for("torrent")
        return payload.torrent if isinstance(payload, TorrentResponse) else None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResponseData":
        response = data.get("response")
        error = data.get("error")
        return cls(
            status=str(data.get("status") or ""),
            error=str(error) if error is not None else None,
            response=response if isinstance(response, dict) else {},
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"status": self.status}
        if self.error is not None:
            result["error"] = self.error
        if self.response:
            result["response"] = self.response
        return result
