import logging
from typing import Any, Optional

from rich.box import HEAVY, ROUNDED, SIMPLE
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from trackercli.domain.interfaces.user_interface import FetchResults, UserInterface
from trackercli.domain.models.tracker import ResponseData, TorrentGroupResponse, TorrentResponse

logger = logging.getLogger(__name__)


def _format_size(size: Optional[int]) -> str:
    if size is None:
        return "-"
    value = float(size)
    for unit in ("B", "KiB", "MiB", "GiB"):
        if value < 1024:
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} TiB"


class ConsoleDisplay(UserInterface):
    """Concrete implementation of UserInterface using the rich library for console output."""

    def __init__(self, console: Optional[Console] = None):
        self._console = console or Console()

    @property
    def console(self) -> Console:
        """Get the Rich console instance for direct operations."""
        return self._console

    def _row_for(self, torrent_id: int, action: str, response_data: ResponseData) -> tuple:
        payload = response_data.payload_for(action)
        if isinstance(payload, TorrentResponse) and payload.torrent is not None:
            torrent = payload.torrent
            return (str(torrent_id), torrent.display_name, torrent.username, _format_size(torrent.size))
        if isinstance(payload, TorrentGroupResponse) and payload.group is not None:
            group = payload.group
            year = f" ({group.year})" if group.year else ""
            return (str(torrent_id), f"{group.display_name}{year}", "-", f"{len(payload.torrents)} torrent(s)")
        return (str(torrent_id), "-", "-", response_data.status)

    def display_results(self, indexer: str, action: str, results: FetchResults, **kwargs: Any) -> None:
        """Displays fetched envelopes as a table, one row per id."""
        logger.debug(f"display_results called: indexer={indexer}, action={action}, rows={len(results)}")
        table = Table(title=f"{indexer} · {action}", box=ROUNDED, border_style="cyan")
        table.add_column("ID", style="bold", justify="right")
        table.add_column("Release")
        table.add_column("Uploader", style="green")
        table.add_column("Details", style="dim")
        for torrent_id, response_data in results:
            table.add_row(*self._row_for(torrent_id, action, response_data))
        self.console.print(table)

    def _print_message(self, message: str, label: str, color: str, box=HEAVY) -> None:
        self.console.print(Panel(
            Text(message, style="white"),
            title=f"[bold {color}]{label}[/bold {color}]",
            border_style=color,
            box=box,
            padding=(0, 1),
        ))

    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message in a distinct style."""
        self._print_message(error_message, "Error", "red")

    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        self._print_message(warning_message, "Warning", "yellow")

    def display_info(self, info_message: str, **kwargs: Any) -> None:
        self._print_message(info_message, "Info", "blue", box=SIMPLE)
