"""Interface for presenting results to the user.

Defines the contract for displaying fetch results, errors, warnings and
informational messages, allowing different UI implementations.
"""

import abc
from typing import Any, List, Tuple

from ..models.tracker import ResponseData


# (torrent id, envelope) pairs as produced by a batch of fetches
FetchResults = List[Tuple[int, ResponseData]]


class UserInterface(abc.ABC):
    """Abstract Base Class for user interaction."""

    @abc.abstractmethod
    def display_results(self, indexer: str, action: str, results: FetchResults, **kwargs: Any) -> None:
        """Displays the envelopes fetched for a batch of ids.

        Args:
            indexer: The indexer the ids were fetched from.
            action: The action requested for every id.
            results: (id, envelope) pairs, in request order.
            **kwargs: Additional arguments for formatting.
        """
        pass

    @abc.abstractmethod
    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message to the user."""
        pass

    @abc.abstractmethod
    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        """Displays a warning message to the user."""
        pass

    @abc.abstractmethod
    def display_info(self, info_message: str, **kwargs: Any) -> None:
        """Displays an informational message to the user."""
        pass
