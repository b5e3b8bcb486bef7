"""Common interface for event sources."""
from abc import ABC, abstractmethod
from typing import Any, Dict, List

from catalog.models import EventInput


class SourceFetcher(ABC):
    """Fetches candidate events for one kind of source entry."""

    source_type = ''

    @abstractmethod
    def fetch(self, source: Dict[str, Any]) -> List[EventInput]:
        """
        Fetch candidate events for a configured source.

        Args:
            source: Source entry from the sources configuration

        Returns:
            List of EventInput objects, possibly empty
        """
