"""Fetcher for events listed by hand in the sources configuration."""
import logging
from typing import Any, Dict, List

from catalog.models import EventInput
from sources.base import SourceFetcher

logger = logging.getLogger(__name__)

# camelCase keys used in the data file -> EventInput fields
FIELD_MAP = {
    'name': 'name',
    'date': 'date',
    'description': 'description',
    'city': 'city',
    'venue': 'venue',
    'startTime': 'start_time',
    'endTime': 'end_time',
    'category': 'category',
    'official': 'official',
    'price': 'price',
    'url': 'url',
}


class ManualSourceFetcher(SourceFetcher):
    """Reads the inline "events" array of a manual source entry."""

    source_type = 'manual'

    def fetch(self, source: Dict[str, Any]) -> List[EventInput]:
        """
        Convert inline event objects into candidates.

        Entries without a name or date are skipped with a warning.

        Args:
            source: Source entry with an optional "events" list

        Returns:
            List of EventInput objects tagged with source "manual"
        """
        logger.info(f"Processing manual events from {source.get('name', '?')}")
        candidates = []

        for entry in source.get('events', []):
            if not entry.get('name') or not entry.get('date'):
                logger.warning(f"Manual event missing name or date: {entry}")
                continue

            fields = {
                attr: entry[key]
                for key, attr in FIELD_MAP.items()
                if entry.get(key) is not None
            }
            candidates.append(EventInput(source='manual', **fields))

        return candidates
