"""Placeholder fetcher for web calendar sources."""
import logging
from typing import Any, Dict, List

from catalog.models import EventInput
from sources.base import SourceFetcher

logger = logging.getLogger(__name__)


class WebSourceFetcher(SourceFetcher):
    """Fetcher for web pages listing events.

    Every site needs its own parser, none is written yet, so this yields
    no events.
    """

    source_type = 'web'

    def fetch(self, source: Dict[str, Any]) -> List[EventInput]:
        logger.info(f"Scraping: {source.get('name', '?')} ({source.get('url', 'no url')})")
        logger.info("Web scraping requires a specific parser per source")
        return []
