"""Lookup of source fetchers and loading of the sources configuration."""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from sources.base import SourceFetcher
from sources.manual import ManualSourceFetcher
from sources.web import WebSourceFetcher
from storage.json_store import StoreError

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_TYPE = 'web'


class SourceRegistry:
    """Maps a source entry's "type" to the fetcher that handles it."""

    def __init__(self, fetchers: Optional[Iterable[SourceFetcher]] = None):
        if fetchers is None:
            fetchers = [WebSourceFetcher(), ManualSourceFetcher()]
        self._fetchers = {fetcher.source_type: fetcher for fetcher in fetchers}

    def register(self, fetcher: SourceFetcher) -> None:
        self._fetchers[fetcher.source_type] = fetcher

    def get_fetcher(self, source: Dict[str, Any]) -> SourceFetcher:
        """
        Return the fetcher for a source entry.

        Raises:
            ValueError: If no fetcher handles the entry's type
        """
        source_type = source.get('type', DEFAULT_SOURCE_TYPE)
        try:
            return self._fetchers[source_type]
        except KeyError:
            raise ValueError(f"No fetcher for source type '{source_type}'")


def load_sources_config(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """
    Read the list of sources from the sources configuration file.

    Args:
        path: Location of sources.json

    Returns:
        List of source entries

    Raises:
        StoreError: If the file is missing or not valid JSON
    """
    path = Path(path)
    try:
        with path.open('r', encoding='utf-8') as infile:
            config = json.load(infile)
    except (json.JSONDecodeError, OSError) as e:
        logger.error(f"Error loading sources from {path}: {e}")
        raise StoreError(f"Unable to load {path}: {e}") from e

    sources = config.get('sources', []) if isinstance(config, dict) else []
    logger.info(f"Loaded {len(sources)} sources from {path}")
    return sources
