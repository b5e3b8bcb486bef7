"""Loading the events document and the browser-side saved-set."""
import json
import logging
from pathlib import Path
from typing import FrozenSet, Iterable, Optional

import requests

from catalog.models import DataStore
from storage.json_store import StoreError, store_from_dict

logger = logging.getLogger(__name__)

SAVED_KEY = 'fomoff_saved'


def fetch_store(location: str, timeout: int = 10) -> DataStore:
    """
    Load the events document once, from a URL or a local path.

    There is no retry: a failure here is final for the session.

    Args:
        location: http(s) URL or filesystem path of events.json
        timeout: HTTP request timeout in seconds

    Returns:
        DataStore with events, cities and categories

    Raises:
        StoreError: If the document cannot be fetched or decoded
    """
    logger.info(f"Loading events from {location}")

    try:
        if location.startswith(('http://', 'https://')):
            response = requests.get(location, timeout=timeout)
            response.raise_for_status()
            data = response.json()
        else:
            with Path(location).open('r', encoding='utf-8') as infile:
                data = json.load(infile)
    except (requests.RequestException, ValueError, OSError) as e:
        logger.error(f"Error loading events from {location}: {e}")
        raise StoreError(f"Unable to load events from {location}: {e}") from e

    if not isinstance(data, dict):
        raise StoreError(f"Unexpected events document at {location}")

    try:
        store = store_from_dict(data)
    except StoreError as e:
        logger.error(f"Error loading events from {location}: {e}")
        raise StoreError(f"Unable to load events from {location}: {e}") from e
    logger.info(f"Loaded {len(store.events)} events")
    return store


def decode_saved(raw: Optional[str]) -> FrozenSet[str]:
    """
    Decode the saved-set stored in the browser.

    Args:
        raw: JSON array of event ids, or None when nothing is stored

    Returns:
        Set of ids; empty when missing or malformed
    """
    if not raw:
        return frozenset()
    try:
        ids = json.loads(raw)
    except ValueError:
        logger.warning(f"Ignoring malformed saved-set: {raw!r}")
        return frozenset()
    if not isinstance(ids, list):
        logger.warning(f"Ignoring malformed saved-set: {raw!r}")
        return frozenset()
    return frozenset(str(event_id) for event_id in ids)


def encode_saved(saved: Iterable[str]) -> str:
    """Encode the saved-set as a JSON array (sorted for stable output)."""
    return json.dumps(sorted(saved))
