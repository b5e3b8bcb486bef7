"""JSON file store for the shared events document."""
import json
import logging
import os
import stat
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

from catalog.models import Category, City, DataStore, EventRecord, extra_keys, with_extra

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised when a data file cannot be read or decoded."""


def utc_timestamp(value: Optional[datetime] = None) -> str:
    """
    Format a timestamp as ISO 8601 UTC with millisecond precision.

    Args:
        value: Datetime to format (default: now)

    Returns:
        String such as "2026-01-30T15:04:05.000Z"
    """
    dt = value or datetime.now(timezone.utc)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


DOCUMENT_KEYS = ('lastUpdated', 'events', 'cities', 'categories')


def _section(data: Dict[str, Any], key: str, kind: type) -> Any:
    value = data.get(key, kind())
    if not isinstance(value, kind):
        raise StoreError(f"'{key}' must be a JSON {kind.__name__}, got {type(value).__name__}")
    return value


def _metadata(section: Dict[str, Any], key: str, model: type) -> Dict[str, Any]:
    result = {}
    for code, item in section.items():
        if not isinstance(item, dict):
            raise StoreError(f"{key} entry '{code}' must be a JSON object")
        try:
            result[code] = model.from_dict(item)
        except (KeyError, TypeError, ValueError) as e:
            raise StoreError(f"Malformed {key} entry '{code}': {e!r}") from e
    return result


def store_from_dict(data: Dict[str, Any]) -> DataStore:
    """
    Convert a decoded events document into a DataStore.

    Events missing required keys are kept aside as raw objects and written
    back unchanged on save. Keys the models do not know are carried along
    the same way.

    Raises:
        StoreError: If the document does not have the events layout
    """
    events = []
    unparsed = []
    for index, item in enumerate(_section(data, 'events', list)):
        if not isinstance(item, dict):
            raise StoreError(f"Event #{index} must be a JSON object")
        try:
            events.append(EventRecord.from_dict(item))
        except KeyError as e:
            logger.warning(f"Keeping unreadable event {item.get('id', '?')} as is: missing {e}")
            unparsed.append((index, item))

    return DataStore(
        events=events,
        cities=_metadata(_section(data, 'cities', dict), 'cities', City),
        categories=_metadata(_section(data, 'categories', dict), 'categories', Category),
        last_updated=data.get('lastUpdated'),
        unparsed_events=unparsed,
        extra=extra_keys(data, DOCUMENT_KEYS)
    )


def store_to_dict(store: DataStore) -> Dict[str, Any]:
    """Convert a DataStore into the events document layout."""
    events = [event.to_dict() for event in store.events]
    for index, item in store.unparsed_events:
        events.insert(min(index, len(events)), item)

    return with_extra({
        'lastUpdated': store.last_updated,
        'events': events,
        'cities': {code: city.to_dict() for code, city in store.cities.items()},
        'categories': {
            code: category.to_dict()
            for code, category in store.categories.items()
        }
    }, store.extra)


class JsonStore:
    """Load and save the events document on disk."""

    def __init__(self, path: Union[str, Path]):
        """
        Initialize the store.

        Args:
            path: Location of the events JSON file
        """
        self.path = Path(path)

    def load(self) -> DataStore:
        """
        Read the whole events document.

        Returns:
            DataStore; empty when the file does not exist yet

        Raises:
            StoreError: If the file exists but cannot be read or decoded
        """
        if not self.path.exists():
            logger.warning(f"Events file {self.path} not found, starting empty")
            return DataStore()

        try:
            with self.path.open('r', encoding='utf-8') as infile:
                data = json.load(infile)
        except (json.JSONDecodeError, OSError) as e:
            logger.error(f"Error loading events from {self.path}: {e}")
            raise StoreError(f"Unable to load {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise StoreError(f"Unexpected document in {self.path}")

        try:
            store = store_from_dict(data)
        except StoreError as e:
            logger.error(f"Error loading events from {self.path}: {e}")
            raise StoreError(f"Unable to load {self.path}: {e}") from e
        logger.info(f"Loaded {len(store.events)} events from {self.path}")
        return store

    def save(self, store: DataStore) -> None:
        """
        Replace the events file with the given store.

        Stamps lastUpdated before writing. The document is written to a
        sibling temporary file first and then moved over the target.
        """
        store.last_updated = utc_timestamp()
        payload = json.dumps(store_to_dict(store), indent=2, ensure_ascii=False)

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=str(self.path.parent), prefix=self.path.name, suffix='.tmp'
        )
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as outfile:
                outfile.write(payload)
                outfile.write('\n')
            # mkstemp creates 0600; keep the permissions of the file we replace
            if self.path.exists():
                os.chmod(tmp_name, stat.S_IMODE(os.stat(self.path).st_mode))
            os.replace(tmp_name, self.path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

        logger.info(f"Saved {len(store.events)} events to {self.path}")
