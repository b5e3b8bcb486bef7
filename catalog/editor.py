"""Catalog editor: add, list and source runs against the events file."""
import logging
from typing import Any, Dict, List, Optional

from catalog.event_processor import (
    InvalidEventError,
    build_record,
    event_exists,
    find_duplicate,
)
from catalog.models import AddResult, DataStore, EventInput, EventRecord, RunResult
from sources.registry import SourceRegistry
from storage.json_store import JsonStore, utc_timestamp

logger = logging.getLogger(__name__)


class CatalogEditor:
    """Load-mutate-save operations on the shared events file.

    Every operation reads the file again; nothing is cached between calls.
    """

    def __init__(self, store: JsonStore, fetchers: Optional[SourceRegistry] = None):
        """
        Initialize the editor.

        Args:
            store: JsonStore wrapping the events file
            fetchers: Registry of source fetchers (default: web + manual)
        """
        self.store = store
        self.fetchers = fetchers or SourceRegistry()

    def add_event(self, candidate: EventInput) -> AddResult:
        """
        Add a single event unless the same name, date and city exist.

        Args:
            candidate: Event to add

        Returns:
            AddResult; added is False when the event already exists

        Raises:
            InvalidEventError: If the candidate fails validation
            StoreError: If the events file cannot be read
        """
        record = build_record(candidate, added_at=utc_timestamp())
        data = self.store.load()

        existing = find_duplicate(data.events, record.name, record.date, record.city)
        if existing:
            logger.info(f"Event already exists: {record.name} ({record.date})")
            return AddResult(added=False, record=existing)

        self._append_if_new(data, record)
        self.store.save(data)
        return AddResult(added=True, record=record)

    def list_events(self) -> List[EventRecord]:
        """Return all stored events sorted by date."""
        data = self.store.load()
        return sorted(data.events, key=lambda event: event.date)

    def run(self, sources: List[Dict[str, Any]], force: bool = False) -> RunResult:
        """
        Fetch candidates from every enabled source and add the new ones.

        A failing source is logged and does not stop the others. The file
        is saved only if something was added or force is set.

        Args:
            sources: Source entries from the sources configuration
            force: Save even when nothing was added

        Returns:
            RunResult with the number of added events
        """
        data = self.store.load()
        total_added = 0
        errors = []

        for source in sources:
            if not source.get('enabled'):
                continue

            name = source.get('name', '?')
            try:
                fetcher = self.fetchers.get_fetcher(source)
                candidates = fetcher.fetch(source)
            except Exception as e:
                error_msg = f"Error scraping {name}: {e}"
                logger.error(error_msg, exc_info=True)
                errors.append(error_msg)
                continue

            added = self._add_candidates(data, candidates)
            logger.info(f"Source {name}: {added} new of {len(candidates)} candidates")
            total_added += added

        saved = False
        if total_added > 0 or force:
            self.store.save(data)
            saved = True

        logger.info(f"Run complete. Added {total_added} new events")
        return RunResult(added=total_added, saved=saved, errors=errors)

    def _add_candidates(self, data: DataStore, candidates: List[EventInput]) -> int:
        added = 0
        for candidate in candidates:
            try:
                record = build_record(candidate, added_at=utc_timestamp())
            except InvalidEventError as e:
                logger.warning(f"Skipping invalid event '{candidate.name}': {e}")
                continue
            if self._append_if_new(data, record):
                added += 1
        return added

    def _append_if_new(self, data: DataStore, record: EventRecord) -> bool:
        if event_exists(data.events, record.name, record.date, record.city):
            return False
        data.events.append(record)
        logger.info(f"Added: {record.name} ({record.date})")
        return True
