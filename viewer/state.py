"""Viewer application state, intents and the pure list logic."""
from dataclasses import dataclass, field, replace
from typing import FrozenSet, Iterable, List, Optional, Union

from catalog.models import DataStore, EventRecord

ALL = 'all'
AFTER_WORK_HOUR = 17


@dataclass(frozen=True)
class FilterState:
    """Current filter selection. Not persisted."""
    city: str = ALL
    category: str = ALL
    after_work: bool = False


@dataclass(frozen=True)
class ViewerState:
    """Everything a render pass depends on."""
    store: Optional[DataStore]
    filters: FilterState = field(default_factory=FilterState)
    saved: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class SetCityFilter:
    city: str


@dataclass(frozen=True)
class SetCategoryFilter:
    category: str


@dataclass(frozen=True)
class SetAfterWork:
    enabled: bool


@dataclass(frozen=True)
class ToggleSaved:
    event_id: str


Intent = Union[SetCityFilter, SetCategoryFilter, SetAfterWork, ToggleSaved]


def reduce(state: ViewerState, intent: Intent) -> ViewerState:
    """
    Apply a user intent and return the resulting state.

    Args:
        state: Current state (left untouched)
        intent: Filter change or save toggle

    Returns:
        New ViewerState
    """
    if isinstance(intent, SetCityFilter):
        return replace(state, filters=replace(state.filters, city=intent.city or ALL))
    if isinstance(intent, SetCategoryFilter):
        return replace(
            state, filters=replace(state.filters, category=intent.category or ALL)
        )
    if isinstance(intent, SetAfterWork):
        return replace(state, filters=replace(state.filters, after_work=intent.enabled))
    if isinstance(intent, ToggleSaved):
        return replace(state, saved=toggle_saved(state.saved, intent.event_id))
    raise TypeError(f"Unknown intent: {intent!r}")


def toggle_saved(saved: FrozenSet[str], event_id: str) -> FrozenSet[str]:
    """Flip membership of event_id in the saved-set."""
    if event_id in saved:
        return saved - {event_id}
    return saved | {event_id}


def time_to_minutes(value: str) -> int:
    """Convert "HH:MM" to minutes after midnight."""
    hours, minutes = value.split(':')
    return int(hours) * 60 + int(minutes)


def is_after_work(event: EventRecord) -> bool:
    return int(event.start_time.split(':')[0]) >= AFTER_WORK_HOUR


def filter_events(events: Iterable[EventRecord], filters: FilterState) -> List[EventRecord]:
    """
    Keep events matching every active filter.

    City and category match exactly unless set to "all"; the after-work
    filter keeps events starting at 17:00 or later.
    """
    return [
        event for event in events
        if (filters.city == ALL or event.city == filters.city)
        and (filters.category == ALL or event.category == filters.category)
        and (not filters.after_work or is_after_work(event))
    ]


def sort_events(events: Iterable[EventRecord]) -> List[EventRecord]:
    """Sort by date; events on the same date keep their original order."""
    return sorted(events, key=lambda event: event.date)


def overlaps(a: EventRecord, b: EventRecord) -> bool:
    """Whether two events overlap as half-open intervals on the same date."""
    if a.date != b.date:
        return False
    a_start, a_end = time_to_minutes(a.start_time), time_to_minutes(a.end_time)
    b_start, b_end = time_to_minutes(b.start_time), time_to_minutes(b.end_time)
    return a_start < b_end and a_end > b_start


def has_conflict(event: EventRecord, events: Iterable[EventRecord], saved: FrozenSet[str]) -> bool:
    """
    Check whether a saved event collides with another saved event.

    Unsaved events never conflict, even if they overlap a saved one.

    Args:
        event: Event to check
        events: All known events
        saved: Saved event ids

    Returns:
        True if another saved event on the same date overlaps it
    """
    if event.id not in saved:
        return False

    return any(
        other.id in saved and other.id != event.id and overlaps(event, other)
        for other in events
    )


def saved_events(state: ViewerState) -> List[EventRecord]:
    """Saved events present in the store, sorted by date."""
    if state.store is None:
        return []
    return sort_events(event for event in state.store.events if event.id in state.saved)


def visible_events(state: ViewerState) -> List[EventRecord]:
    """Events shown in the main list for the current filters."""
    if state.store is None:
        return []
    return sort_events(filter_events(state.store.events, state.filters))
