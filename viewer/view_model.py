"""Derived, render-ready data for the viewer pages."""
from dataclasses import dataclass
from datetime import date as date_cls, datetime
from typing import List, Optional, Tuple

from catalog.models import Category, City, DataStore, EventRecord
from viewer.calendar_links import build_calendar_url
from viewer.countdown import Countdown, compute_countdown
from viewer.state import FilterState, ViewerState, has_conflict, saved_events, visible_events

MONTHS_ES = ['Ene', 'Feb', 'Mar', 'Abr', 'May', 'Jun', 'Jul', 'Ago', 'Sep', 'Oct', 'Nov', 'Dic']
# Monday first, matching date.weekday()
WEEKDAYS_ES = ['Lun', 'Mar', 'Mié', 'Jue', 'Vie', 'Sáb', 'Dom']

UNKNOWN_CITY_EMOJI = '📍'
UNKNOWN_CATEGORY_EMOJI = '🎫'


@dataclass(frozen=True)
class EventCard:
    """One event as shown in a list or the detail panel."""
    event: EventRecord
    city: City
    category: Category
    day: Optional[int]
    month: str
    weekday: str
    saved: bool
    conflict: bool
    calendar_url: str


@dataclass(frozen=True)
class PageViewModel:
    events: List[EventCard]
    my_events: List[EventCard]
    countdown: Countdown
    filters: FilterState
    city_options: List[Tuple[str, City]]
    category_options: List[Tuple[str, Category]]
    last_updated: Optional[str]


def lookup_city(store: DataStore, code: str) -> City:
    return store.cities.get(code) or City(name=code, emoji=UNKNOWN_CITY_EMOJI)


def lookup_category(store: DataStore, code: str) -> Category:
    return store.categories.get(code) or Category(name=code, emoji=UNKNOWN_CATEGORY_EMOJI)


def format_last_updated(value: Optional[str]) -> Optional[str]:
    """Render the ISO lastUpdated stamp as day/month/year, hour:minute."""
    if not value:
        return None
    try:
        stamp = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        return value
    return stamp.strftime('%d/%m/%Y, %H:%M')


def build_card(state: ViewerState, event: EventRecord) -> EventCard:
    """
    Build the card for one event.

    The conflict flag is computed against the current saved-set on every
    call.
    """
    store = state.store
    city = lookup_city(store, event.city)
    try:
        event_date = date_cls.fromisoformat(event.date)
    except ValueError:
        event_date = None

    return EventCard(
        event=event,
        city=city,
        category=lookup_category(store, event.category),
        day=event_date.day if event_date else None,
        month=MONTHS_ES[event_date.month - 1] if event_date else '',
        weekday=WEEKDAYS_ES[event_date.weekday()] if event_date else '',
        saved=event.id in state.saved,
        conflict=has_conflict(event, store.events, state.saved),
        calendar_url=build_calendar_url(event, city)
    )


def build_page(state: ViewerState, now: datetime) -> PageViewModel:
    """
    Derive the main page from the state.

    Args:
        state: Loaded store, filters and saved-set
        now: Current instant, used for the countdown

    Returns:
        PageViewModel with the filtered list and the saved list
    """
    store = state.store
    return PageViewModel(
        events=[build_card(state, event) for event in visible_events(state)],
        my_events=[build_card(state, event) for event in saved_events(state)],
        countdown=compute_countdown(now),
        filters=state.filters,
        city_options=list(store.cities.items()),
        category_options=list(store.categories.items()),
        last_updated=format_last_updated(store.last_updated)
    )


def build_detail(state: ViewerState, event_id: str) -> Optional[EventCard]:
    """Card for the detail panel, or None when the id is unknown."""
    event = state.store.find_event(event_id)
    if event is None:
        return None
    return build_card(state, event)
