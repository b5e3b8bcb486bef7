"""Unit tests for the viewer's filtering, conflicts, links and countdown."""
from datetime import datetime, timedelta, timezone

import pytest

from catalog.models import City, DataStore, EventRecord
from viewer.calendar_links import build_calendar_url, format_calendar_stamp
from viewer.countdown import CARNIVAL_START, compute_countdown
from viewer.state import (
    FilterState,
    SetAfterWork,
    SetCategoryFilter,
    SetCityFilter,
    ToggleSaved,
    ViewerState,
    filter_events,
    has_conflict,
    reduce,
    saved_events,
    sort_events,
    toggle_saved,
    visible_events,
)
from viewer.view_model import build_detail, build_page

BOGOTA = timezone(timedelta(hours=-5))


def make_event(event_id, date='2026-02-14', start='18:00', end='23:00',
               city='barranquilla', category='fiesta', name=None):
    return EventRecord(
        id=event_id, name=name or event_id, description='Descripción', city=city,
        venue='Lugar', date=date, start_time=start, end_time=end, category=category,
        official=False, price=None, source='manual', url=None, added_at=None
    )


@pytest.fixture
def events():
    return [
        make_event('a', date='2026-02-15', start='10:00', end='12:00', category='desfile'),
        make_event('b', date='2026-02-14', start='18:00', end='23:00'),
        make_event('c', date='2026-02-14', start='20:00', end='22:00', city='cartagena'),
        make_event('d', date='2026-02-14', start='23:00', end='23:30'),
        make_event('e', date='2026-02-13', start='17:00', end='19:00', city='cartagena',
                   category='desfile'),
    ]


class TestFiltering:
    """Test cases for filter_events and sort_events."""

    def test_all_filters_keep_everything(self, events):
        assert filter_events(events, FilterState()) == events

    def test_city_filter(self, events):
        result = filter_events(events, FilterState(city='cartagena'))

        assert [event.id for event in result] == ['c', 'e']

    def test_after_work_keeps_start_hour_17_or_later(self, events):
        result = filter_events(events, FilterState(after_work=True))

        assert [event.id for event in result] == ['b', 'c', 'd', 'e']

    def test_filters_compose_with_and(self, events):
        """Test that sequential filtering equals combined filtering."""
        by_city = filter_events(events, FilterState(city='barranquilla'))
        sequential = filter_events(by_city, FilterState(category='fiesta'))
        combined = filter_events(events, FilterState(city='barranquilla', category='fiesta'))

        assert sequential == combined
        assert [event.id for event in combined] == ['b', 'd']

    def test_sort_by_date_is_stable(self, events):
        assert [event.id for event in sort_events(events)] == ['e', 'b', 'c', 'd', 'a']


class TestConflicts:
    """Test cases for has_conflict."""

    def test_overlapping_saved_events_conflict(self, events):
        saved = frozenset({'b', 'c'})

        assert has_conflict(events[1], events, saved)

    def test_conflict_is_symmetric(self, events):
        saved = frozenset({'b', 'c'})

        assert has_conflict(events[1], events, saved) == has_conflict(events[2], events, saved)

    def test_touching_intervals_do_not_conflict(self, events):
        """Test that 23:00-23:30 does not clash with 18:00-23:00."""
        saved = frozenset({'b', 'd'})

        assert not has_conflict(events[3], events, saved)
        assert not has_conflict(events[1], events, saved)

    def test_unsaved_event_never_conflicts(self, events):
        saved = frozenset({'b'})

        assert not has_conflict(events[2], events, saved)

    def test_different_dates_do_not_conflict(self, events):
        saved = frozenset({'a', 'b', 'e'})

        assert not any(has_conflict(event, events, saved) for event in events)


class TestReduce:
    """Test cases for intents and the reducer."""

    def test_filter_intents_return_new_state(self, events):
        state = ViewerState(store=DataStore(events=events))

        new_state = reduce(state, SetCityFilter('cartagena'))
        new_state = reduce(new_state, SetCategoryFilter('desfile'))
        new_state = reduce(new_state, SetAfterWork(True))

        assert state.filters == FilterState()
        assert new_state.filters == FilterState('cartagena', 'desfile', True)
        assert [event.id for event in visible_events(new_state)] == ['e']

    def test_toggle_saved_flips_membership(self):
        saved = toggle_saved(frozenset(), 'a')
        assert saved == {'a'}
        assert toggle_saved(saved, 'a') == frozenset()

    def test_toggle_intent_updates_saved_list(self, events):
        state = ViewerState(store=DataStore(events=events))

        state = reduce(state, ToggleSaved('a'))
        state = reduce(state, ToggleSaved('e'))

        assert [event.id for event in saved_events(state)] == ['e', 'a']

    def test_unknown_intent_raises(self, events):
        with pytest.raises(TypeError):
            reduce(ViewerState(store=DataStore(events=events)), 'city')


class TestCalendarLinks:
    """Test cases for calendar deep links."""

    def test_format_calendar_stamp(self):
        assert format_calendar_stamp('2026-02-14', '18:00') == '20260214T180000'

    def test_build_calendar_url(self):
        event = make_event('b', name='Fiesta Blanca')
        city = City(name='Barranquilla', emoji='🎭', travel_time=100)

        url = build_calendar_url(event, city)

        assert url.startswith('https://calendar.google.com/calendar/render?action=TEMPLATE')
        assert '&text=Fiesta%20Blanca' in url
        assert '&dates=20260214T180000/20260214T230000' in url
        assert '&location=Lugar%2C%20Barranquilla%2C%20Colombia' in url
        assert url.endswith('&ctz=America/Bogota')


class TestCountdown:
    """Test cases for compute_countdown."""

    def test_days_and_hours_remaining(self):
        countdown = compute_countdown(datetime(2026, 2, 1, 0, 0, tzinfo=BOGOTA))

        assert countdown.days == 13
        assert countdown.hours == 0
        assert not countdown.arrived

    def test_partial_day(self):
        countdown = compute_countdown(datetime(2026, 2, 12, 14, 30, tzinfo=BOGOTA))

        assert countdown.days == 1
        assert countdown.hours == 9

    def test_arrived(self):
        assert compute_countdown(CARNIVAL_START).arrived
        assert compute_countdown(CARNIVAL_START + timedelta(days=2)).arrived


class TestViewModel:
    """Test cases for page and detail view models."""

    def test_page_cards_carry_saved_and_conflict(self, events):
        store = DataStore(
            events=events,
            cities={'barranquilla': City('Barranquilla', '🎭', 100)},
            last_updated='2026-01-20T15:00:00.000Z'
        )
        state = ViewerState(store=store, saved=frozenset({'b', 'c'}))

        vm = build_page(state, now=datetime(2026, 2, 1, tzinfo=BOGOTA))

        cards = {card.event.id: card for card in vm.events}
        assert cards['b'].saved and cards['b'].conflict
        assert cards['c'].conflict
        assert not cards['d'].saved and not cards['d'].conflict
        assert cards['b'].day == 14
        assert cards['b'].month == 'Feb'
        assert cards['b'].weekday == 'Sáb'
        # unknown city falls back to its code
        assert cards['c'].city.name == 'cartagena'
        assert [card.event.id for card in vm.my_events] == ['b', 'c']
        assert vm.countdown.days == 13
        assert vm.last_updated == '20/01/2026, 15:00'

    def test_detail_unknown_id(self, events):
        state = ViewerState(store=DataStore(events=events))

        assert build_detail(state, 'zzz') is None
        assert build_detail(state, 'a').event.id == 'a'
