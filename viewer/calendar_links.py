"""Google Calendar deep links for events."""
from urllib.parse import quote

from catalog.models import City, EventRecord

GOOGLE_CALENDAR_URL = 'https://calendar.google.com/calendar/render'
CALENDAR_TIMEZONE = 'America/Bogota'
COUNTRY = 'Colombia'
# mark characters kept unescaped in query values
URI_COMPONENT_SAFE = "!~*'()"


def format_calendar_stamp(date: str, time: str) -> str:
    """
    Build the compact local date-time used in calendar links.

    Args:
        date: ISO date, e.g. "2026-02-14"
        time: Wall-clock time, e.g. "18:00"

    Returns:
        String such as "20260214T180000"
    """
    return f"{date.replace('-', '')}T{time.replace(':', '')}00"


def build_calendar_url(event: EventRecord, city: City) -> str:
    """
    Build an "add to Google Calendar" link for an event.

    The link carries title, time range, description and location, pinned
    to the Bogota time zone. Nothing is requested here.
    """
    start = format_calendar_stamp(event.date, event.start_time)
    end = format_calendar_stamp(event.date, event.end_time)
    location = f"{event.venue}, {city.name}, {COUNTRY}"

    return (
        f"{GOOGLE_CALENDAR_URL}?action=TEMPLATE"
        f"&text={quote(event.name, safe=URI_COMPONENT_SAFE)}"
        f"&dates={start}/{end}"
        f"&details={quote(event.description or '', safe=URI_COMPONENT_SAFE)}"
        f"&location={quote(location, safe=URI_COMPONENT_SAFE)}"
        f"&ctz={CALENDAR_TIMEZONE}"
    )
