"""Normalization, identifiers and validation for catalog events."""
import hashlib
import json
import logging
import re
from datetime import datetime
from typing import Iterable, Optional

from catalog.models import EventInput, EventRecord

logger = logging.getLogger(__name__)

DEFAULT_YEAR = '2026'
DEFAULT_MONTH = '01'
EVENT_ID_LENGTH = 12

SPANISH_MONTHS = {
    'enero': '01', 'febrero': '02', 'marzo': '03', 'abril': '04',
    'mayo': '05', 'junio': '06', 'julio': '07', 'agosto': '08',
    'septiembre': '09', 'octubre': '10', 'noviembre': '11', 'diciembre': '12',
    'ene': '01', 'feb': '02', 'mar': '03', 'abr': '04',
    'may': '05', 'jun': '06', 'jul': '07', 'ago': '08',
    'sep': '09', 'sept': '09', 'set': '09', 'oct': '10', 'nov': '11',
    'dic': '12',
}

ISO_DATE_RE = re.compile(r'^\d{4}-\d{2}-\d{2}$')
# "14 de febrero 2026", "14 feb", "sáb 3 de marzo de 2026", "14 feb. 2026 8pm"
SPANISH_DATE_RE = re.compile(
    r'(?<![\d/-])(\d{1,2})(?![\d/-])\s*(?:de\s+)?([^\W\d_]+)?\.?'
    r'(?:\s*,?\s*(?:de\s+)?(\d{4})(?!\d))?'
)


class InvalidEventError(ValueError):
    """Raised when a candidate event cannot be stored."""


def parse_date(date_str: str) -> Optional[str]:
    """
    Parse a date into ISO 8601 format (YYYY-MM-DD).

    ISO dates are returned unchanged. Otherwise the string is searched for a
    Spanish free-text date ("<day> [de] <month> [<year>]"); surrounding words
    such as a weekday or a time are ignored. A missing year
    becomes DEFAULT_YEAR and a missing or unknown month becomes DEFAULT_MONTH.

    Args:
        date_str: Date string as typed by the operator or found by a source

    Returns:
        ISO 8601 date string or None if no pattern matches
    """
    if not date_str:
        return None

    text = date_str.strip()
    if ISO_DATE_RE.match(text):
        return text

    # the first "<day> <month>" with a known month wins, then the first bare day
    matches = list(SPANISH_DATE_RE.finditer(text.lower()))
    if not matches:
        return None
    match = next(
        (m for m in matches if m.group(2) in SPANISH_MONTHS), matches[0]
    )

    day = match.group(1).zfill(2)
    month = SPANISH_MONTHS.get(match.group(2) or '', DEFAULT_MONTH)
    year = match.group(3) or DEFAULT_YEAR
    return f"{year}-{month}-{day}"


def normalize_time(time_str: str) -> Optional[str]:
    """
    Normalize time to 24-hour format (HH:MM).

    Args:
        time_str: Time string in various formats

    Returns:
        24-hour formatted time string or None if parsing fails
    """
    if not time_str:
        return None

    time_formats = [
        '%H:%M',         # 24-hour format
        '%I:%M %p',      # 12-hour format with AM/PM
        '%I:%M%p',       # 12-hour format without space
        '%H:%M:%S',      # 24-hour with seconds
        '%I:%M:%S %p',   # 12-hour with seconds and AM/PM
    ]

    time_str = time_str.strip()

    for fmt in time_formats:
        try:
            time_obj = datetime.strptime(time_str, fmt)
            return time_obj.strftime('%H:%M')
        except ValueError:
            continue

    return None


def generate_event_id(name: str, date: str, city: str) -> str:
    """
    Generate a short stable identifier from name, date and city.

    Args:
        name: Event name
        date: Event date (ISO 8601 format)
        city: City code

    Returns:
        First EVENT_ID_LENGTH characters of the SHA256 hex digest
    """
    # a JSON array keeps "a|b" + "c" apart from "a" + "b|c"
    composite = json.dumps([name, date, city], ensure_ascii=False)
    hash_obj = hashlib.sha256(composite.encode('utf-8'))
    return hash_obj.hexdigest()[:EVENT_ID_LENGTH]


def find_duplicate(
    events: Iterable[EventRecord], name: str, date: str, city: str
) -> Optional[EventRecord]:
    """
    Find a stored event with the same name, date and city.

    Names are compared case-insensitively.

    Returns:
        The matching EventRecord or None
    """
    lowered = name.lower()
    for event in events:
        if (event.name.lower() == lowered and
                event.date == date and
                event.city == city):
            return event
    return None


def event_exists(events: Iterable[EventRecord], name: str, date: str, city: str) -> bool:
    """Check whether an event with the same name, date and city is stored."""
    return find_duplicate(events, name, date, city) is not None


def normalize_date(date_str: str) -> str:
    """
    Parse a date and check that it names a real calendar day.

    Raises:
        InvalidEventError: If the date cannot be parsed or does not exist
    """
    normalized = parse_date(date_str)
    if not normalized:
        raise InvalidEventError(f"Unrecognized date: {date_str!r}")

    try:
        datetime.strptime(normalized, '%Y-%m-%d')
    except ValueError:
        raise InvalidEventError(
            f"Invalid calendar date: {date_str!r} ({normalized})"
        )

    return normalized


def build_record(candidate: EventInput, added_at: str) -> EventRecord:
    """
    Validate a candidate event and turn it into a storable record.

    Args:
        candidate: Event as typed by the operator or returned by a source
        added_at: ISO 8601 creation timestamp

    Returns:
        EventRecord with identifier and addedAt stamped

    Raises:
        InvalidEventError: If name, date or times fail validation
    """
    name = (candidate.name or '').strip()
    if not name:
        raise InvalidEventError("Event name is required")

    date = normalize_date(candidate.date)

    start_time = normalize_time(candidate.start_time)
    end_time = normalize_time(candidate.end_time)
    if not start_time or not end_time:
        raise InvalidEventError(
            f"Invalid time range for '{name}': "
            f"{candidate.start_time!r} - {candidate.end_time!r}"
        )
    # HH:MM strings compare in clock order
    if start_time >= end_time:
        raise InvalidEventError(
            f"Start time must precede end time for '{name}': "
            f"{start_time} - {end_time}"
        )

    return EventRecord(
        id=generate_event_id(name, date, candidate.city),
        name=name,
        description=candidate.description or '',
        city=candidate.city,
        venue=candidate.venue,
        date=date,
        start_time=start_time,
        end_time=end_time,
        category=candidate.category,
        official=candidate.official,
        price=candidate.price or None,
        source=candidate.source,
        url=candidate.url or None,
        added_at=added_at
    )
