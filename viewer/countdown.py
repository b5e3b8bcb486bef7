"""Countdown to the start of the carnival."""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

BOGOTA = timezone(timedelta(hours=-5))
CARNIVAL_START = datetime(2026, 2, 14, 0, 0, 0, tzinfo=BOGOTA)
REFRESH_SECONDS = 60

SECONDS_PER_DAY = 24 * 60 * 60
SECONDS_PER_HOUR = 60 * 60


@dataclass(frozen=True)
class Countdown:
    days: int
    hours: int
    arrived: bool


def compute_countdown(now: datetime, target: datetime = CARNIVAL_START) -> Countdown:
    """
    Whole days and hours left until target.

    Args:
        now: Current instant (timezone aware)
        target: Instant counted down to

    Returns:
        Countdown; arrived is True once target has passed
    """
    remaining = (target - now).total_seconds()
    if remaining <= 0:
        return Countdown(days=0, hours=0, arrived=True)

    days = int(remaining // SECONDS_PER_DAY)
    hours = int((remaining % SECONDS_PER_DAY) // SECONDS_PER_HOUR)
    return Countdown(days=days, hours=hours, arrived=False)
