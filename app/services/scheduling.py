"""Appointment time resolution for phone bookings.

The voice agent passes whatever the caller said, e.g. "2024-02-15" and
"2pm", "2:30 PM" or "14:00". This module turns that into a concrete
start/end pair and never raises: anything it can't understand becomes
14:00 on the next calendar day.
"""

import logging
import re
from datetime import date, datetime, time, timedelta, timezone

logger = logging.getLogger(__name__)

CALL_DURATION = timedelta(minutes=45)
DEFAULT_HOUR = 14

TWELVE_HOUR_RE = re.compile(r"(\d+):?(\d*)\s*(am|pm)", re.IGNORECASE)
TWENTY_FOUR_HOUR_RE = re.compile(r"(\d+):?(\d*)")

DATE_FORMATS = (
    "%Y-%m-%d",
    "%m/%d/%Y",
    "%B %d, %Y",
    "%B %d %Y",
    "%b %d, %Y",
    "%b %d %Y",
)


def parse_time(text: str | None) -> tuple[int, int] | None:
    """Parse a 12- or 24-hour time string into (hour, minute).

    Returns None when nothing usable is found or the values are out of range.
    """
    if not text:
        return None

    lowered = text.strip().lower()
    if "am" in lowered or "pm" in lowered:
        match = TWELVE_HOUR_RE.search(lowered)
        if not match:
            return None
        hour = int(match.group(1))
        minute = int(match.group(2)) if match.group(2) else 0
        if not 1 <= hour <= 12:
            return None
        is_pm = match.group(3) == "pm"
        if is_pm and hour != 12:
            hour += 12
        if not is_pm and hour == 12:
            hour = 0
    else:
        match = TWENTY_FOUR_HOUR_RE.search(lowered)
        if not match:
            return None
        hour = int(match.group(1))
        minute = int(match.group(2)) if match.group(2) else 0

    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        return None
    return hour, minute


def parse_date(text: str | None) -> date | None:
    """Parse a calendar date, ISO first, then a few spoken-style formats."""
    if not text:
        return None
    cleaned = text.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt).date()
        except ValueError:
            continue
    return None


def default_start(now: datetime | None = None) -> datetime:
    """14:00 UTC on the calendar day after `now`."""
    now = now or datetime.now(timezone.utc)
    tomorrow = (now + timedelta(days=1)).date()
    return datetime.combine(tomorrow, time(DEFAULT_HOUR, 0), tzinfo=timezone.utc)


def requested_start(preferred_date, preferred_time) -> datetime | None:
    """The caller's requested start, or None if it can't be honored."""
    try:
        day = parse_date(preferred_date)
        parsed_time = parse_time(preferred_time)
    except Exception as e:
        logger.error(f"Error parsing date/time: {e}")
        return None
    if not (day and parsed_time):
        return None
    hour, minute = parsed_time
    return datetime.combine(day, time(hour, minute), tzinfo=timezone.utc)


def resolve_appointment_window(preferred_date, preferred_time, now=None):
    """Return (start, end) for a requested slot.

    Both values must be present and parseable to be honored; otherwise the
    next-day 14:00 default applies. End is always start + 45 minutes.
    """
    start = requested_start(preferred_date, preferred_time)
    if start is None:
        if preferred_date or preferred_time:
            logger.info(
                f"Could not use requested slot date={preferred_date!r} "
                f"time={preferred_time!r}; using default"
            )
        start = default_start(now)

    return start, start + CALL_DURATION
