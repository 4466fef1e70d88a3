from __future__ import annotations

import logging
import re
from datetime import date, datetime, time
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

ISO_DATE_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
# Optional seconds so "10:00:00" round-trips from stores that keep a TIME column.
SLOT_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


def parse_iso_date(value: str | date | None) -> date | None:
    """Parse YYYY-MM-DD. Returns None if the value is empty or invalid."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    match = ISO_DATE_PATTERN.match(str(value).strip())
    if not match:
        return None
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_slot_time(value: str | time | None) -> time | None:
    """Parse HH:MM (24h) into a time with seconds dropped. Returns None if invalid."""
    if value is None:
        return None
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0, tzinfo=None)

    match = SLOT_TIME_PATTERN.match(str(value).strip())
    if not match:
        return None
    hour = int(match.group(1))
    minute = int(match.group(2))
    if 0 <= hour <= 23 and 0 <= minute <= 59:
        return time(hour, minute)
    return None


def format_iso_date(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def format_slot_time(value: time) -> str:
    return value.strftime("%H:%M")


def safe_timezone(name: str | None, default: str = "UTC") -> ZoneInfo:
    """Resolve an IANA zone name, falling back to `default` and then UTC."""
    for candidate in (name, default):
        if not candidate:
            continue
        try:
            return ZoneInfo(candidate)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Unknown timezone", extra={"reason": candidate})
    return ZoneInfo("UTC")
