"""Time-of-day normalization.

Slot times are stored at second granularity (``HH:MM:SS``) regardless of how
they were entered. Inputs may be ``datetime.time`` objects or strings of the
form ``H:MM``, ``HH:MM`` or ``HH:MM:SS``; sub-second precision and tzinfo are
dropped.
"""

from __future__ import annotations

import re
from datetime import time

from .errors import InvalidTimeError

__all__ = [
    "MINUTES_PER_DAY",
    "TimeLike",
    "add_minutes",
    "format_time",
    "from_minutes",
    "minutes_of",
    "parse_time",
    "shift_within_day",
]

MINUTES_PER_DAY = 24 * 60

_TIME_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::(\d{2}))?\s*$")

type TimeLike = str | time


def parse_time(value: TimeLike) -> time:
    """Normalize a time-of-day input to a second-precision ``time``.

    Args:
        value: A ``time`` or a string like ``"9:00"``, ``"09:00"`` or ``"09:00:00"``.

    Returns:
        A naive ``time`` with ``microsecond == 0``.

    Raises:
        InvalidTimeError: If the value cannot be parsed or is out of range.
    """
    if isinstance(value, time):
        return time(value.hour, value.minute, value.second)
    if not isinstance(value, str):
        raise InvalidTimeError(value, "expected a string or datetime.time")
    if not (match := _TIME_PATTERN.match(value)):
        raise InvalidTimeError(value)
    hours, minutes, seconds = (int(part) if part else 0 for part in match.groups())
    if hours > 23 or minutes > 59 or seconds > 59:
        raise InvalidTimeError(value, "out of range")
    return time(hours, minutes, seconds)


def format_time(value: time) -> str:
    """Render a time as ``HH:MM:SS``."""
    return f"{value.hour:02d}:{value.minute:02d}:{value.second:02d}"


def minutes_of(value: time) -> int:
    """Minutes since midnight (seconds are truncated)."""
    return value.hour * 60 + value.minute


def from_minutes(total: int) -> time:
    """Build a time from minutes since midnight.

    Raises:
        InvalidTimeError: If ``total`` is not within a single day.
    """
    if not 0 <= total < MINUTES_PER_DAY:
        raise InvalidTimeError(total, "minutes must fall within one day")
    return time(total // 60, total % 60)


def add_minutes(value: time, minutes: int) -> time:
    """Add minutes to a time, wrapping around midnight.

    Used for slot end times: a 23:30 slot of 60 minutes ends at 00:30.
    """
    total = (minutes_of(value) + minutes) % MINUTES_PER_DAY
    return time(total // 60, total % 60, value.second)


def shift_within_day(value: time, minutes: int) -> time:
    """Add minutes to a time without crossing midnight.

    Raises:
        InvalidTimeError: If the result would fall on another day.
    """
    total = minutes_of(value) + minutes
    if total >= MINUTES_PER_DAY:
        raise InvalidTimeError(
            format_time(value), f"adding {minutes} min runs past midnight"
        )
    return time(total // 60, total % 60, value.second)
