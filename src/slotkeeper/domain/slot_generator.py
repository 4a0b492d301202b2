"""Candidate start-time generation for quick setup.

This is pure domain logic: no clock, no stores. Given a window and a service
duration it returns every start time whose slot fits entirely inside the
window.

Algorithm:
    1. Normalize ``from_time`` and ``to_time`` to minutes since midnight.
    2. Starting at ``from``, emit the current start while
       ``current + duration <= to`` and advance by ``duration``.

The number of candidates is therefore ``floor((to - from) / duration)``, and a
window shorter than one duration yields an empty list.
"""

from __future__ import annotations

from datetime import time

from .errors import InvalidTimeRangeError
from .times import TimeLike, from_minutes, minutes_of, parse_time

__all__ = [
    "DEFAULT_SETUP_DURATION",
    "DEFAULT_SETUP_FROM",
    "DEFAULT_SETUP_TO",
    "QUICK_SETUP_DURATIONS",
    "generate_start_times",
    "validate_range",
]

# Durations offered for quick setup; generation itself takes any positive one.
QUICK_SETUP_DURATIONS = (15, 30, 45, 60)
DEFAULT_SETUP_FROM = time(9)
DEFAULT_SETUP_TO = time(22)
DEFAULT_SETUP_DURATION = 30


def validate_range(
    from_time: TimeLike, to_time: TimeLike, duration_minutes: int
) -> tuple[time, time]:
    """Check the generation precondition and return the normalized bounds.

    Raises:
        InvalidTimeError: If either bound cannot be parsed.
        InvalidTimeRangeError: If ``from >= to`` or ``duration <= 0``.
    """
    start = parse_time(from_time)
    end = parse_time(to_time)
    if duration_minutes <= 0 or minutes_of(start) >= minutes_of(end):
        raise InvalidTimeRangeError(start, end, duration_minutes)
    return start, end


def generate_start_times(
    from_time: TimeLike, to_time: TimeLike, duration_minutes: int
) -> list[time]:
    """Generate slot start times between two times.

    Args:
        from_time: Opening time (inclusive).
        to_time: Closing time; no slot may end after it.
        duration_minutes: Length of each slot, also the step between starts.

    Returns:
        Start times in ascending order. May be empty.

    Raises:
        InvalidTimeRangeError: If the precondition does not hold.

    Example:
        ``generate_start_times("09:00", "10:00", 30)`` returns 09:00 and 09:30;
        10:00 is excluded because 10:00 + 30 min ends after the window.
    """
    start, end = validate_range(from_time, to_time, duration_minutes)
    current = minutes_of(start)
    limit = minutes_of(end)

    starts: list[time] = []
    while current + duration_minutes <= limit:
        starts.append(from_minutes(current))
        current += duration_minutes
    return starts
