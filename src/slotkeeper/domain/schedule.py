"""Day and page views plus the slot placement rules.

A `DaySchedule` is a computed view: its working flag comes from the working
day map and is never derived from whether slots exist. A `PageView` is the
8-day page currently shown to a provider.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time

from .conflicts import SlotLike
from .errors import (
    DayOffError,
    FirstSlotTimeRequiredError,
    PastDateError,
    PastSlotTimeError,
)
from .times import minutes_of, parse_time, shift_within_day

__all__ = [
    "NEXT_SLOT_STEP_MINUTES",
    "SINGLE_SLOT_MINUTES",
    "DaySchedule",
    "PageView",
    "build_days",
    "check_not_past",
    "check_working_day",
    "drop_elapsed",
    "next_default_start",
]

SINGLE_SLOT_MINUTES = 60
"""Service duration of slots added or edited one at a time."""

NEXT_SLOT_STEP_MINUTES = 30
"""Offset from the latest start used when no explicit time is supplied."""


@dataclass(frozen=True, slots=True)
class DaySchedule:
    """One calendar day as seen by the provider."""

    date: date
    is_working_day: bool
    slots: tuple[SlotLike, ...] = ()

    @property
    def is_off(self) -> bool:
        """Inverse of the working flag."""
        return not self.is_working_day

    @property
    def has_slots(self) -> bool:
        """True when at least one slot exists on this day."""
        return bool(self.slots)

    def find(self, slot_id: str) -> SlotLike | None:
        """Return the slot with the given id, if it is on this day."""
        return next((slot for slot in self.slots if slot.id == slot_id), None)

    def without_slots(self) -> DaySchedule:
        """Copy of this day with its slots removed."""
        return replace(self, slots=())


@dataclass(frozen=True, slots=True)
class PageView:
    """An 8-day page of the rolling calendar."""

    provider_id: str
    page_index: int
    days: tuple[DaySchedule, ...] = field(default_factory=tuple)

    @property
    def dates(self) -> tuple[date, ...]:
        """Dates of the page in order."""
        return tuple(day.date for day in self.days)

    def day(self, day_date: date) -> DaySchedule | None:
        """Return the view of ``day_date`` if it is on this page."""
        return next((day for day in self.days if day.date == day_date), None)

    def find_slot(self, slot_id: str) -> tuple[DaySchedule, SlotLike] | None:
        """Locate a slot on the page by id."""
        for day in self.days:
            if (slot := day.find(slot_id)) is not None:
                return day, slot
        return None

    def has_slots_between(self, first: date, last: date) -> bool:
        """True when any day in ``[first, last]`` on this page has a slot."""
        return any(day.has_slots for day in self.days if first <= day.date <= last)

    def cleared_from(self, today: date) -> PageView:
        """Copy with every day from ``today`` onward emptied of slots."""
        days = tuple(
            day.without_slots() if day.date >= today else day for day in self.days
        )
        return replace(self, days=days)


def build_days(
    dates: Sequence[date],
    working_days: dict[date, bool],
    slots: Iterable[SlotLike],
    slot_date_of: Callable[[SlotLike], date],
) -> tuple[DaySchedule, ...]:
    """Assemble day views from a working-day map and a flat slot list.

    Slots are grouped by ``slot_date_of(slot)`` and sorted by start time.
    Dates missing from ``working_days`` are off.
    """
    grouped: dict[date, list[SlotLike]] = {d: [] for d in dates}
    for slot in slots:
        bucket = grouped.get(slot_date_of(slot))
        if bucket is not None:
            bucket.append(slot)
    return tuple(
        DaySchedule(
            date=d,
            is_working_day=working_days.get(d, False),
            slots=tuple(sorted(grouped[d], key=lambda s: s.start_time)),
        )
        for d in dates
    )


def check_not_past(slot_date: date, start_time: time, now: datetime) -> None:
    """Reject slots that would start in the past.

    Raises:
        PastDateError: If ``slot_date`` is before today.
        PastSlotTimeError: If ``slot_date`` is today and ``start_time`` is at or
            before the current time-of-day (minute resolution).
    """
    today = now.date()
    if slot_date < today:
        raise PastDateError(slot_date)
    if slot_date == today and minutes_of(start_time) <= minutes_of(now.time()):
        raise PastSlotTimeError(slot_date, start_time)


def next_default_start(slot_date: date, existing: Sequence[SlotLike]) -> time:
    """Default start for an added slot: latest existing start + 30 minutes.

    Raises:
        FirstSlotTimeRequiredError: If the day has no slots yet.
        InvalidTimeError: If the default would roll past midnight.
    """
    if not existing:
        raise FirstSlotTimeRequiredError(slot_date)
    latest = max(parse_time(slot.start_time) for slot in existing)
    return shift_within_day(latest, NEXT_SLOT_STEP_MINUTES)


def drop_elapsed(starts: Iterable[time], now: datetime) -> list[time]:
    """Drop start times at or before the current time-of-day."""
    current = minutes_of(now.time())
    return [start for start in starts if minutes_of(start) > current]


def check_working_day(slot_date: date, working_days: dict[date, bool]) -> None:
    """Reject slot placement on a day that is off.

    Raises:
        DayOffError: If ``slot_date`` is absent from or false in the map.
    """
    if not working_days.get(slot_date, False):
        raise DayOffError(slot_date)
