"""Domain-layer error definitions.

Every error here is a *validation* failure: it is raised before anything is
written, so callers can surface it without reloading state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import date, time

# ============================================================================
#                           General domain errors
# ============================================================================


class DomainError(Exception):
    """Base class for domain-layer errors."""


class ValidationError(DomainError):
    """Raised when an input is rejected before any storage call."""


# ============================================================================
#                           Time parsing and ranges
# ============================================================================


class InvalidTimeError(ValidationError):
    """Raised when a time-of-day value cannot be parsed or normalized."""

    def __init__(
        self, value: object, reason: str = "expected HH:MM or HH:MM:SS"
    ) -> None:
        super().__init__(f"Invalid time {value!r}: {reason}.")
        self.value = value
        self.reason = reason


class InvalidTimeRangeError(ValidationError):
    """Raised when a generation window or duration is not usable."""

    def __init__(self, from_time: time, to_time: time, duration_minutes: int) -> None:
        if duration_minutes <= 0:
            reason = "duration must be greater than 0"
        else:
            reason = "start time must be earlier than end time"
        super().__init__(
            f"Invalid range {from_time.isoformat()}-{to_time.isoformat()} "
            f"every {duration_minutes} min: {reason}."
        )
        self.from_time = from_time
        self.to_time = to_time
        self.duration_minutes = duration_minutes


class PageOutOfRangeError(ValidationError):
    """Raised when a calendar page or day offset is outside the rolling window."""

    def __init__(self, what: str, value: int, upper: int) -> None:
        super().__init__(f"{what} {value} is outside [0, {upper}).")
        self.what = what
        self.value = value
        self.upper = upper


# ============================================================================
#                           Slot placement rules
# ============================================================================


class DuplicateSlotTimeError(ValidationError):
    """Raised when a day already holds a slot starting at the requested time."""

    def __init__(self, slot_date: date, start_time: time) -> None:
        super().__init__(
            f"A slot starting at {start_time.isoformat()} already exists on "
            f"{slot_date.isoformat()}."
        )
        self.slot_date = slot_date
        self.start_time = start_time


class PastDateError(ValidationError):
    """Raised when adding a slot to a date strictly before today."""

    def __init__(self, slot_date: date) -> None:
        super().__init__(f"Cannot add slots in the past ({slot_date.isoformat()}).")
        self.slot_date = slot_date


class PastSlotTimeError(ValidationError):
    """Raised when a slot for today starts at or before the current time."""

    def __init__(self, slot_date: date, start_time: time) -> None:
        super().__init__(
            f"Cannot add a slot at {start_time.isoformat()} on "
            f"{slot_date.isoformat()}: that time has already passed."
        )
        self.slot_date = slot_date
        self.start_time = start_time


class FirstSlotTimeRequiredError(ValidationError):
    """Raised when adding the first slot of a day without an explicit time."""

    def __init__(self, slot_date: date) -> None:
        super().__init__(
            f"{slot_date.isoformat()} has no slots yet; "
            "an explicit start time is required."
        )
        self.slot_date = slot_date


class DayOffError(ValidationError):
    """Raised when adding a slot to a date that is not a working day."""

    def __init__(self, slot_date: date) -> None:
        super().__init__(
            f"{slot_date.isoformat()} is a day off; turn it on before adding slots."
        )
        self.slot_date = slot_date
