"""Commands accepted by the message bus.

Every command names the provider it acts for; handlers never infer it from
ambient state.
"""

from dataclasses import dataclass
from datetime import date

from slotkeeper.domain.times import TimeLike


@dataclass(frozen=True)
class Command:
    """Base class for all commands."""

    provider_id: str


@dataclass(frozen=True)
class AddSlot(Command):
    """Add one 60-minute slot; ``start_time=None`` asks for the default start."""

    slot_date: date
    start_time: TimeLike | None = None


@dataclass(frozen=True)
class EditSlotTime(Command):
    """Move a slot to a new start time on the same day."""

    slot_id: str
    new_time: TimeLike


@dataclass(frozen=True)
class DeleteSlot(Command):
    """Remove a single slot."""

    slot_id: str


@dataclass(frozen=True)
class ToggleDayOff(Command):
    """Flip a date between working and off."""

    day: date


@dataclass(frozen=True)
class RunQuickSetup(Command):
    """Replace the 7-day batch window with generated slots."""

    from_time: TimeLike
    to_time: TimeLike
    duration_minutes: int
    confirmed: bool = False


@dataclass(frozen=True)
class ClearSchedule(Command):
    """Delete every unbooked slot from today on and mark those days off."""


@dataclass(frozen=True)
class SetVisibility(Command):
    """Show or hide the provider from customers."""

    visible: bool
