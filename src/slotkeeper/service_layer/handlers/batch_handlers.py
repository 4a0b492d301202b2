"""Batch handlers: quick setup over the 7-day window, and clear.

Quick setup is all-or-nothing. The range delete, every insert, and the
working-flag update share one unit of work; any failure rolls all of it back.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from typing import Any

from slotkeeper.domain.calendar import CalendarWindow
from slotkeeper.domain.schedule import drop_elapsed
from slotkeeper.domain.slot_generator import generate_start_times
from slotkeeper.domain.times import add_minutes
from slotkeeper.interfaces.clock import Clock
from slotkeeper.interfaces.errors import SlotBookedError
from slotkeeper.interfaces.id_generator import IdGenerator
from slotkeeper.interfaces.slot_store import SlotRecord
from slotkeeper.interfaces.unit_of_work import AbstractUnitOfWork
from slotkeeper.service_layer import commands
from slotkeeper.service_layer.errors import ConfirmationRequiredError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class QuickSetupResult:
    """Outcome of a committed quick setup."""

    deleted: int
    inserted: int
    dates: tuple[date, ...]


@dataclass(frozen=True, slots=True)
class ClearResult:
    """Outcome of a committed clear."""

    deleted: int
    kept_booked: int
    days_off: tuple[date, ...]


def run_quick_setup(
    cmd: commands.RunQuickSetup,
    uow: AbstractUnitOfWork,
    clock: Clock,
    id_generator: IdGenerator,
) -> QuickSetupResult:
    """Replace every slot in ``today ... today+6`` with generated slots.

    Today's candidates at or before the current time-of-day are dropped; the
    other six days get the full set. All seven dates end up working, even the
    ones that received no slot.

    Raises:
        InvalidTimeRangeError: Before any store call, for an unusable range.
        SlotBookedError: If a booked slot sits in the window.
        ConfirmationRequiredError: If slots exist and ``cmd.confirmed`` is false.
    """
    starts = generate_start_times(cmd.from_time, cmd.to_time, cmd.duration_minutes)
    now = clock.now()
    window = CalendarWindow(now.date()).batch_window()
    first, last = window[0], window[-1]

    planned = [
        (day, start)
        for offset, day in enumerate(window)
        for start in (drop_elapsed(starts, now) if offset == 0 else starts)
    ]

    with uow:
        existing = uow.slots.list_by_date_range(cmd.provider_id, first, last)
        if booked := next((s for s in existing if s.is_booked), None):
            raise SlotBookedError(booked.id)
        if existing and not cmd.confirmed:
            raise ConfirmationRequiredError(len(existing))

        deleted = uow.slots.delete_range(cmd.provider_id, first, last)
        slot_ids = id_generator.new_ids(len(planned))
        for slot_id, (day, start) in zip(slot_ids, planned, strict=True):
            uow.slots.create(
                SlotRecord(
                    id=slot_id,
                    provider_id=cmd.provider_id,
                    slot_date=day,
                    start_time=start,
                    end_time=add_minutes(start, cmd.duration_minutes),
                )
            )

        working_days = uow.working_days.get(cmd.provider_id)
        working_days.update(dict.fromkeys(window, True))
        uow.working_days.put(cmd.provider_id, working_days)
        uow.commit()

    logger.info(
        "Quick setup %s-%s every %d min: replaced %d slot(s) with %d",
        cmd.from_time,
        cmd.to_time,
        cmd.duration_minutes,
        deleted,
        len(planned),
    )
    return QuickSetupResult(deleted=deleted, inserted=len(planned), dates=window)


def clear_schedule(
    cmd: commands.ClearSchedule, uow: AbstractUnitOfWork, clock: Clock
) -> ClearResult:
    """Delete every unbooked slot dated today or later and mark those days off.

    Past slots and flags are untouched. Booked slots survive, and so does the
    working flag of any date still holding one.
    """
    today = clock.today()

    with uow:
        future = uow.slots.list_by_date_range(cmd.provider_id, today, date.max)
        kept = [s for s in future if s.is_booked]
        for slot in future:
            if not slot.is_booked:
                uow.slots.delete(slot.id)

        booked_dates = {s.slot_date for s in kept}
        working_days = uow.working_days.get(cmd.provider_id)
        days_off = tuple(
            sorted(d for d in working_days if d >= today and d not in booked_dates)
        )
        working_days.update(dict.fromkeys(days_off, False))
        uow.working_days.put(cmd.provider_id, working_days)
        uow.commit()

    deleted = len(future) - len(kept)
    logger.info("Cleared %d slot(s); kept %d booked", deleted, len(kept))
    return ClearResult(deleted=deleted, kept_booked=len(kept), days_off=days_off)


COMMAND_HANDLERS: dict[type, Callable[..., Any]] = {
    commands.RunQuickSetup: run_quick_setup,
    commands.ClearSchedule: clear_schedule,
}
