"""Single-slot handlers: add, edit, delete, and the day-off toggle.

Each handler runs in one unit of work and re-reads authoritative state before
writing: the booked flag, the day's existing slots, and the working-day map
are never taken from the caller's cached view.
"""

import logging
from collections.abc import Callable
from typing import Any

from slotkeeper.domain.conflicts import is_duplicate
from slotkeeper.domain.errors import DuplicateSlotTimeError
from slotkeeper.domain.schedule import (
    SINGLE_SLOT_MINUTES,
    check_not_past,
    check_working_day,
    next_default_start,
)
from slotkeeper.domain.times import add_minutes, parse_time
from slotkeeper.interfaces.clock import Clock
from slotkeeper.interfaces.errors import SlotBookedError, SlotNotFoundError
from slotkeeper.interfaces.id_generator import IdGenerator
from slotkeeper.interfaces.slot_store import SlotPatch, SlotRecord
from slotkeeper.interfaces.unit_of_work import AbstractUnitOfWork
from slotkeeper.service_layer import commands

logger = logging.getLogger(__name__)


def _require_own_slot(
    uow: AbstractUnitOfWork, provider_id: str, slot_id: str
) -> SlotRecord:
    slot = uow.slots.get(slot_id)
    if slot is None or slot.provider_id != provider_id:
        raise SlotNotFoundError(slot_id)
    return slot


def add_slot(
    cmd: commands.AddSlot,
    uow: AbstractUnitOfWork,
    clock: Clock,
    id_generator: IdGenerator,
) -> SlotRecord:
    """Create one slot lasting 60 minutes.

    Without an explicit start the slot goes 30 minutes after the day's latest
    stored start; the first slot of a day always needs an explicit start.
    """
    now = clock.now()
    explicit = parse_time(cmd.start_time) if cmd.start_time is not None else None
    if explicit is not None:
        check_not_past(cmd.slot_date, explicit, now)

    with uow:
        check_working_day(cmd.slot_date, uow.working_days.get(cmd.provider_id))
        existing = uow.slots.list_by_date_range(
            cmd.provider_id, cmd.slot_date, cmd.slot_date
        )
        if explicit is None:
            start = next_default_start(cmd.slot_date, existing)
            check_not_past(cmd.slot_date, start, now)
        else:
            start = explicit
        if is_duplicate(existing, start):
            raise DuplicateSlotTimeError(cmd.slot_date, start)

        slot = uow.slots.create(
            SlotRecord(
                id=id_generator.new_id(),
                provider_id=cmd.provider_id,
                slot_date=cmd.slot_date,
                start_time=start,
                end_time=add_minutes(start, SINGLE_SLOT_MINUTES),
            )
        )
        uow.commit()

    logger.info(
        "Added slot %s on %s at %s", slot.id, slot.slot_date, slot.start_time
    )
    return slot


def edit_slot_time(
    cmd: commands.EditSlotTime, uow: AbstractUnitOfWork, clock: Clock
) -> SlotRecord:
    """Move an unbooked slot to a new start; the end is recomputed (+60 min)."""
    new_start = parse_time(cmd.new_time)

    with uow:
        current = _require_own_slot(uow, cmd.provider_id, cmd.slot_id)
        if current.is_booked:
            raise SlotBookedError(current.id)
        check_not_past(current.slot_date, new_start, clock.now())
        same_day = uow.slots.list_by_date_range(
            cmd.provider_id, current.slot_date, current.slot_date
        )
        if is_duplicate(same_day, new_start, exclude_id=current.id):
            raise DuplicateSlotTimeError(current.slot_date, new_start)

        updated = uow.slots.update(
            current.id,
            SlotPatch(
                start_time=new_start,
                end_time=add_minutes(new_start, SINGLE_SLOT_MINUTES),
            ),
        )
        uow.commit()

    logger.info(
        "Moved slot %s from %s to %s", updated.id, current.start_time, new_start
    )
    return updated


def delete_slot(cmd: commands.DeleteSlot, uow: AbstractUnitOfWork) -> None:
    """Remove an unbooked slot."""
    with uow:
        current = _require_own_slot(uow, cmd.provider_id, cmd.slot_id)
        if current.is_booked:
            raise SlotBookedError(current.id)
        uow.slots.delete(current.id)
        uow.commit()

    logger.info("Deleted slot %s", cmd.slot_id)


def toggle_day_off(cmd: commands.ToggleDayOff, uow: AbstractUnitOfWork) -> bool:
    """Flip a date's working flag and return the new value.

    Turning a day off deletes all of its slots in the same transaction; a day
    holding a booked slot cannot be turned off. Turning a day on creates no
    slots.
    """
    with uow:
        working_days = uow.working_days.get(cmd.provider_id)
        now_working = not working_days.get(cmd.day, False)

        if not now_working:
            day_slots = uow.slots.list_by_date_range(cmd.provider_id, cmd.day, cmd.day)
            if booked := next((s for s in day_slots if s.is_booked), None):
                raise SlotBookedError(booked.id)
            removed = uow.slots.delete_range(cmd.provider_id, cmd.day, cmd.day)
            logger.debug("Removed %d slot(s) from %s", removed, cmd.day)

        working_days[cmd.day] = now_working
        uow.working_days.put(cmd.provider_id, working_days)
        uow.commit()

    logger.info("%s is now %s", cmd.day, "working" if now_working else "off")
    return now_working


COMMAND_HANDLERS: dict[type, Callable[..., Any]] = {
    commands.AddSlot: add_slot,
    commands.EditSlotTime: edit_slot_time,
    commands.DeleteSlot: delete_slot,
    commands.ToggleDayOff: toggle_day_off,
}
