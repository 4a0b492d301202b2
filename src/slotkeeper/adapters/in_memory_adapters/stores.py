"""In-memory implementations of the slot, working-day and visibility ports."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace
from datetime import date

from slotkeeper.interfaces.errors import SlotNotFoundError, SlotTimeTakenError
from slotkeeper.interfaces.slot_store import SlotPatch, SlotRecord, SlotStore
from slotkeeper.interfaces.unsettable import resolve
from slotkeeper.interfaces.visibility import ProviderVisibility
from slotkeeper.interfaces.working_days import WorkingDayMap, WorkingDayStore

from .database import InMemoryDatabase


def _check_range(date_from: date, date_to: date) -> None:
    if date_to < date_from:
        raise ValueError("date_to must be >= date_from")


class InMemorySlotStore(SlotStore):
    """SlotStore backed by an `InMemoryDatabase`.

    - Non-durable: all data is lost when the database is discarded.
    - Enforces the same ``(provider_id, slot_date, start_time)`` uniqueness
      as the SQL schema.
    """

    def __init__(self, database: InMemoryDatabase | None = None):
        self._db = database or InMemoryDatabase()

    # --------------------------------------------------------------------- #
    # Interface implementation
    # --------------------------------------------------------------------- #

    def create(self, slot: SlotRecord) -> SlotRecord:
        with self._db.lock:
            if slot.id in self._db.slots:
                raise ValueError(f"duplicate slot id {slot.id!r}")
            self._ensure_time_free(slot)
            self._db.slots[slot.id] = slot
            return slot

    def update(self, slot_id: str, patch: SlotPatch) -> SlotRecord:
        with self._db.lock:
            current = self._require(slot_id)
            updated = replace(
                current,
                start_time=resolve(
                    patch.start_time, current.start_time, field="start_time"
                ),
                end_time=resolve(patch.end_time, current.end_time, field="end_time"),
                is_booked=resolve(
                    patch.is_booked, current.is_booked, field="is_booked"
                ),
            )
            if updated.start_time != current.start_time:
                self._ensure_time_free(updated)
            self._db.slots[slot_id] = updated
            return updated

    def delete(self, slot_id: str) -> None:
        with self._db.lock:
            self._require(slot_id)
            del self._db.slots[slot_id]

    def delete_range(self, provider_id: str, date_from: date, date_to: date) -> int:
        _check_range(date_from, date_to)
        with self._db.lock:
            doomed = [
                s.id
                for s in self._db.slots.values()
                if s.provider_id == provider_id and date_from <= s.slot_date <= date_to
            ]
            for slot_id in doomed:
                del self._db.slots[slot_id]
            return len(doomed)

    def get(self, slot_id: str) -> SlotRecord | None:
        with self._db.lock:
            return self._db.slots.get(slot_id)

    def list_by_date_range(
        self, provider_id: str, date_from: date, date_to: date
    ) -> Sequence[SlotRecord]:
        _check_range(date_from, date_to)
        with self._db.lock:
            return sorted(
                (
                    s
                    for s in self._db.slots.values()
                    if s.provider_id == provider_id
                    and date_from <= s.slot_date <= date_to
                ),
                key=lambda s: (s.slot_date, s.start_time),
            )

    # --------------------------------------------------------------------- #
    # Helpers
    # --------------------------------------------------------------------- #

    def _require(self, slot_id: str) -> SlotRecord:
        if (slot := self._db.slots.get(slot_id)) is None:
            raise SlotNotFoundError(slot_id)
        return slot

    def _ensure_time_free(self, slot: SlotRecord) -> None:
        for other in self._db.slots.values():
            if (
                other.id != slot.id
                and other.provider_id == slot.provider_id
                and other.slot_date == slot.slot_date
                and other.start_time == slot.start_time
            ):
                raise SlotTimeTakenError(
                    slot.provider_id, slot.slot_date, slot.start_time
                )


class InMemoryWorkingDayStore(WorkingDayStore):
    """WorkingDayStore backed by an `InMemoryDatabase`."""

    def __init__(self, database: InMemoryDatabase | None = None):
        self._db = database or InMemoryDatabase()

    def get(self, provider_id: str) -> WorkingDayMap:
        with self._db.lock:
            return dict(self._db.working_days.get(provider_id, {}))

    def put(self, provider_id: str, working_days: WorkingDayMap) -> None:
        with self._db.lock:
            self._db.working_days[provider_id] = dict(working_days)


class InMemoryVisibility(ProviderVisibility):
    """ProviderVisibility backed by an `InMemoryDatabase`."""

    def __init__(self, database: InMemoryDatabase | None = None):
        self._db = database or InMemoryDatabase()

    def get(self, provider_id: str) -> bool:
        with self._db.lock:
            return self._db.visibility.get(provider_id, True)

    def set(self, provider_id: str, visible: bool) -> None:
        with self._db.lock:
            self._db.visibility[provider_id] = bool(visible)
