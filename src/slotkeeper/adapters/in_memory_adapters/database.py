"""Shared state behind the in-memory stores.

Store calls arrive from worker threads, so every read and write takes the
re-entrant ``lock``. An in-memory unit of work holds the same lock for its
whole lifetime and restores a snapshot on rollback.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import date

from slotkeeper.interfaces.slot_store import SlotRecord


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Point-in-time copy of an `InMemoryDatabase`."""

    slots: dict[str, SlotRecord]
    working_days: dict[str, dict[date, bool]]
    visibility: dict[str, bool]


class InMemoryDatabase:
    """Slots, working-day maps and visibility flags for any number of providers."""

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self.slots: dict[str, SlotRecord] = {}
        self.working_days: dict[str, dict[date, bool]] = {}
        self.visibility: dict[str, bool] = {}

    def snapshot(self) -> Snapshot:
        with self.lock:
            return Snapshot(
                slots=dict(self.slots),
                working_days={p: dict(m) for p, m in self.working_days.items()},
                visibility=dict(self.visibility),
            )

    def restore(self, snapshot: Snapshot) -> None:
        with self.lock:
            self.slots = dict(snapshot.slots)
            self.working_days = {
                p: dict(m) for p, m in snapshot.working_days.items()
            }
            self.visibility = dict(snapshot.visibility)
