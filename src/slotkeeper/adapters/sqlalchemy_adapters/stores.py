"""SQLAlchemy implementations of the slot, working-day and visibility ports.

All three stores share the unit of work's `Connection` and never commit on
their own. Driver errors are translated at this boundary:

- `IntegrityError` on the slot uniqueness constraint → `SlotTimeTakenError`
- any other `DBAPIError` → `StoreUnavailableError`
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import TYPE_CHECKING

from sqlalchemy import delete, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import DBAPIError, IntegrityError

from slotkeeper.adapters.db.dialects import DialectName
from slotkeeper.adapters.db.schema import providers, slots
from slotkeeper.adapters.db.schema import working_days as working_days_table
from slotkeeper.interfaces.errors import (
    SlotNotFoundError,
    SlotTimeTakenError,
    StoreUnavailableError,
)
from slotkeeper.interfaces.slot_store import SlotPatch, SlotRecord, SlotStore
from slotkeeper.interfaces.unsettable import resolve
from slotkeeper.interfaces.visibility import ProviderVisibility
from slotkeeper.interfaces.working_days import WorkingDayMap, WorkingDayStore

if TYPE_CHECKING:
    from datetime import date

    from sqlalchemy.engine import Connection, Row
    from sqlalchemy.sql.dml import Insert

# both dialect inserts support on_conflict_do_update
_UPSERT_INSERTS = {
    DialectName.POSTGRES: pg_insert,
    DialectName.SQLITE: sqlite_insert,
}


@contextmanager
def _storage_errors() -> Iterator[None]:
    try:
        yield
    except IntegrityError:
        raise
    except DBAPIError as e:
        raise StoreUnavailableError(str(e.orig or e)) from e


def _check_range(date_from: date, date_to: date) -> None:
    if date_to < date_from:
        raise ValueError("date_to must be >= date_from")


def _to_record(row: Row) -> SlotRecord:
    return SlotRecord(
        id=row.id,
        provider_id=row.provider_id,
        slot_date=row.slot_date,
        start_time=row.start_time.replace(microsecond=0),
        end_time=row.end_time.replace(microsecond=0),
        is_booked=bool(row.is_booked),
    )


_SLOT_COLUMNS = (
    slots.c.id,
    slots.c.provider_id,
    slots.c.slot_date,
    slots.c.start_time,
    slots.c.end_time,
    slots.c.is_booked,
)


class SqlAlchemySlotStore(SlotStore):
    """SlotStore implementation that supports both Postgres and SQLite."""

    def __init__(self, connection: Connection):
        self.connection = connection

    # --- writes ---

    def create(self, slot: SlotRecord) -> SlotRecord:
        stmt = slots.insert().values(
            id=slot.id,
            provider_id=slot.provider_id,
            slot_date=slot.slot_date,
            start_time=slot.start_time,
            end_time=slot.end_time,
            is_booked=slot.is_booked,
        )
        try:
            with _storage_errors():
                self.connection.execute(stmt)
        except IntegrityError as e:
            raise SlotTimeTakenError(
                slot.provider_id, slot.slot_date, slot.start_time
            ) from e
        return slot

    def update(self, slot_id: str, patch: SlotPatch) -> SlotRecord:
        if (current := self.get(slot_id)) is None:
            raise SlotNotFoundError(slot_id)

        values = {
            "start_time": resolve(
                patch.start_time, current.start_time, field="start_time"
            ),
            "end_time": resolve(patch.end_time, current.end_time, field="end_time"),
            "is_booked": resolve(
                patch.is_booked, current.is_booked, field="is_booked"
            ),
        }
        try:
            with _storage_errors():
                self.connection.execute(
                    update(slots).where(slots.c.id == slot_id).values(**values)
                )
        except IntegrityError as e:
            raise SlotTimeTakenError(
                current.provider_id, current.slot_date, values["start_time"]
            ) from e
        return SlotRecord(
            id=current.id,
            provider_id=current.provider_id,
            slot_date=current.slot_date,
            **values,
        )

    def delete(self, slot_id: str) -> None:
        with _storage_errors():
            result = self.connection.execute(delete(slots).where(slots.c.id == slot_id))
        if result.rowcount == 0:
            raise SlotNotFoundError(slot_id)

    def delete_range(self, provider_id: str, date_from: date, date_to: date) -> int:
        _check_range(date_from, date_to)
        with _storage_errors():
            result = self.connection.execute(
                delete(slots).where(
                    slots.c.provider_id == provider_id,
                    slots.c.slot_date >= date_from,
                    slots.c.slot_date <= date_to,
                )
            )
        return int(result.rowcount)

    # --- reads ---

    def get(self, slot_id: str) -> SlotRecord | None:
        stmt = select(*_SLOT_COLUMNS).where(slots.c.id == slot_id)
        with _storage_errors():
            row = self.connection.execute(stmt).fetchone()
        return _to_record(row) if row else None

    def list_by_date_range(
        self, provider_id: str, date_from: date, date_to: date
    ) -> Sequence[SlotRecord]:
        _check_range(date_from, date_to)
        stmt = (
            select(*_SLOT_COLUMNS)
            .where(
                slots.c.provider_id == provider_id,
                slots.c.slot_date >= date_from,
                slots.c.slot_date <= date_to,
            )
            .order_by(slots.c.slot_date, slots.c.start_time)
        )
        with _storage_errors():
            rows = self.connection.execute(stmt).fetchall()
        return [_to_record(row) for row in rows]


class SqlAlchemyWorkingDayStore(WorkingDayStore):
    """WorkingDayStore storing one row per provider-date."""

    def __init__(self, connection: Connection):
        self.connection = connection

    def get(self, provider_id: str) -> WorkingDayMap:
        table = working_days_table
        stmt = select(table.c.work_date, table.c.is_working).where(
            table.c.provider_id == provider_id
        )
        with _storage_errors():
            rows = self.connection.execute(stmt).fetchall()
        return {row.work_date: bool(row.is_working) for row in rows}

    def put(self, provider_id: str, working_days: WorkingDayMap) -> None:
        with _storage_errors():
            self.connection.execute(
                delete(working_days_table).where(
                    working_days_table.c.provider_id == provider_id
                )
            )
            if working_days:
                self.connection.execute(
                    working_days_table.insert(),
                    [
                        {
                            "provider_id": provider_id,
                            "work_date": day,
                            "is_working": bool(flag),
                        }
                        for day, flag in sorted(working_days.items())
                    ],
                )


class SqlAlchemyVisibility(ProviderVisibility):
    """ProviderVisibility implementation that supports both Postgres and SQLite."""

    def __init__(self, connection: Connection):
        self.connection = connection
        self.dialect = DialectName.of(connection)

    def get(self, provider_id: str) -> bool:
        stmt = select(providers.c.is_visible).where(
            providers.c.provider_id == provider_id
        )
        with _storage_errors():
            value = self.connection.execute(stmt).scalar_one_or_none()
        return True if value is None else bool(value)

    def set(self, provider_id: str, visible: bool) -> None:
        with _storage_errors():
            self.connection.execute(self._build_upsert(provider_id, bool(visible)))

    def _build_upsert(self, provider_id: str, visible: bool) -> Insert:
        insert = _UPSERT_INSERTS[self.dialect]
        stmt = insert(providers).values(provider_id=provider_id, is_visible=visible)
        return stmt.on_conflict_do_update(
            index_elements=[providers.c.provider_id],
            set_={"is_visible": stmt.excluded.is_visible},
        )
