"""Unit of Work implementations.

- `SqlAlchemyUnitOfWork`: one SQLAlchemy Connection/transaction per unit,
  shared by the SQL slot, working-day and visibility stores. The connection
  belongs to the entering thread, so one instance serves every worker thread.
- `InMemoryUnitOfWork`: holds the `InMemoryDatabase` lock for its lifetime and
  restores a snapshot on rollback, giving the same all-or-nothing behavior.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from slotkeeper.adapters.in_memory_adapters import (
    InMemoryDatabase,
    InMemorySlotStore,
    InMemoryVisibility,
    InMemoryWorkingDayStore,
)
from slotkeeper.adapters.sqlalchemy_adapters import (
    SqlAlchemySlotStore,
    SqlAlchemyVisibility,
    SqlAlchemyWorkingDayStore,
)
from slotkeeper.interfaces.unit_of_work import AbstractUnitOfWork

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine

    from slotkeeper.adapters.in_memory_adapters.database import Snapshot


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    """SQLAlchemy-backed Unit of Work.

    The connection and the stores bound to it live in thread-local state:
    two threads inside the same instance each run their own transaction.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self._local = threading.local()

    @property
    def connection(self) -> Connection:
        return self._local.connection

    @property
    def slots(self) -> SqlAlchemySlotStore:
        return self._local.slots

    @property
    def working_days(self) -> SqlAlchemyWorkingDayStore:
        return self._local.working_days

    @property
    def visibility(self) -> SqlAlchemyVisibility:
        return self._local.visibility

    def __enter__(self):
        connection = self.engine.connect()
        self._local.connection = connection
        self._local.slots = SqlAlchemySlotStore(connection)
        self._local.working_days = SqlAlchemyWorkingDayStore(connection)
        self._local.visibility = SqlAlchemyVisibility(connection)
        return super().__enter__()

    def __exit__(self, *args):
        try:
            super().__exit__(*args)
        finally:
            self.connection.close()
            self._local.__dict__.clear()

    def commit(self):
        self.connection.commit()

    def rollback(self):
        self.connection.rollback()


class InMemoryUnitOfWork(AbstractUnitOfWork):
    """Snapshot-based Unit of Work over an `InMemoryDatabase`.

    Units are serialized: entering one blocks until any other unit on the
    same database has exited.
    """

    def __init__(self, database: InMemoryDatabase | None = None):
        self.database = database or InMemoryDatabase()
        self.slots = InMemorySlotStore(self.database)
        self.working_days = InMemoryWorkingDayStore(self.database)
        self.visibility = InMemoryVisibility(self.database)
        self._snapshot: Snapshot | None = None

    def __enter__(self):
        self.database.lock.acquire()
        self._snapshot = self.database.snapshot()
        return super().__enter__()

    def __exit__(self, *args):
        try:
            super().__exit__(*args)
        finally:
            self._snapshot = None
            self.database.lock.release()

    def commit(self):
        self._snapshot = self.database.snapshot()

    def rollback(self):
        if self._snapshot is not None:
            self.database.restore(self._snapshot)
