"""Transaction boundary around the three availability stores.

A handler enters the unit of work, reads and writes through ``slots``,
``working_days`` and ``visibility``, and calls `commit()`. Leaving the block
without committing rolls everything back, so a quick setup that fails on its
tenth insert leaves no trace of the first nine.
"""

from __future__ import annotations

import abc

from .slot_store import SlotStore
from .visibility import ProviderVisibility
from .working_days import WorkingDayStore


class AbstractUnitOfWork(abc.ABC):
    """All-or-nothing access to one provider's availability data."""

    slots: SlotStore
    working_days: WorkingDayStore
    visibility: ProviderVisibility

    def __enter__(self) -> AbstractUnitOfWork:
        """Open the transaction; the stores are usable until exit."""
        return self

    def __exit__(self, *args):
        """Roll back whatever was not committed."""
        self.rollback()

    @abc.abstractmethod
    def commit(self):
        """Make every write since entering durable and visible."""

    @abc.abstractmethod
    def rollback(self):
        """Discard uncommitted writes; a no-op right after `commit()`."""
