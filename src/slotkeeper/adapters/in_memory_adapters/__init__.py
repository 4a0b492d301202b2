"""In-memory adapters for the slot, working-day and visibility ports.

All state lives in an `InMemoryDatabase` and is lost when the instance is
discarded. Use for unit tests, demos, or scenarios where durability is not
required. These adapters pass the same contract tests as the SQLAlchemy ones.
"""

from .database import InMemoryDatabase
from .stores import InMemorySlotStore, InMemoryVisibility, InMemoryWorkingDayStore

__all__ = [
    "InMemoryDatabase",
    "InMemorySlotStore",
    "InMemoryVisibility",
    "InMemoryWorkingDayStore",
]
