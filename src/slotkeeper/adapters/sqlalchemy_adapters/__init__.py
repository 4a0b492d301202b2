"""SQLAlchemy adapters for the slot, working-day and visibility ports.

Durable storage on any SQLAlchemy-supported backend that the migrations
target (SQLite and PostgreSQL). All stores run on the connection owned by
`SqlAlchemyUnitOfWork`.
"""

from .stores import SqlAlchemySlotStore, SqlAlchemyVisibility, SqlAlchemyWorkingDayStore

__all__ = [
    "SqlAlchemySlotStore",
    "SqlAlchemyVisibility",
    "SqlAlchemyWorkingDayStore",
]
