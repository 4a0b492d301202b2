"""Column types the SQLAlchemy schema needs beyond the built-in ones."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy.types import DateTime, TypeDecorator

from .dialects import DialectName

if TYPE_CHECKING:
    from sqlalchemy.engine.interfaces import Dialect

__all__ = ["UTCDateTime"]


def _as_utc(value: datetime) -> datetime:
    """Attach UTC to naive values; convert aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class UTCDateTime(TypeDecorator[datetime]):  # pylint: disable=too-many-ancestors
    """Audit timestamp that always comes back as an aware UTC ``datetime``.

    Only ``slots.created_at`` uses it. Slot dates and start/end times are the
    provider's wall-clock values and live in plain DATE/TIME columns.

    SQLite has no time zone support, so values go in as naive UTC there;
    PostgreSQL gets the aware value for its ``timestamptz`` column.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> Any:
        if value is None:
            return None
        value = _as_utc(value)
        if DialectName.of(dialect) is DialectName.SQLITE:
            return value.replace(tzinfo=None)
        return value

    def process_result_value(self, value: Any, dialect: Dialect) -> datetime | None:
        if value is None:
            return None
        if not isinstance(value, datetime):
            # server-side CURRENT_TIMESTAMP defaults come back as text on SQLite
            value = datetime.fromisoformat(str(value))
        return _as_utc(value)

    def process_literal_param(self, value: datetime | None, dialect: Dialect) -> Any:
        return self.process_bind_param(value, dialect)

    @property
    def python_type(self) -> type[datetime]:
        return datetime
