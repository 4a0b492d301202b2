"""The two database backends SLOTKEEPER runs on.

Only the provider-visibility upsert and the SQLite-specific migration and
timestamp handling need to know which one they are talking to.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Dialect, Engine


class UnsupportedDialect(Exception):
    """The database is neither PostgreSQL nor SQLite."""


class DialectName(str, Enum):
    """Backend names as SQLAlchemy reports them in ``dialect.name``."""

    POSTGRES = "postgresql"
    SQLITE = "sqlite"

    @classmethod
    def from_string(cls, dialect_str: str) -> DialectName:
        """Map ``postgres``, ``postgresql+psycopg``, ``sqlite+pysqlite``... to a member.

        Raises:
            UnsupportedDialect: For any other backend.
        """
        base = (dialect_str or "").strip().lower().partition("+")[0]
        match base:
            case "postgres" | "postgresql" | "pg":
                return cls.POSTGRES
            case "sqlite":
                return cls.SQLITE
        raise UnsupportedDialect(f"Unsupported dialect: {dialect_str!r}")

    @classmethod
    def of(cls, bind: Engine | Connection | Dialect) -> DialectName:
        """The backend behind an engine, a connection or a dialect object.

        Raises:
            UnsupportedDialect: If ``bind`` exposes no dialect name, or an
                unsupported one.
        """
        dialect = getattr(bind, "dialect", bind)
        if not isinstance(name := getattr(dialect, "name", None), str):
            raise UnsupportedDialect(
                f"{type(bind).__name__} does not expose a dialect name"
            )
        return cls.from_string(name)
