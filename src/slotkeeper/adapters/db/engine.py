"""Engine factory shared by the CLI, bootstrap, migrations and tests.

SQLite connections get a fixed set of PRAGMAs on connect. The facade runs
store calls in worker threads, so a file database is opened in WAL mode and
waits on a busy lock instead of failing straight away. Other backends are
used as configured by their URL.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL, make_url

from .dialects import DialectName

if TYPE_CHECKING:
    from sqlite3 import Connection as SQLiteConnection

    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

SQLITE_PRAGMAS = (
    "foreign_keys=ON",
    "journal_mode=WAL",
    "synchronous=NORMAL",
    "temp_store=MEMORY",
    "busy_timeout=5000",
)


def is_sqlite(url: str | URL) -> bool:
    """True for any ``sqlite`` URL, whatever the driver."""
    return make_url(str(url)).get_backend_name() == DialectName.SQLITE.value


def _apply_sqlite_pragmas(dbapi_conn: SQLiteConnection, _conn_record) -> None:
    cur = dbapi_conn.cursor()
    try:
        for pragma in SQLITE_PRAGMAS:
            cur.execute(f"PRAGMA {pragma};")
    finally:
        cur.close()


def make_engine(url: str | URL, *, echo: bool = False) -> Engine:
    """Create an Engine for ``url``; SQLite engines get `SQLITE_PRAGMAS`.

    Args:
        url: Database connection URL (str or :class:`URL`).
        echo: If True, log SQL statements.
    """
    engine = create_engine(url, echo=echo)
    logger.debug("Created engine for %s", make_url(str(url)).render_as_string())
    if is_sqlite(url):
        event.listen(engine, "connect", _apply_sqlite_pragmas)
    return engine
