"""Logging setup for the SLOTKEEPER command line.

Two handlers hang off the root logger when the CLI runs:

- a Rich console handler on stderr, whose verbosity follows ``-v/-q`` and
  ``--debug``; third-party records carry a short ``[library]`` prefix;
- an optional in-memory flight recorder that buffers records and dumps them
  to a file once something at WARNING or above is logged.

Library code never configures logging; it only calls
``logging.getLogger(__name__)``.
"""

from __future__ import annotations

import logging
import os
import platform
import sys
from logging.handlers import MemoryHandler
from pathlib import Path
from typing import TYPE_CHECKING, Literal

import alembic
import sqlalchemy
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from collections.abc import Iterator
    from logging import Logger

    from slotkeeper.config import EngineSettings

PROJECT_PREFIX = "slotkeeper"

CONSOLE_FORMAT = "%(prefix)s %(message)s"
DEBUG_CONSOLE_FORMAT = "%(asctime)s %(name)s: %(message)s"
RECORDER_FORMAT = (
    "[%(asctime)s] [%(process)d:%(threadName)s] %(levelname)s "
    "%(name)s:%(lineno)d: %(message)s"
)

type ColorSystem = Literal["auto", "standard", "256", "truecolor", "windows"]


class ThirdPartyPrefixFilter(logging.Filter):  # pylint: disable=too-few-public-methods
    """Set ``record.prefix`` to ``[package]`` for other libraries' records.

    SLOTKEEPER's own records get an empty prefix. Nothing is filtered out.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        package = record.name.partition(".")[0]
        record.prefix = "" if package == PROJECT_PREFIX else f"[{package}]"
        return True


def config_console_handler(
    level: int = logging.INFO, debug_mode: bool = False, color: bool = True
) -> RichHandler:
    """Build the stderr console handler.

    In debug mode the level is forced to DEBUG and records show a timestamp,
    the logger name and a link to the source line. ``color`` mirrors
    click-extra's ``--color/--no-color``.
    """
    color_system: ColorSystem | None = "auto" if color else None
    handler = RichHandler(
        level=logging.DEBUG if debug_mode else level,
        console=Console(color_system=color_system, stderr=True),
        rich_tracebacks=True,
        show_time=False,
        show_path=debug_mode,
        enable_link_path=debug_mode,
    )
    if debug_mode:
        handler.setFormatter(logging.Formatter(DEBUG_CONSOLE_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        handler.addFilter(ThirdPartyPrefixFilter())
    return handler


def config_flight_recorder(
    path: Path,
    capacity: int = 2000,
    flush_level: int = logging.WARNING,
    flush_on_close: bool = False,
) -> MemoryHandler:
    """Build a buffer of the last ``capacity`` records that spills into ``path``.

    The file is truncated when the recorder is built and written whenever a
    record at ``flush_level`` or above arrives (and on close when
    ``flush_on_close`` is set). Every level is kept; per-logger levels still
    apply upstream.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    sink = logging.FileHandler(path, mode="w", encoding="utf-8")
    sink.setLevel(logging.DEBUG)
    sink.setFormatter(logging.Formatter(RECORDER_FORMAT))
    return MemoryHandler(
        capacity=capacity,
        flushLevel=flush_level,
        target=sink,
        flushOnClose=flush_on_close,
    )


def _environment(handlers: list[logging.Handler]) -> Iterator[tuple[str, object]]:
    yield "Python", sys.version.split()[0]
    yield "Platform", f"{platform.system()} {platform.release()}"
    yield "PID", os.getpid()
    yield "CWD", Path.cwd()
    yield "Alembic", alembic.__version__
    yield "SQLAlchemy", sqlalchemy.__version__
    yield "Handlers", [type(h).__name__ for h in handlers]


def log_startup(  # pylint: disable=too-many-arguments
    logger: Logger,
    *,
    app_version: str,
    level: int,
    handlers: list[logging.Handler],
    log_path: Path | None,
    flight_recorder: bool,
    flight_capacity: int | None,
    force_flush_fr: bool,
    logger_levels: dict[str, int],
    settings: EngineSettings | None = None,
) -> None:
    """Log a one-line INFO summary, then DEBUG diagnostics.

    The diagnostics list interpreter, platform and library versions, the
    active handlers, the flight recorder setup, per-logger levels and, when
    given, the engine settings with the DB password masked.
    """
    logger.info(
        "SLOTKEEPER %s: console=%s, flight-recorder=%s",
        app_version,
        logging.getLevelName(level),
        "ON" if flight_recorder else "OFF",
    )
    for label, value in _environment(handlers):
        logger.debug("%s: %s", label, value)

    if flight_recorder:
        logger.debug(
            "Flight recorder: path=%s, capacity=%s, flush_on_close=%s",
            log_path or "<none>",
            flight_capacity,
            force_flush_fr,
        )
    if logger_levels:
        logger.debug(
            "Per-logger overrides: %s",
            {name: logging.getLevelName(lvl) for name, lvl in logger_levels.items()},
        )
    if settings is not None:
        logger.debug(
            "Engine settings: db=%s, timezone=%s, poll_interval=%ss",
            settings.masked_db_url or "<memory>",
            settings.timezone,
            settings.poll_interval,
        )
