"""SLOTKEEPER CLI entry point.

Defines the top-level ``slotkeeper`` command (via Click-Extra) and registers
its subcommand groups:

- ``slotkeeper db``: database management (upgrade/current/heads/history/status).
- ``slotkeeper schedule``: a provider's calendar (show/add/edit/delete/toggle/
  setup/clear/visibility).

The version is sourced from `slotkeeper.__version__` and displayed by
Click-Extra (``--version``).

Examples
    $ slotkeeper --version
    $ slotkeeper db upgrade
    $ slotkeeper -v schedule --provider p-1 show
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import click
import click_extra as clickx
from platformdirs import user_log_dir

from slotkeeper import __version__
from slotkeeper.config import ConfigurationError, EngineSettings
from slotkeeper.logging import (
    config_console_handler,
    config_flight_recorder,
    log_startup,
)

from .db import db as db_group
from .helpers import hyperlink
from .helpers.log_level_parser import parse_log_level
from .schedule import schedule as schedule_group

if TYPE_CHECKING:
    from logging import Handler

logger = logging.getLogger(__name__)


HELP = """SLOTKEEPER command-line interface.

    SLOTKEEPER manages a service provider's availability: which days they work,
    which time slots customers can book on those days, and whether customers can
    find them at all. Bulk setup, single-slot edits and external bookings are
    reconciled against one authoritative store.
    """


EPILOG = "\b\n" + "\n".join(
    [
        f"{click.style('See Also:', fg='blue', bold=True, underline=True)}",
        "  Alembic   : " + hyperlink("https://alembic.sqlalchemy.org/"),
        "  DB URLs   : "
        + hyperlink("https://docs.sqlalchemy.org/en/20/core/engines.html"),
    ]
)


def _settings_or_none() -> EngineSettings | None:
    try:
        return EngineSettings.from_env()
    except ConfigurationError as e:
        logger.warning("Ignoring invalid configuration: %s", e)
        return None


@clickx.extra_group(
    version=__version__,
    help=HELP,
    params=[
        clickx.ColorOption(show_envvar=True),
        clickx.TimerOption(show_envvar=True),
        clickx.ExtraVersionOption(),
    ],
    epilog=EPILOG,
)
@click.option(
    "--verbose",
    "-v",
    "verbose_count",
    count=True,
    help=(
        "Increase the default WARNING verbosity by one level "
        "for each additional repetition of the option."
    ),
    default=0,
)
@click.option(
    "--quiet",
    "-q",
    "quiet_count",
    count=True,
    help=(
        "Decrease the default WARNING verbosity by one level "
        "for each additional repetition of the option."
    ),
    default=0,
)
@click.option(
    "--debug/--no-debug",
    is_flag=True,
    help="Enable debug mode (timestamps, logger names and source paths).",
    default=False,
)
@click.option(
    "--log-path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to log file (overrides default flight recorder path).",
    default=Path(user_log_dir("slotkeeper", appauthor=False, ensure_exists=True))
    / "latest.log",
    envvar="SLOTKEEPER_LOG_PATH",
    show_default=True,
    show_envvar=True,
)
@click.option(
    "--flight-recorder-capacity",
    type=int,
    default=2000,
    hidden=True,
    envvar="SLOTKEEPER_FLIGHT_RECORDER_CAPACITY",
    show_envvar=True,
    help="Capacity of the flight recorder (in number of log records).",
)
@click.option(
    "--flight-recorder/--no-flight-recorder",
    "flight_recorder",
    is_flag=True,
    help=(
        "Keep the last N log records in memory at DEBUG granularity "
        "(unaffected by -v/-q) and write them to --log-path when a WARNING/ERROR "
        "occurs, or on exit if --force-flush is set."
    ),
    default=True,
    envvar="SLOTKEEPER_FLIGHT_RECORDER",
    show_envvar=True,
)
@click.option(
    "--force-flush/--no-force-flush",
    "force_flush_flight_recorder",
    is_flag=True,
    help="Write the flight recorder buffer to --log-path on exit.",
    default=False,
    show_default=True,
    envvar="SLOTKEEPER_FORCE_FLUSH_FLIGHT_RECORDER",
    show_envvar=True,
)
@click.option(
    "-L",
    "--logger-level",
    "logger_levels",
    multiple=True,
    callback=parse_log_level,
    help=(
        "Set MINIMUM LEVEL for specific LOGGERS (NAME=LEVEL). Applies to both "
        "console and flight recorder. Repeatable (e.g. -L sqlalchemy=INFO "
        "-L slotkeeper.service_layer.sync=DEBUG) or via SLOTKEEPER_LOGGER_LEVEL."
    ),
    default=("sqlalchemy=WARNING", "alembic=WARNING"),
    show_default=True,
    envvar="SLOTKEEPER_LOGGER_LEVEL",
    show_envvar=True,
)
@clickx.pass_context
def slotkeeper(  # pylint: disable=too-many-arguments, too-many-positional-arguments
    ctx: click.Context,
    verbose_count: int,
    quiet_count: int,
    debug: bool,
    log_path: Path,
    flight_recorder_capacity: int,
    flight_recorder: bool,
    force_flush_flight_recorder: bool,
    logger_levels: dict[str, int],
) -> None:
    """SLOTKEEPER command-line interface."""

    # 0) compute effective verbosity
    level = logging.WARNING - (10 * verbose_count) + (10 * quiet_count)
    level = max(logging.DEBUG, min(logging.CRITICAL, level))

    handlers: list[Handler] = []

    # 1) console
    use_color = ctx.color is not False  # None or True => allow color
    handlers.append(
        config_console_handler(level=level, debug_mode=debug, color=use_color)
    )

    # 2) flight recorder
    if flight_recorder:
        handlers.append(
            config_flight_recorder(
                path=log_path,
                capacity=flight_recorder_capacity,
                flush_on_close=force_flush_flight_recorder,
            )
        )

    # 3) root logger; handlers filter
    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)

    # 4) per-logger levels
    for name, lvl in logger_levels.items():
        logging.getLogger(name).setLevel(lvl)

    # 5) startup summary
    log_startup(
        logger,
        app_version=__version__,
        level=level,
        handlers=handlers,
        log_path=log_path,
        flight_recorder=flight_recorder,
        flight_capacity=flight_recorder_capacity if flight_recorder else None,
        force_flush_fr=force_flush_flight_recorder,
        logger_levels=logger_levels,
        settings=_settings_or_none(),
    )

    ctx.call_on_close(logging.shutdown)


slotkeeper.add_command(db_group)
slotkeeper.add_command(schedule_group)
