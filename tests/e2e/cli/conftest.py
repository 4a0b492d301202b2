"""Fixtures for end-to-end CLI tests.

Provides a test-only `log-demo` Click command that emits log messages at
every level, fixtures to register it and to run inside an isolated
filesystem, and the environment a schedule command needs to reach a
migrated database.
"""

import logging
from datetime import UTC, datetime, timedelta

import click
import pytest
from click.testing import CliRunner

from slotkeeper.entrypoints.cli.main import slotkeeper

# pylint: disable=redefined-outer-name

PROVIDER = "p-cli"


@click.command()
def log_demo():
    """Emit representative log messages for CLI/flight-recorder tests.

    Emits DEBUG through CRITICAL on the 'slotkeeper.demo' logger, and
    DEBUG/INFO/WARNING on a 'some.thirdparty' logger to exercise per-logger
    levels and the flight recorder.
    """
    logger = logging.getLogger("slotkeeper.demo")
    logger.debug("This is a debug-level test message.")
    logger.info("This is an info-level test message.")
    logger.warning("This is a warning-level test message.")
    logger.error("This is an error-level test message.")
    logger.critical("This is a critical-level test message.")
    third_party_logger = logging.getLogger("some.thirdparty")
    third_party_logger.debug("This is a debug-level third-party test message.")
    third_party_logger.info("This is an info-level third-party test message.")
    third_party_logger.warning("This is a warning-level third-party test message.")
    logger.debug("This is a final debug-level test message.")


def _remove_command_everywhere(group, name: str) -> None:
    """Remove a command from a Click group and the sections Click-Extra keeps."""
    group.commands.pop(name, None)
    if hasattr(group, "_default_section"):
        group._default_section.commands.pop(name, None)  # pylint: disable=protected-access
    for sec in getattr(group, "_sections", []):
        getattr(sec, "commands", {}).pop(name, None)


@pytest.fixture
def registered_log_demo():
    """Register 'log-demo' on the top-level group for one test."""
    slotkeeper.add_command(log_demo, name="log-demo")
    try:
        yield
    finally:
        _remove_command_everywhere(slotkeeper, "log-demo")


@pytest.fixture
def runner():
    """Return a Click CliRunner for invoking CLI commands in tests."""
    return CliRunner()


@pytest.fixture
def fs(runner):
    """Confine filesystem side effects to a temporary working directory."""
    with runner.isolated_filesystem():
        yield


@pytest.fixture
def cli_env(sqlite_url):
    """Environment for schedule commands: migrated SQLite, UTC, one provider."""
    return {
        "SLOTKEEPER_DB_URL": sqlite_url,
        "SLOTKEEPER_PROVIDER": PROVIDER,
        "SLOTKEEPER_TIMEZONE": "UTC",
        "SLOTKEEPER_TOKEN": None,
    }


@pytest.fixture
def tomorrow():
    """Tomorrow in UTC, the zone `cli_env` runs the engine in."""
    return (datetime.now(UTC) + timedelta(days=1)).date()
