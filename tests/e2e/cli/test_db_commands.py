"""End-to-end tests for ``slotkeeper db``."""

import pytest
from sqlalchemy import inspect

from slotkeeper.adapters.db.engine import make_engine
from slotkeeper.entrypoints.cli.db import (
    CANNOT_CONNECT_MSG,
    INVALID_URL_FORMAT_MSG,
    MISSING_DB_URL_MSG,
    UPGRADE_SCHEMA_INSTRUCTIONS,
)
from slotkeeper.entrypoints.cli.main import slotkeeper

# pylint: disable=redefined-outer-name

HEAD = "3f6c2a9d41b7"
QUIET = ["--no-flight-recorder"]


@pytest.fixture
def fresh_url(tmp_path):
    """URL of a SQLite file that has never been migrated."""
    return f"sqlite+pysqlite:///{tmp_path / 'fresh.db'}"


def db(runner, *args, url=None, **kwargs):
    return runner.invoke(
        slotkeeper, [*QUIET, "db", *args], env={"SLOTKEEPER_DB_URL": url}, **kwargs
    )


class TestStatus:
    @staticmethod
    def test_up_to_date(runner, sqlite_url):
        result = db(runner, "status", url=sqlite_url)
        assert result.exit_code == 0
        assert "Database reachable" in result.output
        assert "Backend : sqlite" in result.output
        assert f"Schema  : {HEAD} (up to date)" in result.output
        assert UPGRADE_SCHEMA_INSTRUCTIONS not in result.output

    @staticmethod
    def test_uninitialized_suggests_upgrade(runner, fresh_url):
        result = db(runner, "status", url=fresh_url)
        assert result.exit_code == 0
        assert "Schema  : uninitialized" in result.output
        assert UPGRADE_SCHEMA_INSTRUCTIONS in result.output

    @staticmethod
    def test_missing_url_exits_nonzero(runner):
        result = db(runner, "status")
        assert result.exit_code == 1
        assert "Cannot connect to database" in result.output
        assert MISSING_DB_URL_MSG in result.output


class TestUpgrade:
    @staticmethod
    def test_force_migrates_to_head(runner, fresh_url):
        result = db(runner, "upgrade", "--force", url=fresh_url)
        assert result.exit_code == 0, result.output
        assert "Upgrade complete!" in result.output

        engine = make_engine(fresh_url)
        try:
            tables = set(inspect(engine).get_table_names())
        finally:
            engine.dispose()
        assert {"slots", "working_days", "providers"} <= tables
        assert f"{HEAD} (up to date)" in db(runner, "status", url=fresh_url).output

    @staticmethod
    def test_declining_the_prompt_aborts(runner, fresh_url):
        result = db(runner, "upgrade", url=fresh_url, input="n\n")
        assert result.exit_code == 1
        assert "Aborted" in result.output
        assert "Upgrade complete!" not in result.output

    @staticmethod
    def test_invalid_url(runner):
        result = db(runner, "upgrade", "--force", url="definitely not a url")
        assert result.exit_code == 1
        assert INVALID_URL_FORMAT_MSG in result.output

    @staticmethod
    def test_unreachable_database(runner, tmp_path):
        missing_dir = tmp_path / "nope" / "x.db"
        result = db(runner, "upgrade", "--force", url=f"sqlite:///{missing_dir}")
        assert result.exit_code == 1
        assert CANNOT_CONNECT_MSG in result.output


def test_heads_needs_no_database(runner):
    result = db(runner, "heads")
    assert result.exit_code == 0
    assert HEAD in result.output


def test_current_reports_head(runner, sqlite_url):
    result = db(runner, "current", url=sqlite_url)
    assert result.exit_code == 0
    assert HEAD in result.output
