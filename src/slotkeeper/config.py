"""Configuration for SLOTKEEPER.

Settings come from the environment:

- ``SLOTKEEPER_DB_URL``: SQLAlchemy URL of the availability database. When
  unset, callers that can run without durability fall back to the in-memory
  adapters; callers that need a database raise `DatabaseUrlNotSetError`.
- ``SLOTKEEPER_TIMEZONE``: IANA zone used for the provider-local calendar
  (default ``UTC``).
- ``SLOTKEEPER_POLL_INTERVAL``: seconds between background refreshes
  (default 5).
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from importlib.resources import files
from typing import TextIO
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from alembic.config import Config
from sqlalchemy.engine import make_url

DB_URL_ENV = "SLOTKEEPER_DB_URL"  # pragma: no mutate
TIMEZONE_ENV = "SLOTKEEPER_TIMEZONE"  # pragma: no mutate
POLL_INTERVAL_ENV = "SLOTKEEPER_POLL_INTERVAL"  # pragma: no mutate

DEFAULT_TIMEZONE = "UTC"
DEFAULT_POLL_INTERVAL = 5.0

ALEMBIC_URL_KEY = "sqlalchemy.url"  # pragma: no mutate
ALEMBIC_SCRIPT_LOCATION_KEY = "script_location"  # pragma: no mutate


class ConfigurationError(Exception):
    """Raised when an environment setting is present but unusable."""


class DatabaseUrlNotSetError(ConfigurationError):
    """Raised when SLOTKEEPER_DB_URL is required but not set."""

    def __init__(self) -> None:
        super().__init__(f"Set {DB_URL_ENV} to your database URL.")


def get_db_url() -> str:
    """Get the database URL from the environment.

    Raises:
        DatabaseUrlNotSetError: If ``SLOTKEEPER_DB_URL`` is not set.
    """
    if not (url := os.environ.get(DB_URL_ENV)):
        raise DatabaseUrlNotSetError
    return url


def _parse_timezone(raw: str) -> str:
    try:
        ZoneInfo(raw)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigurationError(f"{TIMEZONE_ENV}: unknown timezone {raw!r}") from e
    return raw


def _parse_poll_interval(raw: str) -> float:
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{POLL_INTERVAL_ENV}: not a number: {raw!r}") from e
    if value <= 0:
        raise ConfigurationError(f"{POLL_INTERVAL_ENV}: must be > 0, got {value}")
    return value


@dataclass(frozen=True, slots=True)
class EngineSettings:
    """Resolved runtime settings for the availability engine."""

    db_url: str | None = None
    timezone: str = DEFAULT_TIMEZONE
    poll_interval: float = DEFAULT_POLL_INTERVAL

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> EngineSettings:
        """Read settings from ``environ`` (defaults to ``os.environ``).

        Raises:
            ConfigurationError: If the timezone or poll interval is invalid.
        """
        env = os.environ if environ is None else environ
        return cls(
            db_url=env.get(DB_URL_ENV) or None,
            timezone=_parse_timezone(env.get(TIMEZONE_ENV) or DEFAULT_TIMEZONE),
            poll_interval=_parse_poll_interval(
                env.get(POLL_INTERVAL_ENV) or str(DEFAULT_POLL_INTERVAL)
            ),
        )

    @property
    def masked_db_url(self) -> str | None:
        """The DB URL with any password replaced by ``***``."""
        if self.db_url is None:
            return None
        return make_url(self.db_url).render_as_string(hide_password=True)

    def require_db_url(self) -> str:
        """Return the DB URL or raise `DatabaseUrlNotSetError`."""
        if not self.db_url:
            raise DatabaseUrlNotSetError
        return self.db_url


def build_alembic_config(
    db_url: str | None = None, stdout: TextIO = sys.stdout
) -> Config:
    """Build an Alembic `Config` pointing at SLOTKEEPER's packaged migrations.

    Args:
        db_url: SQLAlchemy database URL. May be None only where Alembic will
            not connect (e.g., ``heads``/``history``).
        stdout: Stream Alembic writes status lines to; override in tests.

    Returns:
        An `alembic.config.Config` with ``sqlalchemy.url`` (when given) and
        ``script_location`` set.
    """
    cfg = Config(stdout=stdout)
    if db_url is not None:
        cfg.set_main_option(ALEMBIC_URL_KEY, db_url)
    cfg.set_main_option(
        ALEMBIC_SCRIPT_LOCATION_KEY,
        str(files("slotkeeper.adapters.db.alembic")),
    )
    return cfg
