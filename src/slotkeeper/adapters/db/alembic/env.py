"""Alembic environment for the SLOTKEEPER availability schema.

The database URL is taken from ``-x url=...``, then from the config's
``sqlalchemy.url`` (what `slotkeeper.config.build_alembic_config` sets), then
from ``SLOTKEEPER_DB_URL``. Type and server-default drift are compared on
autogenerate; SQLite runs in batch mode so ALTER TABLE can be emulated.
"""

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

# registers slots, working_days and providers on the shared metadata
import slotkeeper.adapters.db.schema  # noqa: F401 # pylint: disable=unused-import
from slotkeeper.adapters.db.dialects import DialectName
from slotkeeper.adapters.db.metadata import metadata
from slotkeeper.config import DB_URL_ENV, DatabaseUrlNotSetError

# pylint: disable=no-member

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

COMPARE_OPTIONS = {
    "target_metadata": metadata,
    "compare_type": True,
    "compare_server_default": True,
}


def database_url() -> str:
    """The URL to migrate.

    Raises:
        DatabaseUrlNotSetError: If no source provides one.
    """
    candidates = (
        context.get_x_argument(as_dictionary=True).get("url"),
        config.get_main_option("sqlalchemy.url"),
        os.environ.get(DB_URL_ENV),
    )
    for url in candidates:
        # an uninterpolated "%(...)s" placeholder counts as unset
        if url and "%(" not in url:
            return url
    raise DatabaseUrlNotSetError


def run_migrations_offline() -> None:
    """Emit the migration SQL without connecting."""
    context.configure(
        url=database_url(),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **COMPARE_OPTIONS,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply the migrations over a short-lived, unpooled connection."""
    connectable = engine_from_config(
        {"sqlalchemy.url": database_url()},
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            render_as_batch=DialectName.of(connection) is DialectName.SQLITE,
            **COMPARE_OPTIONS,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
