"""Alembic environment for the dead-letter database.

The URL comes from, in order: ``alembic -x url=...``, ``sqlalchemy.url`` in
the Alembic config (as set by `cdcroute.config.build_alembic_config`), then
``CDCROUTE_DB_URL``. Autogenerate compares column types and server defaults;
on SQLite, ALTERs are rendered in batch mode.
"""

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool

import cdcroute.adapters.dead_letter.schema  # noqa: F401 # pylint: disable=unused-import
from cdcroute.infrastructure.db.columns import metadata
from cdcroute.infrastructure.db.engine import is_sqlite, make_engine

# pylint: disable=no-member

alembic_config = context.config

if alembic_config.config_file_name is not None:
    fileConfig(alembic_config.config_file_name)

COMPARE_OPTIONS = {"compare_type": True, "compare_server_default": True}


def database_url() -> str:
    """Return the first URL configured, ignoring unexpanded ``%(...)`` placeholders."""
    candidates = (
        context.get_x_argument(as_dictionary=True).get("url"),
        alembic_config.get_main_option("sqlalchemy.url"),
        os.environ.get("CDCROUTE_DB_URL"),
    )
    for url in candidates:
        if url and "%(" not in url:
            return url
    raise RuntimeError("No database URL: set CDCROUTE_DB_URL or pass -x url=...")


def run_offline(url: str) -> None:
    """Write the migration SQL instead of executing it."""
    context.configure(
        url=url,
        target_metadata=metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=is_sqlite(url),
        **COMPARE_OPTIONS,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_online(url: str) -> None:
    """Execute the migrations over a single, unpooled connection."""
    engine = make_engine(url, poolclass=pool.NullPool)
    with engine.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=metadata,
            render_as_batch=is_sqlite(url),
            **COMPARE_OPTIONS,
        )
        with context.begin_transaction():
            context.run_migrations()
    engine.dispose()


if context.is_offline_mode():
    run_offline(database_url())
else:
    run_online(database_url())
