"""Alembic environment for PLAUDIT.

Policy defaults:
  - compare_type=True and compare_server_default=True for autogenerate
  - render_as_batch=True on SQLite (ALTER TABLE emulation)
  - URL precedence: `-x url=...` > config sqlalchemy.url > PLAUDIT_DB_URL
"""

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

# Import the tables so autogenerate sees them
import plaudit.adapters.persistence.schema  # noqa: F401 # pylint: disable=unused-import
from plaudit.adapters.db.metadata import metadata
from plaudit.config import DB_URL_ENV

# pylint: disable=no-member

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = metadata


def get_url() -> str:
    """Resolve DB URL with precedence: `-x url` > config > env."""

    xargs = context.get_x_argument(as_dictionary=True)
    url = xargs.get("url")

    if not url:
        url = config.get_main_option("sqlalchemy.url")

    if not url or "%(" in url:  # placeholder counts as unset # pylint: disable=R2004
        url = os.environ.get(DB_URL_ENV)

    if not url:
        raise RuntimeError(f"Set {DB_URL_ENV} to your database URL.")
    return url


def run_migrations_offline() -> None:
    """Emit the migration SQL to the script output without connecting."""
    context.configure(
        url=get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        compare_server_default=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations against a live connection."""
    connectable = engine_from_config(
        {"sqlalchemy.url": get_url()},
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        is_sqlite = connection.dialect.name == "sqlite"  # pylint: disable=R2004
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            compare_server_default=True,
            render_as_batch=is_sqlite,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
