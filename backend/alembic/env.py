"""Migration environment for the health tracker schema.

The target metadata covers users, alerts and diagnostic_tests. The URL comes
from ``Settings.DATABASE_URL`` so migrations hit the same database the API
serves from.
"""
from logging.config import fileConfig
from sqlalchemy import engine_from_config, pool
from alembic import context

# backend/ on the path so health_tracker imports without an install
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from health_tracker.config import settings
from health_tracker.database import Base, UTCDateTime

# Model modules register their tables on Base.metadata when imported
from health_tracker.models import user, alert, diagnostic_test  # noqa: F401

config = context.config
config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def render_item(type_, obj, autogen_context):
    """Write UTC timestamp columns as plain ``sa.DateTime(timezone=True)``.

    Conversion to aware datetimes happens when rows are loaded, so revision
    files do not need to import the application package.
    """
    if type_ == "type" and isinstance(obj, UTCDateTime):
        return "sa.DateTime(timezone=True)"
    return False


def _configure_kwargs(url: str) -> dict:
    # SQLite can only ALTER through table copies.
    return {
        "target_metadata": target_metadata,
        "render_item": render_item,
        "compare_type": True,
        "render_as_batch": url.startswith("sqlite"),
    }


def run_migrations_offline() -> None:
    """Emit SQL for the users/alerts/diagnostic_tests schema without connecting."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_kwargs(url),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations against the configured database."""
    url = config.get_main_option("sqlalchemy.url")
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(connection=connection, **_configure_kwargs(url))
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
