"""Alembic environment for the agriprice schema."""

from __future__ import annotations

import logging
from logging.config import fileConfig
from pathlib import Path

from alembic import context
from agriprice.adapters.sqlalchemy.mappings import mapper_registry, start_mappers
from agriprice.adapters.sqlalchemy.unit_of_work import create_database_engine
from agriprice.config import get_database_config

config = context.config

_config_path = Path(config.config_file_name) if config.config_file_name else None
if _config_path is not None and _config_path.suffix == ".ini" and _config_path.exists():
    fileConfig(config.config_file_name)
elif not logging.getLogger().handlers:
    logging.basicConfig(level=logging.INFO)

log = logging.getLogger("alembic.env")

start_mappers()

target_metadata = mapper_registry.metadata


def _configure(**kwargs: object) -> None:
    context.configure(
        target_metadata=target_metadata,
        render_as_batch=True,
        compare_type=True,
        compare_server_default=True,
        **kwargs,
    )


def run_migrations_offline() -> None:
    """Emit migration SQL without a live database."""

    url = config.get_main_option("sqlalchemy.url") or get_database_config().uri
    _configure(url=url, literal_binds=True)

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations against a borrowed connection or a short-lived engine."""

    existing_connection = config.attributes.get("connection")
    if existing_connection is not None:
        _configure(connection=existing_connection)
        with context.begin_transaction():
            context.run_migrations()
        return

    url = config.get_main_option("sqlalchemy.url") or get_database_config().uri
    engine = create_database_engine(url)
    try:
        with engine.connect() as connection:
            _configure(connection=connection)
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
