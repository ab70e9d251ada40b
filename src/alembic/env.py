"""Alembic environment for the EventGate ``public`` schema.

Migrations run synchronously through psycopg2; the application URL is the
asyncpg one with the driver suffix dropped.
"""

import os
from logging.config import fileConfig
from typing import Any

from sqlalchemy import create_engine, pool, text
from sqlmodel import SQLModel

from alembic import context
from src.eventgate.core.config import get_settings

# Registers every table on SQLModel.metadata
from src.eventgate.models import Event, Registration, Tenant, TenantAdmin, User  # noqa: F401

config = context.config

if config.config_file_name is not None and os.path.exists(config.config_file_name):
    fileConfig(config.config_file_name)

target_metadata = SQLModel.metadata
SCHEMA = "public"


def sync_database_url() -> str:
    return get_settings().database_url.replace("+asyncpg", "")


def include_object(obj, name, type_, reflected, compare_to) -> bool:
    if type_ != "table":
        return True
    return getattr(obj, "schema", None) == SCHEMA


def _common_options() -> dict[str, Any]:
    return {"target_metadata": target_metadata, "version_table_schema": SCHEMA}


def run_migrations_offline() -> None:
    context.configure(
        url=sync_database_url(),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_common_options(),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = create_engine(sync_database_url(), poolclass=pool.NullPool)
    try:
        with engine.connect() as connection:
            connection.execute(text(f"SET search_path TO {SCHEMA}"))
            connection.commit()
            context.configure(
                connection=connection,
                include_schemas=True,
                compare_type=True,
                include_object=include_object,
                **_common_options(),
            )
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
