# alembic/env.py
import os
import sys
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

# Add project root to sys.path so we can import streeteats.backend.app
sys.path.append(os.path.dirname(os.path.abspath(os.path.join(__file__, ".."))))

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

from streeteats.backend.app.config import DATABASE_URL  # noqa: E402
from streeteats.backend.app.db import Base  # noqa: E402
from streeteats.backend.app import models  # noqa: E402,F401

# alembic.ini may leave sqlalchemy.url empty; fall back to DATABASE_URL (.env)
if not config.get_main_option("sqlalchemy.url"):
    config.set_main_option("sqlalchemy.url", DATABASE_URL)

target_metadata = Base.metadata


def run_migrations_offline():
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    connectable = engine_from_config(
        config.get_section(config.config_ini_section),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
