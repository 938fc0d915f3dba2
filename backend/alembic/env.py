# alembic/env.py
from __future__ import annotations
import os
import sys
from logging.config import fileConfig
from sqlalchemy import create_engine, pool
from alembic import context

# ensure the backend root is importable when alembic runs from elsewhere
HERE = os.path.dirname(os.path.abspath(__file__))
BACKEND_ROOT = os.path.abspath(os.path.join(HERE, ".."))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from app.core.config import settings  # noqa: E402  (loads .env)
from app.db.base import Base  # noqa: E402
from app.db import models  # noqa: E402,F401  registers the tables

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

def _url() -> str:
    return settings.DATABASE_URL or config.get_main_option("sqlalchemy.url")

def run_migrations_offline():
    context.configure(url=_url(), target_metadata=target_metadata, literal_binds=True)
    with context.begin_transaction():
        context.run_migrations()

def run_migrations_online():
    connectable = create_engine(_url(), poolclass=pool.NullPool)
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata, compare_type=True)
        with context.begin_transaction():
            context.run_migrations()

if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
