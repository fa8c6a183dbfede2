import os
import sys
from logging.config import fileConfig
from sqlalchemy import engine_from_config, make_url
from sqlalchemy import pool
from alembic import context

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from app.models.base import Base
from app.models import *  # noqa: F401,F403  registers every table on Base.metadata
from app.core.config import settings

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# alembic runs on the sync drivers
if not config.get_main_option("sqlalchemy.url"):
    sync_url = make_url(settings.DATABASE_URL.replace("+asyncpg", "").replace("+aiosqlite", ""))
    config.set_main_option("sqlalchemy.url", sync_url.render_as_string(hide_password=False))

db_url = make_url(config.get_main_option("sqlalchemy.url"))
print("🔍 Alembic is using DB URL:", db_url.render_as_string(hide_password=True))

target_metadata = Base.metadata

def _configure_options() -> dict:
    # SQLite cannot ALTER most columns in place
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        "render_as_batch": db_url.get_backend_name() == "sqlite",
    }

def run_migrations_offline() -> None:
    """Emit SQL to stdout instead of touching a database."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_options(),
    )
    with context.begin_transaction():
        context.run_migrations()

def run_migrations_online() -> None:
    """Run migrations against the configured database."""
    if os.getenv("ENVIRONMENT", "development").lower() == "production":
        print("🚨 PRODUCTION ENVIRONMENT DETECTED")
        if "downgrade" in sys.argv:
            raise RuntimeError("🚫 Downgrades are blocked in production!")

    connectable = engine_from_config(
        config.get_section(config.config_ini_section),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(connection=connection, **_configure_options())
        with context.begin_transaction():
            context.run_migrations()

if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
