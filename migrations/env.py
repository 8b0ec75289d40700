# Alembic environment configuration script
import os
import sys
import asyncio
from logging.config import fileConfig

from sqlalchemy import pool, engine_from_config
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import context

# --- Project-Specific Setup ---
current_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.abspath(os.path.join(current_dir, '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

try:
    from app.config import settings
    from infrastructure.database.base_model import Base
    # Registers every mapped table on Base.metadata
    from infrastructure.database import models  # noqa: F401
except ImportError as e:
    print(f"[Migrations env.py] ERROR importing project modules: {e}")
    sys.exit(1)

# --- Alembic Configuration ---
config = context.config

if config.config_file_name:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

# --- Target Metadata ---
target_metadata = Base.metadata

# --- Database URL ---
db_url = str(settings.DATABASE_URL)
if not db_url:
    print("[Migrations env.py] ERROR: DATABASE_URL not set in settings.")
    sys.exit(1)
config.set_main_option("sqlalchemy.url", db_url.replace("%", "%%"))
is_sqlite = db_url.startswith("sqlite")
print(f"[Migrations env.py] Configured Alembic DB URL (scheme: {db_url.split('://', 1)[0]})")


# --- Migration Runtime Functions ---
def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    context.configure(
        url=db_url, target_metadata=target_metadata, literal_binds=True,
        dialect_opts={"paramstyle": "named"}, compare_type=True,
        render_as_batch=is_sqlite,
    )
    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection) -> None:
    context.configure(
        connection=connection, target_metadata=target_metadata,
        compare_type=True,
        # SQLite cannot ALTER most constraints in place
        render_as_batch=is_sqlite,
    )
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online_async() -> None:
    """Run migrations in 'online' mode using async engine."""
    connectable = create_async_engine(db_url, poolclass=pool.NullPool)
    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)
    await connectable.dispose()


def run_migrations_online_sync() -> None:
    """Run migrations in 'online' mode using sync engine."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}), prefix="sqlalchemy.", poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        do_run_migrations(connection)


# --- Main Execution Logic ---
use_async_driver = "aiosqlite" in db_url or "asyncpg" in db_url
if context.is_offline_mode():
    run_migrations_offline()
elif use_async_driver:
    asyncio.run(run_migrations_online_async())
else:
    run_migrations_online_sync()
