from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from typing import Any, Dict, Optional

from app.config import settings
from infrastructure.utils.logging_config import logger

db_url_str = str(settings.DATABASE_URL)
use_async = "sqlite+aiosqlite" in db_url_str or "postgresql+asyncpg" in db_url_str
is_sqlite = db_url_str.startswith("sqlite")

SessionLocal: Optional[sessionmaker[Session]] = None
AsyncSessionLocal: Optional[async_sessionmaker[AsyncSession]] = None
sync_engine: Optional[Engine] = None
async_engine: Optional[AsyncEngine] = None


@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    """Applies PRAGMA settings for SQLite connections."""
    if not is_sqlite:
        return
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA journal_mode=WAL;")
        cursor.execute("PRAGMA busy_timeout = 5000;") # Wait 5s if locked
        cursor.execute("PRAGMA synchronous = NORMAL;")
        cursor.execute("PRAGMA foreign_keys = ON;")
    finally:
        cursor.close()


def _engine_kwargs() -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {"echo": settings.DB_ECHO_LOG, "pool_pre_ping": True}
    if is_sqlite:
        # TestClient and the threadpool touch the connection from worker threads
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        kwargs["pool_size"] = settings.DB_POOL_SIZE
        kwargs["max_overflow"] = settings.DB_MAX_OVERFLOW
    return kwargs


try:
    if use_async:
        logger.info("Initializing Async Database Engine...")
        async_engine = create_async_engine(db_url_str, **_engine_kwargs())
        AsyncSessionLocal = async_sessionmaker(
            bind=async_engine,
            class_=AsyncSession,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False
        )
        logger.info("Async Database Engine and AsyncSessionLocal configured.")
    else:
        logger.info("Initializing Sync Database Engine...")
        sync_engine = create_engine(db_url_str, **_engine_kwargs())
        SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=sync_engine,
            class_=Session
        )
        logger.info("Sync Database Engine and SessionLocal configured.")

except Exception as e:
    logger.exception(f"FATAL: Database initialization failed: {e}")
    raise RuntimeError(f"Database initialization failed: {e}") from e


# --- Table Creation Functions (for tests/initial setup) ---
async def create_db_and_tables_async():
    """Creates all tables defined in Base metadata (async version)."""
    if not async_engine:
        logger.error("Async engine not initialized, cannot create tables.")
        return
    from .base_model import Base
    from . import models  # noqa: F401  registers the mapped tables
    logger.info("Attempting to create database tables (async)...")
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Tables created successfully (async).")

def create_db_and_tables_sync():
    """Creates all tables defined in Base metadata (sync version)."""
    if not sync_engine:
        logger.error("Sync engine not initialized, cannot create tables.")
        return
    from .base_model import Base
    from . import models  # noqa: F401
    logger.info("Attempting to create database tables (sync)...")
    Base.metadata.create_all(bind=sync_engine)
    logger.info("Tables created successfully (sync).")

async def create_db_and_tables():
    if use_async:
        await create_db_and_tables_async()
    else:
        create_db_and_tables_sync()

# --- Engine Disposal Function (called during application shutdown) ---
async def close_db_connections():
    """Dispose of database engine connections."""
    if async_engine:
        logger.info("Disposing async database engine...")
        await async_engine.dispose()
    if sync_engine:
        logger.info("Disposing sync database engine...")
        sync_engine.dispose()
