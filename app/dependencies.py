from typing import Generator, Type, Annotated, AsyncGenerator, TypeVar, Any, Callable
from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings

# --- Infrastructure Abstractions & Factories ---
from infrastructure.database.session import SessionLocal, AsyncSessionLocal
from infrastructure.uow import AbstractUnitOfWork, UnitOfWork, AsyncUnitOfWork
from infrastructure.repositories.base_repository import BaseRepositoryInterface
from infrastructure.repositories.factory import get_repository, RepositoryFactoryError
from infrastructure.S3.s3 import ObjectStorage
from infrastructure.utils.logging_config import logger


EntityType = TypeVar('EntityType')


# --- Database Session Dependency Providers ---

def get_db_session_sync() -> Generator[Session, None, None]:
    """Dependency provider for a synchronous SQLAlchemy session."""
    if SessionLocal is None:
        logger.error("Synchronous SessionLocal is not initialized. Check database configuration and session.py.")
        raise RuntimeError("Synchronous DB session factory not available.")
    db: Session = SessionLocal()
    logger.debug(f"DB Sync Session [{id(db)}] created.")
    try:
        yield db
    finally:
        logger.debug(f"DB Sync Session [{id(db)}] closed.")
        db.close()


async def get_db_session_async() -> AsyncGenerator[AsyncSession, None]:
    """Dependency provider for an asynchronous SQLAlchemy session."""
    if AsyncSessionLocal is None:
        logger.error("Asynchronous AsyncSessionLocal is not initialized. Check database configuration and session.py.")
        raise RuntimeError("Asynchronous DB session factory not available.")
    session: AsyncSession = AsyncSessionLocal()
    logger.debug(f"DB Async Session [{id(session)}] created.")
    try:
        yield session
    except Exception as e:
        logger.warning(f"DB Async Session [{id(session)}] rolling back after {type(e).__name__}")
        await session.rollback()
        raise
    finally:
        logger.debug(f"DB Async Session [{id(session)}] closed.")
        await session.close()


# Determine default session type based on configured DATABASE_URL
db_url_str = str(settings.DATABASE_URL)
IS_ASYNC_DB = "aiosqlite" in db_url_str or "asyncpg" in db_url_str

if IS_ASYNC_DB:
    DefaultSessionDep = get_db_session_async
    DBSession = Annotated[AsyncSession, Depends(DefaultSessionDep)]
    logger.info("Default Database Session Dependency: Async")
else:
    DefaultSessionDep = get_db_session_sync
    DBSession = Annotated[Session, Depends(DefaultSessionDep)]
    logger.info("Default Database Session Dependency: Sync")


# --- Unit of Work Dependency Providers ---

def get_uow_sync(session: Annotated[Session, Depends(get_db_session_sync)]) -> AbstractUnitOfWork:
    return UnitOfWork(session)


async def get_uow_async(session: Annotated[AsyncSession, Depends(get_db_session_async)]) -> AbstractUnitOfWork:
    return AsyncUnitOfWork(session)


# The UoW shares the request's session with the repositories (FastAPI caches
# the session dependency per request).
if IS_ASYNC_DB:
    DefaultUoWDep = get_uow_async
    UoW = Annotated[AsyncUnitOfWork, Depends(DefaultUoWDep)]
else:
    DefaultUoWDep = get_uow_sync
    UoW = Annotated[UnitOfWork, Depends(DefaultUoWDep)]


# --- Repository Dependency Factory ---

def get_repo(
    entity_type: Type[EntityType]
) -> Callable[[DBSession], BaseRepositoryInterface[Any, EntityType]]:
    """
    Returns a dependency function (provider) that, when called by FastAPI,
    will inject the repository registered for ``entity_type`` using the
    default session type (DBSession).
    """
    def _get_specific_repository(session: DBSession) -> BaseRepositoryInterface[Any, EntityType]:
        try:
            repo = get_repository(entity_type, session)  # type: ignore
            logger.debug(f"Repository [{type(repo).__name__}] injected for entity [{entity_type.__name__}] with session [{id(session)}]")
            return repo
        except RepositoryFactoryError as e:
            logger.error(f"Failed dependency resolution: Could not get repository for {entity_type.__name__}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Internal configuration error: Repository for '{entity_type.__name__}' is not available."
            ) from e

    return _get_specific_repository


# --- Object Storage Dependency ---

def get_object_storage() -> ObjectStorage:
    """Dependency provider for the S3 object storage (overridable in tests)."""
    return ObjectStorage()


StorageDep = Annotated[ObjectStorage, Depends(get_object_storage)]
