import abc
from sqlalchemy.orm import Session
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.utils.logging_config import logger


class AbstractUnitOfWork(abc.ABC):
    """
    Transaction boundary around repository writes.

    Use as ``async with uow:``. Leaving the block normally commits (unless the
    caller already committed); leaving it with an exception rolls back and
    lets the exception propagate.
    """

    _committed: bool = False

    async def __aenter__(self):
        logger.debug(f"Entering UoW context ({type(self).__name__})")
        self._committed = False
        return self

    async def __aexit__(self, exc_type, exc_val, traceback):
        if exc_type:
            logger.warning(f"Exception occurred within UoW context: {exc_type.__name__}. Rolling back.")
            try:
                await self.rollback()
            except Exception as rb_exc:
                logger.exception(f"Exception during UoW rollback: {rb_exc}")
            return
        if not self._committed:
            try:
                await self.commit()
            except Exception:
                logger.exception("Exception during UoW commit. Rolling back.")
                await self.rollback()
                raise
        logger.debug(f"Exiting UoW context ({type(self).__name__})")

    async def commit(self):
        await self._commit()
        self._committed = True

    async def rollback(self):
        await self._rollback()

    @abc.abstractmethod
    async def _commit(self):
        raise NotImplementedError

    @abc.abstractmethod
    async def _rollback(self):
        raise NotImplementedError


class UnitOfWork(AbstractUnitOfWork):
    """Synchronous Unit of Work implementation using SQLAlchemy Session."""

    def __init__(self, session: Session):
        self._session = session

    async def _commit(self):
        self._session.commit()
        logger.debug("Sync session commit successful.")

    async def _rollback(self):
        self._session.rollback()
        logger.debug("Sync session rollback successful.")


class AsyncUnitOfWork(AbstractUnitOfWork):
    """Asynchronous Unit of Work implementation using SQLAlchemy AsyncSession."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def _commit(self):
        await self._session.commit()
        logger.debug("Async session commit successful.")

    async def _rollback(self):
        await self._session.rollback()
        logger.debug("Async session rollback successful.")
