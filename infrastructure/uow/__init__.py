from infrastructure.uow.uow import AbstractUnitOfWork, UnitOfWork, AsyncUnitOfWork

__all__ = ["AbstractUnitOfWork", "UnitOfWork", "AsyncUnitOfWork"]
