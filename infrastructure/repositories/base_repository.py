from abc import ABC, abstractmethod
from typing import TypeVar, Generic, Type, Optional, Any, Sequence, Union
from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from infrastructure.utils.logging_config import logger


# Type variable for the SQLAlchemy model (subclass of Base)
ModelType = TypeVar('ModelType')
# Type variable for the Pydantic domain entity (subclass of BaseModel)
EntityType = TypeVar('EntityType', bound=BaseModel)


# --- Base Repository Interface (Defines the contract) ---
class BaseRepositoryInterface(ABC, Generic[ModelType, EntityType]):
    """Defines the common interface for all repositories."""

    @property
    @abstractmethod
    def model_class(self) -> Type[ModelType]:
        """The SQLAlchemy model class associated with the repository."""
        raise NotImplementedError

    @property
    @abstractmethod
    def entity_class(self) -> Type[EntityType]:
        raise NotImplementedError

    @abstractmethod
    async def get_by_id(self, entity_id: str) -> Optional[EntityType]:
        """Finds an entity by its primary key."""
        raise NotImplementedError

    @abstractmethod
    async def add(self, entity: EntityType) -> EntityType:
        """Adds a new domain entity. Returns the stored entity."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, entity_id: str) -> bool:
        """Deletes an entity by its primary key. Returns True if deleted."""
        raise NotImplementedError


# --- Concrete SQLAlchemy Base Repository Implementation ---
class BaseRepository(BaseRepositoryInterface[ModelType, EntityType]):
    """Abstract Base Class providing core SQLAlchemy implementation for sync and async sessions."""

    def __init__(self, db_session: Union[Session, AsyncSession]):
        self._is_async = isinstance(db_session, AsyncSession)
        self._db: Union[Session, AsyncSession] = db_session

    def _map_model_to_entity(self, model: Optional[ModelType]) -> Optional[EntityType]:
        """Default mapping using Pydantic's model_validate (from_attributes)."""
        if model is None:
            return None
        try:
            return self.entity_class.model_validate(model)
        except ValidationError as e:
            logger.error(f"Mapping error: {type(model).__name__} -> {self.entity_class.__name__}: {e.errors()}")
            raise

    def _map_models_to_entities(self, models: Sequence[ModelType]) -> Sequence[EntityType]:
        return [self._map_model_to_entity(model) for model in models]

    # --- Execution helpers (hide the sync/async split from subclasses) ---
    async def _scalars_all(self, stmt: Select) -> Sequence[Any]:
        if self._is_async:
            result = await self._db.execute(stmt) # type: ignore
            return result.unique().scalars().all()
        return self._db.execute(stmt).unique().scalars().all() # type: ignore

    async def _scalars_first(self, stmt: Select) -> Optional[Any]:
        if self._is_async:
            result = await self._db.execute(stmt) # type: ignore
            return result.unique().scalars().first()
        return self._db.execute(stmt).unique().scalars().first() # type: ignore

    async def _scalar(self, stmt: Select) -> Any:
        if self._is_async:
            result = await self._db.execute(stmt) # type: ignore
            return result.scalar_one_or_none()
        return self._db.scalar(stmt) # type: ignore

    async def _get_model(self, entity_id: str) -> Optional[ModelType]:
        if self._is_async:
            return await self._db.get(self.model_class, entity_id) # type: ignore
        return self._db.get(self.model_class, entity_id) # type: ignore

    async def _flush_and_refresh(self, db_model: ModelType) -> None:
        if self._is_async:
            await self._db.flush()
            await self._db.refresh(db_model)
        else:
            self._db.flush() # type: ignore
            self._db.refresh(db_model) # type: ignore

    # --- CRUD ---
    async def get_by_id(self, entity_id: str) -> Optional[EntityType]:
        logger.debug(f"Getting {self.model_class.__name__} by ID: {entity_id}")
        model = await self._get_model(entity_id)
        return self._map_model_to_entity(model)

    async def add(self, entity: EntityType) -> EntityType:
        logger.debug(f"Adding new {type(entity).__name__} entity.")
        model_data = entity.model_dump(exclude_none=False)
        # Let the column default fill in the timestamp when the entity has none yet
        if model_data.get("created_at") is None:
            model_data.pop("created_at", None)
        db_model = self.model_class(**model_data)
        self._db.add(db_model)
        await self._flush_and_refresh(db_model)

        mapped_entity = self._map_model_to_entity(db_model)
        logger.info(f"Added {type(entity).__name__} ID: {getattr(mapped_entity, 'id', 'N/A')}")
        return mapped_entity

    async def delete(self, entity_id: str) -> bool:
        logger.debug(f"Deleting {self.model_class.__name__} ID: {entity_id}")
        obj_to_delete = await self._get_model(entity_id)
        if obj_to_delete is None:
            logger.warning(f"Delete failed: {self.model_class.__name__} ID {entity_id} not found.")
            return False
        if self._is_async:
            await self._db.delete(obj_to_delete) # type: ignore
            await self._db.flush() # type: ignore
        else:
            self._db.delete(obj_to_delete) # type: ignore
            self._db.flush() # type: ignore
        logger.info(f"Deleted {self.model_class.__name__} ID: {entity_id}")
        return True

