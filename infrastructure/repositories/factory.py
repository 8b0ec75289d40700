from sqlalchemy.orm import Session
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Type, TypeVar, Dict, Union
from pydantic import BaseModel

from infrastructure.utils.logging_config import logger
from .base_repository import BaseRepositoryInterface, BaseRepository

# --- Import Domain Entities ---
from features.audio.domain.entities.audio_clip import AudioClip as AudioClipEntity
from features.favorites.domain.entities.favorite import Favorite as FavoriteEntity

# --- Import Concrete Repository Implementations ---
from infrastructure.repositories.audio_clip_repository import AudioClipRepository
from infrastructure.repositories.favorite_repository import FavoriteRepository


EntityType = TypeVar('EntityType', bound=BaseModel)
ModelType = TypeVar('ModelType')
RepoImpl = TypeVar('RepoImpl', bound=BaseRepository)


# --- Repository Mapping ---
# Maps Domain Entity Type -> Concrete Repository Implementation Class
_repository_map: Dict[Type[BaseModel], Type[BaseRepository]] = {
    AudioClipEntity: AudioClipRepository,
    FavoriteEntity: FavoriteRepository,
}


class RepositoryFactoryError(ValueError):
    """Custom exception for repository factory errors."""
    pass


def get_repository(
    entity_type: Type[EntityType],
    db_session: Union[Session, AsyncSession]
) -> BaseRepositoryInterface[ModelType, EntityType]:
    """
    Factory function to get a repository instance for a given domain entity type.

    Args:
        entity_type: The domain entity class (e.g., AudioClipEntity).
        db_session: The SQLAlchemy session (sync or async) to inject.

    Raises:
        RepositoryFactoryError: If no repository mapping is found.
    """
    logger.debug(f"Requesting repository for entity type: {entity_type.__name__}")
    repo_class = _repository_map.get(entity_type)

    if repo_class is None:
        registered_keys = [k.__name__ for k in _repository_map.keys()]
        logger.error(f"No repository implementation registered for entity type: {entity_type.__name__}")
        raise RepositoryFactoryError(
            f"Repository implementation not found for {entity_type.__name__}. "
            f"Registered types: {registered_keys}."
        )

    instance = repo_class(db_session)
    logger.debug(f"Instantiated repository: {repo_class.__name__} for {entity_type.__name__}")
    return instance
