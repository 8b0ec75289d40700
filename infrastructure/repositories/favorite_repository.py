# infrastructure/repositories/favorite_repository.py
from typing import Optional, Sequence, Type

from sqlalchemy import select

from features.favorites.domain.entities.favorite import Favorite as FavoriteEntity
from infrastructure.database.models.favorite_model import FavoriteModel
from infrastructure.repositories.base_repository import BaseRepository
from infrastructure.utils.logging_config import logger


class FavoriteRepository(BaseRepository[FavoriteModel, FavoriteEntity]):

    @property
    def model_class(self) -> Type[FavoriteModel]:
        return FavoriteModel

    @property
    def entity_class(self) -> Type[FavoriteEntity]:
        return FavoriteEntity

    async def add(self, entity: FavoriteEntity) -> FavoriteEntity:
        db_model = self.model_class(id=entity.id, user_id=entity.user_id, audio_id=entity.audio_id)
        self._db.add(db_model)
        await self._flush_and_refresh(db_model)
        logger.info(f"Added favorite {db_model.id} (user={entity.user_id}, audio={entity.audio_id})")
        # Re-select so the joined clip is loaded the same way for sync and async sessions
        return await self.get_for_user(entity.user_id, entity.audio_id)

    async def get_for_user(self, user_id: str, audio_id: str) -> Optional[FavoriteEntity]:
        stmt = select(self.model_class).where(
            self.model_class.user_id == user_id,
            self.model_class.audio_id == audio_id,
        )
        return self._map_model_to_entity(await self._scalars_first(stmt))

    async def list_for_user(self, user_id: str) -> Sequence[FavoriteEntity]:
        logger.debug(f"Listing favorites for user: {user_id}")
        stmt = (
            select(self.model_class)
            .where(self.model_class.user_id == user_id)
            .order_by(self.model_class.created_at.desc(), self.model_class.id.desc())
        )
        return self._map_models_to_entities(await self._scalars_all(stmt))
