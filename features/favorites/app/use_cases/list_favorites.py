from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from features.favorites.domain.entities.favorite import Favorite
from infrastructure.repositories.favorite_repository import FavoriteRepository
from app.exceptions import PersistenceError, ValidationError
from infrastructure.utils.logging_config import logger


class ListFavoritesUseCase:
    def __init__(self, repository: FavoriteRepository):
        self._repository = repository

    async def execute(self, user_id: Optional[str]) -> List[Favorite]:
        user_id = (user_id or "").strip()
        if not user_id:
            raise ValidationError("userId is required")
        try:
            return list(await self._repository.list_for_user(user_id))
        except SQLAlchemyError as e:
            logger.exception(f"Failed to list favorites for {user_id}: {e}")
            raise PersistenceError("Failed to fetch favorites") from e
