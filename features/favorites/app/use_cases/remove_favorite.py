from sqlalchemy.exc import SQLAlchemyError

from infrastructure.repositories.favorite_repository import FavoriteRepository
from infrastructure.uow import AbstractUnitOfWork
from infrastructure.utils.validation_utils import is_object_id
from app.exceptions import NotFoundError, PersistenceError, ValidationError
from infrastructure.utils.logging_config import logger


class RemoveFavoriteUseCase:
    def __init__(self, repository: FavoriteRepository, uow: AbstractUnitOfWork):
        self._repository = repository
        self._uow = uow

    async def execute(self, user_id: str, audio_id: str) -> None:
        user_id = (user_id or "").strip()
        if not user_id:
            raise ValidationError("userId is required")
        if not is_object_id(audio_id):
            raise ValidationError("Invalid audio ID format")
        audio_id = audio_id.lower()

        try:
            existing = await self._repository.get_for_user(user_id, audio_id)
            if not existing:
                raise NotFoundError("Favorite not found")
            async with self._uow:
                await self._repository.delete(existing.id)
        except SQLAlchemyError as e:
            logger.exception(f"Failed to remove favorite {audio_id} for {user_id}: {e}")
            raise PersistenceError("Failed to update favorites") from e
        logger.info("Favorite removed", extra={"feature": "favorites", "user_id": user_id, "audio_id": audio_id})
