from typing import Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from features.favorites.domain.entities.favorite import Favorite
from infrastructure.repositories.audio_clip_repository import AudioClipRepository
from infrastructure.repositories.favorite_repository import FavoriteRepository
from infrastructure.uow import AbstractUnitOfWork
from infrastructure.utils.validation_utils import is_object_id
from app.exceptions import NotFoundError, PersistenceError, ValidationError
from infrastructure.utils.logging_config import logger


class AddFavoriteUseCase:
    """Marks a clip as a user's favorite. Idempotent: returns (favorite, created)."""

    def __init__(self, repository: FavoriteRepository, audio_repository: AudioClipRepository, uow: AbstractUnitOfWork):
        self._repository = repository
        self._audio_repository = audio_repository
        self._uow = uow

    async def execute(self, user_id: str, audio_id: str) -> Tuple[Favorite, bool]:
        user_id = (user_id or "").strip()
        if not user_id:
            raise ValidationError("userId is required")
        if not is_object_id(audio_id):
            raise ValidationError("Invalid audio ID format")
        audio_id = audio_id.lower()
        log_extra = {"feature": "favorites", "user_id": user_id, "audio_id": audio_id}

        try:
            existing = await self._repository.get_for_user(user_id, audio_id)
            if existing:
                logger.debug("Favorite already present", extra=log_extra)
                return existing, False
            if not await self._audio_repository.get_by_id(audio_id):
                raise NotFoundError("Audio not found")
            async with self._uow:
                created = await self._repository.add(Favorite(user_id=user_id, audio_id=audio_id))
        except IntegrityError:
            # Lost a race with a concurrent add of the same pair
            existing = await self._repository.get_for_user(user_id, audio_id)
            if existing:
                return existing, False
            raise PersistenceError("Failed to update favorites")
        except SQLAlchemyError as e:
            logger.exception(f"Failed to add favorite: {e}", extra=log_extra)
            raise PersistenceError("Failed to update favorites") from e

        logger.info("Favorite added", extra=log_extra)
        return created, True
