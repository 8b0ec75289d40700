from sqlalchemy.exc import SQLAlchemyError

from features.audio.domain.entities.audio_clip import AudioClip
from infrastructure.repositories.audio_clip_repository import AudioClipRepository
from infrastructure.utils.validation_utils import is_object_id
from app.exceptions import NotFoundError, PersistenceError, ValidationError
from infrastructure.utils.logging_config import logger


class GetAudioUseCase:
    def __init__(self, repository: AudioClipRepository):
        self._repository = repository

    async def execute(self, audio_id: str) -> AudioClip:
        if not is_object_id(audio_id):
            logger.warning(f"Rejected malformed audio id: {audio_id!r}")
            raise ValidationError("Invalid audio ID format")
        try:
            result = await self._repository.get_by_id(audio_id.lower())
        except SQLAlchemyError as e:
            logger.exception(f"Failed to load audio {audio_id}: {e}")
            raise PersistenceError("Failed to fetch audio files") from e
        if not result:
            raise NotFoundError("Audio not found")
        return result
