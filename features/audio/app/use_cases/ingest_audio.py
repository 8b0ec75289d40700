from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError

from app.config import settings
from app.exceptions import PersistenceError, ValidationError
from features.audio.domain.entities.audio_clip import (
    AudioClip, AudioSource, AudioType, DEFAULT_ARTIST_NAME,
)
from infrastructure.repositories.audio_clip_repository import AudioClipRepository
from infrastructure.S3.s3 import build_object_key
from infrastructure.uow import AbstractUnitOfWork
from infrastructure.utils.validation_utils import parse_float, parse_int, parse_whole_number
from infrastructure.utils.logging_config import logger

USER_UPLOADED_SOUND_FLAG = 1

USER_UPLOADED_LICENSE_TYPE = "Original Sound – No License Required"
USER_UPLOADED_USAGE_NOTES = "Original sound uploaded by the user. No third-party license is required."
AI_GENERATED_LICENSE_TYPE = "Envato MusicGen – Commercial License"
AI_GENERATED_USAGE_NOTES = (
    "Licensed via Envato MusicGen. Allowed for commercial use inside this app as part of "
    "an end product. Redistribution outside the app is not permitted."
)


class ObjectStore(Protocol):
    async def upload(self, data: bytes, key: str, content_type: Optional[str] = None) -> str: ...


@dataclass
class UploadedBlob:
    filename: Optional[str]
    content_type: Optional[str]
    data: bytes


@dataclass
class IngestFields:
    """Raw multipart form values; everything arrives as optional text."""
    title: Optional[str] = None
    category: Optional[str] = None
    type: Optional[str] = None
    duration: Any = None
    priority: Any = None
    rating: Any = None
    download_count: Any = None
    sound_flag: Any = None
    original_audio_url: Optional[str] = None
    artist_name: Optional[str] = None


def parse_audio_type(raw: Optional[str]) -> AudioType:
    """Accepts the stored values plus space/underscore spellings of background-music."""
    value = (raw or "").strip().lower()
    if not value:
        return AudioType.MUSIC
    value = value.replace("_", "-").replace(" ", "-")
    try:
        return AudioType(value)
    except ValueError:
        raise ValidationError(f"Invalid audio type: {raw}")


def _text(value: Optional[str], default: Optional[str]) -> Optional[str]:
    if value is None:
        return default
    value = value.strip()
    return value or default


def _is_missing(blob: Optional[UploadedBlob]) -> bool:
    # An unselected form file arrives as an empty part with no filename
    return blob is None or (not blob.data and not blob.filename)


class IngestAudioUseCase:
    def __init__(self, repository: AudioClipRepository, uow: AbstractUnitOfWork, storage: ObjectStore):
        self._repository = repository
        self._uow = uow
        self._storage = storage

    async def execute(
        self,
        fields: IngestFields,
        audio: Optional[UploadedBlob],
        license_file: Optional[UploadedBlob] = None,
    ) -> AudioClip:
        # Only an exact 1 marks a user upload; fractional flags count as 0
        sound_flag = parse_whole_number(fields.sound_flag) or 0
        user_uploaded = sound_flag == USER_UPLOADED_SOUND_FLAG
        log_extra = {"feature": "audio", "sound_flag": sound_flag}
        logger.info("Executing IngestAudioUseCase", extra=log_extra)

        if _is_missing(audio):
            logger.warning("Upload rejected: audio file missing", extra=log_extra)
            raise ValidationError("audio file required")
        if not user_uploaded and _is_missing(license_file):
            logger.warning("Upload rejected: license file missing", extra=log_extra)
            raise ValidationError("license file required")

        audio_type = parse_audio_type(fields.type)

        uploaded: List[Dict[str, str]] = []
        audio_key = build_object_key(settings.S3_AUDIO_PREFIX, audio.filename)
        audio_url = await self._storage.upload(audio.data, audio_key, audio.content_type)
        uploaded.append({"key": audio_key, "url": audio_url})

        license_url: Optional[str] = None
        if not user_uploaded:
            license_key = build_object_key(settings.S3_LICENSE_PREFIX, license_file.filename)
            license_url = await self._storage.upload(
                license_file.data, license_key, license_file.content_type or "text/plain"
            )
            uploaded.append({"key": license_key, "url": license_url})

        clip = AudioClip(
            title=_text(fields.title, "Untitled"),
            category=_text(fields.category, "General"),
            type=audio_type,
            duration=max(parse_int(fields.duration, 0), 0),
            audio_url=audio_url,
            priority=parse_int(fields.priority, 0),
            rating=min(max(parse_float(fields.rating, 0), 0.0), 5.0),
            download_count=max(parse_int(fields.download_count, 0), 0),
            source=AudioSource.USER_UPLOADED if user_uploaded else AudioSource.AI_GENERATED,
            license_type=USER_UPLOADED_LICENSE_TYPE if user_uploaded else AI_GENERATED_LICENSE_TYPE,
            license_url=license_url,
            original_audio_url=_text(fields.original_audio_url, None),
            artist_name=_text(fields.artist_name, DEFAULT_ARTIST_NAME),
            usage_notes=USER_UPLOADED_USAGE_NOTES if user_uploaded else AI_GENERATED_USAGE_NOTES,
            sound_flag=sound_flag,
        )

        try:
            async with self._uow:
                created = await self._repository.add(clip)
        except SQLAlchemyError as e:
            # Uploaded objects are not removed; record them so they can be cleaned up.
            logger.exception(f"Failed to save audio record: {e}", extra={**log_extra, "orphaned_objects": uploaded})
            raise PersistenceError("Failed to save audio record") from e

        logger.info(f"Audio {created.id} ingested ({created.source})", extra={**log_extra, "audio_id": created.id})
        return created
