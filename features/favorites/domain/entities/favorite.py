# features/favorites/domain/entities/favorite.py
from typing import Optional
from datetime import datetime

from pydantic import Field, field_validator

from features.audio.domain.entities.audio_clip import AudioClip, CamelModel
from infrastructure.utils.datetime_utils import make_aware
from infrastructure.utils.validation_utils import generate_object_id


class Favorite(CamelModel):
    """A clip a user has marked; unique per (user_id, audio_id)."""
    id: str = Field(default_factory=generate_object_id)
    user_id: str = Field(..., min_length=1, max_length=128)
    audio_id: str
    created_at: Optional[datetime] = None
    audio: Optional[AudioClip] = None

    @field_validator("created_at")
    @classmethod
    def _created_at_is_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return make_aware(value) if value is not None else None
