# features/audio/domain/entities/audio_clip.py
from enum import Enum
from typing import List, Optional
from datetime import datetime

from pydantic import BaseModel, Field, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from infrastructure.utils.datetime_utils import make_aware
from infrastructure.utils.validation_utils import generate_object_id

DEFAULT_ARTIST_NAME = "Envato MusicGen AI"


class AudioType(str, Enum):
    MUSIC = "music"
    SOUND = "sound"
    BACKGROUND_MUSIC = "background-music"
    FX = "fx"


class AudioSource(str, Enum):
    USER_UPLOADED = "user_uploaded"
    AI_GENERATED = "ai_generated"


class CamelModel(BaseModel):
    """Python attributes stay snake_case; JSON uses the camelCase names clients expect."""
    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel,
        use_enum_values=True,
    )


class AudioClip(CamelModel):
    id: str = Field(default_factory=generate_object_id, description="24-hex identifier")
    title: str = "Untitled"
    category: str = "General"
    type: AudioType = Field(AudioType.MUSIC, validate_default=True)
    duration: int = Field(0, ge=0, description="Length in seconds")
    audio_url: str
    priority: int = 0
    rating: float = Field(0.0, ge=0, le=5)
    download_count: int = Field(0, ge=0)
    source: AudioSource
    license_type: str
    license_url: Optional[str] = None
    original_audio_url: Optional[str] = None
    artist_name: str = DEFAULT_ARTIST_NAME
    attribution_required: bool = False
    is_redistribution_allowed: bool = False
    usage_notes: Optional[str] = None
    sound_flag: int = 0
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")

    @field_validator("created_at")
    @classmethod
    def _created_at_is_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return make_aware(value) if value is not None else None


class CatalogPage(CamelModel):
    """One page of a catalog query plus the metadata needed to request the next one."""
    items: List[AudioClip]
    page: int
    limit: int
    total: int
    has_more: bool
