from typing import Optional
from sqlalchemy import String, Integer, Float, Boolean, Text, Index
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.base_model import Base


class AudioClipModel(Base):
    """SQLAlchemy ORM Model for the 'audio_clips' table."""
    __tablename__ = "audio_clips"

    title: Mapped[str] = mapped_column(String(255), nullable=False, default="Untitled")
    category: Mapped[str] = mapped_column(String(255), nullable=False, default="General")
    type: Mapped[str] = mapped_column(String(32), nullable=False, default="music")
    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    audio_url: Mapped[str] = mapped_column(Text, nullable=False)

    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    download_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    source: Mapped[str] = mapped_column(String(32), nullable=False)
    license_type: Mapped[str] = mapped_column(String(255), nullable=False)
    license_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    original_audio_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    artist_name: Mapped[str] = mapped_column(String(255), nullable=False, default="Envato MusicGen AI")
    attribution_required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_redistribution_allowed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    usage_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    sound_flag: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<AudioClipModel(id={self.id!r}, title={self.title!r}, type={self.type!r})>"


# Descending indexes for the sortable popularity fields and the listing sort key.
Index("ix_audio_clips_category", AudioClipModel.category)
Index("ix_audio_clips_type", AudioClipModel.type)
Index("ix_audio_clips_priority", AudioClipModel.priority.desc())
Index("ix_audio_clips_rating", AudioClipModel.rating.desc())
Index("ix_audio_clips_download_count", AudioClipModel.download_count.desc())
Index("ix_audio_clips_created_at", AudioClipModel.created_at.desc())
