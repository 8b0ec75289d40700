from sqlalchemy import String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from infrastructure.database.base_model import Base
from infrastructure.database.models.audio_clip_model import AudioClipModel


class FavoriteModel(Base):
    """SQLAlchemy ORM Model for the 'favorites' table."""
    __tablename__ = "favorites"

    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    audio_id: Mapped[str] = mapped_column(ForeignKey("audio_clips.id"), nullable=False, index=True)

    # Eager so the repository can map the joined clip after the session is done with it.
    audio: Mapped[AudioClipModel] = relationship(lazy="joined")

    __table_args__ = (
        UniqueConstraint("user_id", "audio_id", name="uq_favorites_user_id_audio_id"),
    )

    def __repr__(self) -> str:
        return f"<FavoriteModel(id={self.id!r}, user_id={self.user_id!r}, audio_id={self.audio_id!r})>"
