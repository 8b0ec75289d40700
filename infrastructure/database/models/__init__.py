from infrastructure.database.models.audio_clip_model import AudioClipModel
from infrastructure.database.models.favorite_model import FavoriteModel

__all__ = ["AudioClipModel", "FavoriteModel"]
