from typing import List, Optional, Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import Field

from features.audio.domain.entities.audio_clip import AudioClip as AudioClipEntity, CamelModel
from features.favorites.domain.entities.favorite import Favorite as FavoriteEntity
from features.favorites.app.use_cases.list_favorites import ListFavoritesUseCase
from features.favorites.app.use_cases.add_favorite import AddFavoriteUseCase
from features.favorites.app.use_cases.remove_favorite import RemoveFavoriteUseCase
from app.dependencies import UoW, get_repo
from infrastructure.repositories.audio_clip_repository import AudioClipRepository
from infrastructure.repositories.favorite_repository import FavoriteRepository


# --- API Schemas ---
class FavoriteCreateRequestSchema(CamelModel):
    user_id: str = Field(..., min_length=1, max_length=128)
    audio_id: str


class FavoriteListResponseSchema(CamelModel):
    success: bool = True
    data: List[FavoriteEntity]


class FavoriteResponseSchema(CamelModel):
    success: bool = True
    message: str
    data: FavoriteEntity


class MessageResponseSchema(CamelModel):
    success: bool = True
    message: str


# --- Repository Dependencies ---
FavoriteRepo = Annotated[FavoriteRepository, Depends(get_repo(FavoriteEntity))]
AudioClipRepo = Annotated[AudioClipRepository, Depends(get_repo(AudioClipEntity))]

# --- API Router ---
router = APIRouter(prefix="/favorites", tags=["Favorites"])


@router.get("", response_model=FavoriteListResponseSchema)
async def list_favorites(repo: FavoriteRepo, user_id: Optional[str] = Query(None, alias="userId")):
    return FavoriteListResponseSchema(data=await ListFavoritesUseCase(repo).execute(user_id))


@router.post("", response_model=FavoriteResponseSchema, status_code=status.HTTP_201_CREATED)
async def add_favorite(
    data: FavoriteCreateRequestSchema,
    response: Response,
    repo: FavoriteRepo,
    audio_repo: AudioClipRepo,
    uow: UoW,
):
    favorite, created = await AddFavoriteUseCase(repo, audio_repo, uow).execute(data.user_id, data.audio_id)
    if not created:
        response.status_code = status.HTTP_200_OK
        return FavoriteResponseSchema(message="Already in favorites", data=favorite)
    return FavoriteResponseSchema(message="Added to favorites", data=favorite)


@router.delete("/{audio_id}", response_model=MessageResponseSchema)
async def remove_favorite(
    audio_id: str,
    repo: FavoriteRepo,
    uow: UoW,
    user_id: Optional[str] = Query(None, alias="userId"),
):
    await RemoveFavoriteUseCase(repo, uow).execute(user_id, audio_id)
    return MessageResponseSchema(message="Removed from favorites")
