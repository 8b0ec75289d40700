from typing import List, Optional, Annotated

from fastapi import APIRouter, Depends, status, Query, File, Form, UploadFile

from features.audio.domain.entities.audio_clip import AudioClip as AudioClipEntity, CamelModel, CatalogPage
from features.audio.domain.search import CatalogQuery
from features.audio.app.use_cases.search_audio import SearchAudioUseCase
from features.audio.app.use_cases.get_audio import GetAudioUseCase
from features.audio.app.use_cases.ingest_audio import IngestAudioUseCase, IngestFields, UploadedBlob
from app.dependencies import UoW, StorageDep, get_repo
from infrastructure.repositories.audio_clip_repository import AudioClipRepository


# --- API Schemas ---
class PageMetaSchema(CamelModel):
    page: int
    limit: int
    total: int
    has_more: bool


class AudioListResponseSchema(CamelModel):
    success: bool = True
    message: str
    data: List[AudioClipEntity]
    meta: PageMetaSchema


class AudioResponseSchema(CamelModel):
    success: bool = True
    data: AudioClipEntity


class AudioUploadResponseSchema(CamelModel):
    success: bool = True
    message: str
    audio: AudioClipEntity


def _page_response(result: CatalogPage, message: str) -> AudioListResponseSchema:
    return AudioListResponseSchema(
        message=message,
        data=result.items,
        meta=PageMetaSchema(page=result.page, limit=result.limit, total=result.total, has_more=result.has_more),
    )


async def _read_blob(upload: Optional[UploadFile]) -> Optional[UploadedBlob]:
    if upload is None:
        return None
    return UploadedBlob(filename=upload.filename, content_type=upload.content_type, data=await upload.read())


# --- Repository Dependencies ---
AudioClipRepo = Annotated[AudioClipRepository, Depends(get_repo(AudioClipEntity))]

# --- API Router ---
router = APIRouter(prefix="/audio", tags=["Audio"])


# Paging values are taken as text so bad input falls back to defaults instead of a 422.
@router.get("", response_model=AudioListResponseSchema)
async def list_audio(
    repo: AudioClipRepo,
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    q: Optional[str] = Query(None, description="Free-text search over title, category and artist"),
    type: Optional[str] = Query(None, description="music, sound, background-music, fx or all"),
):
    query = CatalogQuery.from_raw(page=page, limit=limit, query=q, type=type)
    result = await SearchAudioUseCase(repo).execute(query)
    message = "Audio files fetched successfully" if result.items else "No audio files found"
    return _page_response(result, message)


@router.get("/category/{category}", response_model=AudioListResponseSchema)
async def list_audio_by_category(
    category: str,
    repo: AudioClipRepo,
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
):
    query = CatalogQuery.for_category(category, page=page, limit=limit)
    result = await SearchAudioUseCase(repo).execute(query)
    if result.items:
        message = "Audio files fetched successfully"
    else:
        message = f"No audio files found for category: {category}"
    return _page_response(result, message)


@router.post("/upload", response_model=AudioUploadResponseSchema, status_code=status.HTTP_201_CREATED)
async def upload_audio(
    repo: AudioClipRepo,
    uow: UoW,
    storage: StorageDep,
    audio: Optional[UploadFile] = File(None),
    license_txt: Optional[UploadFile] = File(None),
    title: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    duration: Optional[str] = Form(None),
    type: Optional[str] = Form(None),
    priority: Optional[str] = Form(None),
    rating: Optional[str] = Form(None),
    download_count: Optional[str] = Form(None),
    soundflag: Optional[str] = Form(None),
    original_audio_url: Optional[str] = Form(None),
    artist_name: Optional[str] = Form(None),
):
    fields = IngestFields(
        title=title,
        category=category,
        type=type,
        duration=duration,
        priority=priority,
        rating=rating,
        download_count=download_count,
        sound_flag=soundflag,
        original_audio_url=original_audio_url,
        artist_name=artist_name,
    )
    created = await IngestAudioUseCase(repo, uow, storage).execute(
        fields, await _read_blob(audio), await _read_blob(license_txt)
    )
    return AudioUploadResponseSchema(message="Audio uploaded successfully", audio=created)


@router.get("/{audio_id}", response_model=AudioResponseSchema)
async def get_audio(audio_id: str, repo: AudioClipRepo):
    return AudioResponseSchema(data=await GetAudioUseCase(repo).execute(audio_id))
