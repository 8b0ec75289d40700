"""
Client for the audio catalog API, as consumed by the mobile app.

Every public method returns a result object instead of raising: failures are
reported through ``error`` with a message suitable for showing to a user.
"""
import math
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, List, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError as PydanticValidationError

from app.config import settings
from features.audio.domain.entities.audio_clip import AudioClip
from features.audio.domain.search import DEFAULT_LIMIT, strip_emoji
from infrastructure.utils.logging_config import logger
from .base_client import ExternalServiceError
from .http_client import HTTPClient

NETWORK_ERROR_MESSAGE = "Unable to reach the audio catalog. Please check your connection and try again."
INVALID_RESPONSE_MESSAGE = "Received an unexpected response from the audio catalog."

# Substrings (lower-cased label) -> category key, first match wins
_CATEGORY_KEYWORDS = (
    ("funny", ("funny", "comedy", "😂")),
    ("emotional", ("sad", "emotional", "😭", "😢")),
    ("cinematic", ("cinematic", "epic")),
    ("trending", ("viral", "trending", "🔥")),
    ("lofi", ("lo-fi", "lofi")),
    ("jazz", ("jazz",)),
    ("pop", ("pop",)),
)


def normalize_category_key(raw: Optional[str]) -> Optional[str]:
    """Maps a human category label such as ``"😂 Funny / Comedy"`` to a short key."""
    if not raw:
        return None
    label = str(raw).lower()
    for key, needles in _CATEGORY_KEYWORDS:
        if any(needle in label for needle in needles):
            return key
    return strip_emoji(label).strip() or label


def format_duration(seconds: Optional[float]) -> str:
    if seconds is None:
        return "—"
    try:
        value = float(seconds)
    except (TypeError, ValueError):
        return "—"
    if not math.isfinite(value) or value < 0:
        return "—"
    mins, secs = divmod(int(value), 60)
    return f"{mins}:{secs:02d}"


def to_track(clip: AudioClip) -> Dict[str, Any]:
    """Player-ready dict: the clip's camelCase fields plus display helpers."""
    track = clip.model_dump(by_alias=True, mode="json")
    track.update({
        "artist": clip.artist_name or "Unknown Artist",
        "duration": format_duration(clip.duration),
        "durationSeconds": clip.duration,
        "uri": clip.audio_url,
    })
    return track


@dataclass
class CatalogPageResult:
    items: List[AudioClip] = field(default_factory=list)
    page: int = 1
    limit: int = DEFAULT_LIMIT
    total: int = 0
    has_more: bool = False
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class CatalogItemResult:
    audio: Optional[AudioClip] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _error_message(exc: ExternalServiceError) -> str:
    original = exc.original_exception
    if isinstance(original, httpx.HTTPStatusError):
        try:
            body = original.response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        return f"Audio catalog request failed (status {original.response.status_code})."
    if isinstance(original, httpx.RequestError):
        return NETWORK_ERROR_MESSAGE
    return INVALID_RESPONSE_MESSAGE


class CatalogClient(HTTPClient):
    def __init__(self, base_url: Optional[str] = None, client: Optional[httpx.AsyncClient] = None,
                 timeout: Optional[float] = None):
        super().__init__(
            base_url=base_url or settings.CATALOG_API_URL,
            service_name="Audio Catalog",
            default_headers={"Accept": "application/json"},
            default_timeout=timeout,
            client=client,
        )

    async def _get_envelope(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        payload = await self.get(endpoint, params=params)
        if not isinstance(payload, dict):
            raise ExternalServiceError(INVALID_RESPONSE_MESSAGE, self.service_name)
        if not payload.get("success"):
            raise ExternalServiceError(str(payload.get("error") or INVALID_RESPONSE_MESSAGE), self.service_name)
        return payload

    def _parse_page(self, payload: Dict[str, Any], page: int, limit: int) -> CatalogPageResult:
        data = payload.get("data") or []
        if isinstance(data, dict):
            data = [data]
        meta = payload.get("meta") or {}
        items = [AudioClip.model_validate(item) for item in data]
        return CatalogPageResult(
            items=items,
            page=int(meta.get("page", page)),
            limit=int(meta.get("limit", limit)),
            total=int(meta.get("total", len(items))),
            has_more=bool(meta.get("hasMore", False)),
        )

    async def _fetch_page(self, endpoint: str, params: Dict[str, Any], page: int, limit: int) -> CatalogPageResult:
        try:
            payload = await self._get_envelope(endpoint, params)
            return self._parse_page(payload, page, limit)
        except ExternalServiceError as e:
            message = e.message if e.original_exception is None else _error_message(e)
            logger.warning(f"Catalog page request failed: {e}", extra={"endpoint": endpoint})
            return CatalogPageResult(page=page, limit=limit, error=message)
        except (PydanticValidationError, TypeError, ValueError) as e:
            logger.warning(f"Malformed catalog page from {endpoint}: {e}")
            return CatalogPageResult(page=page, limit=limit, error=INVALID_RESPONSE_MESSAGE)

    async def fetch_page(self, page: int = 1, limit: int = DEFAULT_LIMIT, query: Optional[str] = None,
                         type: Optional[str] = None) -> CatalogPageResult:
        params: Dict[str, Any] = {"page": page, "limit": limit}
        if query:
            params["q"] = query
        if type:
            params["type"] = type
        return await self._fetch_page("/audio", params, page, limit)

    async def fetch_category(self, category: str, page: int = 1, limit: int = DEFAULT_LIMIT) -> CatalogPageResult:
        endpoint = f"/audio/category/{quote(category, safe='')}"
        return await self._fetch_page(endpoint, {"page": page, "limit": limit}, page, limit)

    async def fetch_audio(self, audio_id: str) -> CatalogItemResult:
        try:
            payload = await self._get_envelope(f"/audio/{quote(audio_id, safe='')}")
            data = payload.get("data")
            return CatalogItemResult(audio=AudioClip.model_validate(data) if data else None)
        except ExternalServiceError as e:
            message = e.message if e.original_exception is None else _error_message(e)
            logger.warning(f"Catalog item request failed: {e}", extra={"audio_id": audio_id})
            return CatalogItemResult(error=message)
        except (PydanticValidationError, TypeError, ValueError) as e:
            logger.warning(f"Malformed catalog item {audio_id}: {e}")
            return CatalogItemResult(error=INVALID_RESPONSE_MESSAGE)

    async def iter_pages(self, query: Optional[str] = None, type: Optional[str] = None,
                         limit: int = DEFAULT_LIMIT) -> AsyncIterator[CatalogPageResult]:
        """Yields page 1, 2, ... until the server reports no more, or a page fails."""
        page = 1
        while True:
            result = await self.fetch_page(page=page, limit=limit, query=query, type=type)
            yield result
            if not result.ok or not result.has_more:
                return
            page += 1
