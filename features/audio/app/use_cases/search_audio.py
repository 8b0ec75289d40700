from sqlalchemy.exc import SQLAlchemyError

from features.audio.domain.entities.audio_clip import CatalogPage
from features.audio.domain.search import CatalogQuery
from infrastructure.repositories.audio_clip_repository import AudioClipRepository
from app.exceptions import PersistenceError
from infrastructure.utils.logging_config import logger


class SearchAudioUseCase:
    """Runs one catalog page query (free text, category or type scoped)."""

    def __init__(self, repository: AudioClipRepository):
        self._repository = repository

    async def execute(self, query: CatalogQuery) -> CatalogPage:
        log_extra = {
            "feature": "audio",
            "page": query.page,
            "limit": query.limit,
            "type": query.type,
            "category_only": query.category_only,
        }
        if query.pattern is not None:
            logger.debug(f"Catalog search pattern: {query.pattern.regex!r}", extra=log_extra)

        try:
            total = await self._repository.count(query)
            items = list(await self._repository.find(query))
        except SQLAlchemyError as e:
            logger.exception(f"Catalog query failed: {e}", extra=log_extra)
            raise PersistenceError("Failed to fetch audio files") from e

        has_more = query.skip + len(items) < total
        logger.info(f"Catalog page {query.page}: {len(items)} of {total} (has_more={has_more})", extra=log_extra)
        return CatalogPage(items=items, page=query.page, limit=query.limit, total=total, has_more=has_more)
