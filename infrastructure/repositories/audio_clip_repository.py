# infrastructure/repositories/audio_clip_repository.py
from typing import List, Sequence, Type

from sqlalchemy import select, func, or_
from sqlalchemy.sql import ColumnElement

from features.audio.domain.entities.audio_clip import AudioClip as AudioClipEntity
from features.audio.domain.search import CatalogQuery, LIKE_ESCAPE_CHAR
from infrastructure.database.models.audio_clip_model import AudioClipModel
from infrastructure.repositories.base_repository import BaseRepository
from infrastructure.utils.logging_config import logger


class AudioClipRepository(BaseRepository[AudioClipModel, AudioClipEntity]):
    """Catalog store: create, find by id, filtered count and filtered page."""

    @property
    def model_class(self) -> Type[AudioClipModel]:
        return AudioClipModel

    @property
    def entity_class(self) -> Type[AudioClipEntity]:
        return AudioClipEntity

    def _build_filter(self, query: CatalogQuery) -> List[ColumnElement[bool]]:
        model = self.model_class
        clauses: List[ColumnElement[bool]] = []
        if query.pattern is not None:
            like = query.pattern.like
            if query.category_only:
                clauses.append(model.category.ilike(like, escape=LIKE_ESCAPE_CHAR))
            else:
                clauses.append(or_(
                    model.title.ilike(like, escape=LIKE_ESCAPE_CHAR),
                    model.category.ilike(like, escape=LIKE_ESCAPE_CHAR),
                    model.artist_name.ilike(like, escape=LIKE_ESCAPE_CHAR),
                ))
        if query.type is not None:
            clauses.append(func.lower(model.type) == query.type)
        return clauses

    async def count(self, query: CatalogQuery) -> int:
        stmt = select(func.count()).select_from(self.model_class).where(*self._build_filter(query))
        return (await self._scalar(stmt)) or 0

    async def find(self, query: CatalogQuery) -> Sequence[AudioClipEntity]:
        logger.debug(f"Finding {self.model_class.__name__} (skip={query.skip}, limit={query.limit}, type={query.type})")
        stmt = (
            select(self.model_class)
            .where(*self._build_filter(query))
            # id breaks createdAt ties so consecutive pages never overlap
            .order_by(self.model_class.created_at.desc(), self.model_class.id.desc())
            .offset(query.skip)
            .limit(query.limit)
        )
        models = await self._scalars_all(stmt)
        return self._map_models_to_entities(models)
