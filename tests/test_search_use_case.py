import asyncio

import pytest
from sqlalchemy.exc import OperationalError

from app.exceptions import NotFoundError, PersistenceError, ValidationError
from features.audio.app.use_cases.get_audio import GetAudioUseCase
from features.audio.app.use_cases.search_audio import SearchAudioUseCase
from features.audio.domain.search import CatalogQuery
from infrastructure.repositories.audio_clip_repository import AudioClipRepository


def _search(session, **raw):
    return asyncio.run(SearchAudioUseCase(AudioClipRepository(session)).execute(CatalogQuery.from_raw(**raw)))


def test_lo_fi_matches_title_and_category(session, seed_clips):
    seed_clips(
        {"title": "Lo-Fi Chill", "category": "🎧 Lo-Fi"},
        {"title": "Epic Trailer", "category": "🎬 Cinematic"},
    )
    result = _search(session, query="lo fi")
    assert [clip.title for clip in result.items] == ["Lo-Fi Chill"]
    assert result.total == 1
    assert result.has_more is False


def test_query_matches_artist_name(session, seed_clips):
    seed_clips({"title": "Untitled", "artist_name": "DJ Lofi Cat"}, {"title": "Other"})
    result = _search(session, query="lofi cat")
    assert result.total == 1
    assert result.items[0].artist_name == "DJ Lofi Cat"


def test_tokens_must_appear_in_order(session, seed_clips):
    seed_clips({"title": "Chill Lo-Fi"})
    assert _search(session, query="lo fi").total == 1
    assert _search(session, query="fi chill").total == 0


def test_like_metacharacters_are_literal(session, seed_clips):
    seed_clips({"title": "50% off"}, {"title": "500 off"}, {"title": "a_b"}, {"title": "axb"})
    assert [c.title for c in _search(session, query="50%").items] == ["50% off"]
    # '_' is a separator, so "a_b" searches for "a" then "b"
    assert {c.title for c in _search(session, query="a_b").items} == {"a_b", "axb"}


def test_type_filter_is_case_insensitive(session, seed_clips):
    seed_clips({"title": "Boom", "type": "fx"}, {"title": "Song", "type": "music"})
    assert [c.title for c in _search(session, type="FX").items] == ["Boom"]
    assert _search(session, type="all").total == 2
    assert _search(session, type="undefined").total == 2
    assert _search(session, type="jingle").total == 0


def test_newest_first(session, seed_clips):
    seed_clips({"title": "old"}, {"title": "mid"}, {"title": "new"})
    assert [c.title for c in _search(session).items] == ["new", "mid", "old"]


def test_pages_of_45(session, seed_clips):
    seed_clips(*({"title": f"Track {i}"} for i in range(45)))
    pages = [_search(session, page=page, limit=20) for page in (1, 2, 3)]
    assert [len(p.items) for p in pages] == [20, 20, 5]
    assert [p.has_more for p in pages] == [True, True, False]
    assert all(p.total == 45 for p in pages)
    ids = [clip.id for p in pages for clip in p.items]
    assert len(set(ids)) == 45


def test_page_past_the_end_is_empty(session, seed_clips):
    seed_clips({"title": "only"})
    result = _search(session, page=5, limit=10)
    assert result.items == []
    assert result.total == 1
    assert result.has_more is False


def test_category_variant_ignores_title(session, seed_clips):
    seed_clips(
        {"title": "Lo-Fi in the title", "category": "General"},
        {"title": "Study", "category": "🎧 Lo-Fi"},
    )
    query = CatalogQuery.for_category("lo-fi")
    result = asyncio.run(SearchAudioUseCase(AudioClipRepository(session)).execute(query))
    assert [c.title for c in result.items] == ["Study"]


def test_store_failure_maps_to_persistence_error(session, monkeypatch):
    repo = AudioClipRepository(session)

    async def broken_count(query):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(repo, "count", broken_count)
    with pytest.raises(PersistenceError) as excinfo:
        asyncio.run(SearchAudioUseCase(repo).execute(CatalogQuery()))
    assert excinfo.value.detail == "Failed to fetch audio files"
    assert excinfo.value.status_code == 500


def test_get_audio(session, seed_clips):
    (clip_id,) = seed_clips({"title": "Found me"})
    use_case = GetAudioUseCase(AudioClipRepository(session))
    assert asyncio.run(use_case.execute(clip_id)).title == "Found me"
    with pytest.raises(NotFoundError):
        asyncio.run(use_case.execute("0" * 24))
    with pytest.raises(ValidationError) as excinfo:
        asyncio.run(use_case.execute("not-a-valid-id"))
    assert excinfo.value.status_code == 400
