import asyncio

import httpx
import pytest

from infrastructure.external_services.clients.catalog_client import (
    INVALID_RESPONSE_MESSAGE,
    NETWORK_ERROR_MESSAGE,
    CatalogClient,
    CatalogItemResult,
    CatalogPageResult,
    format_duration,
    normalize_category_key,
    to_track,
)

BASE_URL = "http://catalog.test/api"


def _clip(n, **overrides):
    clip = {
        "id": f"{n:024x}",
        "title": f"Track {n}",
        "category": "🎧 Lo-Fi",
        "type": "music",
        "duration": 125,
        "audioUrl": f"https://cdn.example.test/audio/{n}.mp3",
        "source": "ai_generated",
        "licenseType": "Envato MusicGen – Commercial License",
        "licenseUrl": f"https://cdn.example.test/licenses/{n}.txt",
        "artistName": "Envato MusicGen AI",
        "createdAt": "2026-01-01T00:00:00Z",
    }
    clip.update(overrides)
    return clip


def _client(handler):
    return CatalogClient(base_url=BASE_URL, client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


def _page_handler(total, limit):
    def handler(request):
        page = int(request.url.params.get("page", 1))
        start = (page - 1) * limit
        data = [_clip(i) for i in range(start, min(start + limit, total))]
        return httpx.Response(200, json={
            "success": True,
            "message": "Audio files fetched successfully",
            "data": data,
            "meta": {"page": page, "limit": limit, "total": total, "hasMore": start + len(data) < total},
        })
    return handler


def test_fetch_page_parses_envelope():
    seen = {}

    def handler(request):
        seen.update(request.url.params)
        return _page_handler(3, 20)(request)

    result = asyncio.run(_client(handler).fetch_page(query="lo fi", type="music"))
    assert isinstance(result, CatalogPageResult)
    assert result.ok
    assert result.total == 3
    assert result.has_more is False
    assert [item.title for item in result.items] == ["Track 0", "Track 1", "Track 2"]
    assert seen == {"page": "1", "limit": "20", "q": "lo fi", "type": "music"}


def test_iter_pages_follows_has_more():
    async def collect():
        return [page async for page in _client(_page_handler(45, 20)).iter_pages(limit=20)]

    pages = asyncio.run(collect())
    assert [len(page.items) for page in pages] == [20, 20, 5]
    assert [page.has_more for page in pages] == [True, True, False]


def test_iter_pages_stops_on_error():
    def handler(request):
        if request.url.params["page"] == "2":
            return httpx.Response(500, json={"success": False, "error": "Failed to fetch audio files"})
        return _page_handler(45, 20)(request)

    async def collect():
        return [page async for page in _client(handler).iter_pages(limit=20)]

    pages = asyncio.run(collect())
    assert len(pages) == 2
    assert pages[1].error == "Failed to fetch audio files"
    assert pages[1].items == []


def test_network_failure_becomes_message():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    result = asyncio.run(_client(handler).fetch_page())
    assert result.error == NETWORK_ERROR_MESSAGE
    assert result.items == []


def test_non_json_body_becomes_message():
    result = asyncio.run(_client(lambda request: httpx.Response(200, text="<html>oops</html>")).fetch_page())
    assert result.error == INVALID_RESPONSE_MESSAGE


def test_success_false_envelope():
    def handler(request):
        return httpx.Response(200, json={"success": False, "error": "Maintenance"})

    assert asyncio.run(_client(handler).fetch_page()).error == "Maintenance"


def test_fetch_category_encodes_path():
    paths = []

    def handler(request):
        paths.append(request.url.raw_path.decode())
        return _page_handler(1, 20)(request)

    result = asyncio.run(_client(handler).fetch_category("🎧 Lo-Fi"))
    assert result.ok
    assert paths[0].startswith("/api/audio/category/%F0%9F%8E%A7%20Lo-Fi")


def test_fetch_audio():
    def handler(request):
        if request.url.path.endswith("/" + "0" * 23 + "7"):
            return httpx.Response(200, json={"success": True, "data": _clip(7)})
        return httpx.Response(400, json={"success": False, "error": "Invalid audio ID format"})

    client = _client(handler)
    found = asyncio.run(client.fetch_audio(f"{7:024x}"))
    assert isinstance(found, CatalogItemResult)
    assert found.ok and found.audio.title == "Track 7"
    bad = asyncio.run(client.fetch_audio("nope"))
    assert bad.audio is None
    assert bad.error == "Invalid audio ID format"


@pytest.mark.parametrize("raw, expected", [
    ("😂 Funny / Comedy", "funny"),
    ("😢 Sad", "emotional"),
    ("Epic Trailer", "cinematic"),
    ("🔥 Viral", "trending"),
    ("🎧 Lo-Fi", "lofi"),
    ("Smooth Jazz", "jazz"),
    ("K-Pop", "pop"),
    ("🌧 Ambient", "ambient"),
    (None, None),
])
def test_normalize_category_key(raw, expected):
    assert normalize_category_key(raw) == expected


@pytest.mark.parametrize("seconds, expected", [(0, "0:00"), (5, "0:05"), (125, "2:05"), (59.9, "0:59"), (None, "—")])
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


def test_to_track():
    result = asyncio.run(_client(_page_handler(1, 20)).fetch_page())
    track = to_track(result.items[0])
    assert track["duration"] == "2:05"
    assert track["durationSeconds"] == 125
    assert track["uri"] == track["audioUrl"]
    assert track["artist"] == "Envato MusicGen AI"


def test_factory_returns_catalog_client():
    from infrastructure.external_services.factory import get_external_client

    assert isinstance(get_external_client("catalog"), CatalogClient)
    with pytest.raises(ValueError):
        get_external_client("email")
