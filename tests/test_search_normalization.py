import pytest

from features.audio.domain.search import (
    CatalogQuery,
    build_search_pattern,
    clamp_limit,
    MAX_PAGE,
    clamp_page,
    normalize_search_text,
    normalize_type_filter,
    strip_emoji,
)


@pytest.mark.parametrize("raw, expected", [
    ("🎧 Lo-Fi", "Lo Fi"),
    ("  rock//pop__jazz--x  ", "rock pop jazz x"),
    ("😂 Funny / Comedy", "Funny Comedy"),
    ("Track #1 *live*", "Track #1 *live*"),
    ("👩‍🎤 Singer", "Singer"),
    ("", ""),
    (None, ""),
])
def test_normalize_search_text(raw, expected):
    assert normalize_search_text(raw) == expected


@pytest.mark.parametrize("raw", ["🎧 Lo-Fi", "a  -_/ b", "❤️ love songs 🔥", "plain"])
def test_normalize_is_idempotent(raw):
    once = normalize_search_text(raw)
    assert normalize_search_text(once) == once


def test_strip_emoji_keeps_digits_and_ascii_symbols():
    assert strip_emoji("1#*🔥") == "1#*"


def test_pattern_tokens_in_order():
    pattern = build_search_pattern("lo fi")
    assert pattern.tokens == ("lo", "fi")
    assert pattern.regex == "lo.*fi"
    assert pattern.like == "%lo%fi%"
    assert pattern.matches("Lo-Fi Chill")
    assert pattern.matches("🎧 Lo-Fi")
    assert not pattern.matches("Fi Lo")
    assert not pattern.matches(None)


def test_pattern_escapes_like_metacharacters():
    pattern = build_search_pattern("100% pure")
    assert pattern.like == "%100\\%%pure%"
    assert pattern.matches("100% pure vibes")


def test_blank_query_means_no_filter():
    assert build_search_pattern(None) is None
    assert build_search_pattern("   ") is None


def test_emoji_only_query_matches_everything():
    pattern = build_search_pattern("🔥🔥")
    assert pattern.tokens == ()
    assert pattern.like == "%%"
    assert pattern.matches("anything")


@pytest.mark.parametrize("raw", [None, "", "all", "ALL", " undefined ", "null", "Null"])
def test_type_filter_disabled_values(raw):
    assert normalize_type_filter(raw) is None


def test_type_filter_lowercases():
    assert normalize_type_filter(" FX ") == "fx"


@pytest.mark.parametrize("raw, expected", [
    (None, 1), ("abc", 1), ("0", 1), ("-3", 1), ("3", 3), ("2.7", 2), (4, 4),
    ("1e20", MAX_PAGE), (10 ** 30, MAX_PAGE), ("-1e20", 1),
])
def test_clamp_page(raw, expected):
    assert clamp_page(raw) == expected


@pytest.mark.parametrize("raw, expected", [
    (None, 20), ("abc", 20), ("0", 20), ("-1", 20), ("5", 5), ("100", 100), ("500", 100),
])
def test_clamp_limit(raw, expected):
    assert clamp_limit(raw) == expected


def test_catalog_query_skip():
    query = CatalogQuery.from_raw(page="3", limit="20", query="lo fi", type="all")
    assert query.skip == 40
    assert query.type is None
    assert query.pattern.tokens == ("lo", "fi")


def test_largest_page_offset_fits_in_64_bits():
    query = CatalogQuery.from_raw(page="1e300", limit="1000")
    assert query.page == MAX_PAGE
    assert query.skip <= 2 ** 63 - 1


def test_category_query_normalizes_segment():
    query = CatalogQuery.for_category("🎧 Lo-Fi")
    assert query.category_only
    assert query.pattern.text == "Lo Fi"
