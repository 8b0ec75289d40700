# features/audio/domain/search.py
"""
Query rules for the audio catalog.

Free text is matched "in order, anything in between": ``"lo fi"`` finds
``"Lo-Fi Chill"`` and ``"🎧 Lo-Fi"``. Text is first normalised (emoji removed,
``/ _ -`` runs turned into spaces, whitespace collapsed), then split into tokens
which are joined by ``.*`` into a single case-insensitive pattern.

The store receives the same pattern as a ``LIKE`` expression (tokens joined by
``%``) so it can run in SQL; :attr:`SearchPattern.regex` keeps the regular
expression form for in-process matching.
"""
import re
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from infrastructure.utils.validation_utils import parse_number

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MAX_LIMIT = 100
# Keeps (page - 1) * limit within a signed 64-bit OFFSET
MAX_PAGE = (2 ** 63 - 1) // MAX_LIMIT

NO_TYPE_FILTER_VALUES = frozenset({"", "all", "undefined", "null"})

LIKE_ESCAPE_CHAR = "\\"

# Pictographic emoji, regional indicators, dingbats and misc symbols, plus the
# joiners that glue sequences together (ZWJ, variation selectors, keycap, tags).
# ASCII digits, '#' and '*' are emoji-capable in Unicode but are kept.
_EMOJI_RE = re.compile(
    "["
    "\U0001F000-\U0001FAFF"
    "\U00002600-\U000027BF"
    "\U00002B00-\U00002BFF"
    "\U00002300-\U000023FF"
    "\U0000203C\U00002049\U00002122\U00002139"
    "\U00002194-\U00002199\U000021A9\U000021AA"
    "\U000024C2\U000025AA\U000025AB\U000025B6\U000025C0\U000025FB-\U000025FE"
    "\U00002934\U00002935\U00003030\U0000303D\U00003297\U00003299"
    "\U000000A9\U000000AE"
    "\U0000200D\U0000FE0E\U0000FE0F\U000020E3"
    "\U000E0020-\U000E007F"
    "]"
)
_SEPARATOR_RE = re.compile(r"[/_\-]+")
_WHITESPACE_RE = re.compile(r"\s+")


def strip_emoji(text: str) -> str:
    return _EMOJI_RE.sub("", text)


def normalize_search_text(raw: Optional[str]) -> str:
    """Emoji-free, separator-free, single-spaced, trimmed. Idempotent."""
    if not raw:
        return ""
    text = strip_emoji(str(raw))
    text = _SEPARATOR_RE.sub(" ", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def _escape_like(token: str) -> str:
    return (
        token.replace(LIKE_ESCAPE_CHAR, LIKE_ESCAPE_CHAR * 2)
        .replace("%", LIKE_ESCAPE_CHAR + "%")
        .replace("_", LIKE_ESCAPE_CHAR + "_")
    )


@dataclass(frozen=True)
class SearchPattern:
    """Ordered-token pattern built from user text."""
    text: str
    tokens: Tuple[str, ...]

    @property
    def regex(self) -> str:
        if self.tokens:
            return ".*".join(re.escape(token) for token in self.tokens)
        return re.escape(self.text)

    @property
    def like(self) -> str:
        if self.tokens:
            return "%" + "%".join(_escape_like(token) for token in self.tokens) + "%"
        return "%" + _escape_like(self.text) + "%"

    def matches(self, value: Optional[str]) -> bool:
        if value is None:
            return False
        return re.search(self.regex, value, flags=re.IGNORECASE | re.DOTALL) is not None


def build_search_pattern(raw: Optional[str]) -> Optional[SearchPattern]:
    """Returns None when there is no text to filter on (missing or blank query)."""
    if raw is None or not str(raw).strip():
        return None
    normalized = normalize_search_text(str(raw).strip())
    tokens = tuple(token for token in normalized.split(" ") if token)
    return SearchPattern(text=normalized, tokens=tokens)


def normalize_type_filter(raw: Optional[str]) -> Optional[str]:
    """Lower-cased type to filter on, or None for "all types"."""
    if raw is None:
        return None
    value = str(raw).strip().lower()
    if value in NO_TYPE_FILTER_VALUES:
        return None
    return value


def clamp_page(raw: Any) -> int:
    number = parse_number(raw)
    if number is None or int(number) < 1:
        return DEFAULT_PAGE
    return min(int(number), MAX_PAGE)


def clamp_limit(raw: Any) -> int:
    number = parse_number(raw)
    if number is None or int(number) < 1:
        return DEFAULT_LIMIT
    return min(int(number), MAX_LIMIT)


@dataclass(frozen=True)
class CatalogQuery:
    """Validated, clamped parameters for one catalog page request."""
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    pattern: Optional[SearchPattern] = None
    type: Optional[str] = None
    # Restrict matching to the category column (category listing).
    category_only: bool = False

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    @classmethod
    def from_raw(cls, page: Any = None, limit: Any = None, query: Optional[str] = None,
                 type: Optional[str] = None) -> "CatalogQuery":
        return cls(
            page=clamp_page(page),
            limit=clamp_limit(limit),
            pattern=build_search_pattern(query),
            type=normalize_type_filter(type),
        )

    @classmethod
    def for_category(cls, category: Optional[str], page: Any = None, limit: Any = None) -> "CatalogQuery":
        return cls(
            page=clamp_page(page),
            limit=clamp_limit(limit),
            pattern=build_search_pattern(normalize_search_text(category)) if category else None,
            category_only=True,
        )
