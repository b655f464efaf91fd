"""Cursor-paginated article retrieval."""

import base64
import binascii
import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from news_curation.data import PUBLISHED_TIERS, Article, Category, Country, Language, PublicationTier
from news_curation.errors import DomainValidationError, InvalidCursorError
from news_curation.persistence.base import ArticleCriteria, ArticleRepository

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10
MAX_LIMIT = 100
DEFAULT_COUNTRY = Country.US


def encode_cursor(value: datetime) -> str:
    """Encode a creation timestamp as an opaque cursor (base64 epoch millis)."""
    millis = round(value.timestamp() * 1000)
    return base64.b64encode(str(millis).encode("ascii")).decode("ascii")


def decode_cursor(cursor: str) -> datetime:
    """Decode a cursor produced by :func:`encode_cursor`.

    Raises:
        InvalidCursorError: If the cursor is not base64 of an integer.
    """
    try:
        payload = base64.b64decode(cursor.encode("ascii"), validate=True).decode("ascii")
        millis = int(payload)
        return datetime.fromtimestamp(millis / 1000, tz=UTC)
    except (binascii.Error, UnicodeError, ValueError, OverflowError, OSError):
        raise InvalidCursorError() from None


@dataclass(frozen=True)
class ArticleQuery:
    """Parameters of one page request."""

    category: Category | None = None
    country: Country | None = None
    language: Language | None = None
    cursor: str | None = None
    limit: int = DEFAULT_LIMIT
    tiers: tuple[PublicationTier, ...] = PUBLISHED_TIERS


@dataclass(frozen=True)
class ArticlePage:
    """One page of articles, newest first."""

    items: list[Article]
    next_cursor: str | None
    total: int


class GetArticles:
    """Page through articles by descending creation time.

    Args:
        article_repository: Article persistence.
    """

    def __init__(self, article_repository: ArticleRepository) -> None:
        self._articles = article_repository

    async def execute(self, query: ArticleQuery) -> ArticlePage:
        if not 1 <= query.limit <= MAX_LIMIT:
            raise DomainValidationError(f"Limit must be between 1 and {MAX_LIMIT}")
        before = decode_cursor(query.cursor) if query.cursor else None

        result = await self._articles.find_many(
            ArticleCriteria(
                category=query.category,
                country=query.country or DEFAULT_COUNTRY,
                language=query.language,
                publication_tiers=query.tiers,
                before=before,
                limit=query.limit + 1,
            )
        )

        items = result.items
        next_cursor = None
        if len(items) > query.limit:
            items = items[: query.limit]
            next_cursor = encode_cursor(items[-1].created_at)

        logger.debug(
            "Returning %d of %d articles (next cursor: %s)", len(items), result.total, next_cursor
        )
        return ArticlePage(items=items, next_cursor=next_cursor, total=result.total)
