"""Repository protocols and query criteria."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from news_curation.agents.base import PublishedSummary
from news_curation.data import (
    Article,
    Category,
    Country,
    InterestTier,
    Language,
    PublicationTier,
    Story,
)

MAX_SOURCE_REFERENCE_STORIES = 2000

DEFAULT_COMPOSABLE_TIERS: tuple[InterestTier, ...] = (
    InterestTier.STANDARD,
    InterestTier.NICHE,
    InterestTier.PENDING_REVIEW,
)


@dataclass(frozen=True)
class StoryCriteria:
    """Filters for listing stories. ``None`` means unfiltered."""

    category: Category | None = None
    country: Country | None = None
    interest_tier: InterestTier | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    limit: int | None = None
    offset: int = 0


@dataclass(frozen=True)
class ArticleCriteria:
    """Filters for listing articles, newest first.

    ``before`` keeps only articles created strictly before that instant and
    does not affect the reported total.
    """

    category: Category | None = None
    country: Country | None = None
    language: Language | None = None
    publication_tiers: tuple[PublicationTier, ...] | None = None
    before: datetime | None = None
    limit: int | None = None


@dataclass(frozen=True)
class ArticleSlice:
    """A window of articles plus the count of all matches."""

    items: list[Article]
    total: int


class StoryRepository(Protocol):
    async def create(self, story: Story) -> Story: ...

    async def find_by_id(self, story_id: str) -> Story | None: ...

    async def find_many(self, criteria: StoryCriteria) -> list[Story]: ...

    async def find_stories_without_articles(
        self,
        *,
        country: Country,
        language: Language,
        interest_tiers: Sequence[InterestTier] = DEFAULT_COMPOSABLE_TIERS,
        category: Category | None = None,
        limit: int = 50,
    ) -> list[Story]: ...

    async def get_all_source_references(self, country: Country | None = None) -> list[str]: ...

    async def update(self, story_id: str, interest_tier: InterestTier) -> Story: ...


class ArticleRepository(Protocol):
    async def create_many(self, articles: Sequence[Article]) -> int: ...

    async def find_by_id(self, article_id: str) -> Article | None: ...

    async def find_many(self, criteria: ArticleCriteria) -> ArticleSlice: ...

    async def count_many(
        self, *, country: Country, language: Language, start: datetime, end: datetime
    ) -> int: ...

    async def find_published_summaries(
        self, *, country: Country, language: Language, since: datetime
    ) -> list[PublishedSummary]: ...

    async def update(self, article_id: str, publication_tier: PublicationTier) -> Article: ...
