"""SQL-backed article repository."""

import logging
from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import ColumnElement, func, select

from news_curation.agents.base import PublishedSummary
from news_curation.data import (
    Article,
    ArticleVariant,
    Authenticity,
    Category,
    Country,
    DiscourseType,
    Language,
    PublicationTier,
    Stance,
    ensure_transition,
)
from news_curation.errors import NotFoundError
from news_curation.persistence.base import ArticleCriteria, ArticleSlice
from news_curation.persistence.database import Database
from news_curation.persistence.tables import ArticleRow, ArticleStoryRow

logger = logging.getLogger(__name__)


def _article_to_row(article: Article) -> ArticleRow:
    return ArticleRow(
        id=article.id,
        headline=article.headline,
        body=article.body,
        summary=article.summary,
        category=article.category.value,
        country=article.country.value,
        language=article.language.value,
        is_fake=article.authenticity.is_fake,
        fake_reason=article.authenticity.reason,
        publication_tier=article.publication_tier.value,
        variants=[
            {
                "headline": v.headline,
                "body": v.body,
                "stance": v.stance.value,
                "discourse": v.discourse.value,
            }
            for v in article.variants
        ],
        published_at=article.published_at,
        created_at=article.created_at,
        story_links=[ArticleStoryRow(story_id=story_id) for story_id in article.story_ids],
    )


def _row_to_article(row: ArticleRow) -> Article:
    return Article(
        id=row.id,
        headline=row.headline,
        body=row.body,
        summary=row.summary,
        category=Category.parse(row.category),
        country=Country(row.country),
        language=Language(row.language),
        authenticity=Authenticity(is_fake=row.is_fake, reason=row.fake_reason),
        published_at=row.published_at,
        created_at=row.created_at,
        publication_tier=PublicationTier(row.publication_tier),
        story_ids=tuple(sorted(link.story_id for link in row.story_links)),
        variants=tuple(
            ArticleVariant(
                headline=v["headline"],
                body=v["body"],
                stance=Stance(v["stance"]),
                discourse=DiscourseType(v["discourse"]),
            )
            for v in row.variants or []
        ),
    )


def _filters(criteria: ArticleCriteria) -> list[ColumnElement[bool]]:
    conditions: list[ColumnElement[bool]] = []
    if criteria.category is not None:
        conditions.append(ArticleRow.category == criteria.category.value)
    if criteria.country is not None:
        conditions.append(ArticleRow.country == criteria.country.value)
    if criteria.language is not None:
        conditions.append(ArticleRow.language == criteria.language.value)
    if criteria.publication_tiers is not None:
        conditions.append(
            ArticleRow.publication_tier.in_([t.value for t in criteria.publication_tiers])
        )
    return conditions


class SqlArticleRepository:
    """Articles, their variants and story links, stored through SQLAlchemy."""

    def __init__(self, database: Database) -> None:
        self._db = database

    async def create_many(self, articles: Sequence[Article]) -> int:
        if not articles:
            return 0
        async with self._db.session() as session, session.begin():
            session.add_all([_article_to_row(a) for a in articles])
        logger.debug("Stored %d articles", len(articles))
        return len(articles)

    async def find_by_id(self, article_id: str) -> Article | None:
        async with self._db.session() as session:
            row = await session.get(ArticleRow, article_id)
            return _row_to_article(row) if row is not None else None

    async def find_many(self, criteria: ArticleCriteria) -> ArticleSlice:
        conditions = _filters(criteria)

        stmt = select(ArticleRow).where(*conditions)
        if criteria.before is not None:
            stmt = stmt.where(ArticleRow.created_at < criteria.before)
        stmt = stmt.order_by(ArticleRow.created_at.desc(), ArticleRow.id.desc())
        if criteria.limit is not None:
            stmt = stmt.limit(criteria.limit)

        count_stmt = select(func.count()).select_from(ArticleRow).where(*conditions)

        async with self._db.session() as session:
            rows = (await session.scalars(stmt)).all()
            total = await session.scalar(count_stmt)
            return ArticleSlice(items=[_row_to_article(r) for r in rows], total=total or 0)

    async def count_many(
        self, *, country: Country, language: Language, start: datetime, end: datetime
    ) -> int:
        """Count articles for a locale created in ``[start, end)``."""
        stmt = (
            select(func.count())
            .select_from(ArticleRow)
            .where(
                ArticleRow.country == country.value,
                ArticleRow.language == language.value,
                ArticleRow.created_at >= start,
                ArticleRow.created_at < end,
            )
        )
        async with self._db.session() as session:
            return await session.scalar(stmt) or 0

    async def find_published_summaries(
        self, *, country: Country, language: Language, since: datetime
    ) -> list[PublishedSummary]:
        stmt = (
            select(ArticleRow.headline, ArticleRow.summary)
            .where(
                ArticleRow.country == country.value,
                ArticleRow.language == language.value,
                ArticleRow.created_at >= since,
            )
            .order_by(ArticleRow.created_at.desc())
        )
        async with self._db.session() as session:
            result = await session.execute(stmt)
            return [PublishedSummary(headline=h, summary=s) for h, s in result.all()]

    async def update(self, article_id: str, publication_tier: PublicationTier) -> Article:
        async with self._db.session() as session, session.begin():
            row = await session.get(ArticleRow, article_id)
            if row is None:
                raise NotFoundError(f"Article {article_id} not found")
            ensure_transition(PublicationTier(row.publication_tier), publication_tier)
            row.publication_tier = publication_tier.value
            return _row_to_article(row)
