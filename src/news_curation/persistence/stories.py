"""SQL-backed story repository."""

import logging
from collections.abc import Callable, Sequence
from datetime import datetime

from sqlalchemy import Select, select

from news_curation.data import (
    Category,
    Country,
    DiscourseType,
    InterestTier,
    Language,
    Perspective,
    PerspectiveTags,
    Stance,
    Story,
    ensure_transition,
    utc_now,
)
from news_curation.errors import NotFoundError
from news_curation.persistence.base import (
    DEFAULT_COMPOSABLE_TIERS,
    MAX_SOURCE_REFERENCE_STORIES,
    StoryCriteria,
)
from news_curation.persistence.database import Database
from news_curation.persistence.tables import (
    ArticleRow,
    ArticleStoryRow,
    PerspectiveRow,
    StoryCountryRow,
    StoryRow,
)

logger = logging.getLogger(__name__)


def _story_to_row(story: Story) -> StoryRow:
    return StoryRow(
        id=story.id,
        category=story.category.value,
        dateline=story.dateline,
        synopsis=story.synopsis,
        source_references=list(story.source_references),
        interest_tier=story.interest_tier.value,
        created_at=story.created_at,
        updated_at=story.updated_at,
        countries=[StoryCountryRow(country=c.value) for c in story.countries],
        perspectives=[
            PerspectiveRow(
                id=p.id,
                holistic_digest=p.holistic_digest,
                stance=p.tags.stance.value if p.tags.stance else None,
                discourse_type=p.tags.discourse_type.value if p.tags.discourse_type else None,
                created_at=p.created_at,
                updated_at=p.updated_at,
            )
            for p in story.perspectives
        ],
    )


def _row_to_story(row: StoryRow) -> Story:
    return Story(
        id=row.id,
        category=Category.parse(row.category),
        countries=tuple(Country(c.country) for c in row.countries),
        dateline=row.dateline,
        synopsis=row.synopsis,
        source_references=tuple(row.source_references),
        perspectives=tuple(
            Perspective(
                id=p.id,
                story_id=row.id,
                holistic_digest=p.holistic_digest,
                tags=PerspectiveTags(
                    stance=Stance(p.stance) if p.stance else None,
                    discourse_type=DiscourseType(p.discourse_type) if p.discourse_type else None,
                ),
                created_at=p.created_at,
                updated_at=p.updated_at,
            )
            for p in row.perspectives
        ),
        created_at=row.created_at,
        updated_at=row.updated_at,
        interest_tier=InterestTier(row.interest_tier),
    )


def _in_country(country: Country, *, include_global: bool = False) -> Select[tuple[str]]:
    countries = {country.value}
    if include_global:
        countries.add(Country.GLOBAL.value)
    return select(StoryCountryRow.story_id).where(StoryCountryRow.country.in_(countries))


class SqlStoryRepository:
    """Stories and their perspectives, stored through SQLAlchemy."""

    def __init__(self, database: Database, *, clock: Callable[[], datetime] = utc_now) -> None:
        self._db = database
        self._clock = clock

    async def create(self, story: Story) -> Story:
        async with self._db.session() as session, session.begin():
            session.add(_story_to_row(story))
        logger.debug("Stored story %s with %d perspectives", story.id, len(story.perspectives))
        return story

    async def find_by_id(self, story_id: str) -> Story | None:
        async with self._db.session() as session:
            row = await session.get(StoryRow, story_id)
            return _row_to_story(row) if row is not None else None

    async def find_many(self, criteria: StoryCriteria) -> list[Story]:
        stmt = select(StoryRow)
        if criteria.category is not None:
            stmt = stmt.where(StoryRow.category == criteria.category.value)
        if criteria.country is not None:
            stmt = stmt.where(StoryRow.id.in_(_in_country(criteria.country)))
        if criteria.interest_tier is not None:
            stmt = stmt.where(StoryRow.interest_tier == criteria.interest_tier.value)
        if criteria.start_date is not None:
            stmt = stmt.where(StoryRow.dateline >= criteria.start_date)
        if criteria.end_date is not None:
            stmt = stmt.where(StoryRow.dateline <= criteria.end_date)
        stmt = stmt.order_by(StoryRow.dateline.desc()).offset(criteria.offset)
        if criteria.limit is not None:
            stmt = stmt.limit(criteria.limit)

        async with self._db.session() as session:
            rows = (await session.scalars(stmt)).all()
            return [_row_to_story(row) for row in rows]

    async def find_stories_without_articles(
        self,
        *,
        country: Country,
        language: Language,
        interest_tiers: Sequence[InterestTier] = DEFAULT_COMPOSABLE_TIERS,
        category: Category | None = None,
        limit: int = 50,
    ) -> list[Story]:
        """Stories for ``country`` (or global) with no article yet in that locale."""
        covered = (
            select(ArticleStoryRow.story_id)
            .join(ArticleRow, ArticleRow.id == ArticleStoryRow.article_id)
            .where(ArticleRow.country == country.value, ArticleRow.language == language.value)
        )
        stmt = select(StoryRow).where(
            StoryRow.interest_tier.in_([t.value for t in interest_tiers]),
            StoryRow.id.in_(_in_country(country, include_global=True)),
            StoryRow.id.not_in(covered),
        )
        if category is not None:
            stmt = stmt.where(StoryRow.category == category.value)
        stmt = stmt.order_by(StoryRow.created_at.desc()).limit(limit)

        async with self._db.session() as session:
            rows = (await session.scalars(stmt)).all()
            return [_row_to_story(row) for row in rows]

    async def get_all_source_references(self, country: Country | None = None) -> list[str]:
        stmt = select(StoryRow.source_references)
        if country is not None:
            stmt = stmt.where(StoryRow.id.in_(_in_country(country)))
        stmt = stmt.order_by(StoryRow.created_at.desc()).limit(MAX_SOURCE_REFERENCE_STORIES)

        async with self._db.session() as session:
            result = await session.scalars(stmt)
            return [ref for refs in result.all() for ref in refs]

    async def update(self, story_id: str, interest_tier: InterestTier) -> Story:
        async with self._db.session() as session, session.begin():
            row = await session.get(StoryRow, story_id)
            if row is None:
                raise NotFoundError(f"Story {story_id} not found")
            ensure_transition(InterestTier(row.interest_tier), interest_tier)
            row.interest_tier = interest_tier.value
            row.updated_at = self._clock()
            return _row_to_story(row)
