"""Article generation: composition from stories and direct generation from news."""

import logging
import math
import random
from collections.abc import Callable
from datetime import datetime, timedelta

from news_curation.agents.base import ArticleComposerAgent, ArticleGeneratorAgent, GeneratedArticle
from news_curation.data import (
    Article,
    Authenticity,
    Country,
    Language,
    Story,
    truncate_to_millis,
    utc_now,
)
from news_curation.dates import local_day_bounds, local_time
from news_curation.news.base import NewsProvider
from news_curation.persistence.base import ArticleRepository, StoryRepository

logger = logging.getLogger(__name__)

STORY_BATCH_SIZE = 50
MIN_DIRECT_COVERAGE = 2
MIN_NEWS_RATIO = 0.6
HISTORY_WINDOW = timedelta(days=30)

# (hour before which the target applies, articles expected by then)
DAILY_TARGETS: tuple[tuple[int, int], ...] = ((7, 0), (14, 4), (20, 8))
END_OF_DAY_TARGET = 12


def daily_target(local_hour: int) -> int:
    """Articles a locale should have by ``local_hour``."""
    for before_hour, target in DAILY_TARGETS:
        if local_hour < before_hour:
            return target
    return END_OF_DAY_TARGET


class ComposeArticles:
    """Compose one article per story that has none yet in the target locale.

    Args:
        agent: Article composer agent.
        story_repository: Story persistence.
        article_repository: Article persistence.
        clock: Returns the current UTC time.
    """

    def __init__(
        self,
        agent: ArticleComposerAgent,
        story_repository: StoryRepository,
        article_repository: ArticleRepository,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._agent = agent
        self._stories = story_repository
        self._articles = article_repository
        self._clock = clock

    async def execute(self, country: Country, language: Language) -> list[Article]:
        stories = await self._stories.find_stories_without_articles(
            country=country, language=language, limit=STORY_BATCH_SIZE
        )
        if not stories:
            logger.info("No stories awaiting articles for %s/%s", country, language)
            return []

        logger.info("Composing articles for %d stories (%s/%s)", len(stories), country, language)
        created: list[Article] = []
        for story in stories:
            try:
                article = await self._compose(story, country, language)
            except Exception:
                logger.exception("Failed to compose article for story %s", story.id)
                continue
            if article is not None:
                created.append(article)

        logger.info(
            "Composed %d of %d articles for %s/%s", len(created), len(stories), country, language
        )
        return created

    async def _compose(self, story: Story, country: Country, language: Language) -> Article | None:
        composition = await self._agent.compose(story, country=country, language=language)
        if composition is None:
            logger.warning("Composer returned nothing for story %s", story.id)
            return None

        article = Article.create(
            headline=composition.headline,
            body=composition.body,
            summary=composition.summary,
            category=composition.category,
            country=country,
            language=language,
            story_ids=(story.id,),
            variants=composition.variants,
            now=self._clock(),
        )
        await self._articles.create_many([article])
        return article


class GenerateArticlesFromNews:
    """Top up a locale's daily quota with a mixed batch of real and fake articles.

    The quota grows through the local day (see :func:`daily_target`). Items of
    a batch are shuffled and given creation times one second apart, so their
    order is strict and the fabricated ones are not grouped.

    Args:
        agent: Article generator agent.
        news_provider: Source of raw news clusters.
        article_repository: Article persistence.
        clock: Returns the current UTC time.
        rng: Random source used to shuffle the batch.
    """

    def __init__(
        self,
        agent: ArticleGeneratorAgent,
        news_provider: NewsProvider,
        article_repository: ArticleRepository,
        clock: Callable[[], datetime] = utc_now,
        rng: random.Random | None = None,
    ) -> None:
        self._agent = agent
        self._news = news_provider
        self._articles = article_repository
        self._clock = clock
        self._rng = rng or random.Random()

    async def target_count(self, country: Country, language: Language, now: datetime) -> int:
        """Articles still missing today for the locale."""
        start, end = local_day_bounds(country, now)
        existing = await self._articles.count_many(
            country=country, language=language, start=start, end=end
        )
        target = daily_target(local_time(country, now).hour)
        logger.info(
            "Locale %s/%s has %d articles today, target is %d", country, language, existing, target
        )
        return target - existing

    async def execute(self, country: Country, language: Language) -> list[Article]:
        now = self._clock()
        count = await self.target_count(country, language, now)
        if count <= 0:
            logger.info("Daily article target already met for %s/%s", country, language)
            return []

        news = await self._news.fetch_news(country=country, language=language)
        candidates = sorted(
            (item for item in news if item.coverage > MIN_DIRECT_COVERAGE),
            key=lambda item: item.coverage,
            reverse=True,
        )
        if not candidates:
            logger.warning("No widely covered news for %s/%s", country, language)
            return []
        minimum = math.floor(count * MIN_NEWS_RATIO)
        if len(candidates) < minimum:
            logger.warning(
                "Only %d news items for %s/%s, need at least %d to generate %d articles",
                len(candidates),
                country,
                language,
                minimum,
                count,
            )
            return []

        history = await self._articles.find_published_summaries(
            country=country, language=language, since=now - HISTORY_WINDOW
        )
        generated = await self._agent.generate(
            news=candidates, history=history, count=count, country=country, language=language
        )
        if not generated:
            logger.warning("Generator returned no articles for %s/%s", country, language)
            return []

        articles = self._to_articles(generated, country, language, now)
        await self._articles.create_many(articles)
        logger.info(
            "Generated %d articles (%d fabricated) for %s/%s",
            len(articles),
            sum(1 for a in articles if a.is_fake),
            country,
            language,
        )
        return articles

    def _to_articles(
        self,
        generated: list[GeneratedArticle],
        country: Country,
        language: Language,
        now: datetime,
    ) -> list[Article]:
        shuffled = list(generated)
        self._rng.shuffle(shuffled)
        base = truncate_to_millis(now)
        articles = []
        for i, item in enumerate(shuffled):
            created_at = base + timedelta(seconds=i)
            article = Article.create(
                headline=item.headline,
                body=item.body,
                summary=item.summary,
                category=item.category,
                country=country,
                language=language,
                authenticity=Authenticity(is_fake=item.is_fake, reason=item.fake_reason),
                now=created_at,
            )
            articles.append(article)
        return articles
