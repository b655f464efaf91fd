"""Turn fresh news clusters into pending-review stories."""

import logging
from collections.abc import Callable
from datetime import datetime

from news_curation.agents.base import StoryDigestAgent
from news_curation.data import Country, Language, NewsItem, Story, utc_now
from news_curation.news.base import NewsProvider
from news_curation.persistence.base import StoryRepository

logger = logging.getLogger(__name__)

MIN_CORROBORATING_ARTICLES = 2


class DigestStories:
    """Fetch news for one target, digest new clusters, and store them as stories.

    A cluster whose source articles all belong to already stored stories is
    skipped. A failure on one cluster is logged and does not stop the batch.

    Args:
        agent: Story digest agent.
        news_provider: Source of raw news clusters.
        story_repository: Story persistence.
        clock: Returns the current UTC time.
    """

    def __init__(
        self,
        agent: StoryDigestAgent,
        news_provider: NewsProvider,
        story_repository: StoryRepository,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._agent = agent
        self._news = news_provider
        self._stories = story_repository
        self._clock = clock

    async def execute(self, country: Country, language: Language) -> list[Story]:
        """Run one digest pass for ``(country, language)``.

        Returns:
            The stories created in this pass.
        """
        logger.info("Starting story digestion for %s/%s", country, language)

        news = await self._news.fetch_news(country=country, language=language)
        if not news:
            logger.warning("No news fetched for %s/%s", country, language)
            return []

        candidates = [item for item in news if item.coverage >= MIN_CORROBORATING_ARTICLES]
        dropped = len(news) - len(candidates)
        if dropped:
            logger.info(
                "Dropped %d news items with fewer than %d corroborating articles",
                dropped,
                MIN_CORROBORATING_ARTICLES,
            )
        if not candidates:
            logger.warning("No corroborated news for %s/%s", country, language)
            return []

        known = set(await self._stories.get_all_source_references(country))
        logger.info(
            "Digesting %d news items for %s/%s (%d known source references)",
            len(candidates),
            country,
            language,
            len(known),
        )

        created: list[Story] = []
        for item in candidates:
            references = set(item.source_references)
            if references and references <= known:
                logger.debug('Skipping already digested news item "%s"', item.headline)
                continue
            try:
                story = await self._digest(item, country)
            except Exception:
                logger.exception('Failed to digest news item "%s"', item.headline)
                continue
            if story is None:
                continue
            known |= references
            created.append(story)

        logger.info(
            "Story digestion for %s/%s created %d stories", country, language, len(created)
        )
        return created

    async def _digest(self, item: NewsItem, country: Country) -> Story | None:
        digest = await self._agent.digest(item)
        if digest is None:
            logger.warning('Digest agent returned nothing for "%s"', item.headline)
            return None

        story = Story.create(
            category=digest.category,
            countries=(country,),
            dateline=item.published_at,
            synopsis=digest.synopsis,
            source_references=item.source_references,
            perspectives=digest.perspectives,
            now=self._clock(),
        )
        return await self._stories.create(story)
