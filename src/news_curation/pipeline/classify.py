"""Move pending-review stories and articles to a terminal tier."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, TypeVar

from news_curation.agents.base import ArticleClassifierAgent, Classifier, StoryClassifierAgent
from news_curation.data import Article, InterestTier, PublicationTier, Story, ensure_transition
from news_curation.persistence.base import (
    ArticleCriteria,
    ArticleRepository,
    StoryCriteria,
    StoryRepository,
)

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 50

EntityT = TypeVar("EntityT", Story, Article)
TierT = TypeVar("TierT", InterestTier, PublicationTier)


@dataclass(frozen=True)
class ClassificationSummary:
    """Counts from one classification batch."""

    classified: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.classified + self.failed


class ClassificationStage(ABC, Generic[EntityT, TierT]):
    """Classify one bounded batch of pending-review entities.

    Entities the agent cannot classify stay in ``PENDING_REVIEW`` and are
    picked up again by a later batch.
    """

    kind: str = "entity"

    def __init__(
        self, agent: Classifier[EntityT, TierT], *, batch_size: int = DEFAULT_BATCH_SIZE
    ) -> None:
        self._agent = agent
        self._batch_size = batch_size

    @abstractmethod
    async def _pending(self, limit: int) -> list[EntityT]: ...

    @abstractmethod
    def _current_tier(self, entity: EntityT) -> TierT: ...

    @abstractmethod
    async def _save(self, entity: EntityT, tier: TierT) -> None: ...

    async def execute(self) -> ClassificationSummary:
        entities = await self._pending(self._batch_size)
        if not entities:
            logger.info("No pending %ss to classify", self.kind)
            return ClassificationSummary()

        logger.info("Classifying %d pending %ss", len(entities), self.kind)
        classified = 0
        failed = 0
        for entity in entities:
            try:
                result = await self._agent.classify(entity)
                if result is None:
                    failed += 1
                    continue
                ensure_transition(self._current_tier(entity), result.tier)
                await self._save(entity, result.tier)
            except Exception:
                logger.exception("Failed to classify %s %s", self.kind, entity.id)
                failed += 1
                continue
            logger.debug("%s %s -> %s (%s)", self.kind, entity.id, result.tier, result.reason)
            classified += 1

        summary = ClassificationSummary(classified=classified, failed=failed)
        logger.info(
            "%s classification: %d classified, %d failed, %d total",
            self.kind.capitalize(),
            summary.classified,
            summary.failed,
            summary.total,
        )
        return summary


class ClassifyStories(ClassificationStage[Story, InterestTier]):
    """Assign interest tiers to pending stories."""

    kind = "story"

    def __init__(
        self,
        agent: StoryClassifierAgent,
        story_repository: StoryRepository,
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        super().__init__(agent, batch_size=batch_size)
        self._stories = story_repository

    async def _pending(self, limit: int) -> list[Story]:
        return await self._stories.find_many(
            StoryCriteria(interest_tier=InterestTier.PENDING_REVIEW, limit=limit)
        )

    def _current_tier(self, entity: Story) -> InterestTier:
        return entity.interest_tier

    async def _save(self, entity: Story, tier: InterestTier) -> None:
        await self._stories.update(entity.id, tier)


class ClassifyArticles(ClassificationStage[Article, PublicationTier]):
    """Assign publication tiers to pending articles."""

    kind = "article"

    def __init__(
        self,
        agent: ArticleClassifierAgent,
        article_repository: ArticleRepository,
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        super().__init__(agent, batch_size=batch_size)
        self._articles = article_repository

    async def _pending(self, limit: int) -> list[Article]:
        page = await self._articles.find_many(
            ArticleCriteria(publication_tiers=(PublicationTier.PENDING_REVIEW,), limit=limit)
        )
        return page.items

    def _current_tier(self, entity: Article) -> PublicationTier:
        return entity.publication_tier

    async def _save(self, entity: Article, tier: PublicationTier) -> None:
        await self._articles.update(entity.id, tier)
