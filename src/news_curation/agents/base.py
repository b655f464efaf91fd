"""Protocols and result types for the AI transformation agents.

Every agent returns ``None`` when it cannot produce a usable result
(upstream error, refusal, invalid output). Agents never raise for that case.
"""

from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar

from news_curation.data import (
    Article,
    ArticleVariant,
    Category,
    Country,
    InterestTier,
    Language,
    NewsItem,
    PerspectiveDraft,
    PublicationTier,
    Story,
)

MIN_FAKE_ARTICLES = 2

TierT = TypeVar("TierT", InterestTier, PublicationTier)
EntityT_contra = TypeVar("EntityT_contra", contravariant=True)


@dataclass(frozen=True)
class StoryDigest:
    """Structured brief produced from one news cluster."""

    category: Category
    synopsis: str
    perspectives: tuple[PerspectiveDraft, ...]


@dataclass(frozen=True)
class ClassificationResult(Generic[TierT]):
    """A tier chosen by a classifier, with its justification."""

    tier: TierT
    reason: str


@dataclass(frozen=True)
class ArticleComposition:
    """A neutral main article plus stance variants composed from a story."""

    headline: str
    body: str
    summary: str
    category: Category
    variants: tuple[ArticleVariant, ...] = ()


@dataclass(frozen=True)
class GeneratedArticle:
    """One article of a direct-mode batch, real or fabricated."""

    headline: str
    body: str
    summary: str
    category: Category
    is_fake: bool
    fake_reason: str | None = None


@dataclass(frozen=True)
class PublishedSummary:
    """Headline and summary of an already published article."""

    headline: str
    summary: str


class StoryDigestAgent(Protocol):
    """Turns a corroborated news cluster into a story digest."""

    async def digest(self, item: NewsItem) -> StoryDigest | None: ...


class Classifier(Protocol[EntityT_contra, TierT]):
    """Assigns a terminal tier to an entity."""

    async def classify(self, entity: EntityT_contra) -> ClassificationResult[TierT] | None: ...


StoryClassifierAgent = Classifier[Story, InterestTier]
ArticleClassifierAgent = Classifier[Article, PublicationTier]


class ArticleComposerAgent(Protocol):
    """Composes a publishable article from a story for a target locale."""

    async def compose(
        self, story: Story, *, country: Country, language: Language
    ) -> ArticleComposition | None: ...


class ArticleGeneratorAgent(Protocol):
    """Writes a batch of real and fabricated articles straight from raw news."""

    async def generate(
        self,
        *,
        news: list[NewsItem],
        history: list[PublishedSummary],
        count: int,
        country: Country,
        language: Language,
    ) -> list[GeneratedArticle] | None: ...
