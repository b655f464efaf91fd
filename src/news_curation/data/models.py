"""Core data models for the curation pipeline."""

import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import StrEnum

from news_curation.errors import DomainValidationError, InvalidTierTransitionError

SYNOPSIS_MAX_LENGTH = 1000
HOLISTIC_DIGEST_MIN_LENGTH = 200
HOLISTIC_DIGEST_MAX_LENGTH = 20000
ARTICLE_BODY_MIN_LENGTH = 30
MAX_ARTICLE_VARIANTS = 3


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(tz=UTC)


def truncate_to_millis(value: datetime) -> datetime:
    """Drop sub-millisecond precision so timestamps survive cursor encoding."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.replace(microsecond=(value.microsecond // 1000) * 1000)


class Category(StrEnum):
    """Editorial category of a story or article."""

    BUSINESS = "business"
    ENTERTAINMENT = "entertainment"
    HEALTH = "health"
    OTHER = "other"
    POLITICS = "politics"
    SCIENCE = "science"
    SPORTS = "sports"
    TECHNOLOGY = "technology"
    WORLD = "world"

    @classmethod
    def parse(cls, value: str) -> "Category":
        """Parse a category, falling back to OTHER for unknown labels."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.OTHER


class Country(StrEnum):
    """Countries the pipeline produces content for."""

    US = "us"
    FR = "fr"
    GLOBAL = "global"

    @classmethod
    def parse(cls, value: str) -> "Country":
        try:
            return cls(value.strip().lower())
        except ValueError:
            supported = ", ".join(c.value for c in cls)
            raise DomainValidationError(
                f"Invalid country: {value}. Supported countries are: {supported}"
            ) from None


class Language(StrEnum):
    """Languages articles can be written in."""

    EN = "en"
    FR = "fr"
    DE = "de"
    IT = "it"
    ES = "es"

    @classmethod
    def parse(cls, value: str) -> "Language":
        try:
            return cls(value.strip().lower())
        except ValueError:
            supported = ", ".join(lang.value for lang in cls)
            raise DomainValidationError(
                f"Invalid language: {value}. Supported languages are: {supported}"
            ) from None


class Stance(StrEnum):
    """Position a perspective takes on the events of a story."""

    SUPPORTIVE = "supportive"
    CRITICAL = "critical"
    NEUTRAL = "neutral"
    MIXED = "mixed"
    CONCERNED = "concerned"
    OPTIMISTIC = "optimistic"
    SKEPTICAL = "skeptical"


class DiscourseType(StrEnum):
    """How established a perspective is in public discourse."""

    MAINSTREAM = "mainstream"
    ALTERNATIVE = "alternative"
    UNDERREPORTED = "underreported"
    DUBIOUS = "dubious"


# ============================================================
# Tiers
# ============================================================

_PENDING_REVIEW = "PENDING_REVIEW"


class InterestTier(StrEnum):
    """Audience interest of a story.

    ``PENDING_REVIEW`` moves once to one of the terminal tiers.
    """

    PENDING_REVIEW = _PENDING_REVIEW
    STANDARD = "STANDARD"
    NICHE = "NICHE"
    ARCHIVED = "ARCHIVED"

    @property
    def is_terminal(self) -> bool:
        return self.value != _PENDING_REVIEW

    def can_transition_to(self, target: object) -> bool:
        return _can_transition(self, target, InterestTier)


class PublicationTier(StrEnum):
    """Publication placement of an article.

    Same transitions as :class:`InterestTier` but a distinct type, so an
    interest tier can never be stored on an article by accident.
    """

    PENDING_REVIEW = _PENDING_REVIEW
    STANDARD = "STANDARD"
    NICHE = "NICHE"
    ARCHIVED = "ARCHIVED"

    @property
    def is_terminal(self) -> bool:
        return self.value != _PENDING_REVIEW

    def can_transition_to(self, target: object) -> bool:
        return _can_transition(self, target, PublicationTier)


PUBLISHED_TIERS: tuple[PublicationTier, ...] = (PublicationTier.STANDARD, PublicationTier.NICHE)


def _can_transition(
    current: InterestTier | PublicationTier,
    target: object,
    kind: type[InterestTier] | type[PublicationTier],
) -> bool:
    if not isinstance(target, kind):
        return False
    return current.value == _PENDING_REVIEW and target.value != _PENDING_REVIEW


def ensure_transition(
    current: InterestTier | PublicationTier, target: InterestTier | PublicationTier
) -> None:
    """Raise if ``current`` may not move to ``target``.

    Raises:
        InvalidTierTransitionError: On a disallowed move or a tier of the wrong kind.
    """
    if type(current) is not type(target):
        raise InvalidTierTransitionError(
            f"Cannot assign {type(target).__name__} where {type(current).__name__} is expected"
        )
    if not current.can_transition_to(target):
        raise InvalidTierTransitionError(f"Cannot move tier from {current} to {target}")


# ============================================================
# Raw news
# ============================================================


@dataclass(frozen=True)
class NewsArticle:
    """One source article reported by the upstream news provider."""

    id: str
    headline: str
    body: str


@dataclass(frozen=True)
class NewsItem:
    """A cluster of corroborating source articles about one event.

    ``headline`` and ``body`` come from the representative article of the
    cluster. Never persisted.
    """

    headline: str
    body: str
    published_at: datetime
    coverage: int
    articles: tuple[NewsArticle, ...] = ()

    @property
    def source_references(self) -> tuple[str, ...]:
        return tuple(a.id for a in self.articles)


# ============================================================
# Stories
# ============================================================


@dataclass(frozen=True)
class PerspectiveTags:
    """Stance and discourse tags; at least one must be set."""

    stance: Stance | None = None
    discourse_type: DiscourseType | None = None

    def __post_init__(self) -> None:
        if self.stance is None and self.discourse_type is None:
            raise DomainValidationError("At least one perspective tag must be provided")


def validate_holistic_digest(digest: str) -> str:
    if not HOLISTIC_DIGEST_MIN_LENGTH <= len(digest) <= HOLISTIC_DIGEST_MAX_LENGTH:
        raise DomainValidationError(
            f"Holistic digest must be between {HOLISTIC_DIGEST_MIN_LENGTH} and "
            f"{HOLISTIC_DIGEST_MAX_LENGTH} characters, got {len(digest)}"
        )
    return digest


@dataclass(frozen=True)
class PerspectiveDraft:
    """A perspective before it is attached to a story."""

    holistic_digest: str
    tags: PerspectiveTags

    def __post_init__(self) -> None:
        validate_holistic_digest(self.holistic_digest)


@dataclass(frozen=True)
class Perspective:
    """One viewpoint on a story, owned by exactly that story."""

    id: str
    story_id: str
    holistic_digest: str
    tags: PerspectiveTags
    created_at: datetime
    updated_at: datetime

    def __post_init__(self) -> None:
        validate_holistic_digest(self.holistic_digest)


@dataclass(frozen=True)
class Story:
    """A clustered, digested real-world news event.

    Only ``interest_tier`` and ``updated_at`` ever change, through
    :meth:`with_interest_tier`.
    """

    id: str
    category: Category
    countries: tuple[Country, ...]
    dateline: datetime
    synopsis: str
    source_references: tuple[str, ...]
    perspectives: tuple[Perspective, ...]
    created_at: datetime
    updated_at: datetime
    interest_tier: InterestTier = InterestTier.PENDING_REVIEW

    def __post_init__(self) -> None:
        if not self.countries:
            raise DomainValidationError("At least one country is required")
        if not self.source_references:
            raise DomainValidationError("At least one external source reference is required")
        if not self.perspectives:
            raise DomainValidationError("At least one perspective is required")
        if not self.synopsis.strip():
            raise DomainValidationError("Synopsis must not be empty")
        if len(self.synopsis) > SYNOPSIS_MAX_LENGTH:
            raise DomainValidationError(
                f"Synopsis cannot exceed {SYNOPSIS_MAX_LENGTH} characters"
            )
        if not isinstance(self.interest_tier, InterestTier):
            raise DomainValidationError(f"Invalid interest tier: {self.interest_tier!r}")
        for perspective in self.perspectives:
            if perspective.story_id != self.id:
                raise DomainValidationError(
                    f"Perspective {perspective.id} belongs to another story"
                )
        # A global story cannot also be tied to specific countries.
        if Country.GLOBAL in self.countries and len(self.countries) > 1:
            object.__setattr__(self, "countries", (Country.GLOBAL,))

    @classmethod
    def create(
        cls,
        *,
        category: Category,
        countries: Iterable[Country],
        dateline: datetime,
        synopsis: str,
        source_references: Iterable[str],
        perspectives: Iterable[PerspectiveDraft],
        now: datetime | None = None,
    ) -> "Story":
        """Build a new pending-review story with fresh ids."""
        now = now or utc_now()
        story_id = str(uuid.uuid4())
        return cls(
            id=story_id,
            category=category,
            countries=tuple(countries),
            dateline=dateline,
            synopsis=synopsis,
            source_references=tuple(source_references),
            perspectives=tuple(
                Perspective(
                    id=str(uuid.uuid4()),
                    story_id=story_id,
                    holistic_digest=draft.holistic_digest,
                    tags=draft.tags,
                    created_at=now,
                    updated_at=now,
                )
                for draft in perspectives
            ),
            created_at=now,
            updated_at=now,
        )

    def with_interest_tier(self, tier: InterestTier, now: datetime | None = None) -> "Story":
        ensure_transition(self.interest_tier, tier)
        return replace(self, interest_tier=tier, updated_at=now or utc_now())


# ============================================================
# Articles
# ============================================================


@dataclass(frozen=True)
class Authenticity:
    """Whether an article is fabricated, and why."""

    is_fake: bool = False
    reason: str | None = None

    def __post_init__(self) -> None:
        if self.is_fake and not (self.reason and self.reason.strip()):
            raise DomainValidationError("Fake articles must have a reason specified")
        if not self.is_fake and self.reason is not None:
            object.__setattr__(self, "reason", None)

    def __str__(self) -> str:
        return f"Fake article (Reason: {self.reason})" if self.is_fake else "Legitimate article"


@dataclass(frozen=True)
class ArticleVariant:
    """A rewrite of an article from one stance."""

    headline: str
    body: str
    stance: Stance
    discourse: DiscourseType

    def __post_init__(self) -> None:
        _validate_headline(self.headline)
        _validate_body(self.body)


def _validate_headline(headline: str) -> None:
    if not headline.strip():
        raise DomainValidationError("Article headline must be at least 1 character long")


def _validate_body(body: str) -> None:
    if len(body) < ARTICLE_BODY_MIN_LENGTH:
        raise DomainValidationError(
            f"Article body must be at least {ARTICLE_BODY_MIN_LENGTH} characters long"
        )


@dataclass(frozen=True)
class Article:
    """A generated, publishable article, possibly fabricated."""

    id: str
    headline: str
    body: str
    summary: str
    category: Category
    country: Country
    language: Language
    authenticity: Authenticity
    published_at: datetime
    created_at: datetime
    publication_tier: PublicationTier = PublicationTier.PENDING_REVIEW
    story_ids: tuple[str, ...] = ()
    variants: tuple[ArticleVariant, ...] = field(default=())

    def __post_init__(self) -> None:
        _validate_headline(self.headline)
        _validate_body(self.body)
        if not isinstance(self.publication_tier, PublicationTier):
            raise DomainValidationError(f"Invalid publication tier: {self.publication_tier!r}")
        if len(self.variants) > MAX_ARTICLE_VARIANTS:
            raise DomainValidationError(
                f"An article has at most {MAX_ARTICLE_VARIANTS} variants"
            )
        object.__setattr__(self, "created_at", truncate_to_millis(self.created_at))

    @property
    def is_fake(self) -> bool:
        return self.authenticity.is_fake

    @classmethod
    def create(
        cls,
        *,
        headline: str,
        body: str,
        summary: str,
        category: Category,
        country: Country,
        language: Language,
        authenticity: Authenticity | None = None,
        story_ids: Iterable[str] = (),
        variants: Iterable[ArticleVariant] = (),
        now: datetime | None = None,
    ) -> "Article":
        """Build a new pending-review article with a fresh id."""
        now = now or utc_now()
        return cls(
            id=str(uuid.uuid4()),
            headline=headline,
            body=body,
            summary=summary,
            category=category,
            country=country,
            language=language,
            authenticity=authenticity or Authenticity(),
            published_at=now,
            created_at=now,
            story_ids=tuple(story_ids),
            variants=tuple(variants),
        )

    def with_publication_tier(self, tier: PublicationTier) -> "Article":
        ensure_transition(self.publication_tier, tier)
        return replace(self, publication_tier=tier)
