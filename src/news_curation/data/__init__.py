"""Data models for news_curation."""

from news_curation.data.models import (
    PUBLISHED_TIERS,
    Article,
    ArticleVariant,
    Authenticity,
    Category,
    Country,
    DiscourseType,
    InterestTier,
    Language,
    NewsArticle,
    NewsItem,
    Perspective,
    PerspectiveDraft,
    PerspectiveTags,
    PublicationTier,
    Stance,
    Story,
    ensure_transition,
    truncate_to_millis,
    utc_now,
)

__all__ = [
    "PUBLISHED_TIERS",
    "Article",
    "ArticleVariant",
    "Authenticity",
    "Category",
    "Country",
    "DiscourseType",
    "InterestTier",
    "Language",
    "NewsArticle",
    "NewsItem",
    "Perspective",
    "PerspectiveDraft",
    "PerspectiveTags",
    "PublicationTier",
    "Stance",
    "Story",
    "ensure_transition",
    "truncate_to_millis",
    "utc_now",
]
