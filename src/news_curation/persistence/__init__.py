"""Persistence for stories and articles."""

from news_curation.persistence.articles import SqlArticleRepository
from news_curation.persistence.base import (
    ArticleCriteria,
    ArticleRepository,
    ArticleSlice,
    StoryCriteria,
    StoryRepository,
)
from news_curation.persistence.database import DEFAULT_DATABASE_URL, Database
from news_curation.persistence.stories import SqlStoryRepository

__all__ = [
    # Protocols
    "ArticleRepository",
    "StoryRepository",
    # Criteria
    "ArticleCriteria",
    "ArticleSlice",
    "StoryCriteria",
    # Implementations
    "DEFAULT_DATABASE_URL",
    "Database",
    "SqlArticleRepository",
    "SqlStoryRepository",
]
