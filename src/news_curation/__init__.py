"""News Curation: turn raw news into digested stories and publishable articles."""

from news_curation.agents.base import (
    ArticleClassifierAgent,
    ArticleComposerAgent,
    ArticleGeneratorAgent,
    StoryClassifierAgent,
    StoryDigestAgent,
)
from news_curation.config import CurationConfig, create_from_config, load_config
from news_curation.data import (
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
    PerspectiveTags,
    PublicationTier,
    Stance,
    Story,
)
from news_curation.errors import (
    CurationError,
    DomainValidationError,
    InvalidCursorError,
    InvalidTierTransitionError,
    NotFoundError,
)
from news_curation.http import create_app
from news_curation.news import CachedNewsProvider, NewsProvider, RateLimiter, WorldNewsProvider
from news_curation.persistence import (
    ArticleRepository,
    Database,
    SqlArticleRepository,
    SqlStoryRepository,
    StoryRepository,
)
from news_curation.pipeline import (
    ClassifyArticles,
    ClassifyStories,
    ComposeArticles,
    DigestStories,
    GenerateArticlesFromNews,
    GetArticles,
    decode_cursor,
    encode_cursor,
)
from news_curation.run_logger import RunLogger
from news_curation.tasks import ArticleGenerationTask, Scheduler, StoryDigestTask, Task

__all__ = [
    # Models
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
    "PerspectiveTags",
    "PublicationTier",
    "Stance",
    "Story",
    # Errors
    "CurationError",
    "DomainValidationError",
    "InvalidCursorError",
    "InvalidTierTransitionError",
    "NotFoundError",
    # Protocols
    "ArticleClassifierAgent",
    "ArticleComposerAgent",
    "ArticleGeneratorAgent",
    "ArticleRepository",
    "NewsProvider",
    "StoryClassifierAgent",
    "StoryDigestAgent",
    "StoryRepository",
    "Task",
    # News
    "CachedNewsProvider",
    "RateLimiter",
    "WorldNewsProvider",
    # Persistence
    "Database",
    "SqlArticleRepository",
    "SqlStoryRepository",
    # Pipeline
    "ClassifyArticles",
    "ClassifyStories",
    "ComposeArticles",
    "DigestStories",
    "GenerateArticlesFromNews",
    "GetArticles",
    "decode_cursor",
    "encode_cursor",
    # Tasks
    "ArticleGenerationTask",
    "Scheduler",
    "StoryDigestTask",
    # HTTP
    "create_app",
    # Logging
    "RunLogger",
    # Config
    "CurationConfig",
    "create_from_config",
    "load_config",
]
