"""Pipeline stages: digestion, classification, generation and retrieval."""

from news_curation.pipeline.classify import (
    ClassificationStage,
    ClassificationSummary,
    ClassifyArticles,
    ClassifyStories,
)
from news_curation.pipeline.digest_stories import DigestStories
from news_curation.pipeline.generate_articles import (
    ComposeArticles,
    GenerateArticlesFromNews,
    daily_target,
)
from news_curation.pipeline.get_articles import (
    ArticlePage,
    ArticleQuery,
    GetArticles,
    decode_cursor,
    encode_cursor,
)

__all__ = [
    # Digestion
    "DigestStories",
    # Classification
    "ClassificationStage",
    "ClassificationSummary",
    "ClassifyArticles",
    "ClassifyStories",
    # Generation
    "ComposeArticles",
    "GenerateArticlesFromNews",
    "daily_target",
    # Retrieval
    "ArticlePage",
    "ArticleQuery",
    "GetArticles",
    "decode_cursor",
    "encode_cursor",
]
