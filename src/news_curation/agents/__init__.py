"""AI transformation agents."""

from news_curation.agents.article_composer import ClaudeArticleComposer
from news_curation.agents.article_generator import ClaudeArticleGenerator
from news_curation.agents.base import (
    MIN_FAKE_ARTICLES,
    ArticleClassifierAgent,
    ArticleComposerAgent,
    ArticleComposition,
    ArticleGeneratorAgent,
    ClassificationResult,
    Classifier,
    GeneratedArticle,
    PublishedSummary,
    StoryClassifierAgent,
    StoryDigest,
    StoryDigestAgent,
)
from news_curation.agents.classifiers import ClaudeArticleClassifier, ClaudeStoryClassifier
from news_curation.agents.story_digest import ClaudeStoryDigestAgent

__all__ = [
    "MIN_FAKE_ARTICLES",
    # Protocols
    "ArticleClassifierAgent",
    "ArticleComposerAgent",
    "ArticleGeneratorAgent",
    "Classifier",
    "StoryClassifierAgent",
    "StoryDigestAgent",
    # Results
    "ArticleComposition",
    "ClassificationResult",
    "GeneratedArticle",
    "PublishedSummary",
    "StoryDigest",
    # Claude agents
    "ClaudeArticleClassifier",
    "ClaudeArticleComposer",
    "ClaudeArticleGenerator",
    "ClaudeStoryClassifier",
    "ClaudeStoryDigestAgent",
]
