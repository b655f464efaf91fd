"""Factory functions to create components from configuration."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

from fastapi import FastAPI

from news_curation.agents.article_composer import ClaudeArticleComposer
from news_curation.agents.article_generator import ClaudeArticleGenerator
from news_curation.agents.classifiers import ClaudeArticleClassifier, ClaudeStoryClassifier
from news_curation.agents.story_digest import ClaudeStoryDigestAgent
from news_curation.config.models import (
    AgentsConfig,
    CurationConfig,
    NewsConfig,
    RunLogConfig,
    TargetConfig,
)
from news_curation.news.base import NewsProvider
from news_curation.news.cache import CachedNewsProvider
from news_curation.news.rate_limit import RateLimiter
from news_curation.news.world_news import WorldNewsProvider
from news_curation.persistence.articles import SqlArticleRepository
from news_curation.persistence.database import Database
from news_curation.persistence.stories import SqlStoryRepository
from news_curation.pipeline.classify import ClassifyArticles, ClassifyStories
from news_curation.pipeline.digest_stories import DigestStories
from news_curation.pipeline.generate_articles import ComposeArticles, GenerateArticlesFromNews
from news_curation.pipeline.get_articles import GetArticles
from news_curation.run_logger import RunLogger
from news_curation.tasks.article_generation import ArticleGenerationTask
from news_curation.tasks.base import Target, Task
from news_curation.tasks.scheduler import Scheduler
from news_curation.tasks.story_digest import StoryDigestTask

logger = logging.getLogger(__name__)


@dataclass
class Container:
    """Every wired component of a running process."""

    config: CurationConfig
    database: Database
    story_repository: SqlStoryRepository
    article_repository: SqlArticleRepository
    news_provider: NewsProvider
    digest_stories: DigestStories
    classify_stories: ClassifyStories
    compose_articles: ComposeArticles
    classify_articles: ClassifyArticles
    generate_articles: GenerateArticlesFromNews
    get_articles: GetArticles
    tasks: list[Task]
    scheduler: Scheduler

    @asynccontextmanager
    async def lifespan(self, app: FastAPI) -> AsyncIterator[None]:
        """Connect the database and run the scheduler for the app's lifetime."""
        await self.database.connect()
        self.scheduler.start()
        try:
            yield
        finally:
            await self.scheduler.stop()
            await self.database.disconnect()


def create_news_provider(config: NewsConfig, *, env: str) -> NewsProvider:
    """Create the World News provider, wrapped in the file cache when enabled."""
    provider = WorldNewsProvider(
        rate_limiter=RateLimiter(config.rate_limit_seconds),
        base_url=config.base_url,
        timeout=config.timeout_seconds,
    )
    if not config.use_cache:
        return provider
    return CachedNewsProvider(
        provider, cache_dir=config.cache_dir, env=env, ttl=config.cache_ttl_seconds
    )


def create_run_logger(config: RunLogConfig) -> RunLogger | None:
    if not config.enabled:
        return None
    return RunLogger(log_dir=Path(config.log_dir), enabled=True)


def _targets(configs: list[TargetConfig]) -> list[Target]:
    return [Target(country=c.country, language=c.language) for c in configs]


def _agent_kwargs(config: AgentsConfig) -> dict[str, str | int]:
    return {"model": config.model, "max_tokens": config.max_tokens}


def create_from_config(config: CurationConfig) -> Container:
    """Wire every component from root config.

    The database is created but not connected; the caller owns its lifecycle.

    Args:
        config: Root configuration.

    Returns:
        Container holding the wired components.
    """
    database = Database(config.app.database_url)
    stories = SqlStoryRepository(database)
    articles = SqlArticleRepository(database)
    news_provider = create_news_provider(config.news, env=config.app.env)
    agents = _agent_kwargs(config.agents)
    batch_size = config.tasks.classification_batch_size

    digest_stories = DigestStories(ClaudeStoryDigestAgent(**agents), news_provider, stories)
    classify_stories = ClassifyStories(
        ClaudeStoryClassifier(**agents), stories, batch_size=batch_size
    )
    compose_articles = ComposeArticles(ClaudeArticleComposer(**agents), stories, articles)
    classify_articles = ClassifyArticles(
        ClaudeArticleClassifier(**agents), articles, batch_size=batch_size
    )
    generate_articles = GenerateArticlesFromNews(
        ClaudeArticleGenerator(**agents), news_provider, articles
    )

    tasks: list[Task] = [
        StoryDigestTask(
            digest_stories,
            classify_stories,
            compose_articles,
            classify_articles,
            _targets(config.tasks.story_digest),
            schedule=timedelta(hours=config.tasks.story_digest_interval_hours),
            run_logger=create_run_logger(config.run_log),
        ),
        ArticleGenerationTask(
            generate_articles,
            classify_articles,
            _targets(config.tasks.article_generation),
            schedule=timedelta(hours=config.tasks.article_generation_interval_hours),
            run_logger=create_run_logger(config.run_log),
        ),
    ]
    logger.info("Created %d tasks for env %s", len(tasks), config.app.env)

    return Container(
        config=config,
        database=database,
        story_repository=stories,
        article_repository=articles,
        news_provider=news_provider,
        digest_stories=digest_stories,
        classify_stories=classify_stories,
        compose_articles=compose_articles,
        classify_articles=classify_articles,
        generate_articles=generate_articles,
        get_articles=GetArticles(articles),
        tasks=tasks,
        scheduler=Scheduler(tasks),
    )
