"""Pydantic configuration models for news_curation components."""

from pydantic import BaseModel, Field

from news_curation.agents.claude import DEFAULT_MODEL
from news_curation.data import Country, Language
from news_curation.persistence.database import DEFAULT_DATABASE_URL

# ============================================================
# Application Config
# ============================================================


class AppConfig(BaseModel):
    """Process-wide settings."""

    env: str = "development"
    database_url: str = DEFAULT_DATABASE_URL
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000

    model_config = {"frozen": True}


# ============================================================
# News Config
# ============================================================


class NewsConfig(BaseModel):
    """Configuration for the World News provider and its file cache."""

    use_cache: bool = True
    cache_dir: str | None = None
    cache_ttl_seconds: float = Field(default=3600, gt=0)
    rate_limit_seconds: float = Field(default=1.2, ge=0)
    base_url: str = "https://api.worldnewsapi.com"
    timeout_seconds: float = 30.0

    model_config = {"frozen": True}


# ============================================================
# Agent Config
# ============================================================


class AgentsConfig(BaseModel):
    """Configuration shared by all Claude agents."""

    model: str = DEFAULT_MODEL
    max_tokens: int = 4096

    model_config = {"frozen": True}


# ============================================================
# Task Configs
# ============================================================


class TargetConfig(BaseModel):
    """A country/language pair to produce content for."""

    country: Country
    language: Language

    model_config = {"frozen": True}


def _default_targets() -> list[TargetConfig]:
    return [
        TargetConfig(country=Country.US, language=Language.EN),
        TargetConfig(country=Country.FR, language=Language.FR),
    ]


class TasksConfig(BaseModel):
    """Targets and schedules of the scheduled tasks."""

    story_digest: list[TargetConfig] = Field(default_factory=_default_targets)
    article_generation: list[TargetConfig] = Field(default_factory=_default_targets)
    story_digest_interval_hours: float = Field(default=2, gt=0)
    article_generation_interval_hours: float = Field(default=6, gt=0)
    classification_batch_size: int = Field(default=50, ge=1)

    model_config = {"frozen": True}


# ============================================================
# Logging Config
# ============================================================


class RunLogConfig(BaseModel):
    """Configuration for per-run JSON task logs."""

    enabled: bool = False
    log_dir: str = "logs"

    model_config = {"frozen": True}


# ============================================================
# Root Config
# ============================================================


class CurationConfig(BaseModel):
    """Root configuration for news_curation."""

    app: AppConfig = Field(default_factory=AppConfig)
    news: NewsConfig = Field(default_factory=NewsConfig)
    agents: AgentsConfig = Field(default_factory=AgentsConfig)
    tasks: TasksConfig = Field(default_factory=TasksConfig)
    run_log: RunLogConfig = Field(default_factory=RunLogConfig)

    model_config = {"frozen": True}
