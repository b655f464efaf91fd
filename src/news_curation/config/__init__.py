"""Configuration module for news_curation."""

from news_curation.config.factory import Container, create_from_config, create_news_provider
from news_curation.config.loader import get_default_config_path, load_config
from news_curation.config.models import (
    AgentsConfig,
    AppConfig,
    CurationConfig,
    NewsConfig,
    RunLogConfig,
    TargetConfig,
    TasksConfig,
)

__all__ = [
    "AgentsConfig",
    "AppConfig",
    "Container",
    "CurationConfig",
    "NewsConfig",
    "RunLogConfig",
    "TargetConfig",
    "TasksConfig",
    "create_from_config",
    "create_news_provider",
    "get_default_config_path",
    "load_config",
]
