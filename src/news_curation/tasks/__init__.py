"""Scheduled tasks and the scheduler running them."""

from news_curation.tasks.article_generation import ArticleGenerationTask
from news_curation.tasks.base import (
    Target,
    TargetFailure,
    TargetOutcome,
    TargetSuccess,
    Task,
    outcome_counts,
    run_for_targets,
)
from news_curation.tasks.scheduler import Scheduler
from news_curation.tasks.story_digest import StoryDigestTask

__all__ = [
    # Protocol
    "Task",
    # Fan-out
    "Target",
    "TargetFailure",
    "TargetOutcome",
    "TargetSuccess",
    "outcome_counts",
    "run_for_targets",
    # Implementations
    "ArticleGenerationTask",
    "Scheduler",
    "StoryDigestTask",
]
