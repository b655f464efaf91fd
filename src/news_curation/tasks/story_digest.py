"""Story digest task: news to stories to classified articles."""

import logging
import time
from collections.abc import Sequence
from datetime import timedelta

from news_curation.pipeline.classify import ClassifyArticles, ClassifyStories
from news_curation.pipeline.digest_stories import DigestStories
from news_curation.pipeline.generate_articles import ComposeArticles
from news_curation.run_logger import RunLogger
from news_curation.tasks.base import (
    Target,
    TargetFailure,
    TargetOutcome,
    outcome_counts,
    run_for_targets,
)

logger = logging.getLogger(__name__)


class StoryDigestTask:
    """Digest news into stories, classify them, compose and classify articles.

    Stages run strictly one after the other; within the digest and compose
    stages every target runs concurrently.

    Args:
        digest_stories: Story digestion stage.
        classify_stories: Story classification stage.
        compose_articles: Article composition stage.
        classify_articles: Article classification stage.
        targets: Country/language pairs to produce content for.
        schedule: Interval between runs.
        execute_on_startup: Run once when the scheduler starts.
        run_logger: Optional per-run JSON recorder.
    """

    name = "story-digest"

    def __init__(
        self,
        digest_stories: DigestStories,
        classify_stories: ClassifyStories,
        compose_articles: ComposeArticles,
        classify_articles: ClassifyArticles,
        targets: Sequence[Target],
        *,
        schedule: timedelta = timedelta(hours=2),
        execute_on_startup: bool = True,
        run_logger: RunLogger | None = None,
    ) -> None:
        self._digest = digest_stories
        self._classify_stories = classify_stories
        self._compose = compose_articles
        self._classify_articles = classify_articles
        self._targets = list(targets)
        self.schedule = schedule
        self.execute_on_startup = execute_on_startup
        self._run_logger = run_logger

    async def execute(self) -> None:
        logger.info("[%s] Starting for %d targets", self.name, len(self._targets))
        run_id = self._run_logger.start_run(self.name) if self._run_logger else None
        failed = 0

        t0 = time.monotonic()
        digested = await run_for_targets(self._targets, self._digest.execute)
        failed += self._log_stage(run_id, "digest", self._digest, digested, time.monotonic() - t0)

        t0 = time.monotonic()
        story_summary = await self._classify_stories.execute()
        if self._run_logger:
            self._run_logger.log_stage(
                run_id,
                stage="classify_stories",
                component=type(self._classify_stories).__name__,
                input_data=None,
                output_data=story_summary,
                duration_seconds=time.monotonic() - t0,
            )

        t0 = time.monotonic()
        composed = await run_for_targets(self._targets, self._compose.execute)
        failed += self._log_stage(run_id, "compose", self._compose, composed, time.monotonic() - t0)

        t0 = time.monotonic()
        article_summary = await self._classify_articles.execute()
        if self._run_logger:
            self._run_logger.log_stage(
                run_id,
                stage="classify_articles",
                component=type(self._classify_articles).__name__,
                input_data=None,
                output_data=article_summary,
                duration_seconds=time.monotonic() - t0,
            )
            self._run_logger.finish_run(run_id, failed_targets=failed)

        logger.info("[%s] Finished with %d failed target branches", self.name, failed)

    def _log_stage(
        self,
        run_id: str | None,
        stage: str,
        component: object,
        outcomes: Sequence[TargetOutcome[list]],
        duration: float,
    ) -> int:
        failures = [o for o in outcomes if isinstance(o, TargetFailure)]
        if self._run_logger:
            self._run_logger.log_stage(
                run_id,
                stage=stage,
                component=type(component).__name__,
                input_data=[str(t) for t in self._targets],
                output_data=outcome_counts(outcomes),
                duration_seconds=duration,
            )
        return len(failures)
