"""Direct article generation task."""

import logging
import time
from collections.abc import Sequence
from datetime import timedelta

from news_curation.pipeline.classify import ClassifyArticles
from news_curation.pipeline.generate_articles import GenerateArticlesFromNews
from news_curation.run_logger import RunLogger
from news_curation.tasks.base import Target, TargetFailure, outcome_counts, run_for_targets

logger = logging.getLogger(__name__)


class ArticleGenerationTask:
    """Top up every target's daily article quota, then classify new articles."""

    name = "article-generation"

    def __init__(
        self,
        generate_articles: GenerateArticlesFromNews,
        classify_articles: ClassifyArticles,
        targets: Sequence[Target],
        *,
        schedule: timedelta = timedelta(hours=6),
        execute_on_startup: bool = False,
        run_logger: RunLogger | None = None,
    ) -> None:
        self._generate = generate_articles
        self._classify_articles = classify_articles
        self._targets = list(targets)
        self.schedule = schedule
        self.execute_on_startup = execute_on_startup
        self._run_logger = run_logger

    async def execute(self) -> None:
        logger.info("[%s] Starting for %d targets", self.name, len(self._targets))
        run_id = self._run_logger.start_run(self.name) if self._run_logger else None

        t0 = time.monotonic()
        outcomes = await run_for_targets(self._targets, self._generate.execute)
        failures = [o for o in outcomes if isinstance(o, TargetFailure)]
        if self._run_logger:
            self._run_logger.log_stage(
                run_id,
                stage="generate",
                component=type(self._generate).__name__,
                input_data=[str(t) for t in self._targets],
                output_data=outcome_counts(outcomes),
                duration_seconds=time.monotonic() - t0,
            )

        t0 = time.monotonic()
        summary = await self._classify_articles.execute()
        if self._run_logger:
            self._run_logger.log_stage(
                run_id,
                stage="classify_articles",
                component=type(self._classify_articles).__name__,
                input_data=None,
                output_data=summary,
                duration_seconds=time.monotonic() - t0,
            )
            self._run_logger.finish_run(run_id, failed_targets=len(failures))

        logger.info("[%s] Finished with %d failed targets", self.name, len(failures))
