"""Interval scheduler running tasks inside the event loop."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence

from news_curation.tasks.base import Task

logger = logging.getLogger(__name__)


class Scheduler:
    """Run each task every ``task.schedule``, plus once at start when requested.

    Every run is its own asyncio task, so a slow run does not delay the next
    tick and runs of the same task may overlap. A failing run is logged and
    later runs go ahead.

    Args:
        tasks: Tasks to schedule. Names must be unique.
        sleep: Awaitable sleep, injectable for tests.
    """

    def __init__(
        self,
        tasks: Sequence[Task],
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        names = [t.name for t in tasks]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate task names: {names}")
        self._tasks = {t.name: t for t in tasks}
        self._sleep = sleep
        self._timers: list[asyncio.Task[None]] = []
        self._runs: set[asyncio.Task[None]] = set()

    @property
    def running(self) -> bool:
        return bool(self._timers)

    @property
    def task_names(self) -> list[str]:
        return list(self._tasks)

    def get(self, name: str) -> Task:
        try:
            return self._tasks[name]
        except KeyError:
            raise KeyError(f"Unknown task: {name}. Available: {', '.join(self._tasks)}") from None

    async def run(self, task: Task) -> None:
        """Run one task now, logging instead of raising on failure."""
        logger.info("Running task %s", task.name)
        try:
            await task.execute()
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Task %s failed", task.name)
        else:
            logger.info("Task %s completed", task.name)

    def start(self) -> None:
        """Start startup runs and interval timers. Needs a running event loop."""
        if self._timers:
            return
        for task in self._tasks.values():
            if task.execute_on_startup:
                self._spawn(task)
            self._timers.append(asyncio.create_task(self._tick(task), name=f"timer:{task.name}"))
            logger.info(
                "Scheduled task %s every %s (on startup: %s)",
                task.name,
                task.schedule,
                task.execute_on_startup,
            )

    async def stop(self) -> None:
        """Cancel future invocations, then wait for runs already in flight."""
        for timer in self._timers:
            timer.cancel()
        await asyncio.gather(*self._timers, return_exceptions=True)
        self._timers.clear()
        if self._runs:
            logger.info("Waiting for %d in-flight runs", len(self._runs))
            await asyncio.gather(*self._runs, return_exceptions=True)
        logger.info("Scheduler stopped")

    async def _tick(self, task: Task) -> None:
        interval = task.schedule.total_seconds()
        while True:
            await self._sleep(interval)
            self._spawn(task)

    def _spawn(self, task: Task) -> None:
        run = asyncio.create_task(self.run(task), name=f"run:{task.name}")
        self._runs.add(run)
        run.add_done_callback(self._runs.discard)
