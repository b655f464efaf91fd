"""Task protocol and per-target fan-out."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence, Sized
from dataclasses import dataclass
from datetime import timedelta
from typing import Generic, Protocol, TypeVar

from news_curation.data import Country, Language

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Target:
    """A (country, language) pair content is produced for."""

    country: Country
    language: Language

    def __str__(self) -> str:
        return f"{self.country}/{self.language}"


@dataclass(frozen=True)
class TargetSuccess(Generic[T]):
    target: Target
    value: T


@dataclass(frozen=True)
class TargetFailure:
    target: Target
    error: BaseException


TargetOutcome = TargetSuccess[T] | TargetFailure


class Task(Protocol):
    """A scheduled unit of work."""

    @property
    def name(self) -> str: ...

    @property
    def schedule(self) -> timedelta: ...

    @property
    def execute_on_startup(self) -> bool: ...

    async def execute(self) -> None: ...


async def run_for_targets(
    targets: Sequence[Target],
    fn: Callable[[Country, Language], Awaitable[T]],
) -> list[TargetOutcome[T]]:
    """Run ``fn`` concurrently for every target and collect each outcome.

    A failing target never cancels the others. Outcomes keep target order.
    """
    results = await asyncio.gather(
        *(fn(t.country, t.language) for t in targets), return_exceptions=True
    )

    outcomes: list[TargetOutcome[T]] = []
    for target, result in zip(targets, results, strict=True):
        if isinstance(result, asyncio.CancelledError):
            raise result
        if isinstance(result, BaseException):
            logger.error("Target %s failed: %s", target, result, exc_info=result)
            outcomes.append(TargetFailure(target=target, error=result))
        else:
            outcomes.append(TargetSuccess(target=target, value=result))
    return outcomes


def outcome_counts(outcomes: Sequence[TargetOutcome[Sized]]) -> dict[str, int | str]:
    """Per-target result sizes, or the error for failed targets."""
    return {
        str(o.target): repr(o.error) if isinstance(o, TargetFailure) else len(o.value)
        for o in outcomes
    }
