"""
PreloadExercises Use Case.

Resolves every exercise name a workout plan needs, concurrently, so the
plan can be rendered from a warm cache. Each name is resolved in its own
task; one failing or slow name never cancels or blocks the others.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Mapping, Optional

from domain.models import MatchResult

if TYPE_CHECKING:
    from backend.core.exercise_resolver import ExerciseResolver

logger = logging.getLogger(__name__)


@dataclass
class PreloadReport:
    """Outcome counts and timing of the last preload."""

    total: int = 0
    succeeded: int = 0
    failed: int = 0
    timed_out: int = 0
    elapsed_ms: float = 0.0

    @property
    def success_rate(self) -> float:
        return self.succeeded / self.total if self.total else 1.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "timed_out": self.timed_out,
            "elapsed_ms": round(self.elapsed_ms, 1),
            "success_rate": round(self.success_rate, 3),
        }


class PreloadExercisesUseCase:
    """
    Use case for warming the resolver with a batch of exercise names.

    Usage:
        >>> use_case = PreloadExercisesUseCase(resolver=resolver)
        >>> results = await use_case.execute(["push ups", "goblet squat"])
        >>> results["push ups"].record.media_url
        'https://media.giphy.com/media/l1J9EdzfOSgfyueLm/giphy.gif'
    """

    def __init__(
        self,
        resolver: "ExerciseResolver",
        deadline_seconds: Optional[float] = None,
    ) -> None:
        """
        Initialize the use case with required dependencies.

        Args:
            resolver: Resolver whose find_exercise is called once per name
            deadline_seconds: Default overall deadline for a batch (None waits for all)
        """
        self._resolver = resolver
        self._deadline_seconds = deadline_seconds
        self.last_report: Optional[PreloadReport] = None

    async def execute(
        self,
        names: Iterable[str],
        deadline_seconds: Optional[float] = None,
    ) -> Dict[str, Optional[MatchResult]]:
        """
        Resolve all distinct names concurrently.

        Args:
            names: Exercise names; duplicates are resolved once
            deadline_seconds: Overall deadline overriding the default;
                names still pending when it passes map to None

        Returns:
            Exactly one entry per distinct name. The value is None only if
            resolution raised or missed the deadline.
        """
        distinct = list(dict.fromkeys(name for name in names if name is not None))
        report = PreloadReport(total=len(distinct))
        self.last_report = report
        if not distinct:
            return {}

        deadline = self._deadline_seconds if deadline_seconds is None else deadline_seconds
        started = time.monotonic()

        tasks = {name: asyncio.create_task(self._resolver.find_exercise(name)) for name in distinct}
        _, pending = await asyncio.wait(tasks.values(), timeout=deadline)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        results: Dict[str, Optional[MatchResult]] = {}
        for name, task in tasks.items():
            if task in pending:
                report.timed_out += 1
                results[name] = None
                continue
            error = task.exception()
            if error is not None:
                report.failed += 1
                logger.warning(f"Preload failed for '{name}': {error!r}")
                results[name] = None
                continue
            report.succeeded += 1
            results[name] = task.result()

        report.elapsed_ms = (time.monotonic() - started) * 1000
        logger.info(
            f"Preloaded {report.succeeded}/{report.total} exercises in {report.elapsed_ms:.0f}ms "
            f"(success rate {report.success_rate:.0%}, {report.failed} failed, {report.timed_out} timed out)"
        )
        return results

    async def preload(
        self,
        names: Iterable[str],
        deadline_seconds: Optional[float] = None,
    ) -> Dict[str, Optional[MatchResult]]:
        return await self.execute(names, deadline_seconds=deadline_seconds)

    async def preload_plan(
        self,
        workouts: Iterable[Mapping[str, Any]],
        deadline_seconds: Optional[float] = None,
    ) -> Dict[str, Optional[MatchResult]]:
        """
        Preload every exercise of a multi-day plan.

        Args:
            workouts: Workouts shaped like ``{"exercises": [...]}``; an
                exercise is a name or a mapping with a ``name`` key
        """
        return await self.execute(plan_exercise_names(workouts), deadline_seconds=deadline_seconds)


def plan_exercise_names(workouts: Iterable[Mapping[str, Any]]) -> List[str]:
    """Distinct exercise names of a plan, in first-seen order."""
    names: List[str] = []
    for workout in workouts:
        for exercise in workout.get("exercises") or []:
            name = exercise.get("name") if isinstance(exercise, Mapping) else exercise
            if isinstance(name, str) and name.strip():
                names.append(name)
    return list(dict.fromkeys(names))
