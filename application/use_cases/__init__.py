"""
Application Use Cases for the exercise media resolver.

This package contains application-level use cases that orchestrate the
resolver on behalf of callers. Use cases are the entry points for batch
operations and contain the application's workflow logic.

Architecture follows Clean Architecture / Hexagonal pattern:
- Use cases orchestrate the resolver and report outcomes
- Dependencies are injected via constructors for testability
- Use cases return domain models, not API responses

Usage:
    from application.use_cases import PreloadExercisesUseCase

    # Warm the cache for a plan
    preload_use_case = PreloadExercisesUseCase(resolver=resolver)
    results = await preload_use_case.execute(["push ups", "goblet squat"])
    print(preload_use_case.last_report.success_rate)
"""

from application.use_cases.preload_exercises import (
    PreloadExercisesUseCase,
    PreloadReport,
    plan_exercise_names,
)

__all__ = [
    # PreloadExercises
    "PreloadExercisesUseCase",
    "PreloadReport",
    "plan_exercise_names",
]
