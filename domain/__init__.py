"""
Domain layer for the exercise media resolver.

This package contains pure domain models that are independent of
infrastructure concerns (HTTP catalogs, cache storage, API).
"""

from domain.models import (
    CacheSnapshot,
    ExerciseRecord,
    MatchResult,
    MatchSource,
    MatchType,
    PageResult,
)

__all__ = [
    "CacheSnapshot",
    "ExerciseRecord",
    "MatchResult",
    "MatchSource",
    "MatchType",
    "PageResult",
]
