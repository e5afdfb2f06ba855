"""
Domain models for the exercise media resolver.

This package contains pure domain models that are independent of
infrastructure concerns (HTTP catalogs, cache storage, API).

These models represent the core concepts:
- ExerciseRecord: canonical exercise with demonstration media and metadata
- MatchResult: a record plus confidence, match type and source
- PageResult: one page of records from a remote catalog
- CacheSnapshot: durable copy of the cache contents

Usage:
    >>> from domain.models import ExerciseRecord, MatchResult, MatchType, MatchSource
"""

from domain.models.exercise import (
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
