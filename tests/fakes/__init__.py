"""
Fake Port Implementations for Testing.

This package provides in-memory fake implementations of the application
ports for fast, isolated testing. No network or filesystem required.

Features:
- All fakes implement the same Protocol interfaces as real implementations
- Calls are recorded for assertions (e.g. "the catalogs were not consulted")
- Factory functions for common test scenarios

Usage:
    from tests.fakes import FakeCatalogGateway, make_record, create_resolver

    gateway = FakeCatalogGateway(records=[make_record("0001", "Barbell Hip Thrust")])
    resolver = create_resolver(gateway=gateway)
"""
from typing import Callable, Optional

from backend.core.exercise_resolver import ExerciseResolver
from backend.core.local_mapping import LocalMappingTable
from backend.core.media import MediaUrlFixer
from backend.core.name_resolution import NameResolutionEngine
from domain.models import ExerciseRecord
from infrastructure.cache import ExerciseCache

# Import all fake implementations
from tests.fakes.catalog_gateway import FakeCatalogGateway
from tests.fakes.snapshot_store import InMemorySnapshotStore
from tests.fakes.advanced_matcher import FakeAdvancedMatcher


# =============================================================================
# Factory Functions
# =============================================================================


def make_record(
    exercise_id: str,
    name: str,
    media_url: Optional[str] = None,
    **fields,
) -> ExerciseRecord:
    """
    Create an ExerciseRecord with sensible test defaults.

    Args:
        exercise_id: Record id
        name: Record name
        media_url: Media URL (a static.exercisedb.dev GIF if None)
        **fields: Any other ExerciseRecord field
    """
    if media_url is None:
        media_url = f"https://static.exercisedb.dev/media/{exercise_id}.gif"
    return ExerciseRecord(id=exercise_id, name=name, media_url=media_url, **fields)


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def create_resolver(
    *,
    gateway: Optional[FakeCatalogGateway] = None,
    cache: Optional[ExerciseCache] = None,
    clock: Optional[Callable[[], float]] = None,
    engine: Optional[NameResolutionEngine] = None,
    advanced_matcher: Optional[FakeAdvancedMatcher] = None,
    snapshot_store: Optional[InMemorySnapshotStore] = None,
    local_mappings: Optional[LocalMappingTable] = None,
) -> ExerciseResolver:
    """
    Create an ExerciseResolver wired to fakes.

    Defaults: empty FakeCatalogGateway, fresh cache, bundled engine and
    local mappings, no advanced matcher, no persistence.
    """
    if cache is None:
        cache = ExerciseCache(clock=clock) if clock is not None else ExerciseCache()
    return ExerciseResolver(
        cache=cache,
        local_mappings=local_mappings if local_mappings is not None else LocalMappingTable(),
        gateway=gateway if gateway is not None else FakeCatalogGateway(),
        engine=engine if engine is not None else NameResolutionEngine(),
        advanced_matcher=advanced_matcher,
        media_fixer=MediaUrlFixer(),
        snapshot_store=snapshot_store,
        popular_pages=3,
        popular_page_size=2,
    )


__all__ = [
    # Fakes
    "FakeCatalogGateway",
    "InMemorySnapshotStore",
    "FakeAdvancedMatcher",
    "FakeClock",
    # Factories
    "make_record",
    "create_resolver",
]
