"""
FastAPI Dependency Providers for the exercise media resolver.

This module provides FastAPI dependency injection functions. The resolver
and the preload use case are built once per application by create_app()
and stored on ``app.state``; the providers below hand them to routes.

Usage in routers:
    from api.deps import get_exercise_resolver
    from backend.core.exercise_resolver import ExerciseResolver

    @router.get("/exercises/resolve")
    async def resolve(
        name: str,
        resolver: ExerciseResolver = Depends(get_exercise_resolver),
    ):
        return await resolver.find_exercise(name)

Testing:
    # Override dependencies in tests
    app.dependency_overrides[get_exercise_resolver] = lambda: resolver_with_fakes
"""

from typing import Optional

from fastapi import Request

from application.ports import AdvancedMatcher, CatalogGateway, SnapshotStore
from application.use_cases import PreloadExercisesUseCase
from backend.core.exercise_resolver import ExerciseResolver
from backend.core.local_mapping import LocalMappingTable
from backend.core.media import MediaUrlFixer
from backend.core.name_resolution import NameResolutionEngine
from backend.settings import Settings, get_settings as _get_settings
from infrastructure import ExerciseCache, FileSnapshotStore, RemoteCatalogGateway


# =============================================================================
# Settings Provider
# =============================================================================


def get_settings() -> Settings:
    """
    Get application settings.

    Returns cached Settings instance from backend.settings.
    Use this as a FastAPI dependency for settings access.
    """
    return _get_settings()


# =============================================================================
# Resolver Wiring
# =============================================================================


def build_resolver(
    settings: Settings,
    gateway: Optional[CatalogGateway] = None,
    snapshot_store: Optional[SnapshotStore] = None,
    advanced_matcher: Optional[AdvancedMatcher] = None,
) -> ExerciseResolver:
    """
    Assemble a resolver with its own cache from settings.

    Args:
        settings: Application settings
        gateway: Catalog gateway (HTTP gateway from settings if None)
        snapshot_store: Snapshot store (file store at cache_snapshot_path if None;
            an empty path disables persistence)
        advanced_matcher: Optional upstream matcher
    """
    media_fixer = MediaUrlFixer(settings.broken_media_host, settings.media_host_replacement)
    if gateway is None:
        gateway = RemoteCatalogGateway.from_settings(settings)
    if snapshot_store is None and settings.cache_snapshot_path:
        snapshot_store = FileSnapshotStore(settings.cache_snapshot_path)
    return ExerciseResolver(
        cache=ExerciseCache(ttl_seconds=settings.cache_ttl_seconds),
        local_mappings=LocalMappingTable(),
        gateway=gateway,
        engine=NameResolutionEngine(),
        advanced_matcher=advanced_matcher,
        media_fixer=media_fixer,
        snapshot_store=snapshot_store,
        popular_pages=settings.popular_preload_pages,
        popular_page_size=settings.popular_preload_page_size,
    )


def build_preload_use_case(settings: Settings, resolver: ExerciseResolver) -> PreloadExercisesUseCase:
    """Bind a preload use case to ``resolver`` with the configured deadline."""
    return PreloadExercisesUseCase(
        resolver=resolver,
        deadline_seconds=settings.preload_deadline_seconds,
    )


def get_exercise_resolver(request: Request) -> ExerciseResolver:
    """
    Get the application's exercise resolver.

    The resolver is built once by create_app() from the app's own settings
    and kept on ``app.state``, so every request shares its cache.

    Returns:
        ExerciseResolver for this application instance
    """
    return request.app.state.exercise_resolver


def get_preload_use_case(request: Request) -> PreloadExercisesUseCase:
    """
    Get the preload use case bound to the application's resolver.

    Kept per application so ``last_report`` survives between requests.
    """
    return request.app.state.preload_use_case
