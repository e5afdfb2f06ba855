"""
Application factory for FastAPI.

This module provides a factory function for creating FastAPI application instances.
The factory pattern allows for:
- Easy testing with custom settings
- Multiple app instances with different configurations
- Clear separation of app creation from route definitions

Usage:
    from backend.main import create_app
    from backend.settings import Settings

    # Default app (uses get_settings())
    app = create_app()

    # Test app with custom settings
    test_settings = Settings(environment="test", initialize_on_startup=False, _env_file=None)
    test_app = create_app(settings=test_settings)
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure a FastAPI application instance.

    Args:
        settings: Optional Settings instance. If not provided, uses get_settings()
                  which loads from environment variables.

    Returns:
        Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    # Initialize Sentry for error tracking
    _init_sentry(settings)

    # Create FastAPI app
    app = FastAPI(
        title="Exercise Media Resolver API",
        description="Resolves free-form exercise names to demonstration media",
        version="1.0.0",
        lifespan=_lifespan(settings),
    )

    # Build the resolver this app serves from its own settings
    _init_state(app, settings)

    # Configure CORS middleware
    _configure_cors(app)

    # Include API routers
    _include_routers(app)

    # Log configuration status
    _log_configuration(settings)

    return app


def _lifespan(settings: Settings):
    """Restore or warm the exercise cache on startup, persist it on shutdown."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        resolver = app.state.exercise_resolver
        if settings.initialize_on_startup:
            restored = await resolver.initialize()
            logger.info(f"Exercise cache {'restored from snapshot' if restored else 'warmed from catalogs'}")
        yield
        resolver.persist()

    return lifespan


def _init_state(app: FastAPI, settings: Settings) -> None:
    """Attach settings, the exercise resolver and the preload use case to app.state."""
    from api.deps import build_preload_use_case, build_resolver

    resolver = build_resolver(settings)
    app.state.settings = settings
    app.state.exercise_resolver = resolver
    app.state.preload_use_case = build_preload_use_case(settings, resolver)


def _init_sentry(settings: Settings) -> None:
    """Initialize Sentry SDK if DSN is configured."""
    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.environment,
            traces_sample_rate=0.1,  # 10% of transactions for performance monitoring
            profiles_sample_rate=0.1,
            enable_tracing=True,
        )
        logger.info("Sentry initialized for exercise-media-resolver")


def _configure_cors(app: FastAPI) -> None:
    """Configure CORS middleware for the application."""
    trusted_origins = [
        "http://localhost:3000",
        "http://localhost:3001",
    ]
    # Add production domains from environment if configured
    production_origins = os.environ.get("CORS_ALLOWED_ORIGINS", "").split(",")
    trusted_origins.extend([origin.strip() for origin in production_origins if origin.strip()])

    app.add_middleware(
        CORSMiddleware,
        allow_origins=trusted_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def _include_routers(app: FastAPI) -> None:
    """Include all API routers in the application."""
    from api.routers import exercises_router, health_router

    # Health router (no prefix - /health at root)
    app.include_router(health_router)

    # Domain routers (with prefixes defined in each router)
    app.include_router(exercises_router)


def _log_configuration(settings: Settings) -> None:
    """Log catalog and cache configuration at startup."""
    logger.info(f"Primary exercise catalog: {settings.primary_catalog_url}")
    if settings.ninjas_api_key:
        logger.info("API Ninjas catalog enabled")
    else:
        logger.info("API Ninjas catalog disabled (no API key)")

    if settings.cache_snapshot_path:
        logger.info(f"Exercise cache snapshot: {settings.cache_snapshot_path}")
    else:
        logger.warning("Exercise cache persistence disabled")


# Default app instance for uvicorn
# This allows: uvicorn backend.main:app --reload
app = create_app()
