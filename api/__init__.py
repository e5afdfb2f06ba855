"""
API package for the exercise media resolver.

This package contains:
- deps.py: FastAPI dependency providers for DI
- routers/: API route handlers
- schemas/: Request and response models
"""

# Re-export dependency providers for convenient access
from api.deps import (
    build_preload_use_case,
    build_resolver,
    get_exercise_resolver,
    get_preload_use_case,
    get_settings,
)

__all__ = [
    # Settings
    "get_settings",
    # Resolver
    "build_resolver",
    "build_preload_use_case",
    "get_exercise_resolver",
    "get_preload_use_case",
]
