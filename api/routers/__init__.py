"""
Router package for the exercise media resolver API.

This package contains all API routers organized by domain:
- health: Health check endpoint
- exercises: Name resolution, preloading, browsing and cache management
"""

from api.routers.health import router as health_router
from api.routers.exercises import router as exercises_router

__all__ = [
    "health_router",
    "exercises_router",
]
