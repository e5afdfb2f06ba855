"""
Pydantic schemas for API requests and responses.

Organized by feature/domain:
- exercises: Name resolution, preloading and lookup models
"""

from api.schemas.exercises import (
    ExerciseListResponse,
    NameListResponse,
    PreloadRequest,
    PreloadResponse,
    ResolveResponse,
    SuggestionResponse,
)

__all__ = [
    "ExerciseListResponse",
    "NameListResponse",
    "PreloadRequest",
    "PreloadResponse",
    "ResolveResponse",
    "SuggestionResponse",
]
