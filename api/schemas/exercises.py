"""
Pydantic models for the exercises API.

Request and response models for name resolution, batch preloading,
suggestions and cache statistics.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

from domain.models import ExerciseRecord, MatchResult


class ResolveResponse(BaseModel):
    """A resolved exercise and how it was found."""
    query: str
    exercise: ExerciseRecord
    confidence: float = Field(..., description="Match confidence (0.0 to 1.0)")
    match_type: str = Field(..., description="exact, normalized, semantic, fuzzy, partial or fallback")
    source: str = Field(..., description="local_mapping, cache, remote or generated")
    degraded: bool = Field(..., description="True when the record was synthesized, not found")

    @classmethod
    def from_match(cls, query: str, match: MatchResult) -> "ResolveResponse":
        """Convert MatchResult to response model."""
        return cls(
            query=query,
            exercise=match.record,
            confidence=match.confidence,
            match_type=match.match_type.value,
            source=match.source.value,
            degraded=match.is_degraded,
        )


class PreloadRequest(BaseModel):
    """Names to preload, given directly or as a plan of workouts."""
    names: List[str] = Field(default_factory=list, max_length=500)
    workouts: List[Dict[str, Any]] = Field(
        default_factory=list,
        description='Workouts shaped like {"exercises": ["Push Ups", {"name": "Plank"}]}',
    )

    @model_validator(mode="after")
    def require_names_or_workouts(self) -> "PreloadRequest":
        if not self.names and not self.workouts:
            raise ValueError("Provide names or workouts")
        return self


class PreloadResponse(BaseModel):
    """One entry per distinct name; null when resolution failed or timed out."""
    results: Dict[str, Optional[ResolveResponse]]
    report: Dict[str, Any]


class SuggestionResponse(BaseModel):
    exercise: ExerciseRecord
    similarity: float


class ExerciseListResponse(BaseModel):
    """Response model for list of exercises."""
    exercises: List[ExerciseRecord]
    count: int


class NameListResponse(BaseModel):
    names: List[str]
    count: int
