"""
Exercise record and match result value objects.

An ExerciseRecord is the canonical shape every catalog, mapping table and
synthesis step is normalized into. A MatchResult wraps a record with how it
was found (match type, source) and how confident the resolver is.

Examples:
    >>> record = ExerciseRecord(
    ...     id="local_plank",
    ...     name="Plank",
    ...     media_url="https://media.giphy.com/media/ZAOJHWhgLdHEI/giphy.gif",
    ...     target_muscles=["core"],
    ... )
    >>> record.has_media
    True

    >>> result = MatchResult(
    ...     record=record,
    ...     confidence=1.0,
    ...     match_type=MatchType.EXACT,
    ...     source=MatchSource.LOCAL_MAPPING,
    ... )
    >>> result.is_degraded
    False
"""

from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MatchType(str, Enum):
    """How the record was matched to the query."""

    EXACT = "exact"
    NORMALIZED = "normalized"
    SEMANTIC = "semantic"
    FUZZY = "fuzzy"
    PARTIAL = "partial"
    FALLBACK = "fallback"


class MatchSource(str, Enum):
    """Where the matched record came from."""

    LOCAL_MAPPING = "local_mapping"
    CACHE = "cache"
    REMOTE = "remote"
    GENERATED = "generated"


def _unique(values: List[str]) -> List[str]:
    seen = set()
    result = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result


class ExerciseRecord(BaseModel):
    """
    Canonical exercise record with a demonstration clip and metadata.

    Records are immutable; replacing a field (e.g. rewriting a broken media
    host) produces a new record via ``model_copy(update=...)``.

    A record with an empty ``media_url`` may live in a mapping table while it
    awaits enrichment, but it is never eligible as a final resolution result.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Identifier, stable within its source")
    name: str = Field(..., description="Canonical display name")
    media_url: str = Field(default="", description="Demonstration GIF/video URL")
    target_muscles: List[str] = Field(default_factory=list)
    body_parts: List[str] = Field(default_factory=list)
    equipment: List[str] = Field(default_factory=list)
    secondary_muscles: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)

    @field_validator("target_muscles", "body_parts", "equipment", "secondary_muscles")
    @classmethod
    def dedupe(cls, v: List[str]) -> List[str]:
        """Muscle, body part and equipment lists behave as ordered sets."""
        return _unique([item for item in v if item])

    @property
    def has_media(self) -> bool:
        """True if the record carries a usable media URL."""
        return bool(self.media_url and self.media_url.strip())


class MatchResult(BaseModel):
    """Result of resolving a free-form exercise name."""

    record: ExerciseRecord
    confidence: float = Field(..., ge=0.0, le=1.0)
    match_type: MatchType
    source: MatchSource

    @property
    def is_degraded(self) -> bool:
        """
        True when the record was synthesized rather than found.

        The media shown for a degraded result may not depict the requested
        exercise; callers can use this to flag the demonstration as a guess.
        """
        return self.source == MatchSource.GENERATED or self.match_type == MatchType.FALLBACK


class PageResult(BaseModel):
    """One page of records fetched from a remote catalog."""

    success: bool
    records: List[ExerciseRecord] = Field(default_factory=list)
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1)
    total_pages: int = 0
    total_records: int = 0
    has_next: bool = False
    source_catalog: str = ""
    errors: List[str] = Field(default_factory=list)


class CacheSnapshot(BaseModel):
    """Durable copy of the exercise cache plus when it was last refreshed."""

    records: List[ExerciseRecord] = Field(default_factory=list)
    refreshed_at: float = Field(..., description="Unix timestamp of the last refresh")
    inserted_at: Dict[str, float] = Field(
        default_factory=dict,
        description="Record id to the unix time it was cached; refreshed_at when absent",
    )
