"""
Response schemas for the remote exercise catalogs.

Each catalog gets its own explicit model and one ``to_record`` method that
maps it onto ExerciseRecord. Nothing outside this package sees these shapes.

Catalogs:
- primary: ExerciseDB v1 style API (``{success, metadata, data}`` envelope)
- api-ninjas: bare list of exercises, no ids and no media
- free-exercise-db: full JSON dump with relative image paths
"""
from typing import List, Optional
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, field_validator

from backend.core.normalize import clean
from domain.models import ExerciseRecord

NINJAS_PLACEHOLDER_MEDIA = "https://static.exercisedb.dev/media/placeholder_{type}.gif"
FREE_PLACEHOLDER_MEDIA = "https://via.placeholder.com/400x300.gif?text={name}"
DEFAULT_INSTRUCTIONS = ["Follow proper form and technique"]


def _slug(name: str) -> str:
    return clean(name).replace(" ", "_")


def _list(v):
    """Catalogs send null where they mean an empty list."""
    return [] if v is None else v


# =============================================================================
# Primary catalog
# =============================================================================


class PrimaryExercise(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    exercise_id: str = Field(..., alias="exerciseId")
    name: str
    gif_url: Optional[str] = Field(default="", alias="gifUrl")
    target_muscles: List[str] = Field(default_factory=list, alias="targetMuscles")
    body_parts: List[str] = Field(default_factory=list, alias="bodyParts")
    equipments: List[str] = Field(default_factory=list)
    secondary_muscles: List[str] = Field(default_factory=list, alias="secondaryMuscles")
    instructions: List[str] = Field(default_factory=list)

    @field_validator(
        "target_muscles", "body_parts", "equipments", "secondary_muscles", "instructions",
        mode="before",
    )
    @classmethod
    def nulls_to_empty(cls, v):
        return _list(v)

    def to_record(self) -> ExerciseRecord:
        return ExerciseRecord(
            id=self.exercise_id,
            name=self.name,
            media_url=self.gif_url or "",
            target_muscles=self.target_muscles,
            body_parts=self.body_parts,
            equipment=self.equipments,
            secondary_muscles=self.secondary_muscles,
            instructions=self.instructions,
        )


class PrimaryMetadata(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    total_pages: int = Field(default=0, alias="totalPages")
    total_exercises: int = Field(default=0, alias="totalExercises")
    current_page: int = Field(default=1, alias="currentPage")
    previous_page: Optional[str] = Field(default=None, alias="previousPage")
    next_page: Optional[str] = Field(default=None, alias="nextPage")


class PrimaryListResponse(BaseModel):
    """Envelope of the search, listing, body part and equipment endpoints."""

    model_config = ConfigDict(extra="ignore")

    success: bool = True
    metadata: Optional[PrimaryMetadata] = None
    data: List[PrimaryExercise] = Field(default_factory=list)


class PrimaryItemResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    success: bool = True
    data: Optional[PrimaryExercise] = None


class PrimaryNamedItem(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str


class PrimaryNamesResponse(BaseModel):
    """``/bodyparts`` and ``/equipments``: names as strings or ``{name}`` objects."""

    model_config = ConfigDict(extra="ignore")

    success: bool = True
    data: List[str] = Field(default_factory=list)

    @field_validator("data", mode="before")
    @classmethod
    def flatten_names(cls, v):
        names = []
        for item in _list(v):
            if isinstance(item, dict):
                item = PrimaryNamedItem.model_validate(item).name
            names.append(item)
        return names


# =============================================================================
# API Ninjas
# =============================================================================


class NinjasExercise(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    type: Optional[str] = None
    muscle: Optional[str] = None
    equipment: Optional[str] = None
    difficulty: Optional[str] = None
    instructions: Optional[str] = None

    def to_record(self) -> ExerciseRecord:
        """API Ninjas has no ids or media: derive the id, use a per-type placeholder clip."""
        kind = (self.type or "general").lower()
        return ExerciseRecord(
            id=f"ninja_{_slug(self.name)}",
            name=self.name,
            media_url=NINJAS_PLACEHOLDER_MEDIA.format(type=kind),
            target_muscles=[self.muscle] if self.muscle else [],
            body_parts=[],
            equipment=[self.equipment or "body weight"],
            secondary_muscles=[],
            instructions=[self.instructions] if self.instructions else list(DEFAULT_INSTRUCTIONS),
        )


# =============================================================================
# free-exercise-db
# =============================================================================


class FreeExercise(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: Optional[str] = None
    name: str
    category: Optional[str] = None
    equipment: Optional[str] = None
    primary_muscles: List[str] = Field(default_factory=list, alias="primaryMuscles")
    secondary_muscles: List[str] = Field(default_factory=list, alias="secondaryMuscles")
    instructions: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)

    @field_validator("primary_muscles", "secondary_muscles", "instructions", "images", mode="before")
    @classmethod
    def nulls_to_empty(cls, v):
        return _list(v)

    def to_record(self, media_base: str) -> ExerciseRecord:
        """Image paths in the dump are relative to the repository's exercises/ folder."""
        if self.images:
            image = self.images[0]
            media_url = image if image.startswith("http") else media_base.rstrip("/") + "/" + image.lstrip("/")
        else:
            media_url = FREE_PLACEHOLDER_MEDIA.format(name=quote(self.name))
        return ExerciseRecord(
            id=self.id or f"free_{_slug(self.name)}",
            name=self.name,
            media_url=media_url,
            target_muscles=self.primary_muscles,
            body_parts=[self.category] if self.category else [],
            equipment=[self.equipment or "body weight"],
            secondary_muscles=self.secondary_muscles,
            instructions=self.instructions or list(DEFAULT_INSTRUCTIONS),
        )
