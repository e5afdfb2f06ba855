"""
Exercises router for name resolution and lookup.

This router provides endpoints for:
- Resolving a free-form exercise name to a record with media
- Preloading the names of a workout plan
- Suggestions, catalog browsing and lookup by id
- Cache statistics and cache reset
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from api.deps import get_exercise_resolver, get_preload_use_case
from api.schemas.exercises import (
    ExerciseListResponse,
    NameListResponse,
    PreloadRequest,
    PreloadResponse,
    ResolveResponse,
    SuggestionResponse,
)
from application.use_cases import PreloadExercisesUseCase, plan_exercise_names
from backend.core.exercise_resolver import ExerciseResolver
from domain.models import ExerciseRecord

router = APIRouter(
    prefix="/exercises",
    tags=["Exercises"],
)


# =============================================================================
# Resolution Endpoints
# =============================================================================


@router.get("/resolve", response_model=ResolveResponse)
async def resolve_exercise(
    name: str = Query(..., min_length=1, max_length=200, description="Exercise name in any formatting"),
    resolver: ExerciseResolver = Depends(get_exercise_resolver),
) -> ResolveResponse:
    """
    Resolve an exercise name to a record with a demonstration clip.

    Always returns a record. ``degraded`` is true when nothing matched and
    the record was synthesized from the name.
    """
    match = await resolver.find_exercise(name)
    return ResolveResponse.from_match(name, match)


@router.post("/preload", response_model=PreloadResponse)
async def preload_exercises(
    request: PreloadRequest,
    use_case: PreloadExercisesUseCase = Depends(get_preload_use_case),
) -> PreloadResponse:
    """
    Resolve a batch of names concurrently to warm the cache.

    Returns one entry per distinct name together with the batch report.
    """
    names = list(request.names) + plan_exercise_names(request.workouts)
    results = await use_case.execute(names)
    return PreloadResponse(
        results={
            name: ResolveResponse.from_match(name, match) if match is not None else None
            for name, match in results.items()
        },
        report=use_case.last_report.to_dict(),
    )


@router.get("/suggest", response_model=List[SuggestionResponse])
async def suggest_exercises(
    q: str = Query(..., min_length=1, description="Exercise name to get suggestions for"),
    limit: int = Query(5, ge=1, le=20, description="Maximum suggestions to return"),
    resolver: ExerciseResolver = Depends(get_exercise_resolver),
) -> List[SuggestionResponse]:
    """Known exercises ranked by name similarity."""
    return [
        SuggestionResponse(exercise=record, similarity=round(score, 3))
        for record, score in resolver.engine.suggest(q, limit=limit)
    ]


# =============================================================================
# Cache Endpoints
# =============================================================================


@router.get("/stats")
async def get_stats(
    resolver: ExerciseResolver = Depends(get_exercise_resolver),
    use_case: PreloadExercisesUseCase = Depends(get_preload_use_case),
) -> dict:
    """Resolution tier counters, cache size and the last preload report."""
    report = use_case.last_report
    return {
        **resolver.get_stats(),
        "last_preload": report.to_dict() if report is not None else None,
    }


@router.delete("/cache")
async def clear_cache(
    resolver: ExerciseResolver = Depends(get_exercise_resolver),
) -> dict:
    """Drop cached and persisted records; local mappings are re-seeded."""
    resolver.clear_cache()
    return {"status": "cleared", "cache": resolver.cache.stats()}


# =============================================================================
# Browse Endpoints
# =============================================================================


@router.get("/body-parts", response_model=NameListResponse)
async def list_body_parts(
    resolver: ExerciseResolver = Depends(get_exercise_resolver),
) -> NameListResponse:
    names = await resolver.list_body_parts()
    return NameListResponse(names=names, count=len(names))


@router.get("/body-parts/{body_part}", response_model=ExerciseListResponse)
async def list_exercises_by_body_part(
    body_part: str = Path(..., min_length=1, max_length=100),
    resolver: ExerciseResolver = Depends(get_exercise_resolver),
) -> ExerciseListResponse:
    exercises = await resolver.exercises_by_body_part(body_part)
    return ExerciseListResponse(exercises=exercises, count=len(exercises))


@router.get("/equipments", response_model=NameListResponse)
async def list_equipments(
    resolver: ExerciseResolver = Depends(get_exercise_resolver),
) -> NameListResponse:
    names = await resolver.list_equipments()
    return NameListResponse(names=names, count=len(names))


@router.get("/equipments/{equipment}", response_model=ExerciseListResponse)
async def list_exercises_by_equipment(
    equipment: str = Path(..., min_length=1, max_length=100),
    resolver: ExerciseResolver = Depends(get_exercise_resolver),
) -> ExerciseListResponse:
    exercises = await resolver.exercises_by_equipment(equipment)
    return ExerciseListResponse(exercises=exercises, count=len(exercises))


# =============================================================================
# Lookup Endpoints
# =============================================================================


@router.get("/{exercise_id}", response_model=ExerciseRecord)
async def get_exercise(
    exercise_id: str = Path(
        ...,
        description="Exercise id as issued by its source (e.g., '0662')",
        min_length=1,
        max_length=100,
    ),
    resolver: ExerciseResolver = Depends(get_exercise_resolver),
) -> ExerciseRecord:
    """
    Get an exercise by id, from the cache or the remote catalogs.

    Args:
        exercise_id: The exercise id (e.g., "0662")
    """
    record = await resolver.get_exercise(exercise_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Exercise '{exercise_id}' not found")
    return record
