"""
Synthetic exercise records.

When no mapping, cache entry or catalog matches a query, a plausible record
is built from the words of the query itself: target muscles, equipment and a
coarse category are inferred from keywords, and a category-appropriate
placeholder clip is attached. Synthesized records are never cached as
authoritative.
"""
import logging
import re
from typing import List

from backend.core.normalize import clean, normalize, title_case
from domain.models import ExerciseRecord

logger = logging.getLogger(__name__)

GENERIC_MEDIA_URL = "https://media.giphy.com/media/3oEjI6SIIHBdRxXI40/giphy.gif"

CATEGORY_MEDIA_URLS = {
    "cardio": "https://media.giphy.com/media/3oEjI6SIIHBdRxXI40/giphy.gif",
    "strength": "https://media.giphy.com/media/l1J9EdzfOSgfyueLm/giphy.gif",
    "core": "https://media.giphy.com/media/ZAOJHWhgLdHEI/giphy.gif",
    "flexibility": "https://media.giphy.com/media/3oEjI5TqjzqZWQzKus/giphy.gif",
    "general": GENERIC_MEDIA_URL,
}

# Specific clips take precedence over the category clip.
SPECIFIC_MEDIA_URLS = [
    (re.compile(r"jump.*jack"), "https://media.giphy.com/media/3oEduGGZhLKWtfHJYc/giphy.gif"),
    (re.compile(r"push.*up"), "https://media.giphy.com/media/l1J9EdzfOSgfyueLm/giphy.gif"),
    (re.compile(r"plank"), "https://media.giphy.com/media/ZAOJHWhgLdHEI/giphy.gif"),
    (re.compile(r"mountain.*climb"), "https://media.giphy.com/media/3oEjI8Kq5HhZLCrqBW/giphy.gif"),
    (re.compile(r"burpee"), "https://media.giphy.com/media/3oEjI0ZBtK8e6XG1qg/giphy.gif"),
]

MUSCLE_PATTERNS = [
    (re.compile(r"push|chest|press"), ["pectorals"]),
    (re.compile(r"squat|leg|thigh"), ["quads", "glutes"]),
    (re.compile(r"pull|back|row"), ["lats", "upper back"]),
    (re.compile(r"shoulder|raise"), ["delts"]),
    (re.compile(r"curl|bicep"), ["biceps"]),
    (re.compile(r"dip|tricep"), ["triceps"]),
    (re.compile(r"core|abs|plank|crunch"), ["abs"]),
    (re.compile(r"glute|hip|bridge"), ["glutes"]),
    (re.compile(r"calf"), ["calves"]),
    (re.compile(r"cardio|run|jump|jack"), ["cardiovascular system"]),
]

EQUIPMENT_PATTERNS = [
    (re.compile(r"dumbbell"), "dumbbell"),
    (re.compile(r"barbell"), "barbell"),
    (re.compile(r"kettlebell"), "kettlebell"),
    (re.compile(r"band|resistance"), "band"),
    (re.compile(r"cable"), "cable"),
    (re.compile(r"machine"), "machine"),
]

CATEGORY_PATTERNS = [
    (re.compile(r"cardio|run|jump|jack|climb"), "cardio"),
    (re.compile(r"stretch|yoga|flexibility"), "flexibility"),
    (re.compile(r"dumbbell|barbell|weight|press|curl|row"), "strength"),
    (re.compile(r"plank|crunch|abs|core"), "core"),
]

BODY_PARTS = {
    "pectorals": "chest",
    "lats": "back",
    "upper back": "back",
    "delts": "shoulders",
    "biceps": "upper arms",
    "triceps": "upper arms",
    "quads": "upper legs",
    "glutes": "upper legs",
    "hamstrings": "upper legs",
    "calves": "lower legs",
    "abs": "waist",
    "cardiovascular system": "cardio",
}

BASE_INSTRUCTIONS = [
    "Maintain proper form throughout the exercise",
    "Control the movement in both directions",
    "Breathe steadily and avoid holding your breath",
]

CATEGORY_INSTRUCTIONS = {
    "cardio": ["Keep a steady pace", "Land softly if jumping", "Stay light on your feet"],
    "strength": ["Use appropriate weight", "Work through a full range of motion", "Focus on the target muscles"],
    "core": ["Engage your core muscles", "Keep your back neutral", "Don't strain your neck"],
    "flexibility": ["Hold stretches for 15-30 seconds", "Don't bounce", "Breathe deeply"],
}


def infer_target_muscles(name: str) -> List[str]:
    for pattern, muscles in MUSCLE_PATTERNS:
        if pattern.search(name):
            return list(muscles)
    return ["full body"]


def infer_equipment(name: str) -> str:
    for pattern, equipment in EQUIPMENT_PATTERNS:
        if pattern.search(name):
            return equipment
    return "body weight"


def infer_category(name: str) -> str:
    """One of cardio, flexibility, strength, core, general."""
    for pattern, category in CATEGORY_PATTERNS:
        if pattern.search(name):
            return category
    return "general"


def infer_body_parts(muscles: List[str]) -> List[str]:
    return list(dict.fromkeys(BODY_PARTS.get(m, "full body") for m in muscles))


def fallback_media_url(name: str, category: str) -> str:
    for pattern, url in SPECIFIC_MEDIA_URLS:
        if pattern.search(name):
            return url
    return CATEGORY_MEDIA_URLS.get(category, GENERIC_MEDIA_URL)


def generate_instructions(category: str) -> List[str]:
    return BASE_INSTRUCTIONS + CATEGORY_INSTRUCTIONS.get(category, ["Follow proper technique"])


def synthesize_record(query: str) -> ExerciseRecord:
    """
    Build a plausible record from the query alone.

    Deterministic: the same query always yields the same record, and every
    synthesized record carries a non-empty media URL.
    """
    name = normalize(query)
    category = infer_category(name)
    muscles = infer_target_muscles(name)
    slug = name.replace(" ", "_") or "exercise"
    record = ExerciseRecord(
        id=f"generated_{slug}",
        name=title_case(query) or "Exercise",
        media_url=fallback_media_url(name, category),
        target_muscles=muscles,
        body_parts=infer_body_parts(muscles),
        equipment=[infer_equipment(name)],
        secondary_muscles=[],
        instructions=generate_instructions(category),
    )
    logger.debug(f"Synthesized {category} record '{record.name}' for '{query}'")
    return record


def emergency_record(query: str) -> ExerciseRecord:
    """Minimal record with the generic clip, used when even synthesis is unusable."""
    name = clean(query)
    return ExerciseRecord(
        id=f"emergency_{name.replace(' ', '_') or 'exercise'}",
        name=(query or "").strip() or "Exercise",
        media_url=GENERIC_MEDIA_URL,
        target_muscles=["full body"],
        body_parts=["full body"],
        equipment=["body weight"],
        secondary_muscles=[],
        instructions=["Perform with proper form"],
    )
