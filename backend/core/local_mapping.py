"""
Local mapping table for the most common exercises.

A small, hand-curated set of records that resolve with zero latency and no
network. It is the first tier the resolver consults and seeds the cache on
startup.

Lookup order:
1. Exact snake_case key (confidence 1.0)
2. String-transform variants: parenthetical, leading equipment word and
   per-set/per-leg suffix stripped (confidence 0.95)
3. Keyword heuristics, e.g. "jump" + "jack" -> jumping_jacks (confidence 0.9)

Entries with an empty media URL are placeholders awaiting enrichment from a
remote catalog; a hit on one is reported as a miss.
"""
import logging
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from backend.core.normalize import (
    normalize,
    snake_key,
    strip_parentheticals,
    strip_prefixes,
    strip_suffixes,
)
from domain.models import ExerciseRecord, MatchResult, MatchSource, MatchType

logger = logging.getLogger(__name__)

EXACT_CONFIDENCE = 1.0
VARIANT_CONFIDENCE = 0.95
HEURISTIC_CONFIDENCE = 0.9


def _record(key: str, **fields) -> Tuple[str, ExerciseRecord]:
    return key, ExerciseRecord(**fields)


DEFAULT_MAPPINGS: Dict[str, ExerciseRecord] = dict([
    # Cardio
    _record(
        "jumping_jacks",
        id="local_jumping_jacks",
        name="Jumping Jacks",
        media_url="https://media.giphy.com/media/3oEduGGZhLKWtfHJYc/giphy.gif",
        target_muscles=["cardiovascular system"],
        body_parts=["full body"],
        equipment=["body weight"],
        secondary_muscles=["legs", "arms"],
        instructions=[
            "Start standing with feet together and arms at sides",
            "Jump while spreading legs and raising arms overhead",
            "Jump back to starting position",
            "Repeat for desired reps",
        ],
    ),
    _record(
        "light_jogging_intervals",
        id="local_jogging_intervals",
        name="Light Jogging Intervals",
        media_url="https://media.giphy.com/media/3o7WTCmEF0Zcw1zYWY/giphy.gif",
        target_muscles=["cardiovascular system"],
        body_parts=["full body"],
        equipment=["body weight"],
        secondary_muscles=["legs", "core"],
        instructions=[
            "Start with light jogging pace",
            "Alternate between jogging and walking",
            "Maintain steady breathing",
            "Keep arms relaxed and moving naturally",
        ],
    ),
    _record(
        "butt_kicks",
        id="local_butt_kicks",
        name="Butt Kicks",
        media_url="https://media.giphy.com/media/xT9IgG50Fb7Mi0prBC/giphy.gif",
        target_muscles=["hamstrings"],
        body_parts=["legs"],
        equipment=["body weight"],
        secondary_muscles=["calves", "glutes"],
        instructions=[
            "Stand with feet hip-width apart",
            "Jog in place while kicking heels to glutes",
            "Keep core engaged",
            "Pump arms naturally",
        ],
    ),
    _record(
        "high_knees",
        id="local_high_knees",
        name="High Knees",
        media_url="https://media.giphy.com/media/3oEjI6SIIHBdRxXI40/giphy.gif",
        target_muscles=["quadriceps"],
        body_parts=["legs"],
        equipment=["body weight"],
        secondary_muscles=["hip flexors", "core"],
        instructions=[
            "Stand with feet hip-width apart",
            "Jog in place lifting knees toward chest",
            "Keep core tight",
            "Pump arms opposite to legs",
        ],
    ),
    # Strength placeholders, media comes from a remote catalog
    _record(
        "dumbbell_goblet_squat",
        id="local_goblet_squat",
        name="Dumbbell Goblet Squat",
        media_url="",
        target_muscles=["quadriceps"],
        body_parts=["legs"],
        equipment=["dumbbell"],
        secondary_muscles=["glutes", "core"],
        instructions=[
            "Hold dumbbell at chest level",
            "Stand with feet shoulder-width apart",
            "Squat down keeping chest up",
            "Drive through heels to stand",
        ],
    ),
    _record(
        "dumbbell_lunges",
        id="local_dumbbell_lunges",
        name="Dumbbell Lunges",
        media_url="",
        target_muscles=["quadriceps"],
        body_parts=["legs"],
        equipment=["dumbbell"],
        secondary_muscles=["glutes", "hamstrings"],
        instructions=[
            "Hold dumbbells at sides",
            "Step forward into lunge position",
            "Lower until both knees at 90 degrees",
            "Push back to starting position",
        ],
    ),
    # Bodyweight
    _record(
        "push_ups",
        id="local_push_ups",
        name="Push-ups",
        media_url="https://media.giphy.com/media/l1J9EdzfOSgfyueLm/giphy.gif",
        target_muscles=["chest"],
        body_parts=["upper body"],
        equipment=["body weight"],
        secondary_muscles=["triceps", "shoulders"],
        instructions=[
            "Start in plank position",
            "Lower chest to floor",
            "Push back up to starting position",
            "Keep body straight throughout",
        ],
    ),
    _record(
        "plank",
        id="local_plank",
        name="Plank",
        media_url="https://media.giphy.com/media/ZAOJHWhgLdHEI/giphy.gif",
        target_muscles=["core"],
        body_parts=["core"],
        equipment=["body weight"],
        secondary_muscles=["shoulders", "back"],
        instructions=[
            "Start in forearm plank position",
            "Keep body straight from head to heels",
            "Engage core muscles",
            "Hold for desired time",
        ],
    ),
    _record(
        "mountain_climbers",
        id="local_mountain_climbers",
        name="Mountain Climbers",
        media_url="https://media.giphy.com/media/3oEjI8Kq5HhZLCrqBW/giphy.gif",
        target_muscles=["core"],
        body_parts=["full body"],
        equipment=["body weight"],
        secondary_muscles=["shoulders", "legs"],
        instructions=[
            "Start in plank position",
            "Alternate bringing knees to chest",
            "Keep hips level",
            "Maintain fast pace",
        ],
    ),
    _record(
        "mountain_climber",
        id="local_mountain_climber",
        name="Mountain Climber",
        media_url="https://media.giphy.com/media/3oEjI8Kq5HhZLCrqBW/giphy.gif",
        target_muscles=["cardiovascular system"],
        body_parts=["full body"],
        equipment=["body weight"],
        secondary_muscles=["shoulders", "legs", "core"],
        instructions=[
            "Start in plank position",
            "Alternate bringing knees to chest",
            "Keep hips level",
            "Maintain fast pace",
        ],
    ),
    _record(
        "burpees",
        id="local_burpees",
        name="Burpees",
        media_url="https://media.giphy.com/media/3oEjI0ZBtK8e6XG1qg/giphy.gif",
        target_muscles=["full body"],
        body_parts=["full body"],
        equipment=["body weight"],
        secondary_muscles=["cardiovascular system"],
        instructions=[
            "Start standing",
            "Drop to squat and place hands on floor",
            "Jump feet back to plank",
            "Do push-up, jump feet in, jump up",
        ],
    ),
])


def _has_all(*words: str) -> Callable[[str], bool]:
    return lambda name: all(w in name for w in words)


def _has_any(*words: str) -> Callable[[str], bool]:
    return lambda name: any(w in name for w in words)


# Checked in order against the normalized (space separated) name.
KEYWORD_HEURISTICS: List[Tuple[Callable[[str], bool], str]] = [
    (_has_all("jump", "jack"), "jumping_jacks"),
    (_has_any("jog", "running"), "light_jogging_intervals"),
    (_has_all("butt", "kick"), "butt_kicks"),
    (_has_all("high", "knee"), "high_knees"),
    (_has_all("goblet", "squat"), "dumbbell_goblet_squat"),
    (_has_any("lunge"), "dumbbell_lunges"),
    (_has_all("push", "up"), "push_ups"),
    (_has_any("plank"), "plank"),
    (_has_all("mountain", "climb"), "mountain_climbers"),
    (_has_any("burpee"), "burpees"),
]


class LocalMappingTable:
    """
    Guaranteed-available records for very common exercises.

    Keys are snake_case (``"jumping_jacks"``); any input formatting is
    reduced to that form before lookup.
    """

    def __init__(self, mappings: Optional[Dict[str, ExerciseRecord]] = None):
        source = DEFAULT_MAPPINGS if mappings is None else mappings
        self._mappings: Dict[str, ExerciseRecord] = {snake_key(k): v for k, v in source.items()}

    def __len__(self) -> int:
        return len(self._mappings)

    def items(self) -> Iterator[Tuple[str, ExerciseRecord]]:
        """All (key, record) pairs, including media-less placeholders."""
        return iter(self._mappings.items())

    def lookup(self, name: str) -> Optional[ExerciseRecord]:
        """Return the mapped record for ``name`` or None on a miss."""
        match = self.match(name)
        return match.record if match else None

    def match(self, name: str) -> Optional[MatchResult]:
        """Like ``lookup`` but reports how the key was found."""
        if not name or not name.strip():
            return None

        for key, confidence, match_type in self._candidates(name):
            record = self._mappings.get(key)
            if record is None:
                continue
            if not record.has_media:
                logger.debug(f"Local mapping '{key}' has no media, leaving it to remote catalogs")
                continue
            logger.debug(f"Local mapping hit: '{name}' -> '{key}'")
            return MatchResult(
                record=record,
                confidence=confidence,
                match_type=match_type,
                source=MatchSource.LOCAL_MAPPING,
            )
        return None

    def _candidates(self, name: str) -> Iterator[Tuple[str, float, MatchType]]:
        yield snake_key(name), EXACT_CONFIDENCE, MatchType.EXACT

        without_parens = strip_parentheticals(name)
        variants = [
            without_parens,
            strip_prefixes(without_parens),
            strip_suffixes(without_parens),
            strip_suffixes(strip_prefixes(without_parens)),
        ]
        for variant in variants:
            yield snake_key(variant), VARIANT_CONFIDENCE, MatchType.NORMALIZED

        normalized = normalize(name)
        for matches, key in KEYWORD_HEURISTICS:
            if matches(normalized):
                yield key, HEURISTIC_CONFIDENCE, MatchType.NORMALIZED
