"""
Bundled exercise dictionaries.

Loads the canonical catalog, the alias table and the semantic patterns
from ``shared/dictionaries``. These are the name resolution engine's
offline knowledge: they resolve without any network access.
"""
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, List, Pattern

import yaml

from backend.core.normalize import DICTIONARIES, normalize, snake_key
from domain.models import ExerciseRecord


@dataclass(frozen=True)
class SemanticPattern:
    """Regular expression that maps a query to a canonical name."""

    regex: Pattern[str]
    canonical_name: str
    confidence: float


def _load(filename: str):
    return yaml.safe_load((DICTIONARIES / filename).read_text())


@lru_cache
def canonical_records() -> List[ExerciseRecord]:
    """Bundled canonical records, in file order."""
    records = [ExerciseRecord(**item) for item in _load("canonical_exercises.yaml")]
    missing = [r.name for r in records if not r.has_media]
    if missing:
        raise ValueError(f"Bundled catalog entries without media: {missing}")
    return records


@lru_cache
def alias_mappings() -> Dict[str, str]:
    """Alias table keyed by snake_case token, values are canonical names."""
    return {snake_key(raw): canonical for raw, canonical in _load("exercise_aliases.yaml").items()}


@lru_cache
def semantic_patterns() -> List[SemanticPattern]:
    """Ordered semantic patterns; the first match wins."""
    patterns = []
    for item in _load("semantic_patterns.yaml"):
        confidence = float(item["confidence"])
        if not 0.0 <= confidence <= 1.0:
            raise ValueError(f"Pattern {item['pattern']!r} has confidence outside [0, 1]")
        patterns.append(
            SemanticPattern(
                regex=re.compile(item["pattern"], re.IGNORECASE),
                canonical_name=item["target"],
                confidence=confidence,
            )
        )
    return patterns


def lookup(name: str):
    """Find a bundled record by name (any formatting)."""
    key = normalize(name)
    return next((r for r in canonical_records() if normalize(r.name) == key), None)
