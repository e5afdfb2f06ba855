"""
Exercise name normalization.

Free-form names arrive as "Push_Ups", "db goblet-squat (3x12)" or
"Jumping Jacks - each set". Everything that compares names goes through
``normalize`` first so the matchers only ever see lower-case, space
separated words.
"""
import pathlib
import re
from functools import lru_cache
from typing import Dict, List

import yaml

ROOT = pathlib.Path(__file__).resolve().parents[2]

DICTIONARIES = ROOT / "shared" / "dictionaries"


@lru_cache
def _dictionary() -> Dict[str, object]:
    return yaml.safe_load((DICTIONARIES / "normalization.yaml").read_text())


def clean(text: str) -> str:
    """Lower-case, turn ``_``/``-``/``/`` into spaces, drop punctuation, collapse spaces."""
    if not text:
        return ""
    t = text.lower().strip()
    t = re.sub(r"[-_/]", " ", t)
    t = re.sub(r"[^\w\s]", "", t)
    return re.sub(r"\s+", " ", t).strip()


def normalize(text: str) -> str:
    """``clean`` plus expansion of common abbreviations (db, kb, rdl, ...)."""
    t = clean(text)
    if not t:
        return ""
    expand = _dictionary()["expand"]
    words: List[str] = []
    for word in t.split():
        words.extend(expand.get(word, word).split())
    return " ".join(words)


def snake_key(text: str) -> str:
    """Key form used by the mapping tables: ``"Push-Ups"`` -> ``"push_ups"``."""
    return normalize(text).replace(" ", "_")


def strip_parentheticals(text: str) -> str:
    """Remove ``(...)`` qualifiers such as ``"(3 sets)"``."""
    return re.sub(r"\s+", " ", re.sub(r"\(.*?\)", " ", text)).strip()


def strip_prefixes(text: str) -> str:
    """Drop a leading equipment word: ``"dumbbell lunges"`` -> ``"lunges"``."""
    t = normalize(text)
    for prefix in _dictionary()["strip_prefixes"]:
        if t.startswith(prefix + " "):
            return t[len(prefix) + 1:]
    return t


def strip_suffixes(text: str) -> str:
    """Drop trailing per-set/per-leg qualifiers: ``"lunges each leg"`` -> ``"lunges"``."""
    t = normalize(text)
    changed = True
    while changed:
        changed = False
        for suffix in _dictionary()["strip_suffixes"]:
            if t.endswith(" " + suffix):
                t = t[: -len(suffix) - 1]
                changed = True
    return t


def title_case(text: str) -> str:
    """Display form for names built from raw input: ``"air_squats"`` -> ``"Air Squats"``."""
    words = re.sub(r"[_-]", " ", text or "").split()
    return " ".join(w[:1].upper() + w[1:].lower() for w in words)
