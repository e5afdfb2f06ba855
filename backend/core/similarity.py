"""
String similarity used to classify and rank exercise name matches.

similarity = (max_len - levenshtein_distance) / max_len

Symmetric, bounded in [0, 1], and 1.0 only for identical strings.
"""
from typing import Iterable, List, Tuple

from rapidfuzz.distance import Levenshtein


def levenshtein_distance(a: str, b: str) -> int:
    """Edit distance (insertions, deletions, substitutions all cost 1)."""
    return Levenshtein.distance(a, b)


def calculate_similarity(a: str, b: str) -> float:
    """
    Normalized Levenshtein similarity of two strings.

    Examples:
        >>> calculate_similarity("squat", "squats") > 0.8
        True
        >>> calculate_similarity("squat", "deadlift") < 0.3
        True
    """
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return (longest - levenshtein_distance(a, b)) / longest


def indexable_words(text: str) -> List[str]:
    """Words long enough to count towards word overlap (length > 2)."""
    return [w for w in text.split() if len(w) > 2]


def word_overlap_score(query: str, candidate: str) -> float:
    """
    Summed length of query words that also appear in ``candidate``,
    normalized by the query length.

    Both strings are expected in normalized (space separated) form.
    """
    if not query:
        return 0.0
    candidate_words = set(candidate.split())
    overlap = sum(len(w) for w in indexable_words(query) if w in candidate_words)
    return overlap / len(query)


def rank_by_similarity(
    query: str,
    choices: Iterable[str],
    limit: int = 5,
    score_cutoff: float = 0.0,
) -> List[Tuple[str, float]]:
    """
    Return (choice, similarity) pairs sorted by similarity desc.

    Ties keep the order of ``choices``.
    """
    scored = []
    for choice in choices:
        score = calculate_similarity(query, choice)
        if score >= score_cutoff:
            scored.append((choice, score))
    scored.sort(key=lambda x: x[1], reverse=True)
    if limit is not None:
        scored = scored[:limit]
    return scored
