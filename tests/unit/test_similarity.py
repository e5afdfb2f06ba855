"""
Unit tests for backend/core/similarity.py
"""
import pytest

from backend.core.similarity import (
    calculate_similarity,
    indexable_words,
    levenshtein_distance,
    rank_by_similarity,
    word_overlap_score,
)


@pytest.mark.unit
class TestCalculateSimilarity:
    """Normalized Levenshtein similarity."""

    def test_plural_is_similar(self):
        assert calculate_similarity("squat", "squats") > 0.8

    def test_unrelated_names_are_dissimilar(self):
        assert calculate_similarity("squat", "deadlift") < 0.3

    def test_identical_strings_score_one(self):
        assert calculate_similarity("plank", "plank") == 1.0

    def test_only_identical_strings_score_one(self):
        assert calculate_similarity("plank", "planks") < 1.0

    def test_symmetric(self):
        assert calculate_similarity("lunge", "lunges each leg") == calculate_similarity("lunges each leg", "lunge")

    def test_two_empty_strings(self):
        assert calculate_similarity("", "") == 1.0

    def test_one_empty_string(self):
        assert calculate_similarity("", "plank") == 0.0

    def test_bounded(self):
        for a, b in [("a", "zzzz"), ("push up", "pull up"), ("row", "rowing machine")]:
            assert 0.0 <= calculate_similarity(a, b) <= 1.0

    def test_distance(self):
        assert levenshtein_distance("squat", "squats") == 1
        assert levenshtein_distance("row", "row") == 0


@pytest.mark.unit
class TestWordOverlap:
    """Word overlap scoring used by fuzzy and partial matching."""

    def test_indexable_words_skip_short_words(self):
        assert indexable_words("a db row to go") == ["row"]

    def test_overlap_normalized_by_query_length(self):
        # hip (3) + thrust (6) out of 15 characters
        assert word_overlap_score("hip thrust hold", "barbell hip thrust") == pytest.approx(0.6)

    def test_no_overlap(self):
        assert word_overlap_score("plank", "barbell curl") == 0.0

    def test_empty_query(self):
        assert word_overlap_score("", "plank") == 0.0

    def test_whole_words_only(self):
        assert word_overlap_score("row", "narrow grip press") == 0.0


@pytest.mark.unit
class TestRankBySimilarity:

    def test_sorted_and_limited(self):
        ranked = rank_by_similarity("squat", ["squats", "deadlift", "squat"], limit=2)
        assert [choice for choice, _ in ranked] == ["squat", "squats"]
        assert ranked[0][1] == 1.0

    def test_cutoff(self):
        ranked = rank_by_similarity("squat", ["squats", "deadlift"], score_cutoff=0.5)
        assert [choice for choice, _ in ranked] == ["squats"]
