"""
Unit tests for backend/core/name_resolution.py

Covers each resolution stage in order, the confidence ordering between
stages, and runtime indexing of catalog records.
"""
import pytest

from backend.core.name_resolution import NameResolutionEngine
from domain.models import MatchSource, MatchType
from tests.fakes import make_record


@pytest.fixture(scope="module")
def engine() -> NameResolutionEngine:
    return NameResolutionEngine()


@pytest.fixture
def hip_thrust_engine() -> NameResolutionEngine:
    return NameResolutionEngine(
        records=[make_record("1409", "Barbell Hip Thrust")],
        aliases={},
        patterns=[],
    )


# =============================================================================
# Stages
# =============================================================================


@pytest.mark.unit
class TestExactStage:

    def test_canonical_name(self, engine):
        result = engine.resolve("Push-Up")

        assert result.record.id == "0662"
        assert result.confidence == 1.0
        assert result.match_type == MatchType.EXACT
        assert result.source == MatchSource.LOCAL_MAPPING

    def test_any_formatting(self, engine):
        assert engine.resolve("romanian_deadlift").record.id == "0085"
        assert engine.resolve("RDL").record.id == "0085"


@pytest.mark.unit
class TestAliasStage:

    def test_alias_key(self, engine):
        result = engine.resolve("push ups")

        assert result.record.id == "0662"
        assert result.confidence == 0.95
        assert result.match_type == MatchType.NORMALIZED

    def test_plural_variant(self, engine):
        result = engine.resolve("air squat")

        assert result.record.name == "Squat"
        assert result.confidence == 0.9

    def test_alias_to_unindexed_name_is_skipped(self):
        engine = NameResolutionEngine(
            records=[make_record("1", "Plank")],
            aliases={"plonk": "Side Plank"},
            patterns=[],
        )
        assert engine.resolve("plonk").match_type == MatchType.FALLBACK


@pytest.mark.unit
class TestPhraseStage:

    def test_one_extra_word(self, engine):
        result = engine.resolve("tempo squat")

        assert result.record.name == "Squat"
        assert result.confidence == 0.7
        assert result.match_type == MatchType.NORMALIZED

    def test_longest_phrase_wins(self, engine):
        result = engine.resolve("romanian deadlift single leg")

        assert result.record.name == "Romanian Deadlift"
        assert result.confidence == 0.6

    def test_confidence_floor_is_synthesis_confidence(self, engine):
        result = engine.resolve("super slow paused tempo deep squat hold")

        assert result.record.name == "Squat"
        assert result.match_type == MatchType.NORMALIZED
        assert result.confidence == 0.6
        assert result.confidence >= engine.resolve("!!!").confidence


@pytest.mark.unit
class TestSemanticStage:

    def test_pattern(self, engine):
        result = engine.resolve("incline bench press")

        assert result.record.id == "0025"
        assert result.confidence == 0.9
        assert result.match_type == MatchType.SEMANTIC


@pytest.mark.unit
class TestFuzzyStage:

    def test_word_overlap(self, hip_thrust_engine):
        result = hip_thrust_engine.resolve("hip thrust hold")

        assert result.record.id == "1409"
        assert result.match_type == MatchType.FUZZY
        assert result.confidence == pytest.approx(0.6)

    def test_confidence_capped(self, hip_thrust_engine):
        assert hip_thrust_engine.resolve("hip thrust").confidence == 0.8

    def test_short_words_ignored(self, hip_thrust_engine):
        assert hip_thrust_engine.resolve("hi ok").match_type == MatchType.FALLBACK


@pytest.mark.unit
class TestSynthesisStage:

    def test_unknown_name(self, engine):
        result = engine.resolve("unknown_xyz_exercise_123")

        assert result.match_type == MatchType.FALLBACK
        assert result.source == MatchSource.GENERATED
        assert result.confidence == 0.6
        assert result.record.id == "generated_unknown_xyz_exercise_123"
        assert result.record.has_media
        assert result.is_degraded

    @pytest.mark.parametrize("query", ["", "   "])
    def test_blank_input_never_raises(self, engine, query):
        result = engine.resolve(query)
        assert result.record.has_media
        assert result.record.name == "Exercise"

    def test_punctuation_only(self, engine):
        result = engine.resolve("!!!")
        assert result.record.id == "generated_exercise"
        assert result.record.has_media


# =============================================================================
# Ordering and indexing
# =============================================================================


@pytest.mark.unit
class TestConfidenceOrdering:

    def test_exact_beats_fuzzy_for_same_words(self):
        engine = NameResolutionEngine(records=[make_record("1", "Side Plank")], aliases={}, patterns=[])

        exact = engine.resolve("side plank")
        fuzzy = engine.resolve("plank side")

        assert exact.confidence == 1.0
        assert fuzzy.match_type == MatchType.FUZZY
        assert fuzzy.confidence == 0.8
        assert exact.confidence > fuzzy.confidence


@pytest.mark.unit
class TestIndexRecords:

    def test_new_records_resolve_exactly(self):
        engine = NameResolutionEngine(records=[], aliases={}, patterns=[])

        added = engine.index_records([make_record("0160", "Cable Face Pull")])
        result = engine.resolve("cable face pull")

        assert added == 1
        assert result.source == MatchSource.REMOTE
        assert result.match_type == MatchType.EXACT

    def test_first_record_for_a_name_wins(self):
        engine = NameResolutionEngine(records=[make_record("a", "Plank")], aliases={}, patterns=[])

        assert engine.index_records([make_record("b", "plank")]) == 0
        assert engine.resolve("Plank").record.id == "a"

    def test_records_without_media_skipped(self):
        engine = NameResolutionEngine(records=[], aliases={}, patterns=[])

        assert engine.index_records([make_record("x", "Cable Face Pull", media_url="")]) == 0
        assert len(engine) == 0


@pytest.mark.unit
class TestSuggest:

    def test_ranked_by_similarity(self, engine):
        suggestions = engine.suggest("squats", limit=3)

        assert len(suggestions) == 3
        assert suggestions[0][0].name == "Squat"
        assert suggestions[0][1] == pytest.approx(5 / 6)

    def test_blank(self, engine):
        assert engine.suggest("") == []
