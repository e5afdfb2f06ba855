"""
Unit tests for backend/core/synthesis.py
"""
import pytest

from backend.core.synthesis import (
    CATEGORY_MEDIA_URLS,
    GENERIC_MEDIA_URL,
    emergency_record,
    infer_category,
    infer_equipment,
    synthesize_record,
)


@pytest.mark.unit
class TestSynthesizeRecord:

    def test_infers_metadata_from_words(self):
        record = synthesize_record("DB curl")

        assert record.id == "generated_dumbbell_curl"
        assert record.name == "Db Curl"
        assert record.target_muscles == ["biceps"]
        assert record.body_parts == ["upper arms"]
        assert record.equipment == ["dumbbell"]
        assert record.media_url == CATEGORY_MEDIA_URLS["strength"]

    def test_deterministic(self):
        assert synthesize_record("tempo lateral lunge") == synthesize_record("tempo lateral lunge")

    def test_specific_clip_wins_over_category(self):
        record = synthesize_record("jumping jack variation")
        assert record.media_url == "https://media.giphy.com/media/3oEduGGZhLKWtfHJYc/giphy.gif"

    def test_unknown_words_get_generic_record(self):
        record = synthesize_record("zzz qqq")
        assert record.target_muscles == ["full body"]
        assert record.equipment == ["body weight"]
        assert record.media_url == GENERIC_MEDIA_URL

    def test_blank_query_still_has_media(self):
        record = synthesize_record("")
        assert record.id == "generated_exercise"
        assert record.name == "Exercise"
        assert record.has_media

    def test_instructions_include_category_tips(self):
        record = synthesize_record("yoga flow")
        assert "Hold stretches for 15-30 seconds" in record.instructions


@pytest.mark.unit
class TestInference:

    @pytest.mark.parametrize(
        "name,category",
        [
            ("jump squat", "cardio"),
            ("hamstring stretch", "flexibility"),
            ("barbell row", "strength"),
            ("plank hold", "core"),
            ("farmer carry", "general"),
        ],
    )
    def test_category(self, name, category):
        assert infer_category(name) == category

    def test_equipment(self):
        assert infer_equipment("resistance band pull apart") == "band"
        assert infer_equipment("air squat") == "body weight"


@pytest.mark.unit
class TestEmergencyRecord:

    def test_uses_generic_clip(self):
        record = emergency_record("  Mystery Move ")
        assert record.id == "emergency_mystery_move"
        assert record.name == "Mystery Move"
        assert record.media_url == GENERIC_MEDIA_URL

    def test_blank(self):
        assert emergency_record("").name == "Exercise"
