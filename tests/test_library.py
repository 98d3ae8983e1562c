"""
Question library tests - bundled definitions, caching and path validation end to end
"""
import json

import pytest

from intake_engine.core import config
from intake_engine.database.cache import TTLCache, get_library_cache
from intake_engine.services.intake import get_path_questions, validate_path
from intake_engine.services.library import (
    get_intake_path,
    get_question_blocks,
    load_intake_paths,
    load_question_blocks,
)


@pytest.fixture(autouse=True)
def clear_library_cache():
    get_library_cache().clear()
    yield
    get_library_cache().clear()


def path_blocks(client_type):
    path = get_intake_path(client_type)
    return path, get_question_blocks(path.question_block_ids)


def test_bundled_definitions_load():
    """Every bundled block and path parses and every path references known blocks"""
    blocks = load_question_blocks()
    paths = load_intake_paths()
    block_ids = {block.id for block in blocks}

    assert [block.order for block in blocks] == sorted(block.order for block in blocks)
    assert {path.client_type for path in paths} == {
        "NUTRITION_ONLY", "WORKOUT_ONLY", "FULL_PROGRAM", "ATHLETE_PERFORMANCE",
    }
    for path in paths:
        assert set(path.question_block_ids) <= block_ids


def test_unknown_client_type():
    assert get_intake_path("YOUTH_ATHLETE") is None


def test_question_blocks_follow_requested_order():
    blocks = get_question_blocks(["diet-type", "basic-demographics", "missing"])
    assert [block.id for block in blocks] == ["diet-type", "basic-demographics"]


def test_definitions_are_cached(monkeypatch, tmp_path):
    load_question_blocks()
    # Library moved away: cached definitions still served until cleared
    monkeypatch.setattr(config, "LIBRARY_DIR", tmp_path)
    assert len(load_question_blocks()) > 0

    get_library_cache().clear()
    assert load_question_blocks() == []


def test_malformed_definitions_propagate(monkeypatch, tmp_path):
    (tmp_path / "intake_paths.json").write_text("{not json")
    monkeypatch.setattr(config, "LIBRARY_DIR", tmp_path)
    with pytest.raises(json.JSONDecodeError):
        load_intake_paths()


def test_ttl_cache_expires():
    cache = TTLCache(ttl_seconds=60)
    cache.set("key", "value")
    assert cache.get("key") == "value"

    expired = TTLCache(ttl_seconds=0)
    expired.set("key", "value")
    assert expired.get("key") is None


def test_nutrition_path_skips_training_blocks():
    path, blocks = path_blocks("NUTRITION_ONLY")
    question_ids = [q.id for q in get_path_questions(path, blocks, {})]
    assert "diet-type" in question_ids
    assert "days-per-week" not in question_ids


def test_workout_path_rejects_eight_days():
    path, blocks = path_blocks("WORKOUT_ONLY")
    responses = {
        "full-name": "Jane Doe",
        "email": "jane@example.com",
        "date-of-birth": "1990-01-01",
        "height-inches": 66,
        "weight-lbs": 140,
        "primary-goal": "general-fitness",
        "motivation": "Feel stronger every day",
        "training-goal": ["strength"],
        "training-experience": "beginner",
        "days-per-week": 8,
        "session-duration": "45",
        "food-allergies": ["none"],
    }
    result = validate_path(path, blocks, responses)
    assert result.errors == {"days-per-week": ["Cannot exceed 7 days"]}

    responses["days-per-week"] = 7
    assert validate_path(path, blocks, responses).is_valid


def test_allergy_details_shown_for_real_allergies():
    path, blocks = path_blocks("NUTRITION_ONLY")
    with_allergy = [q.id for q in get_path_questions(path, blocks, {"food-allergies": ["peanuts"]})]
    without = [q.id for q in get_path_questions(path, blocks, {"food-allergies": ["none"]})]
    assert "allergy-details" in with_allergy
    assert "allergy-details" not in without


def test_athlete_path_branches():
    """Performance metrics only for competitive levels; nutrition only when opted in"""
    path, blocks = path_blocks("ATHLETE_PERFORMANCE")

    recreational = [q.id for q in get_path_questions(path, blocks, {"competition-level": "masters"})]
    assert "squat-1rm" not in recreational
    assert "training-goal" not in recreational
    assert "diet-type" not in recreational

    college = [q.id for q in get_path_questions(
        path, blocks, {"competition-level": "college", "include-nutrition": "yes"},
    )]
    assert "squat-1rm" in college
    assert "diet-type" in college
