from __future__ import annotations

import pytest

from gym_cli.core.models import (
    normalize_exercise,
    normalize_history_entry,
    normalize_plan,
    parse_count,
    parse_weight,
    round_weight,
)


def test_round_weight_half_up() -> None:
    assert round_weight(22.25) == 22.3
    assert round_weight(22.24) == 22.2
    assert round_weight(0.05) == 0.1
    assert round_weight(20) == 20.0


@pytest.mark.parametrize(
    "value, expected",
    [("22.5", 22.5), (" 40 ", 40.0), (0, 0.0), (17.25, 17.25)],
)
def test_parse_weight_accepts_non_negative_numbers(value, expected) -> None:
    assert parse_weight(value) == expected


@pytest.mark.parametrize("value", [None, True, "", "abc", -0.5, "nan", "inf", float("-inf")])
def test_parse_weight_rejects_unusable_values(value) -> None:
    assert parse_weight(value) is None


def test_normalize_exercise_defaults_missing_fields() -> None:
    exercise = normalize_exercise({"id": "e1", "name": "Bench", "currentWeight": 20})
    assert exercise is not None
    assert exercise.previous_weight is None
    assert exercise.best_weight == 20.0
    assert exercise.notes == ""
    assert exercise.target_sets == 3
    assert exercise.completed_sets == 0


def test_normalize_exercise_legacy_completed_flag() -> None:
    done = normalize_exercise({"id": "e1", "name": "Bench", "currentWeight": 20, "targetSets": 4, "completed": True})
    assert done is not None
    assert done.completed_sets == 4
    assert done.is_done

    explicit = normalize_exercise(
        {"id": "e1", "name": "Bench", "currentWeight": 20, "completed": True, "completedSets": 1}
    )
    assert explicit is not None
    assert explicit.completed_sets == 1


def test_normalize_exercise_clamps_and_repairs() -> None:
    exercise = normalize_exercise(
        {
            "id": "e1",
            "name": "Deadlift",
            "currentWeight": 420,
            "previousWeight": "oops",
            "bestWeight": 10,
            "targetSets": 99,
            "completedSets": -4,
        }
    )
    assert exercise is not None
    assert exercise.current_weight == 300.0
    assert exercise.previous_weight is None
    assert exercise.best_weight == 300.0
    assert exercise.target_sets == 12
    assert exercise.completed_sets == 0


def test_normalize_exercise_respects_custom_ceiling() -> None:
    exercise = normalize_exercise({"id": "e1", "name": "Curl", "currentWeight": 80}, max_weight=50)
    assert exercise is not None
    assert exercise.current_weight == 50.0


def test_normalize_exercise_rejects_non_mapping() -> None:
    assert normalize_exercise("Bench") is None
    assert normalize_exercise(None) is None


def test_normalize_plan_round_trips(sample_plans_payload) -> None:
    for raw in sample_plans_payload:
        plan = normalize_plan(raw)
        assert plan is not None
        assert plan.to_dict() == raw


def test_normalize_plan_generates_missing_id() -> None:
    plan = normalize_plan({"name": "Untitled"})
    assert plan is not None
    assert plan.id
    assert plan.exercises == ()


def test_normalize_history_entry() -> None:
    entry = normalize_history_entry(
        {
            "id": "h1",
            "dateIso": "2026-02-14T18:30:05.250Z",
            "planId": "p1",
            "planName": "Push",
            "exercises": [
                {"name": "Bench", "weight": 22.5, "completedSets": 3, "targetSets": 3, "isPr": True},
                {"name": "Dips"},
                "junk",
            ],
        }
    )
    assert entry is not None
    assert entry.pr_count == 1
    assert len(entry.exercises) == 2
    assert entry.exercises[1].weight == 0.0
    assert entry.exercises[1].target_sets == 3
    assert normalize_history_entry([]) is None


def test_round_weight_handles_large_values() -> None:
    assert round_weight(1e30) == 1e30
    assert round_weight(123456789012345678901234567890.25) == 123456789012345678901234567890.25
    assert round_weight(float("inf")) == float("inf")


@pytest.mark.parametrize(
    "value, expected",
    [("4", 4), (2.9, 2), ("abc", None), (None, None), (float("nan"), None), (10**400, None)],
)
def test_parse_count(value, expected) -> None:
    assert parse_count(value) == expected
