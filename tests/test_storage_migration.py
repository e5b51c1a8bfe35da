from __future__ import annotations

from custom_components.align_training.storage import default_state, migrate_state


def _v1(**extra) -> dict:
    return {
        "workouts": [
            {
                "id": "abc123",
                "name": "Lower A",
                "date": "2026-10-12T08:00:00.000Z",
                "completed": True,
                "exercises": [
                    {
                        "id": "e1",
                        "name": "Back Squat",
                        "category": "Legs",
                        "movementPattern": "squat",
                        "isCompound": True,
                        "defaultRepRange": [5, 8],
                        "sets": [{"reps": 5, "weight": 225, "isCompleted": True}],
                    }
                ],
            }
        ],
        **extra,
    }


def test_program_settings_map_legacy_emphasis() -> None:
    state = migrate_state(
        _v1(programSettings={"goal": "strength", "daysPerWeek": 5, "emphasis": "glutes_legs_3x", "sessionLengthMin": 45})
    )
    assert state["program"] == {
        "goal": "strength",
        "days_per_week": 5,
        "emphasis": "glutes_legs",
        "session_length_min": 45,
        "conditioning_preference": "none",
    }


def test_training_profile_fills_missing_settings() -> None:
    state = migrate_state(_v1(trainingProfile={"goal": "strength", "daysPerWeek": 3}))
    assert state["program"]["goal"] == "strength"
    assert state["program"]["days_per_week"] == 3
    assert state["program"]["session_length_min"] == 60


def test_training_program_is_taken_as_is() -> None:
    program = {
        "goal": "hypertrophy",
        "daysPerWeek": 6,
        "emphasis": "balanced",
        "sessionLengthMin": 75,
        "conditioningPreference": "1_day",
    }
    state = migrate_state(_v1(trainingProgram=program, programSettings={"daysPerWeek": 3}))
    assert state["program"]["days_per_week"] == 6
    assert state["program"]["conditioning_preference"] == "1_day"


def test_only_non_bundled_exercises_become_custom() -> None:
    state = migrate_state(
        _v1(
            availableExercises=[
                {"name": "Bench Press", "category": "Chest"},
                {"name": "Sled Push", "category": "Legs", "primaryMuscles": ["Quads"]},
                {"name": "sled push"},
                {"name": ""},
            ]
        )
    )
    assert [ex["name"] for ex in state["custom_exercises"]] == ["Sled Push"]
    assert state["custom_exercises"][0]["primary_muscles"] == ["quads"]


def test_workouts_are_converted_to_snake_case() -> None:
    state = migrate_state(_v1())
    workout = state["workouts"][0]
    exercise = workout["exercises"][0]
    assert workout["completed"] is True
    assert exercise["movement_pattern"] == "squat"
    assert exercise["default_rep_range"] == [5, 8]
    assert exercise["sets"] == [{"is_completed": True, "reps": 5, "weight": 225.0}]


def test_current_schema_passes_through() -> None:
    current = default_state()
    current["rev"] = 42
    current["block_type"] = "compound"
    state = migrate_state(current, 2)
    assert state["rev"] == 42
    assert state["block_type"] == "compound"


def test_garbage_becomes_default_state() -> None:
    state = migrate_state(["not", "a", "dict"])
    assert state["workouts"] == []
    assert state["program"]["days_per_week"] == 4
    assert state["schema"] == 2
