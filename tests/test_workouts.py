from __future__ import annotations

from datetime import UTC, date, datetime

import pytest

from custom_components.align_training.blocks import build_session_blocks
from custom_components.align_training.models import Exercise, ExerciseDefinition, SetLog, Workout
from custom_components.align_training.workouts import (
    WorkoutInProgressError,
    WorkoutNotFoundError,
    add_exercise,
    auto_complete_stale,
    find_workout,
    finish_workout,
    log_set,
    new_exercise,
    start_workout,
)

SQUAT = ExerciseDefinition(
    name="Squat",
    category="Legs",
    movement_pattern="squat",
    is_compound=True,
    recommended_sets=4,
    default_rep_range=(6, 10),
)
RUNNING = ExerciseDefinition(name="Running", category="Cardio", recommended_sets=1, movement_pattern="cardio")


def _open(workout_id: str = "w-open", day: str = "2026-10-19") -> Workout:
    return Workout(id=workout_id, name="Upper A", date=f"{day}T07:30:00+00:00")


def test_new_loaded_exercise_prefills_top_of_rep_range() -> None:
    ex = new_exercise(SQUAT, [])
    assert len(ex.sets) == 4
    assert all(s.reps == 10 and s.weight == 0 and not s.is_completed for s in ex.sets)
    assert ex.section_type == "primary"
    assert ex.previous_stats is None
    assert ex.id


def test_new_timed_exercise_uses_ten_minute_sets() -> None:
    ex = new_exercise(RUNNING, [], day_type="conditioning")
    assert ex.sets == (SetLog(duration_minutes=10.0),)
    assert ex.section_type == "conditioning_optional"


def test_new_exercise_repeats_last_session() -> None:
    last = Workout(
        id="w1",
        name="Lower A",
        date="2026-10-12T08:00:00+00:00",
        completed=True,
        exercises=(
            Exercise(
                name="Squat",
                id="e1",
                sets=(SetLog(reps=8, weight=100, is_completed=True), SetLog(reps=6, weight=110, is_completed=True)),
            ),
        ),
    )
    ex = new_exercise(SQUAT, [last])
    assert [(s.reps, s.weight) for s in ex.sets] == [(8, 110.0), (6, 110.0)]
    assert ex.previous_stats == ({"reps": 8, "weight": 100}, {"reps": 6, "weight": 110})


def test_start_workout_freezes_blocks_and_plans_exercises() -> None:
    blocks = build_session_blocks("strength", 75)
    now = datetime(2026, 10, 19, 7, 0, tzinfo=UTC)
    workout = start_workout("Lower A", blocks=blocks, planned=[SQUAT, RUNNING], history=[], now=now)
    assert workout.blocks == tuple(blocks)
    assert [ex.name for ex in workout.exercises] == ["Squat", "Running"]
    assert workout.date == now.isoformat()
    assert workout.completed is False


def test_only_one_active_workout() -> None:
    with pytest.raises(WorkoutInProgressError) as err:
        start_workout("Upper B", blocks=None, planned=[], history=[_open()])
    assert err.value.workout_id == "w-open"


def test_add_exercise_ignores_duplicates() -> None:
    workout = add_exercise(_open(), SQUAT, [])
    assert len(workout.exercises) == 1
    again = add_exercise(workout, ExerciseDefinition(name="squat"), [])
    assert again is workout


def test_log_set_updates_and_appends() -> None:
    workout = add_exercise(_open(), SQUAT, [])
    ex_id = workout.exercises[0].id

    workout = log_set(workout, ex_id, 0, reps=8, weight=102.5, rir=7, is_completed=True)
    first = workout.exercises[0].sets[0]
    assert (first.reps, first.weight, first.rir, first.is_completed) == (8, 102.5, 4, True)

    workout = log_set(workout, ex_id, 4, reps=5)
    assert len(workout.exercises[0].sets) == 5

    workout = log_set(workout, ex_id, 0, weight=None)
    assert workout.exercises[0].sets[0].weight is None


def test_log_set_unknown_targets() -> None:
    workout = add_exercise(_open(), SQUAT, [])
    with pytest.raises(WorkoutNotFoundError):
        log_set(workout, "missing", 0, reps=5)
    with pytest.raises(WorkoutNotFoundError):
        log_set(workout, workout.exercises[0].id, 9, reps=5)


def test_finish_and_auto_complete() -> None:
    assert finish_workout(_open()).completed is True

    stale = _open("stale", "2026-10-18")
    today = _open("today", "2026-10-19")
    broken = Workout(id="broken", name="?", date="not a date")
    updated, changed = auto_complete_stale([stale, today, broken], date(2026, 10, 19))
    assert changed is True
    assert [(w.id, w.completed) for w in updated] == [("stale", True), ("today", False), ("broken", True)]

    _, changed = auto_complete_stale([today], date(2026, 10, 19))
    assert changed is False


def test_auto_complete_leaves_future_workouts_open() -> None:
    ahead = _open("ahead", "2026-10-20")
    updated, changed = auto_complete_stale([ahead], date(2026, 10, 19))
    assert changed is False
    assert updated[0].completed is False


def test_find_workout_targets_active_or_id() -> None:
    done = finish_workout(_open("done", "2026-10-12"))
    current = _open("current")
    assert find_workout([done, current]).id == "current"
    assert find_workout([done, current], "done").id == "done"
    with pytest.raises(WorkoutNotFoundError):
        find_workout([done])
    with pytest.raises(WorkoutNotFoundError):
        find_workout([done, current], "missing")
