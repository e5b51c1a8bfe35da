"""Workout session lifecycle: start, add exercises, log sets, finish."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import fields, replace
from datetime import UTC, date, datetime
from typing import Any
from uuid import uuid4

from .models import Exercise, ExerciseDefinition, SetLog, Workout, WorkoutBlock
from .progression import find_previous_stats
from .recommend import infer_section_type

_LOGGER = logging.getLogger(__name__)

TIMED_SET_MINUTES = 10.0


class WorkoutInProgressError(RuntimeError):
    """Raised when a session is started while another one is still open."""

    def __init__(self, workout_id: str) -> None:
        super().__init__(f"Workout {workout_id} is still in progress")
        self.workout_id = workout_id


class WorkoutNotFoundError(LookupError):
    """Raised when a workout, exercise or set index does not exist."""


def _new_id() -> str:
    return uuid4().hex[:9]


def active_workout(workouts: Iterable[Workout]) -> Workout | None:
    return next((w for w in workouts if not w.completed), None)


def find_workout(workouts: Iterable[Workout], workout_id: str | None = None) -> Workout:
    """Return the workout with ``workout_id``, or the active one when it is ``None``."""
    workouts = list(workouts)
    if workout_id is None:
        target = active_workout(workouts)
    else:
        target = next((w for w in workouts if w.id == workout_id), None)
    if target is None:
        raise WorkoutNotFoundError(f"Workout not found: {workout_id or 'active'}")
    return target



def new_exercise(definition: ExerciseDefinition, history: Iterable[Workout], day_type: str = "lift") -> Exercise:
    """Build a loggable exercise with sets pre-filled from the last session or the defaults."""
    previous = find_previous_stats(definition.name, history)
    if definition.is_timed:
        if previous:
            sets = tuple(
                SetLog(duration_minutes=p.get("duration_minutes", TIMED_SET_MINUTES)) for p in previous
            )
        else:
            sets = tuple(SetLog(duration_minutes=TIMED_SET_MINUTES) for _ in range(max(1, definition.recommended_sets)))
    elif previous:
        best = max([float(p.get("weight") or 0) for p in previous] + [0.0])
        sets = tuple(SetLog(reps=int(p.get("reps") or 10), weight=best) for p in previous)
    else:
        top = definition.default_rep_range[1]
        sets = tuple(SetLog(reps=top, weight=0.0) for _ in range(max(1, definition.recommended_sets)))

    return Exercise(
        **{f.name: getattr(definition, f.name) for f in fields(ExerciseDefinition)},
        id=_new_id(),
        sets=sets,
        previous_stats=previous,
        section_type=infer_section_type(definition, "conditioning" if day_type == "conditioning" else "lift"),
    )


def start_workout(
    name: str,
    *,
    blocks: Sequence[WorkoutBlock] | None,
    planned: Sequence[ExerciseDefinition],
    history: Sequence[Workout],
    day_type: str = "lift",
    now: datetime | None = None,
) -> Workout:
    """Open a new session. Blocks are frozen onto the record as they are now."""
    current = active_workout(history)
    if current is not None:
        raise WorkoutInProgressError(current.id)
    started = now or datetime.now(UTC)
    return Workout(
        id=_new_id(),
        name=str(name or "Workout Session"),
        date=started.isoformat(),
        exercises=tuple(new_exercise(d, history, day_type) for d in planned),
        completed=False,
        blocks=tuple(blocks) if blocks is not None else None,
    )


def add_exercise(workout: Workout, definition: ExerciseDefinition, history: Iterable[Workout], day_type: str = "lift") -> Workout:
    """Append an exercise; a name already in the session is a no-op."""
    if any(ex.key == definition.key for ex in workout.exercises):
        return workout
    return replace(workout, exercises=(*workout.exercises, new_exercise(definition, history, day_type)))


def log_set(workout: Workout, exercise_id: str, index: int, **values: Any) -> Workout:
    """Update one set. Unknown keys are ignored; ``None`` clears a value."""
    allowed = {"reps", "weight", "rir", "duration_minutes", "is_completed"}
    exercises = list(workout.exercises)
    pos = next((i for i, ex in enumerate(exercises) if ex.id == exercise_id), None)
    if pos is None:
        raise WorkoutNotFoundError(f"Exercise {exercise_id} not in workout {workout.id}")
    sets = list(exercises[pos].sets)
    if index == len(sets):
        sets.append(SetLog())
    elif not 0 <= index < len(sets):
        raise WorkoutNotFoundError(f"Set {index} not found for exercise {exercise_id}")

    merged = sets[index].as_dict()
    for key, value in values.items():
        if key not in allowed:
            continue
        if value is None:
            merged.pop(key, None)
        else:
            merged[key] = value
    sets[index] = SetLog.from_dict(merged)
    exercises[pos] = replace(exercises[pos], sets=tuple(sets))
    return replace(workout, exercises=tuple(exercises))


def finish_workout(workout: Workout) -> Workout:
    return replace(workout, completed=True)


def auto_complete_stale(
    workouts: Sequence[Workout],
    today: date,
    *,
    local_date: Callable[[datetime], date] | None = None,
) -> tuple[list[Workout], bool]:
    """Close any open workout that started on an earlier day.

    A workout dated after ``today`` is left open.

    Returns the updated list and whether anything changed.
    """
    to_date = local_date or (lambda ts: ts.date())
    changed = False
    out: list[Workout] = []
    for workout in workouts:
        ts = workout.timestamp
        started = date.min if ts.year == 1 else to_date(ts)
        if not workout.completed and started < today:
            _LOGGER.debug("Auto-completing stale workout %s from %s", workout.id, workout.date)
            workout = finish_workout(workout)
            changed = True
        out.append(workout)
    return out, changed
