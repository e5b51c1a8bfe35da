"""Progression advice and training volume derived from workout history.

Nothing here is stored: progress is recomputed from the history every time it
is needed. A missing history means "first time doing this exercise" and is
returned as ``None`` / an empty suggestion, never as an error.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Iterable, Sequence
from datetime import date, datetime

from .const import GLUTE_SET_TARGET
from .models import ExerciseDefinition, ExerciseProgress, ProgressionSuggestion, SetLog, TrainingProgram, Workout

LOAD_INCREMENT = 2.5
DELOAD_AFTER_STALLED_WEEKS = 6

_HEAVY_LOWER_RE = re.compile(r"lower|legs", re.IGNORECASE)


def round_to_increment(value: float, increment: float = LOAD_INCREMENT) -> float:
    """Round half-up to the nearest plate increment."""
    return math.floor(value / increment + 0.5) * increment


def _completed_newest_first(history: Iterable[Workout]) -> list[Workout]:
    completed = [w for w in history if w.completed]
    completed.sort(key=lambda w: w.timestamp, reverse=True)
    return completed


def _find_in_workout(workout: Workout, name: str):
    key = str(name or "").strip().lower()
    return next((ex for ex in workout.exercises if ex.key == key), None)


def build_exercise_progress(name: str, history: Iterable[Workout]) -> ExerciseProgress | None:
    for workout in _completed_newest_first(history):
        ex = _find_in_workout(workout, name)
        if ex is None:
            continue
        reps = tuple(s.reps for s in ex.sets if s.reps)
        weight = max([s.weight or 0 for s in ex.sets] + [0])
        return ExerciseProgress(last_weight=float(weight), last_reps=reps, weeks_stalled=0)
    return None


def get_progression_suggestion(
    exercise: ExerciseDefinition,
    current_sets: Sequence[SetLog],
    progress: ExerciseProgress | None,
) -> ProgressionSuggestion:
    min_rep, max_rep = exercise.default_rep_range
    reps = [s.reps for s in current_sets if s.reps]
    all_at_top = bool(reps) and all(r >= max_rep for r in reps)
    below_bottom = bool(reps) and any(r < min_rep for r in reps)

    if progress is None:
        return ProgressionSuggestion()

    if all_at_top:
        multiplier = 1.05 if exercise.is_compound else 1.025
        return ProgressionSuggestion(
            message=f"You hit {max_rep} reps on all sets last week. Increase weight today?",
            next_weight=round_to_increment(progress.last_weight * multiplier),
        )

    if below_bottom:
        return ProgressionSuggestion(
            message=f"Last session was below {min_rep} reps in spots. Consider reducing load slightly.",
            next_weight=round_to_increment(progress.last_weight * 0.97),
        )

    return ProgressionSuggestion(deload=progress.weeks_stalled >= DELOAD_AFTER_STALLED_WEEKS)


def get_session_exercise_cap(session_length_min: int) -> int:
    if session_length_min <= 45:
        return 5
    if session_length_min <= 75:
        return 6
    return 7


def estimate_weekly_glute_sets(
    history: Iterable[Workout],
    since: date | None = None,
    *,
    local_date: Callable[[datetime], date] | None = None,
) -> int:
    """Completed sets on glute exercises across completed workouts.

    ``since`` is compared against the workout's day as given by ``local_date``
    (the UTC date when omitted).
    """
    to_date = local_date or (lambda ts: ts.date())
    total = 0
    for workout in history:
        if not workout.completed:
            continue
        if since is not None:
            ts = workout.timestamp
            started = date.min if ts.year == 1 else to_date(ts)
            if started < since:
                continue
        for ex in workout.exercises:
            if "glutes" in ex.primary_muscles:
                total += sum(1 for s in ex.sets if s.is_completed)
    return total


def find_previous_stats(name: str, history: Iterable[Workout]) -> tuple[dict[str, float], ...] | None:
    """Snapshot of the sets logged the last time this exercise was done."""
    for workout in _completed_newest_first(history):
        ex = _find_in_workout(workout, name)
        if ex is None:
            continue
        return tuple(
            {k: v for k, v in (("reps", s.reps), ("weight", s.weight), ("duration_minutes", s.duration_minutes)) if v is not None}
            for s in ex.sets
        )
    return None


def _has_completed_set(workout: Workout) -> bool:
    return any(s.is_completed for ex in workout.exercises for s in ex.sets)


def progression_notes(history: Iterable[Workout], *, units: str = "lb") -> dict[str, list[str]]:
    """Up to two improvement notes per completed workout, keyed by workout id."""
    completed = [w for w in history if w.completed and _has_completed_set(w)]
    completed.sort(key=lambda w: w.timestamp)

    latest: dict[str, tuple[float, int, float]] = {}
    result: dict[str, list[str]] = {}
    for workout in completed:
        notes: list[str] = []
        for ex in workout.exercises:
            best_weight = max([s.weight or 0 for s in ex.sets] + [0])
            best_reps = max([s.reps or 0 for s in ex.sets] + [0])
            total_duration = sum(s.duration_minutes or 0 for s in ex.sets)
            previous = latest.get(ex.key)
            if previous is not None:
                prev_weight, prev_reps, prev_duration = previous
                if best_weight > prev_weight:
                    notes.append(f"{ex.name} +{best_weight - prev_weight:.1f} {units}")
                elif best_reps > prev_reps:
                    notes.append(f"{ex.name} +{best_reps - prev_reps} reps")
                elif total_duration > prev_duration:
                    notes.append(f"{ex.name} +{total_duration - prev_duration:g} min")
            latest[ex.key] = (best_weight, best_reps, total_duration)
        result[workout.id] = notes[:2]
    return result


def coaching_prompts(
    active_workout: Workout | None,
    history: Sequence[Workout],
    program: TrainingProgram,
    glute_sets: int,
) -> list[str]:
    if active_workout is None:
        return []
    prompts: list[str] = []

    lower_sessions = sum(1 for w in history if w.completed and _HEAVY_LOWER_RE.search(w.name))
    if lower_sessions >= 2:
        prompts.append("You've trained legs twice this week. Next session: recovery focus.")

    if program.emphasis == "glutes_legs":
        low, high = GLUTE_SET_TARGET
        prompts.append(f"Glute volume this week: {glute_sets} sets (target {low}-{high})")

    if active_workout.exercises:
        first = active_workout.exercises[0]
        progress = build_exercise_progress(first.name, history)
        suggestion = get_progression_suggestion(first, first.sets, progress)
        if suggestion.message:
            prompts.append(suggestion.message)
        if suggestion.deload:
            prompts.append("Deload recommended next week.")

    return prompts[:2]
