"""Exercise recommendations, planner suggestions and section inference.

Everything here is keyword and table driven. Rule and keyword order matters:
the first match wins, and results are sorted by score then name so the same
inputs always give the same list.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from .const import RECENT_WORKOUT_WINDOW
from .models import DAYS, DayContext, ExerciseDefinition, TrainingProgram, Workout
from .program import generate_weekly_structure, get_full_week_structure
from .progression import get_session_exercise_cap

# (predicate, section) evaluated top to bottom.
_SectionRule = Callable[[ExerciseDefinition, str], bool]
SECTION_RULES: list[tuple[_SectionRule, str]] = [
    (lambda ex, _day: ex.movement_pattern == "core" or ex.category == "Core", "core"),
    (lambda _ex, day: day == "conditioning", "conditioning_optional"),
    (lambda ex, _day: ex.movement_pattern in {"squat", "hinge", "horizontal_push", "vertical_pull"}, "primary"),
    (lambda ex, _day: ex.movement_pattern in {"lunge", "horizontal_pull", "vertical_push", "glute_bridge"}, "secondary"),
    (lambda ex, _day: ex.category in {"Cardio", "Active Recovery"}, "conditioning_optional"),
]

# Label keyword -> categories. Insertion order is the match order.
SPLIT_CATEGORY_MAP: dict[str, tuple[str, ...]] = {
    "push": ("Chest", "Shoulders", "Arms"),
    "pull": ("Back", "Arms"),
    "legs": ("Legs",),
    "upper": ("Chest", "Back", "Shoulders", "Arms"),
    "lower": ("Legs", "Core"),
    "full body": ("Chest", "Back", "Legs", "Shoulders", "Arms", "Core"),
    "strength": ("Chest", "Back", "Legs", "Shoulders"),
    "condition": ("Cardio",),
    "endurance": ("Cardio",),
    "mobility": ("Active Recovery",),
    "recovery": ("Active Recovery",),
    "rest": ("Active Recovery",),
}
RECOVERY_DAY_FOCUS = ("Cardio", "Active Recovery", "Core")
RECOVERY_DAY_PRIORITY = ("carry", "core", "isolation")


@dataclass(frozen=True, slots=True)
class PhaseConfig:
    categories: tuple[str, ...]
    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()
    enforce_split_focus: bool = False
    split_optional_categories: tuple[str, ...] = ()


PLANNER_PHASE_CONFIG: dict[str, PhaseConfig] = {
    "compound": PhaseConfig(
        categories=("Chest", "Back", "Legs", "Shoulders"),
        exclude=("curl", "extension", "raise", "pushdown", "plank", "twist", "crunch"),
        enforce_split_focus=True,
    ),
    "isolate": PhaseConfig(
        categories=("Arms", "Core", "Shoulders", "Legs"),
        include=("curl", "extension", "raise", "pushdown", "fly", "plank", "crunch", "twist"),
        enforce_split_focus=True,
    ),
    "finisher": PhaseConfig(
        categories=("Cardio", "Core", "Active Recovery"),
        include=("assault bike", "jump rope", "rowing machine", "mountain", "carry", "swing", "stair"),
        split_optional_categories=("Cardio", "Core", "Active Recovery"),
    ),
}

BLOCK_PHASE_HINTS: dict[str, PhaseConfig] = {
    "warmup": PhaseConfig(
        categories=("Cardio", "Active Recovery"),
        include=("walking", "cycling", "elliptical", "mobility", "stretch", "foam", "yoga"),
    ),
    "skill_power": PhaseConfig(
        categories=("Legs", "Shoulders", "Cardio"),
        include=("jump", "sprint", "swing", "clean", "press"),
    ),
    "compound": PhaseConfig(
        categories=("Chest", "Back", "Legs", "Shoulders"),
        exclude=("curl", "extension", "raise", "pushdown", "plank", "crunch", "carry", "twist"),
    ),
    "accessory": PhaseConfig(
        categories=("Arms", "Core", "Shoulders", "Legs"),
        include=("curl", "extension", "raise", "pushdown", "plank", "crunch", "carry", "twist", "fly"),
    ),
    "cooldown": PhaseConfig(
        categories=("Active Recovery", "Core"),
        include=("stretch", "mobility", "foam", "yoga", "pilates", "cool"),
    ),
}

PLANNER_SUGGESTION_LIMIT = 8
RECOMMENDATION_LIMIT = 6
RECOMMENDATION_SCORE_FLOOR = 6


def infer_section_type(exercise: ExerciseDefinition, day_type: str) -> str:
    for predicate, section in SECTION_RULES:
        if predicate(exercise, day_type):
            return section
    return "accessory"


def detect_exercise_phase(exercise, day_type: str, overrides: dict[str, str] | None = None) -> str:
    """User override, then the section stored on the exercise, then inference."""
    override = (overrides or {}).get(getattr(exercise, "id", ""))
    if override:
        return override
    if getattr(exercise, "section_type", None):
        return exercise.section_type
    return infer_section_type(exercise, "conditioning" if day_type == "conditioning" else "lift")


def resolve_split_focus(label: str, *, is_recovery_day: bool = False) -> tuple[str, ...]:
    if is_recovery_day:
        return RECOVERY_DAY_FOCUS
    lowered = str(label or "").lower()
    for keyword, categories in SPLIT_CATEGORY_MAP.items():
        if keyword in lowered:
            return categories
    return ()


def resolve_day_context(program: TrainingProgram, today_index: int) -> DayContext:
    index = int(today_index) % 7
    week_day = get_full_week_structure(program)[index]
    entry = next((g for g in generate_weekly_structure(program) if g.day == DAYS[index]), None)
    is_recovery = week_day.type == "rest" or entry is None
    if entry is not None:
        label = entry.label
        priority = entry.movement_priority
    else:
        label = "Active Recovery"
        priority = RECOVERY_DAY_PRIORITY
    return DayContext(
        day_index=index,
        day_type="rest" if is_recovery else week_day.type,
        label=label,
        movement_priority=tuple(priority),
        split_focus=resolve_split_focus(label, is_recovery_day=is_recovery),
    )


def _keyword_hit(name: str, keywords: Iterable[str]) -> bool:
    lowered = name.lower()
    return any(k in lowered for k in keywords)


def _rank_key(item: tuple[ExerciseDefinition, int]) -> tuple[int, str, str]:
    ex, score = item
    return (-score, ex.name.lower(), ex.name)


def score_for_planner_phase(exercise: ExerciseDefinition, config: PhaseConfig) -> int:
    score = 20 if exercise.category in config.categories else 0
    if _keyword_hit(exercise.name, config.include):
        score += 14
    if _keyword_hit(exercise.name, config.exclude):
        score -= 14
    return score


def _phase_allows_category(config: PhaseConfig, category: str, split_focus: Sequence[str]) -> bool:
    if not split_focus or not config.enforce_split_focus:
        return True
    return category in split_focus or category in config.split_optional_categories


def planner_suggestions(
    catalog: Sequence[ExerciseDefinition], split_focus: Sequence[str]
) -> dict[str, list[ExerciseDefinition]]:
    """Up to eight ranked candidates for each planning phase."""
    out: dict[str, list[ExerciseDefinition]] = {}
    for phase, config in PLANNER_PHASE_CONFIG.items():
        scored = [
            (ex, score_for_planner_phase(ex, config))
            for ex in catalog
            if _phase_allows_category(config, ex.category, split_focus)
        ]
        scored = [item for item in scored if item[1] > 0]
        scored.sort(key=_rank_key)
        out[phase] = [ex for ex, _score in scored[:PLANNER_SUGGESTION_LIMIT]]
    return out


def recent_completed(history: Iterable[Workout], limit: int = RECENT_WORKOUT_WINDOW) -> list[Workout]:
    completed = [w for w in history if w.completed]
    completed.sort(key=lambda w: w.timestamp, reverse=True)
    return completed[:limit]


def score_recommendation(
    exercise: ExerciseDefinition,
    *,
    split_focus: Sequence[str],
    phase: PhaseConfig | None,
    frequency: dict[str, int],
    latest_index: dict[str, int],
    window: int = RECENT_WORKOUT_WINDOW,
) -> int:
    key = exercise.key
    times = frequency.get(key, 0)
    recency_penalty = window - latest_index[key] if key in latest_index else 0
    split_bonus = 20 if exercise.category in split_focus else 0

    phase_bonus = 0
    phase_penalty = 0
    if phase is not None:
        if exercise.category in phase.categories:
            phase_bonus += 24
        if _keyword_hit(exercise.name, phase.include):
            phase_bonus += 18
        if _keyword_hit(exercise.name, phase.exclude):
            phase_penalty += 16

    novelty_bonus = 0 if times else 10
    return split_bonus + phase_bonus + novelty_bonus - phase_penalty - times * 6 - recency_penalty


def recommendations(
    catalog: Sequence[ExerciseDefinition],
    *,
    split_focus: Sequence[str],
    movement_priority: Sequence[str],
    history: Iterable[Workout],
    active_workout: Workout | None = None,
    block_type: str = "all",
) -> list[ExerciseDefinition]:
    """Rank catalog exercises for the session being logged.

    With a phase selected the list is never empty as long as the catalog has
    anything left to offer.
    """
    phase = None if block_type == "all" else BLOCK_PHASE_HINTS.get(block_type)
    in_session = {ex.key for ex in (active_workout.exercises if active_workout else ())}

    recent = recent_completed(history)
    frequency: dict[str, int] = {}
    latest_index: dict[str, int] = {}
    for index, workout in enumerate(recent):
        for ex in workout.exercises:
            frequency[ex.key] = frequency.get(ex.key, 0) + 1
            latest_index.setdefault(ex.key, index)

    pool = [ex for ex in catalog if ex.key not in in_session]
    if phase is not None and movement_priority:
        focused = [ex for ex in pool if ex.movement_pattern in movement_priority]
        if focused:
            pool = focused

    scored = [
        (
            ex,
            score_recommendation(
                ex,
                split_focus=split_focus,
                phase=phase,
                frequency=frequency,
                latest_index=latest_index,
            ),
        )
        for ex in pool
    ]
    scored.sort(key=_rank_key)

    if phase is None:
        return [ex for ex, _score in scored[:RECOMMENDATION_LIMIT]]

    trimmed = [ex for ex, score in scored if score > RECOMMENDATION_SCORE_FLOOR][:RECOMMENDATION_LIMIT]
    if not trimmed:
        return [ex for ex, _score in scored[:RECOMMENDATION_LIMIT]]
    return trimmed


def build_program_driven_plan(
    catalog: Sequence[ExerciseDefinition],
    *,
    movement_priority: Sequence[str],
    program: TrainingProgram,
    day_label: str,
) -> list[ExerciseDefinition]:
    """One exercise per priority pattern, topped up with glute work on leg days."""
    cap = get_session_exercise_cap(program.session_length_min)
    chosen: list[ExerciseDefinition] = []
    chosen_names: set[str] = set()

    for pattern in movement_priority:
        candidates = sorted((ex for ex in catalog if ex.movement_pattern == pattern), key=lambda ex: ex.name)
        candidate = next((ex for ex in candidates if ex.name not in chosen_names), None)
        if candidate is not None and len(chosen) < cap:
            chosen.append(candidate)
            chosen_names.add(candidate.name)

    if program.emphasis == "glutes_legs" and ("lower" in day_label.lower() or "legs" in day_label.lower()):
        glute_candidates = sorted(
            (ex for ex in catalog if "glutes" in ex.primary_muscles),
            key=lambda ex: not ex.is_compound,
        )
        for ex in glute_candidates:
            if len(chosen) >= cap:
                break
            if ex.name not in chosen_names:
                chosen.append(ex)
                chosen_names.add(ex.name)

    return chosen[:cap]


def plan_session(
    catalog: Sequence[ExerciseDefinition],
    *,
    selections: dict[str, list[str]],
    day: DayContext,
    program: TrainingProgram,
    history: Iterable[Workout],
) -> list[ExerciseDefinition]:
    """Exercises to open a new session with.

    Manual planner picks win; otherwise the program-driven plan; otherwise the
    top recommendations.
    """
    by_key = {ex.key: ex for ex in catalog}
    manual: list[ExerciseDefinition] = []
    for phase in PLANNER_PHASE_CONFIG:
        for name in selections.get(phase, []) or []:
            ex = by_key.get(str(name).strip().lower())
            if ex is not None and ex not in manual:
                manual.append(ex)
    if manual:
        return manual

    planned = build_program_driven_plan(
        catalog, movement_priority=day.movement_priority, program=program, day_label=day.label
    )
    if planned:
        return planned
    return recommendations(
        catalog,
        split_focus=day.split_focus,
        movement_priority=day.movement_priority,
        history=history,
    )[:4]
