from __future__ import annotations

from custom_components.align_training.models import (
    Exercise,
    ExerciseDefinition,
    SetLog,
    TrainingProgram,
    Workout,
)
from custom_components.align_training.recommend import (
    RECOVERY_DAY_FOCUS,
    build_program_driven_plan,
    detect_exercise_phase,
    infer_section_type,
    plan_session,
    planner_suggestions,
    recommendations,
    resolve_day_context,
    resolve_split_focus,
)


def _ex(
    name: str,
    category: str = "Legs",
    pattern: str = "isolation",
    muscles: tuple[str, ...] = ("quads",),
    compound: bool = False,
) -> ExerciseDefinition:
    return ExerciseDefinition(
        name=name,
        category=category,
        movement_pattern=pattern,
        primary_muscles=muscles,
        is_compound=compound,
    )


def _done(workout_id: str, date: str, *names: str) -> Workout:
    return Workout(
        id=workout_id,
        name="Session",
        date=date,
        completed=True,
        exercises=tuple(
            Exercise(name=n, id=f"{workout_id}-{i}", sets=(SetLog(reps=10, weight=50, is_completed=True),))
            for i, n in enumerate(names)
        ),
    )


def _leg_catalog() -> list[ExerciseDefinition]:
    return [
        _ex("Back Squat", pattern="squat", muscles=("quads", "glutes"), compound=True),
        _ex("Goblet Squat", pattern="squat"),
        _ex("Hip Thrust", pattern="glute_bridge", muscles=("glutes",), compound=True),
        _ex("Walking Lunge", pattern="lunge", muscles=("glutes", "quads")),
        _ex("Leg Extension"),
        _ex("Cable Kickback", muscles=("glutes",)),
        _ex("Glute Bridge", pattern="glute_bridge", muscles=("glutes",)),
    ]


def test_equal_scores_are_ordered_by_name() -> None:
    catalog = [_ex("Zercher Squat"), _ex("Air Squat"), _ex("Mid Squat")]
    ranked = recommendations(catalog, split_focus=(), movement_priority=(), history=[])
    assert [ex.name for ex in ranked] == ["Air Squat", "Mid Squat", "Zercher Squat"]


def test_phase_request_never_returns_empty_list() -> None:
    catalog = [_ex(f"Curl {c}", category="Arms") for c in "ABCDEF"]
    history = [_done("w1", "2026-10-12T10:00:00+00:00", *(ex.name for ex in catalog))]
    ranked = recommendations(
        catalog,
        split_focus=(),
        movement_priority=(),
        history=history,
        block_type="cooldown",
    )
    assert [ex.name for ex in ranked] == [f"Curl {c}" for c in "ABCDEF"]


def test_phase_hints_lift_matching_exercises() -> None:
    catalog = [_ex("Bicep Curl", category="Arms"), _ex("Stretching", category="Active Recovery")]
    ranked = recommendations(catalog, split_focus=(), movement_priority=(), history=[], block_type="cooldown")
    assert ranked[0].name == "Stretching"


def test_exercises_in_session_are_not_recommended() -> None:
    catalog = [_ex("Squat"), _ex("Lunge")]
    active = Workout(id="a", name="Now", date="2026-10-19T08:00:00+00:00", exercises=(Exercise(name="squat", id="x"),))
    ranked = recommendations(catalog, split_focus=(), movement_priority=(), history=[], active_workout=active)
    assert [ex.name for ex in ranked] == ["Lunge"]


def test_recently_used_exercises_rank_lower() -> None:
    catalog = [_ex("Alpha Press"), _ex("Beta Press")]
    history = [_done("w1", "2026-10-12T10:00:00+00:00", "Alpha Press")]
    ranked = recommendations(catalog, split_focus=(), movement_priority=(), history=history)
    assert [ex.name for ex in ranked] == ["Beta Press", "Alpha Press"]


def test_movement_priority_filter_falls_back_when_nothing_matches() -> None:
    catalog = [_ex("Bench", category="Chest", pattern="horizontal_push")]
    ranked = recommendations(
        catalog, split_focus=(), movement_priority=("carry",), history=[], block_type="compound"
    )
    assert [ex.name for ex in ranked] == ["Bench"]


def test_split_focus_from_labels() -> None:
    assert resolve_split_focus("Push") == ("Chest", "Shoulders", "Arms")
    assert resolve_split_focus("Upper/Conditioning") == ("Chest", "Back", "Shoulders", "Arms")
    assert resolve_split_focus("Lower (Pump)") == ("Legs", "Core")
    assert resolve_split_focus("Full Body B") == ("Chest", "Back", "Legs", "Shoulders", "Arms", "Core")
    assert resolve_split_focus("Conditioning") == ("Cardio",)
    assert resolve_split_focus("Something else") == ()
    assert resolve_split_focus("Push", is_recovery_day=True) == RECOVERY_DAY_FOCUS


def test_rest_day_context_uses_recovery_defaults() -> None:
    day = resolve_day_context(TrainingProgram(), 2)
    assert day.is_recovery_day
    assert day.label == "Active Recovery"
    assert day.movement_priority == ("carry", "core", "isolation")
    assert day.split_focus == RECOVERY_DAY_FOCUS

    monday = resolve_day_context(TrainingProgram(), 0)
    assert monday.day_type == "lift"
    assert monday.split_focus == ("Chest", "Back", "Shoulders", "Arms")


def test_section_inference_rules() -> None:
    assert infer_section_type(_ex("Plank", category="Core", pattern="core"), "lift") == "core"
    assert infer_section_type(_ex("Squat", pattern="squat"), "lift") == "primary"
    assert infer_section_type(_ex("Squat", pattern="squat"), "conditioning") == "conditioning_optional"
    assert infer_section_type(_ex("Lunge", pattern="lunge"), "lift") == "secondary"
    assert infer_section_type(_ex("Running", category="Cardio"), "lift") == "conditioning_optional"
    assert infer_section_type(_ex("Curl", category="Arms"), "lift") == "accessory"


def test_section_override_wins_over_inference() -> None:
    ex = Exercise(name="Squat", id="e1", movement_pattern="squat", category="Legs")
    assert detect_exercise_phase(ex, "lift") == "primary"
    assert detect_exercise_phase(ex, "lift", {"e1": "accessory"}) == "accessory"
    stored = Exercise(name="Squat", id="e2", movement_pattern="squat", category="Legs", section_type="secondary")
    assert detect_exercise_phase(stored, "lift") == "secondary"


def test_planner_suggestions_respect_split_focus() -> None:
    catalog = [
        _ex("Bench Press", category="Chest", pattern="horizontal_push"),
        _ex("Squat", category="Legs", pattern="squat"),
        _ex("Tricep Pushdown", category="Arms"),
        _ex("Jump Rope", category="Cardio"),
    ]
    suggestions = planner_suggestions(catalog, ("Chest", "Shoulders", "Arms"))
    assert [ex.name for ex in suggestions["compound"]] == ["Bench Press"]
    assert [ex.name for ex in suggestions["isolate"]] == ["Tricep Pushdown"]
    assert [ex.name for ex in suggestions["finisher"]] == ["Jump Rope"]


def test_program_plan_tops_up_glute_work_on_leg_days() -> None:
    program = TrainingProgram(days_per_week=5, emphasis="glutes_legs", session_length_min=45)
    plan = build_program_driven_plan(
        _leg_catalog(),
        movement_priority=("squat", "glute_bridge", "lunge", "isolation"),
        program=program,
        day_label="Lower (Glute/Quad)",
    )
    assert [ex.name for ex in plan] == ["Back Squat", "Glute Bridge", "Walking Lunge", "Cable Kickback", "Hip Thrust"]


def test_program_plan_respects_session_cap() -> None:
    program = TrainingProgram(session_length_min=45)
    patterns = ("squat", "hinge", "lunge", "isolation", "core", "carry", "glute_bridge")
    catalog = [_ex(f"{p} move", pattern=p) for p in patterns]
    plan = build_program_driven_plan(catalog, movement_priority=patterns, program=program, day_label="Upper A")
    assert len(plan) == 5


def test_manual_planner_picks_win() -> None:
    program = TrainingProgram(days_per_week=5, emphasis="glutes_legs")
    day = resolve_day_context(program, 0)
    planned = plan_session(
        _leg_catalog(),
        selections={"compound": ["hip thrust"], "isolate": [], "finisher": []},
        day=day,
        program=program,
        history=[],
    )
    assert [ex.name for ex in planned] == ["Hip Thrust"]


def test_all_view_returns_at_most_six() -> None:
    catalog = [_ex(f"Curl {c}", category="Arms") for c in "HGFEDCBA"]
    ranked = recommendations(catalog, split_focus=(), movement_priority=(), history=[])
    assert [ex.name for ex in ranked] == [f"Curl {c}" for c in "ABCDEF"]


def test_phase_view_drops_low_scores_when_something_clears_the_floor() -> None:
    catalog = [
        _ex("Stretching", category="Active Recovery"),
        _ex("Bicep Curl", category="Arms"),
        _ex("Tricep Kickback", category="Arms"),
    ]
    # Bicep Curl: used in the newest workout, 0 - 6 - 10 = -16.
    history = [_done("w1", "2026-10-12T10:00:00+00:00", "Bicep Curl")]
    ranked = recommendations(
        catalog, split_focus=(), movement_priority=(), history=history, block_type="cooldown"
    )
    assert [ex.name for ex in ranked] == ["Stretching", "Tricep Kickback"]


def test_planner_suggestions_drop_non_positive_scores() -> None:
    catalog = [
        _ex("Cable Curl", category="Arms"),
        _ex("Leg Extension", category="Legs"),
        _ex("Running", category="Cardio"),
    ]
    suggestions = planner_suggestions(catalog, ())
    # Cable Curl scores -14 and Running 0 as compounds; Leg Extension keeps 20 - 14.
    assert [ex.name for ex in suggestions["compound"]] == ["Leg Extension"]
    assert [ex.name for ex in suggestions["isolate"]] == ["Cable Curl", "Leg Extension"]
    assert [ex.name for ex in suggestions["finisher"]] == ["Running"]


def test_planner_suggestions_break_ties_by_name_and_keep_eight() -> None:
    catalog = [_ex(f"Chest Press {c}", category="Chest", pattern="horizontal_push") for c in "JIHGFEDCBA"]
    suggestions = planner_suggestions(catalog, ())
    assert [ex.name for ex in suggestions["compound"]] == [f"Chest Press {c}" for c in "ABCDEFGH"]
