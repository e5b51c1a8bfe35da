from __future__ import annotations

import itertools
import re

from custom_components.align_training.blocks import build_session_blocks
from custom_components.align_training.const import (
    CONDITIONING_CHOICES,
    DAYS_PER_WEEK_CHOICES,
    EMPHASIS_CHOICES,
)
from custom_components.align_training.models import DAYS, TrainingProgram
from custom_components.align_training.program import (
    _base_template,
    can_insert_conditioning_between,
    generate_weekly_structure,
    get_full_week_structure,
    get_today_structure,
)


def _program(**kwargs) -> TrainingProgram:
    base = {
        "goal": "hypertrophy",
        "days_per_week": 4,
        "emphasis": "balanced",
        "session_length_min": 60,
        "conditioning_preference": "none",
    }
    base.update(kwargs)
    return TrainingProgram.from_dict(base)


def _all_programs():
    for days, emphasis, conditioning in itertools.product(
        DAYS_PER_WEEK_CHOICES, EMPHASIS_CHOICES, CONDITIONING_CHOICES
    ):
        yield _program(days_per_week=days, emphasis=emphasis, conditioning_preference=conditioning)


def _is_heavy_lower(entry) -> bool:
    return not entry.is_conditioning and bool(re.search(r"lower|legs", entry.label, re.IGNORECASE))


def test_same_program_always_yields_same_week() -> None:
    for program in _all_programs():
        assert generate_weekly_structure(program) == generate_weekly_structure(program)


def test_base_templates_have_unique_valid_days() -> None:
    for days, emphasis in itertools.product(DAYS_PER_WEEK_CHOICES, EMPHASIS_CHOICES):
        template = _base_template(_program(days_per_week=days, emphasis=emphasis))
        day_keys = [entry.day for entry in template]
        assert len(day_keys) == len(set(day_keys))
        assert all(day in DAYS for day in day_keys)


def test_conditioning_never_splits_two_heavy_lower_days() -> None:
    for program in _all_programs():
        week = generate_weekly_structure(program)
        for prev, cur, nxt in zip(week, week[1:], week[2:]):
            if cur.is_conditioning:
                assert not (_is_heavy_lower(prev) and _is_heavy_lower(nxt)), (program, week)


def test_week_is_sorted_monday_first() -> None:
    for program in _all_programs():
        indexes = [DAYS.index(entry.day) for entry in generate_weekly_structure(program)]
        assert indexes == sorted(indexes)


def test_four_day_balanced_upper_lower_scenario() -> None:
    program = _program()
    week = generate_weekly_structure(program)
    assert [(e.day, e.label) for e in week] == [
        ("Mon", "Upper A"),
        ("Tue", "Lower A"),
        ("Thu", "Upper B"),
        ("Fri", "Lower B"),
    ]
    blocks = build_session_blocks(program.goal, program.session_length_min)
    assert len(blocks) == 4
    assert sum(b.duration_min for b in blocks) == 58


def test_two_conditioning_days_on_four_day_split() -> None:
    week = generate_weekly_structure(_program(conditioning_preference="2_days"))
    assert [(e.day, e.label) for e in week] == [
        ("Mon", "Upper A"),
        ("Tue", "Lower A"),
        ("Wed", "Conditioning"),
        ("Thu", "Upper B"),
        ("Fri", "Lower B"),
        ("Sat", "Conditioning"),
    ]
    conditioning = [e for e in week if e.is_conditioning]
    assert all(e.movement_priority == ("carry", "core", "isolation") for e in conditioning)


def test_six_day_split_has_room_for_at_most_one_conditioning_day() -> None:
    week = generate_weekly_structure(_program(days_per_week=6, conditioning_preference="2_days"))
    # Only Sunday is free, and Sunday is not a conditioning slot.
    assert [e.day for e in week] == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
    assert not any(e.is_conditioning for e in week)


def test_glutes_legs_template_only_for_five_days() -> None:
    five = generate_weekly_structure(_program(days_per_week=5, emphasis="glutes_legs"))
    assert [e.label for e in five] == [
        "Lower (Glute/Quad)",
        "Upper A",
        "Lower (Ham/Glute)",
        "Upper B",
        "Lower (Pump)",
    ]
    four = generate_weekly_structure(_program(days_per_week=4, emphasis="glutes_legs"))
    assert [e.label for e in four] == ["Upper A", "Lower A", "Upper B", "Lower B"]


def test_unknown_days_per_week_falls_back_to_five_day_template() -> None:
    week = generate_weekly_structure(_program(days_per_week=2))
    assert [e.label for e in week] == ["Upper A", "Lower A", "Upper B", "Lower B", "Upper/Conditioning"]


def test_conditioning_between_two_lower_days_is_rejected() -> None:
    lower = _base_template(_program(days_per_week=5, emphasis="glutes_legs"))[0]
    upper = _base_template(_program())[0]
    assert not can_insert_conditioning_between(lower, lower)
    assert can_insert_conditioning_between(lower, upper)
    assert can_insert_conditioning_between(None, lower)


def test_full_week_fills_rest_days() -> None:
    full = get_full_week_structure(_program(conditioning_preference="1_day"))
    assert len(full) == 7
    assert [d.type for d in full] == ["lift", "lift", "conditioning", "lift", "lift", "rest", "rest"]
    assert full[5].focus == "Rest & Recovery"
    assert full[0].label == "Monday"


def test_today_structure_lookup() -> None:
    program = _program()
    assert get_today_structure(program, 0).label == "Upper A"
    assert get_today_structure(program, 2) is None
    assert get_today_structure(program, 2, fallback_to_first=True).label == "Upper A"
