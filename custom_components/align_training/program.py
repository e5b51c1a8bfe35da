"""Weekly structure generator.

The weekly structure is never stored. It is re-derived from the active
training program on every read, so the same program always yields the same
week (same days, same labels, same order).
"""

from __future__ import annotations

import logging
import re

from .models import DAY_LABELS, DAYS, GeneratedWeek, TrainingProgram, WeekDay

_LOGGER = logging.getLogger(__name__)

# Wed, Thu, Fri, Tue, Sat: mid-week first.
CONDITIONING_SLOTS = (2, 3, 4, 1, 5)
CONDITIONING_COUNT = {"none": 0, "1_day": 1, "2_days": 2}

_HEAVY_LOWER_RE = re.compile(r"lower|legs", re.IGNORECASE)


def _day(day: str, label: str, focus: list[str], priority: list[str]) -> GeneratedWeek:
    return GeneratedWeek(day=day, label=label, focus_muscles=tuple(focus), movement_priority=tuple(priority))


def _conditioning_day(day: str) -> GeneratedWeek:
    return GeneratedWeek(
        day=day,
        label="Conditioning",
        focus_muscles=("core", "calves"),
        movement_priority=("carry", "core", "isolation"),
        is_conditioning=True,
    )


_UPPER_A = (["chest", "back", "shoulders", "triceps"], ["horizontal_push", "horizontal_pull", "vertical_push", "isolation"])
_UPPER_B = (["back", "chest", "biceps", "shoulders"], ["vertical_pull", "horizontal_push", "horizontal_pull", "isolation"])
_PUSH = (["chest", "shoulders", "triceps"], ["horizontal_push", "vertical_push", "isolation"])
_PULL = (["back", "biceps"], ["horizontal_pull", "vertical_pull", "isolation"])
_LEGS = (["quads", "glutes", "hamstrings"], ["squat", "hinge", "lunge", "isolation"])


def _base_template(program: TrainingProgram) -> list[GeneratedWeek]:
    days_per_week = program.days_per_week
    emphasis = program.emphasis

    if days_per_week == 3:
        return [
            _day("Mon", "Full Body A", ["quads", "glutes", "chest", "back", "core"], ["squat", "horizontal_push", "horizontal_pull", "core"]),
            _day("Wed", "Full Body B", ["hamstrings", "glutes", "shoulders", "back", "core"], ["hinge", "vertical_push", "vertical_pull", "core"]),
            _day("Fri", "Full Body C", ["quads", "glutes", "back", "core"], ["lunge", "horizontal_pull", "horizontal_push", "core"]),
        ]

    if days_per_week == 4:
        return [
            _day("Mon", "Upper A", *_UPPER_A),
            _day("Tue", "Lower A", ["quads", "glutes", "calves"], ["squat", "lunge", "isolation", "core"]),
            _day("Thu", "Upper B", *_UPPER_B),
            _day("Fri", "Lower B", ["hamstrings", "glutes", "calves"], ["hinge", "glute_bridge", "isolation", "core"]),
        ]

    if days_per_week == 5 and emphasis == "glutes_legs":
        return [
            _day("Mon", "Lower (Glute/Quad)", ["glutes", "quads", "calves"], ["squat", "glute_bridge", "lunge", "isolation"]),
            _day("Tue", "Upper A", *_UPPER_A),
            _day("Wed", "Lower (Ham/Glute)", ["hamstrings", "glutes", "core"], ["hinge", "isolation", "glute_bridge", "core"]),
            _day("Fri", "Upper B", *_UPPER_B),
            _day("Sat", "Lower (Pump)", ["glutes", "quads", "calves"], ["lunge", "isolation", "glute_bridge", "core"]),
        ]

    if days_per_week == 6:
        return [
            _day("Mon", "Push", *_PUSH),
            _day("Tue", "Pull", *_PULL),
            _day("Wed", "Legs", *_LEGS),
            _day("Thu", "Push", *_PUSH),
            _day("Fri", "Pull", *_PULL),
            _day("Sat", "Legs", *_LEGS),
        ]

    # Balanced 5-day split; also the fallback for anything unrecognised.
    return [
        _day("Mon", "Upper A", ["chest", "back", "shoulders"], ["horizontal_push", "horizontal_pull", "vertical_push"]),
        _day("Tue", "Lower A", ["quads", "glutes", "calves"], ["squat", "lunge", "isolation"]),
        _day("Wed", "Upper B", ["back", "chest", "biceps"], ["vertical_pull", "horizontal_push", "horizontal_pull"]),
        _day("Fri", "Lower B", ["hamstrings", "glutes", "core"], ["hinge", "glute_bridge", "core"]),
        _day("Sat", "Upper/Conditioning", ["shoulders", "core"], ["carry", "core", "isolation"]),
    ]


def _is_heavy_lower(entry: GeneratedWeek | None) -> bool:
    if entry is None or entry.is_conditioning:
        return False
    return bool(_HEAVY_LOWER_RE.search(entry.label))


def can_insert_conditioning_between(prev: GeneratedWeek | None, nxt: GeneratedWeek | None) -> bool:
    """A conditioning day may not split two heavy lower-body sessions."""
    if prev is None or nxt is None:
        return True
    return not (_is_heavy_lower(prev) and _is_heavy_lower(nxt))


def generate_weekly_structure(program: TrainingProgram) -> list[GeneratedWeek]:
    base = _base_template(program)
    needed = CONDITIONING_COUNT.get(program.conditioning_preference, 0)
    if not needed:
        return base

    result = list(base)
    inserted = 0
    for slot in CONDITIONING_SLOTS:
        if inserted >= needed:
            break
        day = DAYS[slot]
        if any(entry.day == day for entry in result):
            continue

        idx = next((i for i, entry in enumerate(result) if DAYS.index(entry.day) > slot), len(result))
        prev = result[idx - 1] if idx > 0 else None
        nxt = result[idx] if idx < len(result) else None
        if not can_insert_conditioning_between(prev, nxt):
            _LOGGER.debug("Skipping conditioning on %s: between %s and %s", day, prev.label, nxt.label)
            continue

        result.insert(idx, _conditioning_day(day))
        inserted += 1

    if inserted < needed:
        _LOGGER.debug("Placed %s of %s conditioning days", inserted, needed)
    result.sort(key=lambda entry: DAYS.index(entry.day))
    return result


def get_full_week_structure(program: TrainingProgram) -> list[WeekDay]:
    """Seven calendar days, with rest days filled in."""
    by_day = {entry.day: entry for entry in generate_weekly_structure(program)}
    week: list[WeekDay] = []
    for idx, short in enumerate(DAYS):
        entry = by_day.get(short)
        if entry is None:
            week.append(WeekDay(day_index=idx, label=DAY_LABELS[idx], type="rest", focus="Rest & Recovery"))
        elif entry.is_conditioning:
            week.append(WeekDay(day_index=idx, label=DAY_LABELS[idx], type="conditioning", focus=entry.label))
        else:
            week.append(WeekDay(day_index=idx, label=DAY_LABELS[idx], type="lift", focus=entry.label))
    return week


def get_today_structure(
    program: TrainingProgram, today_index: int, *, fallback_to_first: bool = False
) -> GeneratedWeek | None:
    generated = generate_weekly_structure(program)
    day = DAYS[int(today_index) % 7]
    match = next((entry for entry in generated if entry.day == day), None)
    if match is None and fallback_to_first and generated:
        return generated[0]
    return match
