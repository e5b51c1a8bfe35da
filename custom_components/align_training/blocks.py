"""Session blocks and logging sections."""

from __future__ import annotations

import math
from dataclasses import dataclass

from .models import WorkoutBlock

BASE_SESSION_MINUTES = 60
MIN_BLOCK_MINUTES = 5


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def build_session_blocks(goal: str, session_length_min: int) -> list[WorkoutBlock]:
    """Warm / Compound / Isolate / Cool, scaled to the session length.

    Durations are based on a 60 minute session and never drop below 5 minutes.
    """
    base = [
        WorkoutBlock(
            type="warmup",
            title="Warm",
            duration_min=8,
            target_categories=("Cardio", "Active Recovery"),
            notes="Light cardio + dynamic mobility",
        ),
        WorkoutBlock(
            type="compound",
            title="Compound",
            duration_min=25,
            target_categories=("Chest", "Back", "Legs", "Shoulders"),
            recommended_rest_seconds=150 if goal == "strength" else 90,
        ),
        WorkoutBlock(
            type="accessory",
            title="Isolate",
            duration_min=17,
            target_categories=("Arms", "Core", "Shoulders", "Legs"),
            recommended_rest_seconds=75,
        ),
        WorkoutBlock(
            type="cooldown",
            title="Cool",
            duration_min=8,
            target_categories=("Active Recovery", "Core"),
            notes="Static stretching + down regulation",
        ),
    ]
    scale = float(session_length_min) / BASE_SESSION_MINUTES
    return [
        WorkoutBlock(
            type=block.type,
            title=block.title,
            duration_min=max(MIN_BLOCK_MINUTES, _round_half_up(block.duration_min * scale)),
            target_categories=block.target_categories,
            recommended_rest_seconds=block.recommended_rest_seconds,
            notes=block.notes,
        )
        for block in base
    ]


@dataclass(frozen=True, slots=True)
class WorkoutSection:
    type: str
    title: str
    collapsible: bool


DEFAULT_COLLAPSED_SECTIONS: dict[str, bool] = {
    "activation": True,
    "primary": False,
    "secondary": False,
    "accessory": True,
    "core": False,
    "conditioning_optional": True,
    "recovery_note": False,
}


def get_workout_sections(day_type: str) -> list[WorkoutSection]:
    if day_type == "conditioning":
        return [
            WorkoutSection("activation", "Activation", True),
            WorkoutSection("conditioning_optional", "Conditioning Prescription", True),
            WorkoutSection("core", "Core", True),
            WorkoutSection("recovery_note", "Recovery Recommendation", False),
        ]
    if day_type == "rest":
        return [WorkoutSection("recovery_note", "Recovery Recommendation", False)]
    return [
        WorkoutSection("activation", "Activation", True),
        WorkoutSection("primary", "Primary Lift", True),
        WorkoutSection("secondary", "Secondary Lift", True),
        WorkoutSection("accessory", "Accessory Block", True),
        WorkoutSection("core", "Core (Mandatory)", True),
        WorkoutSection("conditioning_optional", "Optional Conditioning", True),
        WorkoutSection("recovery_note", "Recovery Recommendation", False),
    ]
