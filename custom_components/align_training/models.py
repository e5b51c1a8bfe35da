"""Records passed between the training core and the integration.

All records are frozen; changes go through ``dataclasses.replace``. Each one
round-trips through plain dicts (``from_dict`` / ``as_dict``) so it can live in
Home Assistant's JSON storage. ``from_dict`` is tolerant: missing or malformed
fields fall back to defaults instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import UTC, datetime
from typing import Any

from .const import (
    CONDITIONING_CHOICES,
    DEFAULT_CONDITIONING_PREFERENCE,
    DEFAULT_DAYS_PER_WEEK,
    DEFAULT_EMPHASIS,
    DEFAULT_GOAL,
    DEFAULT_SESSION_LENGTH_MIN,
    GOAL_CHOICES,
    TIMED_CATEGORIES,
)

DAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
DAY_LABELS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def _int_or(value: Any, default: int | None) -> int | None:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except Exception:  # noqa: BLE001
        return default


def _float_or_none(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except Exception:  # noqa: BLE001
        return None


def _str_tuple(value: Any) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(str(v).strip() for v in value if str(v).strip())


@dataclass(frozen=True, slots=True)
class TrainingProgram:
    goal: str = DEFAULT_GOAL
    days_per_week: int = DEFAULT_DAYS_PER_WEEK
    emphasis: str = DEFAULT_EMPHASIS
    session_length_min: int = DEFAULT_SESSION_LENGTH_MIN
    conditioning_preference: str = DEFAULT_CONDITIONING_PREFERENCE

    @classmethod
    def from_dict(cls, raw: Any) -> TrainingProgram:
        if not isinstance(raw, dict):
            return cls()
        goal = str(raw.get("goal") or DEFAULT_GOAL).strip().lower()
        if goal not in GOAL_CHOICES:
            goal = DEFAULT_GOAL
        conditioning = str(raw.get("conditioning_preference") or DEFAULT_CONDITIONING_PREFERENCE).strip().lower()
        if conditioning not in CONDITIONING_CHOICES:
            conditioning = DEFAULT_CONDITIONING_PREFERENCE
        length = _int_or(raw.get("session_length_min"), DEFAULT_SESSION_LENGTH_MIN)
        if not length or length <= 0:
            length = DEFAULT_SESSION_LENGTH_MIN
        # days_per_week / emphasis are passed through; the template selector owns their fallback.
        return cls(
            goal=goal,
            days_per_week=_int_or(raw.get("days_per_week"), DEFAULT_DAYS_PER_WEEK) or 0,
            emphasis=str(raw.get("emphasis") or DEFAULT_EMPHASIS).strip().lower(),
            session_length_min=length,
            conditioning_preference=conditioning,
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "goal": self.goal,
            "days_per_week": self.days_per_week,
            "emphasis": self.emphasis,
            "session_length_min": self.session_length_min,
            "conditioning_preference": self.conditioning_preference,
        }


@dataclass(frozen=True, slots=True)
class GeneratedWeek:
    day: str
    label: str
    focus_muscles: tuple[str, ...]
    movement_priority: tuple[str, ...]
    is_conditioning: bool = False

    def as_dict(self) -> dict[str, Any]:
        return {
            "day": self.day,
            "label": self.label,
            "focus_muscles": list(self.focus_muscles),
            "movement_priority": list(self.movement_priority),
            "is_conditioning": self.is_conditioning,
        }


@dataclass(frozen=True, slots=True)
class WeekDay:
    day_index: int
    label: str
    type: str  # lift | conditioning | rest
    focus: str

    def as_dict(self) -> dict[str, Any]:
        return {"day_index": self.day_index, "label": self.label, "type": self.type, "focus": self.focus}


@dataclass(frozen=True, slots=True)
class WorkoutBlock:
    type: str
    title: str
    duration_min: int
    target_categories: tuple[str, ...]
    recommended_rest_seconds: int | None = None
    notes: str | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> WorkoutBlock:
        return cls(
            type=str(raw.get("type") or "accessory"),
            title=str(raw.get("title") or ""),
            duration_min=max(5, _int_or(raw.get("duration_min"), 5) or 5),
            target_categories=_str_tuple(raw.get("target_categories")),
            recommended_rest_seconds=_int_or(raw.get("recommended_rest_seconds"), None),
            notes=str(raw["notes"]) if raw.get("notes") else None,
        )

    def as_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "type": self.type,
            "title": self.title,
            "duration_min": self.duration_min,
            "target_categories": list(self.target_categories),
        }
        if self.recommended_rest_seconds is not None:
            out["recommended_rest_seconds"] = self.recommended_rest_seconds
        if self.notes:
            out["notes"] = self.notes
        return out


@dataclass(frozen=True, slots=True)
class ExerciseDefinition:
    name: str
    category: str = "Core"
    equipment: str = "bodyweight"
    recommended_sets: int = 3
    primary_muscles: tuple[str, ...] = ("core",)
    movement_pattern: str = "isolation"
    is_compound: bool = False
    default_rep_range: tuple[int, int] = (8, 12)
    default_rest_sec: int = 60
    difficulty: str = "beginner"

    @property
    def key(self) -> str:
        return self.name.strip().lower()

    @property
    def is_timed(self) -> bool:
        return self.category in TIMED_CATEGORIES

    @staticmethod
    def _fields_from_dict(raw: dict[str, Any]) -> dict[str, Any]:
        sets_raw = raw.get("recommended_sets")
        if isinstance(sets_raw, list):
            # Older catalogs stored a list of set templates.
            recommended_sets = len(sets_raw) or 3
        else:
            recommended_sets = _int_or(sets_raw, 3) or 3
        rep_range = raw.get("default_rep_range")
        rep_min, rep_max = 8, 12
        if isinstance(rep_range, (list, tuple)) and len(rep_range) == 2:
            lo = _int_or(rep_range[0], None)
            hi = _int_or(rep_range[1], None)
            if lo is not None and hi is not None and 0 < lo <= hi:
                rep_min, rep_max = lo, hi
        muscles = tuple(m.lower() for m in _str_tuple(raw.get("primary_muscles")))
        is_compound = raw.get("is_compound")
        return {
            "name": str(raw.get("name") or "Exercise").strip(),
            "category": str(raw.get("category") or "Core"),
            "equipment": str(raw.get("equipment") or "bodyweight"),
            "recommended_sets": recommended_sets,
            "primary_muscles": muscles or ("core",),
            "movement_pattern": str(raw.get("movement_pattern") or "isolation"),
            "is_compound": is_compound if isinstance(is_compound, bool) else False,
            "default_rep_range": (rep_min, rep_max),
            "default_rest_sec": _int_or(raw.get("default_rest_sec"), 60) or 60,
            "difficulty": str(raw.get("difficulty") or "beginner"),
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> ExerciseDefinition:
        return cls(**cls._fields_from_dict(raw))

    def definition_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "category": self.category,
            "equipment": self.equipment,
            "recommended_sets": self.recommended_sets,
            "primary_muscles": list(self.primary_muscles),
            "movement_pattern": self.movement_pattern,
            "is_compound": self.is_compound,
            "default_rep_range": list(self.default_rep_range),
            "default_rest_sec": self.default_rest_sec,
            "difficulty": self.difficulty,
        }

    def as_dict(self) -> dict[str, Any]:
        return self.definition_dict()


@dataclass(frozen=True, slots=True)
class SetLog:
    reps: int | None = None
    weight: float | None = None
    rir: int | None = None
    duration_minutes: float | None = None
    is_completed: bool = False

    @classmethod
    def from_dict(cls, raw: Any) -> SetLog:
        if not isinstance(raw, dict):
            return cls()
        rir = _int_or(raw.get("rir"), None)
        if rir is not None:
            rir = max(0, min(4, rir))
        return cls(
            reps=_int_or(raw.get("reps"), None),
            weight=_float_or_none(raw.get("weight")),
            rir=rir,
            duration_minutes=_float_or_none(raw.get("duration_minutes")),
            is_completed=bool(raw.get("is_completed")),
        )

    def as_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"is_completed": self.is_completed}
        for key in ("reps", "weight", "rir", "duration_minutes"):
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        return out


@dataclass(frozen=True, slots=True)
class Exercise(ExerciseDefinition):
    id: str = ""
    sets: tuple[SetLog, ...] = ()
    previous_stats: tuple[dict[str, Any], ...] | None = None
    section_type: str | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Exercise:
        sets = raw.get("sets") if isinstance(raw.get("sets"), list) else []
        prev = raw.get("previous_stats")
        return cls(
            **cls._fields_from_dict(raw),
            id=str(raw.get("id") or ""),
            sets=tuple(SetLog.from_dict(s) for s in sets),
            previous_stats=tuple(p for p in prev if isinstance(p, dict)) if isinstance(prev, list) else None,
            section_type=str(raw["section_type"]) if raw.get("section_type") else None,
        )

    @property
    def definition(self) -> ExerciseDefinition:
        return ExerciseDefinition(**{f.name: getattr(self, f.name) for f in fields(ExerciseDefinition)})

    def as_dict(self) -> dict[str, Any]:
        out = self.definition_dict()
        out["id"] = self.id
        out["sets"] = [s.as_dict() for s in self.sets]
        if self.previous_stats is not None:
            out["previous_stats"] = [dict(p) for p in self.previous_stats]
        if self.section_type:
            out["section_type"] = self.section_type
        return out


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO date or datetime; naive values are treated as UTC."""
    try:
        parsed = datetime.fromisoformat(str(value or "").strip())
    except ValueError:
        return datetime.min.replace(tzinfo=UTC)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


@dataclass(frozen=True, slots=True)
class Workout:
    id: str
    name: str
    date: str
    exercises: tuple[Exercise, ...] = ()
    completed: bool = False
    blocks: tuple[WorkoutBlock, ...] | None = None

    @property
    def timestamp(self) -> datetime:
        return parse_timestamp(self.date)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Workout:
        exercises = raw.get("exercises") if isinstance(raw.get("exercises"), list) else []
        blocks = raw.get("blocks")
        return cls(
            id=str(raw.get("id") or ""),
            name=str(raw.get("name") or "Workout Session"),
            date=str(raw.get("date") or ""),
            exercises=tuple(Exercise.from_dict(e) for e in exercises if isinstance(e, dict)),
            completed=bool(raw.get("completed")),
            blocks=tuple(WorkoutBlock.from_dict(b) for b in blocks if isinstance(b, dict)) if isinstance(blocks, list) else None,
        )

    def as_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "date": self.date,
            "exercises": [e.as_dict() for e in self.exercises],
            "completed": self.completed,
        }
        if self.blocks is not None:
            out["blocks"] = [b.as_dict() for b in self.blocks]
        return out


@dataclass(frozen=True, slots=True)
class ExerciseProgress:
    last_weight: float
    last_reps: tuple[int, ...]
    weeks_stalled: int = 0


@dataclass(frozen=True, slots=True)
class ProgressionSuggestion:
    message: str | None = None
    next_weight: float | None = None
    deload: bool = False

    def as_dict(self) -> dict[str, Any]:
        return {"message": self.message, "next_weight": self.next_weight, "deload": self.deload}


@dataclass(frozen=True, slots=True)
class DayContext:
    """What today looks like from the planner's point of view."""

    day_index: int
    day_type: str
    label: str
    movement_priority: tuple[str, ...]
    split_focus: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_recovery_day(self) -> bool:
        return self.day_type == "rest"

    def as_dict(self) -> dict[str, Any]:
        return {
            "day_index": self.day_index,
            "day_type": self.day_type,
            "label": self.label,
            "movement_priority": list(self.movement_priority),
            "split_focus": list(self.split_focus),
        }
