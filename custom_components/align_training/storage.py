"""Storage for Align Training (.storage).

State model (schema v2):
- program: the active training program
- custom_exercises: user-added exercise definitions, merged after the bundled catalog
- workouts: every logged workout, completed or active (at most one active)
- planner_selections: manual picks per planner phase (compound / isolate / finisher)
- block_type: recommendation phase selected in the UI ("all" or a block type)
- section_overrides: exercise id -> section type chosen by the user
- rev: monotonic revision for optimistic concurrency in the UI

Schema v1 was the camelCase browser export (trainingProgram, availableExercises,
...). It is migrated once when loaded.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from datetime import UTC, date, datetime
from typing import Any

from homeassistant.core import HomeAssistant
from homeassistant.helpers.storage import Store
from homeassistant.util import dt as dt_util

from .const import BLOCK_TYPE_CHOICES, DOMAIN, PLANNER_PHASES
from .library import load_bundled_exercises, normalize_custom_exercise
from .models import ExerciseDefinition, TrainingProgram, Workout
from .workouts import (
    WorkoutInProgressError,
    active_workout,
    add_exercise,
    auto_complete_stale,
    find_workout,
    finish_workout,
    log_set,
)

_LOGGER = logging.getLogger(__name__)

_STORAGE_VERSION = 2
_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


class ConflictError(RuntimeError):
    """Raised when optimistic concurrency checks fail."""

    def __init__(self, *, expected: int, current: int) -> None:
        super().__init__(f"State changed (expected rev={expected}, current rev={current})")
        self.expected = expected
        self.current = current


def _snake_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {_CAMEL_RE.sub("_", str(k)).lower(): _snake_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_snake_keys(v) for v in value]
    return value


def _legacy_program(old: dict[str, Any]) -> dict[str, Any]:
    if isinstance(old.get("training_program"), dict):
        return dict(old["training_program"])
    settings = old.get("program_settings") if isinstance(old.get("program_settings"), dict) else {}
    profile = old.get("training_profile") if isinstance(old.get("training_profile"), dict) else {}
    default = TrainingProgram()
    emphasis = settings.get("emphasis")
    if emphasis == "glutes_legs_3x":
        emphasis = "glutes_legs"
    return {
        "goal": settings.get("goal") or profile.get("goal") or default.goal,
        "days_per_week": settings.get("days_per_week") or profile.get("days_per_week") or default.days_per_week,
        "emphasis": emphasis or default.emphasis,
        "session_length_min": settings.get("session_length_min")
        or profile.get("session_length_min")
        or default.session_length_min,
        "conditioning_preference": default.conditioning_preference,
    }


def default_state() -> dict[str, Any]:
    return {
        "schema": _STORAGE_VERSION,
        "rev": 1,
        "program": TrainingProgram().as_dict(),
        "custom_exercises": [],
        "workouts": [],
        "planner_selections": {phase: [] for phase in PLANNER_PHASES},
        "block_type": "all",
        "section_overrides": {},
        "updated_at": _now_iso(),
    }


def migrate_state(old_data: Any, old_version: int = 1) -> dict[str, Any]:
    """Turn a v1 (camelCase) payload into the v2 state."""
    state = default_state()
    if not isinstance(old_data, dict):
        return state
    if old_version >= _STORAGE_VERSION:
        state.update(old_data)
        return state

    old = _snake_keys(old_data)
    state["program"] = TrainingProgram.from_dict(_legacy_program(old)).as_dict()

    bundled = {str(ex.get("name") or "").strip().lower() for ex in load_bundled_exercises()}
    custom: list[dict[str, Any]] = []
    seen: set[str] = set()
    for ex in old.get("available_exercises") or []:
        normalized = normalize_custom_exercise(ex)
        if normalized is None:
            continue
        key = normalized["name"].lower()
        if key in bundled or key in seen:
            continue
        seen.add(key)
        custom.append(normalized)
    state["custom_exercises"] = custom

    workouts = old.get("workouts") if isinstance(old.get("workouts"), list) else []
    state["workouts"] = [Workout.from_dict(w).as_dict() for w in workouts if isinstance(w, dict)]
    _LOGGER.debug(
        "Migrated v%s state: %s custom exercises, %s workouts",
        old_version,
        len(custom),
        len(state["workouts"]),
    )
    return state


class _AlignTrainingStore(Store[dict[str, Any]]):
    async def _async_migrate_func(
        self, old_major_version: int, old_minor_version: int, old_data: dict[str, Any]
    ) -> dict[str, Any]:
        return migrate_state(old_data, old_major_version)


class AlignTrainingStore:
    """Per-config-entry storage wrapper."""

    def __init__(self, hass: HomeAssistant, entry_id: str) -> None:
        self._store: Store[dict[str, Any]] = _AlignTrainingStore(hass, _STORAGE_VERSION, f"{DOMAIN}_{entry_id}")
        self._data: dict[str, Any] | None = None
        self._fresh = False

    async def async_load(self) -> dict[str, Any]:
        if self._data is None:
            loaded = await self._store.async_load()
            self._fresh = loaded is None
            self._data = migrate_state(loaded, _STORAGE_VERSION) if isinstance(loaded, dict) else default_state()

            if not isinstance(self._data.get("program"), dict):
                self._data["program"] = TrainingProgram().as_dict()
            if not isinstance(self._data.get("workouts"), list):
                self._data["workouts"] = []
            if not isinstance(self._data.get("custom_exercises"), list):
                self._data["custom_exercises"] = []
            selections = self._data.get("planner_selections")
            if not isinstance(selections, dict):
                selections = {}
            self._data["planner_selections"] = {
                phase: [str(n) for n in selections.get(phase, []) if str(n).strip()]
                if isinstance(selections.get(phase), list)
                else []
                for phase in PLANNER_PHASES
            }
            if self._data.get("block_type") not in BLOCK_TYPE_CHOICES:
                self._data["block_type"] = "all"
            if not isinstance(self._data.get("section_overrides"), dict):
                self._data["section_overrides"] = {}

        return dict(self._data)

    async def async_seed_program(self, entry_data: dict[str, Any]) -> None:
        """Take the initial program from the config entry on first run."""
        state = await self.async_load()
        if not self._fresh:
            return
        self._fresh = False
        state["program"] = TrainingProgram.from_dict(dict(entry_data or {})).as_dict()
        await self.async_save(state)

    def _assert_rev(self, state: dict[str, Any], expected_rev: int | None) -> None:
        if expected_rev is None:
            return
        cur = int(state.get("rev") or 1)
        if int(expected_rev) != cur:
            raise ConflictError(expected=int(expected_rev), current=cur)

    async def async_save(self, state: dict[str, Any]) -> dict[str, Any]:
        next_state = dict(state or {})
        next_state["schema"] = _STORAGE_VERSION
        next_state["rev"] = int(next_state.get("rev") or 1) + 1
        next_state["updated_at"] = _now_iso()
        self._data = next_state
        await self._store.async_save(self._data)
        return dict(self._data)

    # Reads

    @staticmethod
    def get_program(state: dict[str, Any]) -> TrainingProgram:
        return TrainingProgram.from_dict(state.get("program"))

    @staticmethod
    def get_workouts(state: dict[str, Any]) -> list[Workout]:
        raw = state.get("workouts") if isinstance(state, dict) else None
        return [Workout.from_dict(w) for w in raw or [] if isinstance(w, dict)]

    # Program and catalog

    async def async_set_program(self, changes: dict[str, Any], *, expected_rev: int | None = None) -> dict[str, Any]:
        """Merge changes into the active program (unknown values fall back to defaults)."""
        state = await self.async_load()
        self._assert_rev(state, expected_rev)
        current = self.get_program(state).as_dict()
        current.update({k: v for k, v in (changes or {}).items() if k in current and v is not None})
        state["program"] = TrainingProgram.from_dict(current).as_dict()
        return await self.async_save(state)

    async def async_add_custom_exercise(
        self, exercise: dict[str, Any], *, expected_rev: int | None = None
    ) -> dict[str, Any]:
        """Add a user exercise; a name already in the bundled or custom catalog is ignored."""
        state = await self.async_load()
        self._assert_rev(state, expected_rev)
        normalized = normalize_custom_exercise(exercise)
        if normalized is None:
            return state
        key = normalized["name"].lower()
        known = {str(ex.get("name") or "").strip().lower() for ex in load_bundled_exercises()}
        known.update(str(ex.get("name") or "").strip().lower() for ex in state["custom_exercises"])
        if key in known:
            return state
        state["custom_exercises"] = [*state["custom_exercises"], normalized]
        return await self.async_save(state)

    # Planner

    async def async_toggle_planner_selection(
        self, phase: str, name: str, *, expected_rev: int | None = None
    ) -> dict[str, Any]:
        state = await self.async_load()
        self._assert_rev(state, expected_rev)
        if phase not in PLANNER_PHASES:
            raise ValueError(f"Unknown planner phase: {phase}")
        selections = {k: list(v) for k, v in state["planner_selections"].items()}
        picked = selections.get(phase, [])
        key = str(name or "").strip().lower()
        if not key:
            return state
        if any(n.lower() == key for n in picked):
            picked = [n for n in picked if n.lower() != key]
        else:
            picked.append(str(name).strip())
        selections[phase] = picked
        state["planner_selections"] = selections
        return await self.async_save(state)

    async def async_set_block_type(self, block_type: str, *, expected_rev: int | None = None) -> dict[str, Any]:
        state = await self.async_load()
        self._assert_rev(state, expected_rev)
        if block_type not in BLOCK_TYPE_CHOICES:
            raise ValueError(f"Unknown block type: {block_type}")
        state["block_type"] = block_type
        return await self.async_save(state)

    async def async_set_section_override(
        self, exercise_id: str, section: str | None, *, expected_rev: int | None = None
    ) -> dict[str, Any]:
        """Pin an exercise to a workout section; ``None`` returns it to inference."""
        state = await self.async_load()
        self._assert_rev(state, expected_rev)
        overrides = dict(state["section_overrides"])
        if section:
            overrides[str(exercise_id)] = str(section)
        else:
            overrides.pop(str(exercise_id), None)
        state["section_overrides"] = overrides
        return await self.async_save(state)

    # Workouts

    async def _async_update_workout(
        self,
        workout_id: str | None,
        update: Callable[[Workout], Workout],
        *,
        expected_rev: int | None,
    ) -> dict[str, Any]:
        """Apply ``update`` to one workout; ``None`` targets the active workout."""
        state = await self.async_load()
        self._assert_rev(state, expected_rev)
        workouts = self.get_workouts(state)
        target = find_workout(workouts, workout_id)
        updated = update(target)
        state["workouts"] = [(updated if w.id == target.id else w).as_dict() for w in workouts]
        return await self.async_save(state)

    async def async_add_workout(self, workout: Workout, *, expected_rev: int | None = None) -> dict[str, Any]:
        state = await self.async_load()
        self._assert_rev(state, expected_rev)
        current = active_workout(self.get_workouts(state))
        if current is not None:
            raise WorkoutInProgressError(current.id)
        state["workouts"] = [*state["workouts"], workout.as_dict()]
        return await self.async_save(state)

    async def async_add_exercise(
        self,
        definition: ExerciseDefinition,
        *,
        day_type: str = "lift",
        workout_id: str | None = None,
        expected_rev: int | None = None,
    ) -> dict[str, Any]:
        state = await self.async_load()
        history = self.get_workouts(state)
        return await self._async_update_workout(
            workout_id,
            lambda w: add_exercise(w, definition, history, day_type),
            expected_rev=expected_rev,
        )

    async def async_log_set(
        self,
        exercise_id: str,
        index: int,
        values: dict[str, Any],
        *,
        workout_id: str | None = None,
        expected_rev: int | None = None,
    ) -> dict[str, Any]:
        return await self._async_update_workout(
            workout_id,
            lambda w: log_set(w, exercise_id, index, **values),
            expected_rev=expected_rev,
        )

    async def async_finish_workout(
        self, *, workout_id: str | None = None, expected_rev: int | None = None
    ) -> dict[str, Any]:
        return await self._async_update_workout(workout_id, finish_workout, expected_rev=expected_rev)

    async def async_auto_complete(self, today: date | None = None) -> bool:
        """Complete open workouts from earlier local days. Returns True when something changed."""
        state = await self.async_load()
        local_today = today or dt_util.as_local(dt_util.utcnow()).date()
        workouts, changed = auto_complete_stale(
            self.get_workouts(state),
            local_today,
            local_date=lambda ts: dt_util.as_local(ts).date(),
        )
        if not changed:
            return False
        state["workouts"] = [w.as_dict() for w in workouts]
        await self.async_save(state)
        return True
