"""Websocket API for Align Training."""

from __future__ import annotations

from datetime import timedelta
from typing import Any

import voluptuous as vol

from homeassistant.components import websocket_api
from homeassistant.core import HomeAssistant
from homeassistant.loader import async_get_integration
from homeassistant.util import dt as dt_util

from .const import DOMAIN, PLANNER_PHASES, TIMED_CATEGORIES
from .models import ExerciseDefinition
from .progression import build_exercise_progress, find_previous_stats, get_progression_suggestion
from .storage import ConflictError
from .workouts import WorkoutNotFoundError, find_workout
from .ws_state import public_state

_SECTION_TYPES = [
    "activation",
    "primary",
    "secondary",
    "accessory",
    "core",
    "conditioning_optional",
    "recovery_note",
]


async def _async_runtime_payload(hass: HomeAssistant) -> dict[str, Any]:
    """UI runtime values: local today, weekday index and the Monday of this week."""
    today = dt_util.as_local(dt_util.utcnow()).date()
    return {
        "today": today.isoformat(),
        "day_index": today.weekday(),
        "week_start": (today - timedelta(days=today.weekday())).isoformat(),
        "backend_version": str((await async_get_integration(hass, DOMAIN)).version or ""),
    }


def _coordinator(hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]):
    entry_id = msg["entry_id"]
    coordinator = hass.data.get(DOMAIN, {}).get(entry_id)
    if coordinator is None:
        connection.send_error(msg["id"], "entry_not_found", f"No entry found for entry_id={entry_id}")
    return coordinator


async def _send_state(
    hass: HomeAssistant,
    coordinator,
    connection: websocket_api.ActiveConnection,
    msg: dict[str, Any],
    state: dict[str, Any],
) -> None:
    """Refresh listeners, then reply with the state derived from ``state``."""
    await coordinator.async_after_write()
    derived = await coordinator.async_derive(state)
    runtime = await _async_runtime_payload(hass)
    connection.send_result(msg["id"], {"entry_id": msg["entry_id"], "state": public_state(derived, runtime=runtime)})


@websocket_api.websocket_command(
    {
        vol.Required("type"): "align_training/get_state",
        vol.Required("entry_id"): str,
    }
)
@websocket_api.async_response
async def ws_get_state(
    hass: HomeAssistant,
    connection: websocket_api.ActiveConnection,
    msg: dict[str, Any],
) -> None:
    coordinator = _coordinator(hass, connection, msg)
    if coordinator is None:
        return
    derived = await coordinator.async_derive(await coordinator.store.async_load())
    runtime = await _async_runtime_payload(hass)
    connection.send_result(msg["id"], {"entry_id": msg["entry_id"], "state": public_state(derived, runtime=runtime)})


@websocket_api.websocket_command(
    {
        vol.Required("type"): "align_training/get_library",
        vol.Required("entry_id"): str,
    }
)
@websocket_api.async_response
async def ws_get_library(
    hass: HomeAssistant,
    connection: websocket_api.ActiveConnection,
    msg: dict[str, Any],
) -> None:
    coordinator = _coordinator(hass, connection, msg)
    if coordinator is None:
        return
    state = await coordinator.store.async_load()
    catalog = await coordinator.async_catalog(state)
    custom = {str(ex.get("name") or "").strip().lower() for ex in state.get("custom_exercises", [])}
    payload = [{**ex.as_dict(), "custom": ex.key in custom} for ex in catalog]
    payload.sort(key=lambda e: e["name"].lower())
    connection.send_result(msg["id"], {"entry_id": msg["entry_id"], "exercises": payload})


@websocket_api.websocket_command(
    {
        vol.Required("type"): "align_training/set_program",
        vol.Required("entry_id"): str,
        vol.Required("program"): dict,
        vol.Optional("expected_rev"): vol.Coerce(int),
    }
)
@websocket_api.async_response
async def ws_set_program(
    hass: HomeAssistant,
    connection: websocket_api.ActiveConnection,
    msg: dict[str, Any],
) -> None:
    coordinator = _coordinator(hass, connection, msg)
    if coordinator is None:
        return
    try:
        state = await coordinator.store.async_set_program(msg["program"], expected_rev=msg.get("expected_rev"))
    except ConflictError as e:
        connection.send_error(msg["id"], "conflict", str(e))
        return
    await _send_state(hass, coordinator, connection, msg, state)


@websocket_api.websocket_command(
    {
        vol.Required("type"): "align_training/add_custom_exercise",
        vol.Required("entry_id"): str,
        vol.Required("exercise"): dict,
        vol.Optional("expected_rev"): vol.Coerce(int),
    }
)
@websocket_api.async_response
async def ws_add_custom_exercise(
    hass: HomeAssistant,
    connection: websocket_api.ActiveConnection,
    msg: dict[str, Any],
) -> None:
    coordinator = _coordinator(hass, connection, msg)
    if coordinator is None:
        return
    try:
        state = await coordinator.store.async_add_custom_exercise(msg["exercise"], expected_rev=msg.get("expected_rev"))
    except ConflictError as e:
        connection.send_error(msg["id"], "conflict", str(e))
        return
    await _send_state(hass, coordinator, connection, msg, state)


@websocket_api.websocket_command(
    {
        vol.Required("type"): "align_training/toggle_planner_selection",
        vol.Required("entry_id"): str,
        vol.Required("phase"): vol.In(PLANNER_PHASES),
        vol.Required("name"): str,
        vol.Optional("expected_rev"): vol.Coerce(int),
    }
)
@websocket_api.async_response
async def ws_toggle_planner_selection(
    hass: HomeAssistant,
    connection: websocket_api.ActiveConnection,
    msg: dict[str, Any],
) -> None:
    coordinator = _coordinator(hass, connection, msg)
    if coordinator is None:
        return
    try:
        state = await coordinator.store.async_toggle_planner_selection(
            msg["phase"], msg["name"], expected_rev=msg.get("expected_rev")
        )
    except ConflictError as e:
        connection.send_error(msg["id"], "conflict", str(e))
        return
    await _send_state(hass, coordinator, connection, msg, state)


@websocket_api.websocket_command(
    {
        vol.Required("type"): "align_training/add_exercise",
        vol.Required("entry_id"): str,
        vol.Required("name"): str,
        vol.Optional("category"): str,
        vol.Optional("equipment"): str,
        vol.Optional("movement_pattern"): str,
        vol.Optional("primary_muscle"): str,
        vol.Optional("workout_id"): str,
        vol.Optional("expected_rev"): vol.Coerce(int),
    }
)
@websocket_api.async_response
async def ws_add_exercise(
    hass: HomeAssistant,
    connection: websocket_api.ActiveConnection,
    msg: dict[str, Any],
) -> None:
    """Add an exercise to the session; unknown names are saved as custom exercises first."""
    coordinator = _coordinator(hass, connection, msg)
    if coordinator is None:
        return
    name = str(msg["name"]).strip()
    if not name:
        connection.send_error(msg["id"], "invalid_format", "Exercise name is required")
        return
    state = await coordinator.store.async_load()
    try:
        find_workout(coordinator.store.get_workouts(state), msg.get("workout_id"))
    except WorkoutNotFoundError as e:
        connection.send_error(msg["id"], "not_found", str(e))
        return
    catalog = await coordinator.async_catalog(state)
    definition = next((ex for ex in catalog if ex.key == name.lower()), None)
    expected_rev = msg.get("expected_rev")
    try:
        if definition is None:
            category = str(msg.get("category") or "Core")
            timed = category in TIMED_CATEGORIES
            custom = {
                "name": name,
                "category": category,
                "equipment": "bodyweight" if timed else str(msg.get("equipment") or "bodyweight"),
                "recommended_sets": 1 if timed else 3,
                "primary_muscles": [str(msg.get("primary_muscle") or "core")],
                "movement_pattern": str(msg.get("movement_pattern") or "isolation"),
            }
            state = await coordinator.store.async_add_custom_exercise(custom, expected_rev=expected_rev)
            definition = ExerciseDefinition.from_dict(custom)
            # Revision was checked by the write above.
            expected_rev = None
        derived = await coordinator.async_derive(state)
        state = await coordinator.store.async_add_exercise(
            definition,
            day_type=derived["day"].day_type,
            workout_id=msg.get("workout_id"),
            expected_rev=expected_rev,
        )
    except ConflictError as e:
        connection.send_error(msg["id"], "conflict", str(e))
        return
    except WorkoutNotFoundError as e:
        connection.send_error(msg["id"], "not_found", str(e))
        return
    await _send_state(hass, coordinator, connection, msg, state)


@websocket_api.websocket_command(
    {
        vol.Required("type"): "align_training/log_set",
        vol.Required("entry_id"): str,
        vol.Required("exercise_id"): str,
        vol.Required("index"): vol.All(vol.Coerce(int), vol.Range(min=0)),
        vol.Optional("reps"): vol.Any(None, vol.Coerce(int)),
        vol.Optional("weight"): vol.Any(None, vol.Coerce(float)),
        vol.Optional("rir"): vol.Any(None, vol.Coerce(int)),
        vol.Optional("duration_minutes"): vol.Any(None, vol.Coerce(float)),
        vol.Optional("is_completed"): bool,
        vol.Optional("workout_id"): str,
        vol.Optional("expected_rev"): vol.Coerce(int),
    }
)
@websocket_api.async_response
async def ws_log_set(
    hass: HomeAssistant,
    connection: websocket_api.ActiveConnection,
    msg: dict[str, Any],
) -> None:
    coordinator = _coordinator(hass, connection, msg)
    if coordinator is None:
        return
    values = {k: msg[k] for k in ("reps", "weight", "rir", "duration_minutes", "is_completed") if k in msg}
    try:
        state = await coordinator.store.async_log_set(
            msg["exercise_id"],
            int(msg["index"]),
            values,
            workout_id=msg.get("workout_id"),
            expected_rev=msg.get("expected_rev"),
        )
    except ConflictError as e:
        connection.send_error(msg["id"], "conflict", str(e))
        return
    except WorkoutNotFoundError as e:
        connection.send_error(msg["id"], "not_found", str(e))
        return
    await _send_state(hass, coordinator, connection, msg, state)


@websocket_api.websocket_command(
    {
        vol.Required("type"): "align_training/set_section",
        vol.Required("entry_id"): str,
        vol.Required("exercise_id"): str,
        vol.Required("section"): vol.Any(None, vol.In(_SECTION_TYPES)),
        vol.Optional("expected_rev"): vol.Coerce(int),
    }
)
@websocket_api.async_response
async def ws_set_section(
    hass: HomeAssistant,
    connection: websocket_api.ActiveConnection,
    msg: dict[str, Any],
) -> None:
    coordinator = _coordinator(hass, connection, msg)
    if coordinator is None:
        return
    try:
        state = await coordinator.store.async_set_section_override(
            msg["exercise_id"], msg["section"], expected_rev=msg.get("expected_rev")
        )
    except ConflictError as e:
        connection.send_error(msg["id"], "conflict", str(e))
        return
    await _send_state(hass, coordinator, connection, msg, state)


@websocket_api.websocket_command(
    {
        vol.Required("type"): "align_training/get_progression",
        vol.Required("entry_id"): str,
        vol.Required("name"): str,
    }
)
@websocket_api.async_response
async def ws_get_progression(
    hass: HomeAssistant,
    connection: websocket_api.ActiveConnection,
    msg: dict[str, Any],
) -> None:
    """Progress, suggestion and last logged sets for one exercise."""
    coordinator = _coordinator(hass, connection, msg)
    if coordinator is None:
        return
    state = await coordinator.store.async_load()
    workouts = coordinator.store.get_workouts(state)
    key = str(msg["name"]).strip().lower()
    catalog = await coordinator.async_catalog(state)
    active = next((w for w in workouts if not w.completed), None)
    in_session = next((ex for ex in active.exercises if ex.key == key), None) if active is not None else None
    definition = in_session or next((ex for ex in catalog if ex.key == key), None)
    if definition is None:
        connection.send_error(msg["id"], "not_found", f"Unknown exercise: {msg['name']}")
        return
    progress = build_exercise_progress(definition.name, workouts)
    suggestion = get_progression_suggestion(definition, in_session.sets if in_session else (), progress)
    previous = find_previous_stats(definition.name, workouts)
    connection.send_result(
        msg["id"],
        {
            "entry_id": msg["entry_id"],
            "name": definition.name,
            "progress": (
                {
                    "last_weight": progress.last_weight,
                    "last_reps": list(progress.last_reps),
                    "weeks_stalled": progress.weeks_stalled,
                }
                if progress is not None
                else None
            ),
            "suggestion": suggestion.as_dict(),
            "previous_stats": list(previous) if previous is not None else None,
        },
    )


def async_register(hass: HomeAssistant) -> None:
    websocket_api.async_register_command(hass, ws_get_state)
    websocket_api.async_register_command(hass, ws_get_library)
    websocket_api.async_register_command(hass, ws_set_program)
    websocket_api.async_register_command(hass, ws_add_custom_exercise)
    websocket_api.async_register_command(hass, ws_toggle_planner_selection)
    websocket_api.async_register_command(hass, ws_add_exercise)
    websocket_api.async_register_command(hass, ws_log_set)
    websocket_api.async_register_command(hass, ws_set_section)
    websocket_api.async_register_command(hass, ws_get_progression)
