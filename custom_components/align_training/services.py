"""Services for Align Training."""

from __future__ import annotations

import voluptuous as vol

from homeassistant.core import HomeAssistant, ServiceCall, ServiceResponse, SupportsResponse

from .const import (
    BLOCK_TYPE_CHOICES,
    CONDITIONING_CHOICES,
    CONF_CONDITIONING_PREFERENCE,
    CONF_DAYS_PER_WEEK,
    CONF_EMPHASIS,
    CONF_GOAL,
    CONF_SESSION_LENGTH_MIN,
    DAYS_PER_WEEK_CHOICES,
    DOMAIN,
    EMPHASIS_CHOICES,
    GOAL_CHOICES,
    SESSION_LENGTH_CHOICES,
)
from .recommend import recommendations
from .storage import ConflictError
from .workouts import WorkoutInProgressError, WorkoutNotFoundError

SERVICE_GET_WEEK = "get_week"
SERVICE_SET_PROGRAM = "set_program"
SERVICE_GET_RECOMMENDATIONS = "get_recommendations"
SERVICE_START_WORKOUT = "start_workout"
SERVICE_FINISH_WORKOUT = "finish_workout"

_ENTRY_SCHEMA = vol.Schema({vol.Required("entry_id"): str})
_SET_PROGRAM_SCHEMA = vol.Schema(
    {
        vol.Required("entry_id"): str,
        vol.Optional(CONF_GOAL): vol.In(GOAL_CHOICES),
        vol.Optional(CONF_DAYS_PER_WEEK): vol.All(vol.Coerce(int), vol.In(DAYS_PER_WEEK_CHOICES)),
        vol.Optional(CONF_EMPHASIS): vol.In(EMPHASIS_CHOICES),
        vol.Optional(CONF_SESSION_LENGTH_MIN): vol.All(vol.Coerce(int), vol.In(SESSION_LENGTH_CHOICES)),
        vol.Optional(CONF_CONDITIONING_PREFERENCE): vol.In(CONDITIONING_CHOICES),
        vol.Optional("expected_rev"): vol.Coerce(int),
    }
)
_RECOMMENDATIONS_SCHEMA = vol.Schema(
    {
        vol.Required("entry_id"): str,
        vol.Optional("block_type"): vol.In(BLOCK_TYPE_CHOICES),
    }
)
_START_SCHEMA = vol.Schema(
    {
        vol.Required("entry_id"): str,
        vol.Optional("name"): str,
        vol.Optional("expected_rev"): vol.Coerce(int),
    }
)
_FINISH_SCHEMA = vol.Schema(
    {
        vol.Required("entry_id"): str,
        vol.Optional("workout_id"): str,
        vol.Optional("expected_rev"): vol.Coerce(int),
    }
)

_PROGRAM_FIELDS = (CONF_GOAL, CONF_DAYS_PER_WEEK, CONF_EMPHASIS, CONF_SESSION_LENGTH_MIN, CONF_CONDITIONING_PREFERENCE)


def _week_payload(data: dict) -> dict:
    return {
        "program": data["program"].as_dict(),
        "week": [g.as_dict() for g in data["week"]],
        "full_week": [d.as_dict() for d in data["full_week"]],
        "today": data["day"].as_dict(),
        "blocks": [b.as_dict() for b in data["blocks"]],
    }


async def async_register(hass: HomeAssistant) -> None:
    async def _coordinator_for_entry(entry_id: str):
        return hass.data.get(DOMAIN, {}).get(entry_id)

    async def _async_get_week(call: ServiceCall) -> ServiceResponse:
        entry_id = str(call.data["entry_id"])
        coordinator = await _coordinator_for_entry(entry_id)
        if coordinator is None:
            return {"ok": False, "error": "entry_not_found"}
        data = await coordinator.async_derive(await coordinator.store.async_load())
        return {"ok": True, "entry_id": entry_id, **_week_payload(data)}

    async def _async_set_program(call: ServiceCall) -> ServiceResponse:
        entry_id = str(call.data["entry_id"])
        coordinator = await _coordinator_for_entry(entry_id)
        if coordinator is None:
            return {"ok": False, "error": "entry_not_found"}
        changes = {key: call.data[key] for key in _PROGRAM_FIELDS if key in call.data}
        try:
            state = await coordinator.store.async_set_program(changes, expected_rev=call.data.get("expected_rev"))
        except ConflictError as err:
            return {"ok": False, "error": "conflict", "message": str(err)}
        await coordinator.async_after_write()
        data = await coordinator.async_derive(state)
        return {"ok": True, "entry_id": entry_id, "rev": state["rev"], **_week_payload(data)}

    async def _async_get_recommendations(call: ServiceCall) -> ServiceResponse:
        entry_id = str(call.data["entry_id"])
        coordinator = await _coordinator_for_entry(entry_id)
        if coordinator is None:
            return {"ok": False, "error": "entry_not_found"}
        state = await coordinator.store.async_load()
        data = await coordinator.async_derive(state)
        day = data["day"]
        ranked = recommendations(
            data["catalog"],
            split_focus=day.split_focus,
            movement_priority=day.movement_priority,
            history=coordinator.store.get_workouts(state),
            active_workout=data["active_workout"],
            block_type=str(call.data.get("block_type") or state.get("block_type") or "all"),
        )
        return {
            "ok": True,
            "entry_id": entry_id,
            "recommendations": [ex.as_dict() for ex in ranked],
            "planner_suggestions": {
                phase: [ex.name for ex in items] for phase, items in data["planner_suggestions"].items()
            },
        }

    async def _async_start_workout(call: ServiceCall) -> ServiceResponse:
        entry_id = str(call.data["entry_id"])
        coordinator = await _coordinator_for_entry(entry_id)
        if coordinator is None:
            return {"ok": False, "error": "entry_not_found"}
        try:
            workout = await coordinator.async_start_workout(
                name=call.data.get("name"), expected_rev=call.data.get("expected_rev")
            )
        except WorkoutInProgressError as err:
            return {"ok": False, "error": "workout_in_progress", "workout_id": err.workout_id}
        except ConflictError as err:
            return {"ok": False, "error": "conflict", "message": str(err)}
        return {"ok": True, "entry_id": entry_id, "workout": workout.as_dict()}

    async def _async_finish_workout(call: ServiceCall) -> ServiceResponse:
        entry_id = str(call.data["entry_id"])
        coordinator = await _coordinator_for_entry(entry_id)
        if coordinator is None:
            return {"ok": False, "error": "entry_not_found"}
        try:
            state = await coordinator.async_finish_workout(
                workout_id=call.data.get("workout_id"), expected_rev=call.data.get("expected_rev")
            )
        except WorkoutNotFoundError:
            return {"ok": False, "error": "not_found"}
        except ConflictError as err:
            return {"ok": False, "error": "conflict", "message": str(err)}
        return {"ok": True, "entry_id": entry_id, "rev": state["rev"]}

    for service, handler, schema in (
        (SERVICE_GET_WEEK, _async_get_week, _ENTRY_SCHEMA),
        (SERVICE_SET_PROGRAM, _async_set_program, _SET_PROGRAM_SCHEMA),
        (SERVICE_GET_RECOMMENDATIONS, _async_get_recommendations, _RECOMMENDATIONS_SCHEMA),
        (SERVICE_START_WORKOUT, _async_start_workout, _START_SCHEMA),
        (SERVICE_FINISH_WORKOUT, _async_finish_workout, _FINISH_SCHEMA),
    ):
        if not hass.services.has_service(DOMAIN, service):
            hass.services.async_register(
                DOMAIN,
                service,
                handler,
                schema=schema,
                supports_response=SupportsResponse.ONLY,
            )
