"""Diagnostics support for Align Training.

This file is picked up by Home Assistant automatically when present.
"""

from __future__ import annotations

from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.loader import async_get_integration

from .const import DOMAIN


def _state_summary(state: dict[str, Any]) -> dict[str, Any]:
    workouts = state.get("workouts") if isinstance(state.get("workouts"), list) else []
    return {
        "schema": state.get("schema"),
        "rev": state.get("rev"),
        "updated_at": state.get("updated_at"),
        "program": state.get("program"),
        "block_type": state.get("block_type"),
        "custom_exercises": len(state.get("custom_exercises") or []),
        "workouts": len(workouts),
        "open_workouts": sum(1 for w in workouts if isinstance(w, dict) and not w.get("completed")),
        "planner_selections": {k: len(v) for k, v in (state.get("planner_selections") or {}).items()},
        "section_overrides": len(state.get("section_overrides") or {}),
    }


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant,
    entry: ConfigEntry,
) -> dict[str, Any]:
    """Return diagnostics for a config entry.

    Workout contents are summarized, not dumped.
    """
    coordinator = hass.data.get(DOMAIN, {}).get(entry.entry_id)
    integration = await async_get_integration(hass, DOMAIN)

    payload: dict[str, Any] = {
        "entry": {
            "entry_id": entry.entry_id,
            "title": entry.title,
            "version": entry.version,
            "data": dict(entry.data),
            "options": dict(entry.options),
        },
        "integration_version": str(integration.version or ""),
    }

    if coordinator is not None:
        data = getattr(coordinator, "data", None) or {}
        day = data.get("day")
        payload["coordinator"] = {
            "last_update_success": bool(getattr(coordinator, "last_update_success", False)),
            "last_exception": repr(getattr(coordinator, "last_exception", None)),
            "today": day.as_dict() if day is not None else None,
            "catalog_size": len(data.get("catalog") or []),
        }
        payload["state"] = _state_summary(await coordinator.store.async_load())

    return payload
