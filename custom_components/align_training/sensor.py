"""Sensor platform for Align Training."""

from __future__ import annotations

from typing import Any

from homeassistant.components.sensor import SensorEntity, SensorStateClass
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import DOMAIN, GLUTE_SET_TARGET
from .coordinator import AlignTrainingCoordinator
from .entity import AlignTrainingEntity


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    coordinator: AlignTrainingCoordinator = hass.data[DOMAIN][entry.entry_id]
    async_add_entities(
        [
            TodayFocusSensor(entry, coordinator),
            ActiveWorkoutSensor(entry, coordinator),
            WeeklyGluteSetsSensor(entry, coordinator),
        ]
    )


class _AlignTrainingSensor(CoordinatorEntity[AlignTrainingCoordinator], AlignTrainingEntity, SensorEntity):
    _key = ""

    def __init__(self, entry: ConfigEntry, coordinator: AlignTrainingCoordinator) -> None:
        super().__init__(coordinator)
        self._bind(entry, coordinator, self._key)

    @property
    def _data(self) -> dict[str, Any]:
        return self.coordinator.data or {}


class TodayFocusSensor(_AlignTrainingSensor):
    """Today's session label, with the week and the session blocks as attributes."""

    _attr_name = "Today's focus"
    _attr_icon = "mdi:calendar-today"
    _attr_translation_key = "today_focus"
    _key = "today_focus"

    @property
    def native_value(self) -> str | None:
        day = self._data.get("day")
        return day.label if day is not None else None

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        data = self._data
        day = data.get("day")
        program = data.get("program")
        return {
            "entry_id": self._entry.entry_id,
            "day_type": day.day_type if day is not None else None,
            "movement_priority": list(day.movement_priority) if day is not None else [],
            "split_focus": list(day.split_focus) if day is not None else [],
            "program": program.as_dict() if program is not None else {},
            "week": [d.as_dict() for d in data.get("full_week", [])],
            "blocks": [b.as_dict() for b in data.get("blocks", [])],
            "coaching_prompts": list(data.get("coaching_prompts", [])),
        }


class ActiveWorkoutSensor(_AlignTrainingSensor):
    """Name of the session in progress, or idle."""

    _attr_name = "Active workout"
    _attr_icon = "mdi:dumbbell"
    _attr_translation_key = "active_workout"
    _key = "active_workout"

    @property
    def native_value(self) -> str:
        workout = self._data.get("active_workout")
        return workout.name if workout is not None else "idle"

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        workout = self._data.get("active_workout")
        if workout is None:
            return {}
        completed_sets = sum(1 for ex in workout.exercises for s in ex.sets if s.is_completed)
        return {
            "workout_id": workout.id,
            "started": workout.date,
            "exercises": [ex.name for ex in workout.exercises],
            "completed_sets": completed_sets,
        }


class WeeklyGluteSetsSensor(_AlignTrainingSensor):
    _attr_name = "Weekly glute sets"
    _attr_icon = "mdi:chart-bar"
    _attr_translation_key = "weekly_glute_sets"
    _attr_state_class = SensorStateClass.MEASUREMENT
    _attr_native_unit_of_measurement = "sets"
    _key = "weekly_glute_sets"

    @property
    def native_value(self) -> int:
        return int(self._data.get("glute_sets") or 0)

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        low, high = GLUTE_SET_TARGET
        return {"target_min": low, "target_max": high}
