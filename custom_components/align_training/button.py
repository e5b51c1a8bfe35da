"""Button platform for Align Training."""

from __future__ import annotations

import logging

from homeassistant.components.button import ButtonEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN
from .coordinator import AlignTrainingCoordinator
from .entity import AlignTrainingEntity
from .workouts import WorkoutInProgressError, WorkoutNotFoundError

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    coordinator: AlignTrainingCoordinator = hass.data[DOMAIN][entry.entry_id]
    async_add_entities([StartSessionButton(entry, coordinator), FinishSessionButton(entry, coordinator)])


class StartSessionButton(AlignTrainingEntity, ButtonEntity):
    """Start today's session with the planned exercises."""

    _attr_name = "Start session"
    _attr_icon = "mdi:play-circle-outline"
    _attr_translation_key = "start_session"

    def __init__(self, entry: ConfigEntry, coordinator: AlignTrainingCoordinator) -> None:
        self._bind(entry, coordinator, "start_session")

    async def async_press(self) -> None:
        try:
            await self._coordinator.async_start_workout()
        except WorkoutInProgressError as err:
            _LOGGER.warning("Not starting a new session: %s", err)


class FinishSessionButton(AlignTrainingEntity, ButtonEntity):
    _attr_name = "Finish session"
    _attr_icon = "mdi:flag-checkered"
    _attr_translation_key = "finish_session"

    def __init__(self, entry: ConfigEntry, coordinator: AlignTrainingCoordinator) -> None:
        self._bind(entry, coordinator, "finish_session")

    async def async_press(self) -> None:
        try:
            await self._coordinator.async_finish_workout()
        except WorkoutNotFoundError:
            _LOGGER.debug("No active session to finish for entry_id=%s", self._entry.entry_id)
