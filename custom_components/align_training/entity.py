"""Shared entity plumbing for Align Training."""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.config_entries import ConfigEntry
from homeassistant.helpers.device_registry import DeviceEntryType, DeviceInfo
from homeassistant.helpers.entity import Entity

from .const import CONF_NAME, DEFAULT_NAME, DOMAIN

if TYPE_CHECKING:
    from .coordinator import AlignTrainingCoordinator


def device_info_from_entry(entry: ConfigEntry) -> DeviceInfo:
    """One service device per entry; the options-flow name wins over the original one."""
    name = entry.options.get(CONF_NAME, entry.data.get(CONF_NAME, DEFAULT_NAME))
    return DeviceInfo(
        identifiers={(DOMAIN, entry.entry_id)},
        name=str(name),
        manufacturer="Align Training",
        model="Training planner",
        entry_type=DeviceEntryType.SERVICE,
    )


class AlignTrainingEntity(Entity):
    """Entity bound to one entry and its coordinator."""

    _attr_has_entity_name = True

    def _bind(self, entry: ConfigEntry, coordinator: AlignTrainingCoordinator, key: str) -> None:
        self._entry = entry
        self._coordinator = coordinator
        self._attr_unique_id = f"{entry.entry_id}_{key}"
        self._attr_device_info = device_info_from_entry(entry)
