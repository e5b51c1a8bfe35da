"""Select platform for Align Training."""

from __future__ import annotations

from homeassistant.components.select import SelectEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.dispatcher import async_dispatcher_connect
from homeassistant.helpers.entity_platform import AddEntitiesCallback

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
    SIGNAL_STATE_UPDATED,
)
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
            ProgramFieldSelect(entry, coordinator, field=CONF_GOAL, name="Goal", choices=GOAL_CHOICES, icon="mdi:target"),
            ProgramFieldSelect(
                entry,
                coordinator,
                field=CONF_DAYS_PER_WEEK,
                name="Days per week",
                choices=DAYS_PER_WEEK_CHOICES,
                icon="mdi:calendar-week",
            ),
            ProgramFieldSelect(
                entry, coordinator, field=CONF_EMPHASIS, name="Emphasis", choices=EMPHASIS_CHOICES, icon="mdi:arm-flex"
            ),
            ProgramFieldSelect(
                entry,
                coordinator,
                field=CONF_SESSION_LENGTH_MIN,
                name="Session length",
                choices=SESSION_LENGTH_CHOICES,
                icon="mdi:timer-outline",
            ),
            ProgramFieldSelect(
                entry,
                coordinator,
                field=CONF_CONDITIONING_PREFERENCE,
                name="Conditioning",
                choices=CONDITIONING_CHOICES,
                icon="mdi:run",
            ),
            RecommendationPhaseSelect(entry, coordinator),
        ]
    )


class _StoreBackedSelect(AlignTrainingEntity, SelectEntity):
    """Select whose value lives in storage and follows state-updated signals."""

    def __init__(self, entry: ConfigEntry, coordinator: AlignTrainingCoordinator, *, key: str) -> None:
        self._bind(entry, coordinator, key)
        self._unsub = None
        self._value: str | None = None

    @property
    def current_option(self) -> str | None:
        return self._value

    async def async_added_to_hass(self) -> None:
        self._unsub = async_dispatcher_connect(
            self.hass,
            f"{SIGNAL_STATE_UPDATED}_{self._entry.entry_id}",
            self._handle_updated,
        )
        await self._refresh_from_store()

    async def async_will_remove_from_hass(self) -> None:
        if self._unsub:
            self._unsub()
            self._unsub = None

    async def _refresh_from_store(self) -> None:
        raise NotImplementedError

    def _handle_updated(self) -> None:
        self.hass.async_create_task(self._async_reload_and_write())

    async def _async_reload_and_write(self) -> None:
        await self._refresh_from_store()
        self.async_write_ha_state()


class ProgramFieldSelect(_StoreBackedSelect):
    """One field of the active training program."""

    def __init__(
        self,
        entry: ConfigEntry,
        coordinator: AlignTrainingCoordinator,
        *,
        field: str,
        name: str,
        choices: list,
        icon: str,
    ) -> None:
        super().__init__(entry, coordinator, key=f"program_{field}")
        self._field = field
        self._choices = [str(c) for c in choices]
        self._attr_name = name
        self._attr_icon = icon
        self._attr_translation_key = field

    @property
    def options(self) -> list[str]:
        return list(self._choices)

    async def async_select_option(self, option: str) -> None:
        if option not in self._choices:
            return
        await self._coordinator.store.async_set_program({self._field: option})
        await self._coordinator.async_after_write()

    async def _refresh_from_store(self) -> None:
        state = await self._coordinator.store.async_load()
        program = self._coordinator.store.get_program(state).as_dict()
        value = str(program.get(self._field))
        self._value = value if value in self._choices else None


class RecommendationPhaseSelect(_StoreBackedSelect):
    """Block type the in-session recommendations are ranked for."""

    _attr_name = "Recommendation phase"
    _attr_icon = "mdi:format-list-bulleted-type"
    _attr_translation_key = "block_type"

    def __init__(self, entry: ConfigEntry, coordinator: AlignTrainingCoordinator) -> None:
        super().__init__(entry, coordinator, key="block_type")
        self._value = "all"

    @property
    def options(self) -> list[str]:
        return list(BLOCK_TYPE_CHOICES)

    async def async_select_option(self, option: str) -> None:
        option = str(option or "").lower()
        if option not in BLOCK_TYPE_CHOICES:
            option = "all"
        await self._coordinator.store.async_set_block_type(option)
        await self._coordinator.async_after_write()

    async def _refresh_from_store(self) -> None:
        state = await self._coordinator.store.async_load()
        self._value = str(state.get("block_type") or "all")
