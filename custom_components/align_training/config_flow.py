"""Config flow for Align Training."""

from __future__ import annotations

from typing import Any

import voluptuous as vol

from homeassistant import config_entries
from homeassistant.core import callback

from .const import (
    CONDITIONING_CHOICES,
    CONF_CONDITIONING_PREFERENCE,
    CONF_DAYS_PER_WEEK,
    CONF_EMPHASIS,
    CONF_GOAL,
    CONF_NAME,
    CONF_SESSION_LENGTH_MIN,
    DAYS_PER_WEEK_CHOICES,
    DEFAULT_CONDITIONING_PREFERENCE,
    DEFAULT_DAYS_PER_WEEK,
    DEFAULT_EMPHASIS,
    DEFAULT_GOAL,
    DEFAULT_NAME,
    DEFAULT_SESSION_LENGTH_MIN,
    DOMAIN,
    EMPHASIS_CHOICES,
    GOAL_CHOICES,
    SESSION_LENGTH_CHOICES,
)


class AlignTrainingConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    """Handle a config flow for Align Training."""

    VERSION = 1

    async def async_step_user(self, user_input: dict[str, Any] | None = None):
        if user_input is not None:
            name = str(user_input.get(CONF_NAME, DEFAULT_NAME)).strip() or DEFAULT_NAME
            await self.async_set_unique_id(name.lower())
            self._abort_if_unique_id_configured()

            return self.async_create_entry(
                title=name,
                data={
                    CONF_NAME: name,
                    CONF_GOAL: user_input[CONF_GOAL],
                    CONF_DAYS_PER_WEEK: int(user_input[CONF_DAYS_PER_WEEK]),
                    CONF_EMPHASIS: user_input[CONF_EMPHASIS],
                    CONF_SESSION_LENGTH_MIN: int(user_input[CONF_SESSION_LENGTH_MIN]),
                    CONF_CONDITIONING_PREFERENCE: user_input[CONF_CONDITIONING_PREFERENCE],
                },
            )

        schema = vol.Schema(
            {
                vol.Required(CONF_NAME, default=DEFAULT_NAME): str,
                vol.Required(CONF_GOAL, default=DEFAULT_GOAL): vol.In(GOAL_CHOICES),
                vol.Required(CONF_DAYS_PER_WEEK, default=DEFAULT_DAYS_PER_WEEK): vol.In(DAYS_PER_WEEK_CHOICES),
                vol.Required(CONF_EMPHASIS, default=DEFAULT_EMPHASIS): vol.In(EMPHASIS_CHOICES),
                vol.Required(CONF_SESSION_LENGTH_MIN, default=DEFAULT_SESSION_LENGTH_MIN): vol.In(
                    SESSION_LENGTH_CHOICES
                ),
                vol.Required(CONF_CONDITIONING_PREFERENCE, default=DEFAULT_CONDITIONING_PREFERENCE): vol.In(
                    CONDITIONING_CHOICES
                ),
            }
        )
        return self.async_show_form(step_id="user", data_schema=schema)

    @staticmethod
    @callback
    def async_get_options_flow(config_entry):
        return AlignTrainingOptionsFlow(config_entry)


class AlignTrainingOptionsFlow(config_entries.OptionsFlow):
    """Rename the entry; the program itself is edited through selects and services."""

    def __init__(self, config_entry) -> None:
        self._entry = config_entry

    async def async_step_init(self, user_input: dict[str, Any] | None = None):
        if user_input is not None:
            name = str(user_input.get(CONF_NAME, DEFAULT_NAME)).strip() or DEFAULT_NAME
            return self.async_create_entry(title="", data={CONF_NAME: name})

        current_name = self._entry.options.get(
            CONF_NAME,
            self._entry.data.get(CONF_NAME, DEFAULT_NAME),
        )
        schema = vol.Schema(
            {
                vol.Required(CONF_NAME, default=str(current_name)): str,
            }
        )
        return self.async_show_form(step_id="init", data_schema=schema)
