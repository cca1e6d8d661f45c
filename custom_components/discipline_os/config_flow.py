"""Config flow for Discipline OS."""

from __future__ import annotations

from typing import Any

import voluptuous as vol

from homeassistant import config_entries
from homeassistant.core import callback

from .const import (
    CONF_NAME,
    CONF_TEMPLATE,
    DEFAULT_NAME,
    DOMAIN,
    HABIT_TEMPLATES,
    TEMPLATE_DEFAULT,
)

TEMPLATE_OPTIONS = [TEMPLATE_DEFAULT, *[t["name"] for t in HABIT_TEMPLATES]]


class DisciplineConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    """Create a tracker; the habit template only seeds a brand-new store."""

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
                    CONF_TEMPLATE: user_input.get(CONF_TEMPLATE, TEMPLATE_DEFAULT),
                },
            )

        schema = vol.Schema(
            {
                vol.Required(CONF_NAME, default=DEFAULT_NAME): str,
                vol.Required(CONF_TEMPLATE, default=TEMPLATE_DEFAULT): vol.In(TEMPLATE_OPTIONS),
            }
        )
        return self.async_show_form(step_id="user", data_schema=schema)

    @staticmethod
    @callback
    def async_get_options_flow(config_entry):
        return DisciplineOptionsFlow(config_entry)


class DisciplineOptionsFlow(config_entries.OptionsFlow):
    """Rename the tracker device."""

    def __init__(self, config_entry) -> None:
        self._entry = config_entry

    async def async_step_init(self, user_input: dict[str, Any] | None = None):
        if user_input is not None:
            name = str(user_input.get(CONF_NAME, DEFAULT_NAME)).strip() or DEFAULT_NAME
            return self.async_create_entry(title="", data={CONF_NAME: name})

        current_name = self._entry.options.get(CONF_NAME, self._entry.data.get(CONF_NAME, DEFAULT_NAME))
        schema = vol.Schema({vol.Required(CONF_NAME, default=str(current_name)): str})
        return self.async_show_form(step_id="init", data_schema=schema)
