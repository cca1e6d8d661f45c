"""Button platform for Discipline OS."""

from __future__ import annotations

import logging

from homeassistant.components.button import ButtonEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN
from .coordinator import DisciplineCoordinator
from .entity import device_info_from_entry

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    coordinator: DisciplineCoordinator = hass.data[DOMAIN][entry.entry_id]
    async_add_entities([GenerateWorkoutButton(entry, coordinator), UndoButton(entry, coordinator)])


class GenerateWorkoutButton(ButtonEntity):
    """Button to generate today's workout from the profile."""

    _attr_has_entity_name = True
    _attr_name = "Generate workout"
    _attr_icon = "mdi:dumbbell"
    _attr_translation_key = "generate_workout"

    def __init__(self, entry: ConfigEntry, coordinator: DisciplineCoordinator) -> None:
        self._entry = entry
        self._coordinator = coordinator
        self._attr_unique_id = f"{entry.entry_id}_generate_workout"
        self._attr_device_info = device_info_from_entry(entry)

    async def async_press(self) -> None:
        result = await self._coordinator.async_generate_workout()
        _LOGGER.debug("Generate workout: %s", result)


class UndoButton(ButtonEntity):
    """Button to restore the previous snapshot."""

    _attr_has_entity_name = True
    _attr_name = "Undo"
    _attr_icon = "mdi:undo"
    _attr_translation_key = "undo"

    def __init__(self, entry: ConfigEntry, coordinator: DisciplineCoordinator) -> None:
        self._entry = entry
        self._coordinator = coordinator
        self._attr_unique_id = f"{entry.entry_id}_undo"
        self._attr_device_info = device_info_from_entry(entry)

    async def async_press(self) -> None:
        result = await self._coordinator.async_undo()
        _LOGGER.debug("Undo: %s", result)
