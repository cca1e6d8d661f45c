"""Sensor platform for Discipline OS."""

from __future__ import annotations

from typing import Any

from homeassistant.components.sensor import SensorEntity, SensorStateClass
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import DOMAIN
from .coordinator import DisciplineCoordinator
from .entity import device_info_from_entry


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    coordinator: DisciplineCoordinator = hass.data[DOMAIN][entry.entry_id]
    async_add_entities(
        [
            TodayScoreSensor(entry, coordinator),
            StreakSensor(entry, coordinator, kind="current"),
            StreakSensor(entry, coordinator, kind="best"),
        ]
    )


class _DisciplineSensor(CoordinatorEntity[DisciplineCoordinator], SensorEntity):
    _attr_has_entity_name = True
    _attr_state_class = SensorStateClass.MEASUREMENT

    def __init__(self, entry: ConfigEntry, coordinator: DisciplineCoordinator, key: str) -> None:
        super().__init__(coordinator)
        self._entry = entry
        self._attr_unique_id = f"{entry.entry_id}_{key}"
        self._attr_device_info = device_info_from_entry(entry)


class TodayScoreSensor(_DisciplineSensor):
    """Active habits done today, with the status bucket as attributes."""

    _attr_name = "Today score"
    _attr_icon = "mdi:checkbox-marked-circle-outline"
    _attr_translation_key = "today_score"

    def __init__(self, entry: ConfigEntry, coordinator: DisciplineCoordinator) -> None:
        super().__init__(entry, coordinator, "today_score")

    @property
    def native_value(self) -> int:
        return int(self.coordinator.view_for_day()["score"])

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        view = self.coordinator.view_for_day()
        privacy = bool((self.coordinator.state or {}).get("privacy_mode"))
        return {
            "entry_id": self._entry.entry_id,
            "day": view["day"],
            "max_score": view["max_score"],
            "status": view["status"]["class"],
            "label": view["status"]["label"],
            "submitted": view["entry"]["submitted"],
            "habits": [] if privacy else view["habits"],
        }


class StreakSensor(_DisciplineSensor):
    """Current or best run of days meeting the threshold."""

    _attr_icon = "mdi:fire"
    _attr_native_unit_of_measurement = "d"

    def __init__(self, entry: ConfigEntry, coordinator: DisciplineCoordinator, *, kind: str) -> None:
        super().__init__(entry, coordinator, f"{kind}_streak")
        self._kind = kind
        self._attr_name = "Current streak" if kind == "current" else "Best streak"
        self._attr_translation_key = f"{kind}_streak"

    @property
    def native_value(self) -> int:
        return int(self.coordinator.view_for_day()["streaks"][self._kind])
