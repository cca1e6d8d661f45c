"""Services for Discipline OS."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

import voluptuous as vol

from homeassistant.core import HomeAssistant, ServiceCall, ServiceResponse, SupportsResponse

from . import model
from .const import DOMAIN, GOAL_CHOICES, THEME_CHOICES
from .dates import parse_day_key, today_key
from .type_defs import MutationResult


def day_key_validator(value: Any) -> str:
    """Voluptuous validator for strict YYYY-MM-DD day keys."""
    try:
        parse_day_key(str(value))
    except ValueError as err:
        raise vol.Invalid(str(err)) from err
    return str(value)


_ENTRY = {vol.Required("entry_id"): str}
_DAY = {**_ENTRY, vol.Optional("date"): day_key_validator}
_HABIT = {**_ENTRY, vol.Required("habit_id"): str}
_ITEM = {**_DAY, vol.Required("item_id"): str}

_ENTRY_SCHEMA = vol.Schema(_ENTRY)
_DAY_SCHEMA = vol.Schema(_DAY)

# service name -> (schema, handler(coordinator, call data) -> awaitable MutationResult)
_Handler = Callable[[Any, dict[str, Any]], Awaitable[MutationResult]]


def _day(data: dict[str, Any]) -> str:
    return str(data.get("date") or today_key())


def _mutation(func: Callable[..., MutationResult], *keys: str, with_day: bool = True) -> _Handler:
    """Build a handler that calls a day (or state) mutator with the named call fields."""

    async def _handler(coordinator: Any, data: dict[str, Any]) -> MutationResult:
        args = [data[k] for k in keys]
        if with_day:
            return await coordinator.async_mutate(func, _day(data), *args)
        return await coordinator.async_mutate(func, *args)

    return _handler


async def _generate(coordinator: Any, data: dict[str, Any]) -> MutationResult:
    return await coordinator.async_generate_workout(_day(data))


async def _add_workout_item(coordinator: Any, data: dict[str, Any]) -> MutationResult:
    return await coordinator.async_mutate(
        model.add_workout_item, _day(data), data["name"], data.get("prescription", "")
    )


async def _apply_template(coordinator: Any, data: dict[str, Any]) -> MutationResult:
    return await coordinator.async_mutate(model.apply_template, data.get("template"), choice=coordinator.choice)


async def _update_profile(coordinator: Any, data: dict[str, Any]) -> MutationResult:
    fields = {k: data[k] for k in ("goal", "current_weight", "goal_weight", "duration_minutes", "auto_workout_habit") if k in data}
    return await coordinator.async_mutate(model.update_profile, **fields)


async def _update_settings(coordinator: Any, data: dict[str, Any]) -> MutationResult:
    return await coordinator.async_mutate(
        model.update_settings, threshold=data.get("threshold"), labels=data.get("status_labels")
    )


async def _set_theme(coordinator: Any, data: dict[str, Any]) -> MutationResult:
    return await coordinator.async_mutate(model.set_theme, data["theme"])


async def _toggle_privacy(coordinator: Any, data: dict[str, Any]) -> MutationResult:
    return await coordinator.async_mutate(model.toggle_privacy)


async def _shift_month(coordinator: Any, data: dict[str, Any]) -> MutationResult:
    return await coordinator.async_mutate(model.shift_month, data["step"])


async def _undo(coordinator: Any, data: dict[str, Any]) -> MutationResult:
    return await coordinator.async_undo()


_MUTATIONS: dict[str, tuple[vol.Schema, _Handler]] = {
    "toggle_habit": (vol.Schema({**_DAY, vol.Required("habit_id"): str}), _mutation(model.toggle_habit, "habit_id")),
    "set_note": (vol.Schema({**_DAY, vol.Required("note"): str}), _mutation(model.set_note, "note")),
    "submit_day": (_DAY_SCHEMA, _mutation(model.submit_day)),
    "unlock_day": (_DAY_SCHEMA, _mutation(model.unlock_day)),
    "reset_day": (_DAY_SCHEMA, _mutation(model.reset_day)),
    "copy_previous_day": (_DAY_SCHEMA, _mutation(model.copy_previous_day)),
    "generate_workout": (_DAY_SCHEMA, _generate),
    "add_workout_item": (
        vol.Schema({**_DAY, vol.Required("name"): str, vol.Optional("prescription", default=""): str}),
        _add_workout_item,
    ),
    "toggle_workout_item": (vol.Schema(_ITEM), _mutation(model.toggle_workout_item, "item_id")),
    "delete_workout_item": (vol.Schema(_ITEM), _mutation(model.delete_workout_item, "item_id")),
    "clear_workout": (_DAY_SCHEMA, _mutation(model.clear_workouts)),
    "add_habit": (vol.Schema({**_ENTRY, vol.Required("name"): str}), _mutation(model.add_habit, "name", with_day=False)),
    "rename_habit": (
        vol.Schema({**_HABIT, vol.Required("name"): str}),
        _mutation(model.rename_habit, "habit_id", "name", with_day=False),
    ),
    "set_habit_enabled": (
        vol.Schema({**_HABIT, vol.Required("enabled"): bool}),
        _mutation(model.set_habit_enabled, "habit_id", "enabled", with_day=False),
    ),
    "move_habit": (
        vol.Schema({**_HABIT, vol.Required("step"): vol.All(vol.Coerce(int), vol.In([-1, 1]))}),
        _mutation(model.move_habit, "habit_id", "step", with_day=False),
    ),
    "delete_habit": (vol.Schema(_HABIT), _mutation(model.delete_habit, "habit_id", with_day=False)),
    "apply_template": (vol.Schema({**_ENTRY, vol.Optional("template"): str}), _apply_template),
    "update_profile": (
        vol.Schema(
            {
                **_ENTRY,
                vol.Optional("goal"): vol.In(GOAL_CHOICES),
                vol.Optional("current_weight"): vol.Coerce(float),
                vol.Optional("goal_weight"): vol.Coerce(float),
                vol.Optional("duration_minutes"): vol.All(vol.Coerce(int), vol.Range(min=1)),
                vol.Optional("auto_workout_habit"): bool,
            }
        ),
        _update_profile,
    ),
    "update_settings": (
        vol.Schema(
            {
                **_ENTRY,
                vol.Optional("threshold"): vol.Coerce(int),
                vol.Optional("status_labels"): str,
            }
        ),
        _update_settings,
    ),
    "set_theme": (vol.Schema({**_ENTRY, vol.Required("theme"): vol.In(THEME_CHOICES)}), _set_theme),
    "toggle_privacy": (_ENTRY_SCHEMA, _toggle_privacy),
    "shift_month": (vol.Schema({**_ENTRY, vol.Required("step"): vol.Coerce(int)}), _shift_month),
    "undo": (_ENTRY_SCHEMA, _undo),
}

SERVICE_GET_DAY = "get_day"
SERVICE_EXPORT = "export_backup"
SERVICE_IMPORT = "import_backup"
SERVICE_RESET_ALL = "reset_all"


async def async_register(hass: HomeAssistant) -> None:
    async def _coordinator_for_entry(entry_id: str):
        return hass.data.get(DOMAIN, {}).get(entry_id)

    def _make_mutation_service(handler: _Handler):
        async def _async_call(call: ServiceCall) -> ServiceResponse:
            entry_id = str(call.data["entry_id"])
            coordinator = await _coordinator_for_entry(entry_id)
            if coordinator is None:
                return {"ok": False, "error": "entry_not_found"}
            result = await handler(coordinator, dict(call.data))
            if result is MutationResult.APPLIED:
                return {"ok": True, "entry_id": entry_id, "result": str(result)}
            return {"ok": False, "entry_id": entry_id, "error": str(result)}

        return _async_call

    async def _async_get_day(call: ServiceCall) -> ServiceResponse:
        entry_id = str(call.data["entry_id"])
        coordinator = await _coordinator_for_entry(entry_id)
        if coordinator is None:
            return {"ok": False, "error": "entry_not_found"}
        return {"ok": True, "entry_id": entry_id, "day": coordinator.view_for_day(call.data.get("date"))}

    async def _async_export(call: ServiceCall) -> ServiceResponse:
        entry_id = str(call.data["entry_id"])
        coordinator = await _coordinator_for_entry(entry_id)
        if coordinator is None:
            return {"ok": False, "error": "entry_not_found"}
        path = await coordinator.async_export()
        return {"ok": True, "entry_id": entry_id, "path": str(path)}

    async def _async_import(call: ServiceCall) -> ServiceResponse:
        entry_id = str(call.data["entry_id"])
        coordinator = await _coordinator_for_entry(entry_id)
        if coordinator is None:
            return {"ok": False, "error": "entry_not_found"}
        raw_path = str(call.data.get("path") or "").strip()
        path = Path(raw_path) if raw_path else coordinator.store.export_path()
        if not path.is_absolute():
            path = Path(hass.config.path(raw_path))
        if not await coordinator.async_import(path):
            return {"ok": False, "entry_id": entry_id, "error": "import_failed"}
        return {"ok": True, "entry_id": entry_id}

    async def _async_reset_all(call: ServiceCall) -> ServiceResponse:
        entry_id = str(call.data["entry_id"])
        coordinator = await _coordinator_for_entry(entry_id)
        if coordinator is None:
            return {"ok": False, "error": "entry_not_found"}
        await coordinator.async_reset_all()
        return {"ok": True, "entry_id": entry_id}

    for name, (schema, handler) in _MUTATIONS.items():
        if not hass.services.has_service(DOMAIN, name):
            hass.services.async_register(
                DOMAIN,
                name,
                _make_mutation_service(handler),
                schema=schema,
                supports_response=SupportsResponse.OPTIONAL,
            )
    if not hass.services.has_service(DOMAIN, SERVICE_GET_DAY):
        hass.services.async_register(
            DOMAIN,
            SERVICE_GET_DAY,
            _async_get_day,
            schema=_DAY_SCHEMA,
            supports_response=SupportsResponse.ONLY,
        )
    if not hass.services.has_service(DOMAIN, SERVICE_EXPORT):
        hass.services.async_register(
            DOMAIN,
            SERVICE_EXPORT,
            _async_export,
            schema=_ENTRY_SCHEMA,
            supports_response=SupportsResponse.OPTIONAL,
        )
    if not hass.services.has_service(DOMAIN, SERVICE_IMPORT):
        hass.services.async_register(
            DOMAIN,
            SERVICE_IMPORT,
            _async_import,
            schema=vol.Schema({**_ENTRY, vol.Optional("path"): str}),
            supports_response=SupportsResponse.OPTIONAL,
        )
    if not hass.services.has_service(DOMAIN, SERVICE_RESET_ALL):
        hass.services.async_register(
            DOMAIN,
            SERVICE_RESET_ALL,
            _async_reset_all,
            schema=_ENTRY_SCHEMA,
            supports_response=SupportsResponse.OPTIONAL,
        )
