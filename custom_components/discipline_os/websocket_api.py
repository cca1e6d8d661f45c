"""Websocket API for Discipline OS (read side)."""

from __future__ import annotations

from typing import Any

import voluptuous as vol

from homeassistant.components import websocket_api
from homeassistant.core import HomeAssistant
from homeassistant.util import dt as dt_util

from .const import DOMAIN
from .dates import month_days, today_key, week_days
from .scoring import day_summary, month_heatmap, week_recap
from .services import day_key_validator
from .ws_state import public_state


def _runtime_payload() -> dict[str, Any]:
    today = today_key()
    return {
        "today": today,
        "week": week_days(today),
    }


def _coordinator(hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]):
    entry_id = msg["entry_id"]
    coordinator = hass.data.get(DOMAIN, {}).get(entry_id)
    if coordinator is None or coordinator.state is None:
        connection.send_error(msg["id"], "entry_not_found", f"No entry found for entry_id={entry_id}")
        return None
    return coordinator


@websocket_api.websocket_command({vol.Required("type"): "discipline_os/list_entries"})
@websocket_api.async_response
async def ws_list_entries(
    hass: HomeAssistant,
    connection: websocket_api.ActiveConnection,
    msg: dict[str, Any],
) -> None:
    entries = hass.config_entries.async_entries(DOMAIN)
    payload = [{"entry_id": entry.entry_id, "title": entry.title} for entry in entries]
    connection.send_result(msg["id"], {"entries": payload})


@websocket_api.websocket_command(
    {
        vol.Required("type"): "discipline_os/get_state",
        vol.Required("entry_id"): str,
    }
)
@websocket_api.async_response
async def ws_get_state(
    hass: HomeAssistant,
    connection: websocket_api.ActiveConnection,
    msg: dict[str, Any],
) -> None:
    coordinator = _coordinator(hass, connection, msg)
    if coordinator is None:
        return
    connection.send_result(
        msg["id"],
        {"entry_id": msg["entry_id"], "state": public_state(coordinator.state, runtime=_runtime_payload())},
    )


@websocket_api.websocket_command(
    {
        vol.Required("type"): "discipline_os/get_day",
        vol.Required("entry_id"): str,
        vol.Optional("date"): day_key_validator,
    }
)
@websocket_api.async_response
async def ws_get_day(
    hass: HomeAssistant,
    connection: websocket_api.ActiveConnection,
    msg: dict[str, Any],
) -> None:
    coordinator = _coordinator(hass, connection, msg)
    if coordinator is None:
        return
    day = msg.get("date") or today_key()
    connection.send_result(msg["id"], {"entry_id": msg["entry_id"], "day": day_summary(coordinator.state, day)})


@websocket_api.websocket_command(
    {
        vol.Required("type"): "discipline_os/get_week",
        vol.Required("entry_id"): str,
        vol.Optional("date"): day_key_validator,
    }
)
@websocket_api.async_response
async def ws_get_week(
    hass: HomeAssistant,
    connection: websocket_api.ActiveConnection,
    msg: dict[str, Any],
) -> None:
    coordinator = _coordinator(hass, connection, msg)
    if coordinator is None:
        return
    days = week_days(msg.get("date") or today_key())
    connection.send_result(
        msg["id"],
        {"entry_id": msg["entry_id"], "recap": week_recap(coordinator.state, days)},
    )


@websocket_api.websocket_command(
    {
        vol.Required("type"): "discipline_os/get_month",
        vol.Required("entry_id"): str,
        vol.Optional("month_offset"): vol.Coerce(int),
    }
)
@websocket_api.async_response
async def ws_get_month(
    hass: HomeAssistant,
    connection: websocket_api.ActiveConnection,
    msg: dict[str, Any],
) -> None:
    coordinator = _coordinator(hass, connection, msg)
    if coordinator is None:
        return
    state = coordinator.state
    offset = msg.get("month_offset")
    if offset is None:
        offset = int(state.get("month_offset") or 0)
    today = dt_util.as_local(dt_util.utcnow()).date()
    days = month_days(today, offset)
    connection.send_result(
        msg["id"],
        {"entry_id": msg["entry_id"], "month_offset": offset, "cells": month_heatmap(state, days)},
    )


def async_register(hass: HomeAssistant) -> None:
    websocket_api.async_register_command(hass, ws_list_entries)
    websocket_api.async_register_command(hass, ws_get_state)
    websocket_api.async_register_command(hass, ws_get_day)
    websocket_api.async_register_command(hass, ws_get_week)
    websocket_api.async_register_command(hass, ws_get_month)
