"""Coordinator for Discipline OS.

The coordinator is the single owner of the live State. Core mutators run
synchronously against it; only persistence and file I/O are awaited.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from datetime import timedelta
from pathlib import Path
from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator

from .const import CONF_TEMPLATE, DOMAIN, TEMPLATE_DEFAULT
from .dates import today_key
from .migration import default_state
from .model import apply_plan, apply_template
from .planner import Choice, build_plan
from .scoring import day_summary
from .storage import BackupError, DisciplineStore
from .type_defs import MutationResult, State
from .undo import undo

_LOGGER = logging.getLogger(__name__)


class DisciplineCoordinator(DataUpdateCoordinator[State]):
    """Owns the live State and persists it after every applied mutation."""

    def __init__(self, hass: HomeAssistant, entry: ConfigEntry) -> None:
        self.entry = entry
        self.store = DisciplineStore(hass, entry.entry_id)
        self.state: State | None = None
        self.choice: Choice = random.choice

        super().__init__(
            hass,
            logger=_LOGGER,
            name=f"{DOMAIN}_{entry.entry_id}",
            update_interval=timedelta(hours=6),
        )

    async def _async_update_data(self) -> State:
        # Storage is read once; afterwards the in-memory State is authoritative.
        if self.state is None:
            self.state = await self.store.async_load()
            if self.store.is_new:
                await self._async_seed_template()
        return self.state

    async def _async_seed_template(self) -> None:
        name = str(self.entry.data.get(CONF_TEMPLATE) or TEMPLATE_DEFAULT)
        if name == TEMPLATE_DEFAULT or self.state is None:
            return
        if apply_template(self.state, name) is MutationResult.APPLIED:
            # Nothing to undo on a brand-new tracker.
            self.state["undo"] = None
            await self.store.async_save(self.state)
            _LOGGER.debug("Seeded entry_id=%s with template %s", self.entry.entry_id, name)

    def _live(self) -> State:
        if self.state is None:
            self.state = default_state()
        return self.state

    async def _async_commit(self) -> None:
        await self.store.async_save(self._live())
        self.async_set_updated_data(self._live())

    async def async_mutate(self, func: Callable[..., MutationResult], *args: Any, **kwargs: Any) -> MutationResult:
        """Run a core mutator against the live State and persist when it applied."""
        result = func(self._live(), *args, **kwargs)
        if result is MutationResult.APPLIED:
            await self._async_commit()
        else:
            _LOGGER.debug("%s returned %s", getattr(func, "__name__", func), result)
        return result

    async def async_generate_workout(self, day: str | None = None) -> MutationResult:
        state = self._live()
        plan = build_plan(state["profile"], choice=self.choice)
        return await self.async_mutate(apply_plan, day or today_key(), plan)

    async def async_undo(self) -> MutationResult:
        restored, result = undo(self._live())
        if result is MutationResult.APPLIED:
            self.state = restored
            await self._async_commit()
        return result

    async def async_export(self) -> Path:
        return await self.store.async_export(self._live())

    async def async_import(self, path: Path) -> bool:
        """Replace live State with a backup; on failure the current State is kept."""
        try:
            imported = await self.store.async_import(path)
        except BackupError as err:
            _LOGGER.warning("Import failed: %s", err)
            return False
        self.state = imported
        await self._async_commit()
        return True

    async def async_reset_all(self) -> None:
        """Wipe stored data and start again from defaults (no undo)."""
        await self.store.async_remove()
        self.state = default_state()
        await self._async_commit()

    def view_for_day(self, day: str | None = None) -> dict[str, Any]:
        return day_summary(self._live(), day or today_key())
