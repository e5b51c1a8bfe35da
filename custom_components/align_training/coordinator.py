"""Coordinator for Align Training."""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.dispatcher import async_dispatcher_send
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator
from homeassistant.util import dt as dt_util

from .blocks import build_session_blocks, get_workout_sections
from .const import DOMAIN, SIGNAL_STATE_UPDATED
from .library import ExerciseLibrary
from .models import ExerciseDefinition, Workout
from .program import generate_weekly_structure, get_full_week_structure
from .progression import coaching_prompts, estimate_weekly_glute_sets, progression_notes
from .recommend import (
    detect_exercise_phase,
    plan_session,
    planner_suggestions,
    recent_completed,
    recommendations,
    resolve_day_context,
)
from .storage import AlignTrainingStore
from .workouts import active_workout, start_workout

_LOGGER = logging.getLogger(__name__)


def _local_today() -> date:
    return dt_util.as_local(dt_util.utcnow()).date()


class AlignTrainingCoordinator(DataUpdateCoordinator[dict[str, Any]]):
    """Loads state from storage and derives the week, session and advice from it."""

    def __init__(self, hass: HomeAssistant, entry: ConfigEntry) -> None:
        self.entry = entry
        self.store = AlignTrainingStore(hass, entry.entry_id)
        self.library = ExerciseLibrary()

        super().__init__(
            hass,
            logger=_LOGGER,
            name=f"{DOMAIN}_{entry.entry_id}",
            update_interval=timedelta(hours=1),
        )

    async def _async_update_data(self) -> dict[str, Any]:
        # Single source of truth is storage; everything else is derived per refresh.
        state = await self.store.async_load()
        return await self.async_derive(state)

    async def async_catalog(self, state: dict[str, Any] | None = None) -> list[ExerciseDefinition]:
        if state is None:
            state = await self.store.async_load()
        return await self.library.async_catalog(state.get("custom_exercises"))

    async def async_derive(self, state: dict[str, Any], *, today: date | None = None) -> dict[str, Any]:
        today = today or _local_today()
        program = self.store.get_program(state)
        workouts = self.store.get_workouts(state)
        catalog = await self.async_catalog(state)
        day = resolve_day_context(program, today.weekday())
        current = active_workout(workouts)
        week_start = today - timedelta(days=today.weekday())
        glute_sets = estimate_weekly_glute_sets(
            workouts,
            since=week_start,
            local_date=lambda ts: dt_util.as_local(ts).date(),
        )

        return {
            "state": state,
            "program": program,
            "week": generate_weekly_structure(program),
            "full_week": get_full_week_structure(program),
            "day": day,
            "blocks": build_session_blocks(program.goal, program.session_length_min),
            "sections": get_workout_sections(day.day_type),
            "catalog": catalog,
            "planner_suggestions": planner_suggestions(catalog, day.split_focus),
            "recommendations": recommendations(
                catalog,
                split_focus=day.split_focus,
                movement_priority=day.movement_priority,
                history=workouts,
                active_workout=current,
                block_type=str(state.get("block_type") or "all"),
            ),
            "active_workout": current,
            "exercise_sections": {
                ex.id: detect_exercise_phase(ex, day.day_type, state.get("section_overrides"))
                for ex in (current.exercises if current is not None else ())
            },
            "history": recent_completed(workouts),
            "glute_sets": glute_sets,
            "coaching_prompts": coaching_prompts(current, workouts, program, glute_sets),
            "progression_notes": progression_notes(workouts),
        }

    def notify(self) -> None:
        """Nudge entity UI to refresh options after a write."""
        async_dispatcher_send(self.hass, f"{SIGNAL_STATE_UPDATED}_{self.entry.entry_id}")

    async def async_after_write(self) -> None:
        self.notify()
        await self.async_request_refresh()

    async def async_start_workout(
        self, *, name: str | None = None, expected_rev: int | None = None
    ) -> Workout:
        """Open today's session with the planned exercises and the current blocks."""
        state = await self.store.async_load()
        data = await self.async_derive(state)
        program = data["program"]
        day = data["day"]
        workouts = self.store.get_workouts(state)
        planned = plan_session(
            data["catalog"],
            selections=state.get("planner_selections") or {},
            day=day,
            program=program,
            history=workouts,
        )
        workout = start_workout(
            name or day.label,
            blocks=data["blocks"],
            planned=planned,
            history=workouts,
            day_type=day.day_type,
        )
        await self.store.async_add_workout(workout, expected_rev=expected_rev)
        _LOGGER.debug("Started workout %s (%s) with %s exercises", workout.id, workout.name, len(planned))
        await self.async_after_write()
        return workout

    async def async_finish_workout(
        self, *, workout_id: str | None = None, expected_rev: int | None = None
    ) -> dict[str, Any]:
        state = await self.store.async_finish_workout(workout_id=workout_id, expected_rev=expected_rev)
        await self.async_after_write()
        return state

    async def async_rollover(self) -> None:
        """Close workouts left open on a previous day."""
        if await self.store.async_auto_complete(_local_today()):
            await self.async_after_write()
