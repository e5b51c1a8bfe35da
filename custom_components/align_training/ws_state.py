"""Websocket state helpers."""

from __future__ import annotations

from typing import Any


def _dicts(items) -> list[dict[str, Any]]:
    return [item.as_dict() for item in items or []]


def public_state(derived: dict[str, Any], *, runtime: dict[str, Any] | None = None) -> dict[str, Any]:
    """Return a stable, JSON-safe payload for the UI from coordinator data."""
    if not isinstance(derived, dict):
        return {}
    runtime = runtime or {}
    state = derived.get("state") if isinstance(derived.get("state"), dict) else {}
    program = derived.get("program")
    day = derived.get("day")
    active = derived.get("active_workout")
    return {
        "schema": int(state.get("schema") or 2),
        "rev": int(state.get("rev") or 1),
        "program": program.as_dict() if program is not None else {},
        "week": _dicts(derived.get("week")),
        "full_week": _dicts(derived.get("full_week")),
        "today": day.as_dict() if day is not None else None,
        "blocks": _dicts(derived.get("blocks")),
        "sections": [
            {"type": s.type, "title": s.title, "collapsible": s.collapsible} for s in derived.get("sections") or []
        ],
        "planner_selections": state.get("planner_selections", {}),
        "planner_suggestions": {
            phase: [ex.name for ex in items] for phase, items in (derived.get("planner_suggestions") or {}).items()
        },
        "block_type": str(state.get("block_type") or "all"),
        "recommendations": _dicts(derived.get("recommendations")),
        "section_overrides": state.get("section_overrides", {}),
        "exercise_sections": dict(derived.get("exercise_sections") or {}),
        "active_workout": active.as_dict() if active is not None else None,
        "history": _dicts(derived.get("history")),
        "glute_sets": int(derived.get("glute_sets") or 0),
        "coaching_prompts": list(derived.get("coaching_prompts") or []),
        "progression_notes": dict(derived.get("progression_notes") or {}),
        "updated_at": str(state.get("updated_at") or ""),
        "runtime": runtime,
    }
