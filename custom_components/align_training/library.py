"""Exercise catalog loader."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .models import ExerciseDefinition

_DATA_PATH = Path(__file__).parent / "data" / "exercises.json"


def load_bundled_exercises() -> list[dict[str, Any]]:
    raw = json.loads(_DATA_PATH.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        return []
    exercises = raw.get("exercises", [])
    return [ex for ex in exercises if isinstance(ex, dict)] if isinstance(exercises, list) else []


def normalize_custom_exercise(ex: Any) -> dict[str, Any] | None:
    """Return a storable definition dict, or None when the entry has no name."""
    if not isinstance(ex, dict):
        return None
    name = str(ex.get("name") or "").strip()
    if not name:
        return None
    return ExerciseDefinition.from_dict({**ex, "name": name}).as_dict()


def merge_catalog(*sources: list[dict[str, Any]]) -> list[ExerciseDefinition]:
    """Merge catalogs in order; names are unique case-insensitively, first one wins."""
    merged: list[ExerciseDefinition] = []
    seen: set[str] = set()
    for source in sources:
        for ex in source or []:
            if not isinstance(ex, dict) or not str(ex.get("name") or "").strip():
                continue
            definition = ExerciseDefinition.from_dict(ex)
            if definition.key in seen:
                continue
            seen.add(definition.key)
            merged.append(definition)
    return merged


class ExerciseLibrary:
    """Loads bundled exercise data from JSON and caches it."""

    def __init__(self) -> None:
        self._cache: list[dict[str, Any]] | None = None

    async def async_load(self) -> list[dict[str, Any]]:
        if self._cache is not None:
            return self._cache
        self._cache = load_bundled_exercises()
        return self._cache

    async def async_catalog(self, custom_exercises: list[dict[str, Any]] | None = None) -> list[ExerciseDefinition]:
        bundled = await self.async_load()
        return merge_catalog(bundled, custom_exercises or [])
