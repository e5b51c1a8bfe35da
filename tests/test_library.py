from __future__ import annotations

from custom_components.align_training.library import (
    load_bundled_exercises,
    merge_catalog,
    normalize_custom_exercise,
)
from custom_components.align_training.models import ExerciseDefinition


def test_bundled_names_are_unique() -> None:
    names = [str(ex["name"]).strip().lower() for ex in load_bundled_exercises()]
    assert names
    assert len(names) == len(set(names))


def test_bundled_entries_parse_cleanly() -> None:
    for raw in load_bundled_exercises():
        definition = ExerciseDefinition.from_dict(raw)
        assert definition.name == raw["name"]
        assert list(definition.default_rep_range) == raw["default_rep_range"]


def test_merge_keeps_first_entry_per_name() -> None:
    merged = merge_catalog(
        [{"name": "Bench Press", "category": "Chest"}],
        [{"name": "bench press", "category": "Arms"}, {"name": "Sled Push", "category": "Legs"}, {"name": "  "}],
    )
    assert [(ex.name, ex.category) for ex in merged] == [("Bench Press", "Chest"), ("Sled Push", "Legs")]


def test_custom_exercise_needs_a_name() -> None:
    assert normalize_custom_exercise({"name": "   "}) is None
    assert normalize_custom_exercise("Sled Push") is None


def test_custom_exercise_defaults() -> None:
    normalized = normalize_custom_exercise({"name": " Sled Push ", "recommended_sets": [{}, {}, {}, {}]})
    assert normalized is not None
    assert normalized["name"] == "Sled Push"
    assert normalized["recommended_sets"] == 4
    assert normalized["category"] == "Core"
    assert normalized["default_rep_range"] == [8, 12]
    assert normalized["primary_muscles"] == ["core"]


def test_rep_range_must_be_ordered_and_positive() -> None:
    assert ExerciseDefinition.from_dict({"name": "A", "default_rep_range": [12, 6]}).default_rep_range == (8, 12)
    assert ExerciseDefinition.from_dict({"name": "B", "default_rep_range": [0, 6]}).default_rep_range == (8, 12)
    assert ExerciseDefinition.from_dict({"name": "C", "default_rep_range": [5, 5]}).default_rep_range == (5, 5)
