from __future__ import annotations

from custom_components.align_training.blocks import build_session_blocks, get_workout_sections
from custom_components.align_training.const import SESSION_LENGTH_CHOICES


def test_blocks_grow_with_session_length() -> None:
    previous = None
    for length in sorted(SESSION_LENGTH_CHOICES):
        durations = [b.duration_min for b in build_session_blocks("hypertrophy", length)]
        assert all(d >= 5 for d in durations)
        if previous is not None:
            assert all(cur >= prev for cur, prev in zip(durations, previous))
        previous = durations


def test_block_layout_at_sixty_minutes() -> None:
    blocks = build_session_blocks("hypertrophy", 60)
    assert [(b.type, b.title, b.duration_min) for b in blocks] == [
        ("warmup", "Warm", 8),
        ("compound", "Compound", 25),
        ("accessory", "Isolate", 17),
        ("cooldown", "Cool", 8),
    ]


def test_block_scaling_rounds_half_up() -> None:
    assert [b.duration_min for b in build_session_blocks("hypertrophy", 45)] == [6, 19, 13, 6]
    assert [b.duration_min for b in build_session_blocks("hypertrophy", 90)] == [12, 38, 26, 12]


def test_tiny_session_keeps_five_minute_floor() -> None:
    assert [b.duration_min for b in build_session_blocks("strength", 10)] == [5, 5, 5, 5]


def test_rest_depends_on_goal() -> None:
    strength = {b.type: b.recommended_rest_seconds for b in build_session_blocks("strength", 60)}
    hypertrophy = {b.type: b.recommended_rest_seconds for b in build_session_blocks("hypertrophy", 60)}
    assert strength["compound"] == 150
    assert hypertrophy["compound"] == 90
    assert strength["accessory"] == hypertrophy["accessory"] == 75
    assert strength["warmup"] is None


def test_sections_per_day_type() -> None:
    assert [s.type for s in get_workout_sections("rest")] == ["recovery_note"]
    assert [s.type for s in get_workout_sections("conditioning")] == [
        "activation",
        "conditioning_optional",
        "core",
        "recovery_note",
    ]
    assert len(get_workout_sections("lift")) == 7
