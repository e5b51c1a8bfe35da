"""Constants for Align Training integration."""

from __future__ import annotations

from homeassistant.const import Platform

DOMAIN = "align_training"

PLATFORMS: list[Platform] = [
    Platform.BUTTON,
    Platform.SENSOR,
    Platform.SELECT,
]

CONF_NAME = "name"
CONF_GOAL = "goal"
CONF_DAYS_PER_WEEK = "days_per_week"
CONF_EMPHASIS = "emphasis"
CONF_SESSION_LENGTH_MIN = "session_length_min"
CONF_CONDITIONING_PREFERENCE = "conditioning_preference"

DEFAULT_NAME = "Align Training"
DEFAULT_GOAL = "hypertrophy"
DEFAULT_DAYS_PER_WEEK = 4
DEFAULT_EMPHASIS = "balanced"
DEFAULT_SESSION_LENGTH_MIN = 60
DEFAULT_CONDITIONING_PREFERENCE = "none"

GOAL_CHOICES = ["hypertrophy", "strength"]
DAYS_PER_WEEK_CHOICES = [3, 4, 5, 6]
EMPHASIS_CHOICES = ["balanced", "glutes_legs", "upper_body", "push_bias", "pull_bias"]
SESSION_LENGTH_CHOICES = [45, 60, 75, 90]
CONDITIONING_CHOICES = ["none", "1_day", "2_days"]

BLOCK_TYPE_CHOICES = ["all", "warmup", "skill_power", "compound", "accessory", "cooldown"]
PLANNER_PHASES = ["compound", "isolate", "finisher"]

# Categories logged by duration instead of reps x weight.
TIMED_CATEGORIES = ["Cardio", "Active Recovery"]

# Completed workouts considered for novelty/frequency/recency scoring.
RECENT_WORKOUT_WINDOW = 10

GLUTE_SET_TARGET = (12, 18)

SIGNAL_STATE_UPDATED = f"{DOMAIN}_state_updated"
