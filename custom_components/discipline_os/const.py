"""Constants for Discipline OS integration."""

from __future__ import annotations

from homeassistant.const import Platform

DOMAIN = "discipline_os"

PLATFORMS: list[Platform] = [
    Platform.BUTTON,
    Platform.SENSOR,
]

CONF_NAME = "name"
CONF_TEMPLATE = "template"

TEMPLATE_DEFAULT = "Default"

DEFAULT_NAME = "Discipline OS"

# Bump when the stored layout changes; migration always lands on this version.
SCHEMA_VERSION = 8

STORAGE_VERSION = 1
EXPORT_FILENAME = "discipline_os_v7_backup.json"

THEME_CHOICES = ["dark", "light"]
GOAL_CHOICES = ["fat_loss", "endurance", "muscle", "general"]

DEFAULT_THEME = "dark"
DEFAULT_THRESHOLD = 6
THRESHOLD_MIN = 1
THRESHOLD_MAX = 50
WEIGHT_MIN = 50
WEIGHT_MAX = 600
# Months either side of today; keeps the month view inside the calendar range.
MONTH_OFFSET_LIMIT = 1200

DEFAULT_GOAL = "fat_loss"
DEFAULT_CURRENT_WEIGHT = 180
DEFAULT_GOAL_WEIGHT = 165
DEFAULT_DURATION_MINUTES = 25

DEFAULT_STATUS_LABELS = {
    "good": "🔥 LOCKED IN",
    "mid": "😐 SLIPPING",
    "bad": "🚨 BROKE DISCIPLINE",
}

DEFAULT_HABITS = [
    {"id": "h-workout", "name": "Workout", "enabled": True},
    {"id": "h-grind", "name": "Grind / Money", "enabled": True},
    {"id": "h-deep", "name": "Deep Work", "enabled": True},
    {"id": "h-sleep", "name": "Sleep ≥ 7h", "enabled": True},
    {"id": "h-noporn", "name": "No Porn", "enabled": True},
    {"id": "h-nomast", "name": "No Masturbation", "enabled": True},
]

DEFAULT_HABIT_NAME = "Habit"
WORKOUT_HABIT_NAME = "workout"

HABIT_TEMPLATES = [
    {
        "name": "Beginner",
        "threshold": 4,
        "habits": ["Workout", "Deep Work", "Sleep ≥ 7h", "No Porn", "Walk 20m", "Read 15m"],
    },
    {
        "name": "Standard",
        "threshold": 6,
        "habits": [
            "Workout",
            "Grind / Money",
            "Deep Work",
            "Sleep ≥ 7h",
            "No Porn",
            "No Masturbation",
            "Meditation",
        ],
    },
    {
        "name": "Hard Mode",
        "threshold": 7,
        "habits": [
            "Workout",
            "Grind / Money",
            "Deep Work",
            "Sleep ≥ 8h",
            "No Porn",
            "No Masturbation",
            "Cold Shower",
            "No Junk Food",
        ],
    },
]
