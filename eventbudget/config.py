"""Configuration for the event budget planner.

Values are module-level constants with environment variable overrides.
Core functions accept them as parameters and only fall back to these
defaults, so calculations stay deterministic under test.
"""

import os
from pathlib import Path
from typing import Tuple

# Output directory for exported plans and reports
OUTPUT_DIR = Path(os.getenv("EVENTBUDGET_OUTPUT_DIR", "output"))

# Deadlines within this many days are "due soon"
DUE_SOON_DAYS = int(os.getenv("EVENTBUDGET_DUE_SOON_DAYS", "7"))

# Number of tasks shown in the upcoming deadlines list
UPCOMING_LIMIT = int(os.getenv("EVENTBUDGET_UPCOMING_LIMIT", "5"))

# First column of the calendar grid: "sunday" or "monday"
WEEK_START = os.getenv("EVENTBUDGET_WEEK_START", "sunday").strip().lower()

CURRENCY_SYMBOL = os.getenv("EVENTBUDGET_CURRENCY", "R$")

LOG_LEVEL = os.getenv("EVENTBUDGET_LOG_LEVEL", "WARNING").upper()

DEFAULT_CATEGORY = "Geral"

# Offered by the item form; categories are free text
SUGGESTED_CATEGORIES: Tuple[str, ...] = (
    "Espaço",
    "Comida",
    "Decoração",
    "Som/Luz",
    "Geral",
)

# Chart palette, assigned to categories round-robin
CATEGORY_COLOURS: Tuple[str, ...] = (
    "#4f46e5",
    "#8b5cf6",
    "#ec4899",
    "#f43f5e",
    "#f59e0b",
    "#10b981",
)
