"""Centralized constants for the mastery engine.

All magic numbers and configuration defaults live here so every layer
imports from a single source of truth.
"""

# ---------- XP Ledger ----------
XP_PER_LEVEL_BASE = 100  # T(L) = XP_PER_LEVEL_BASE * L * (L - 1) / 2

# ---------- Card Scheduler ----------
INITIAL_INTERVAL = 1  # days
DEFAULT_GROWTH_FACTOR = 2.0
DEFAULT_INTERVAL_CAP = 90  # days
DEFAULT_BASE_INTERVALS = {"easy": 4, "medium": 2, "hard": 1}

# ---------- Rewards ----------
DEFAULT_XP_REWARDS = {
    "task_complete": 10,
    "correct_review": 5,
    "incorrect_review": 0,
    "focus_session": 50,
}

# ---------- Stats ----------
MASTERED_INTERVAL_DAYS = 21
WEAK_ACCURACY_THRESHOLD = 60  # percent
RECENT_REVIEW_WINDOW = 10

# ---------- Achievements ----------
NIGHT_OWL_END_HOUR = 4  # 00:00 <= t < 04:00
EARLY_BIRD_END_HOUR = 7  # 04:00 <= t < 07:00

# ---------- Persistence ----------
STATE_SCHEMA_VERSION = 1
DEFAULT_STATE_KEY = "mastery_state"
