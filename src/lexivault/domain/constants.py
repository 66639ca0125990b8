"""Centralized constants for lexivault.

Scheduling intervals and engagement thresholds live here so every layer
imports from a single source of truth.
"""

from datetime import timedelta

# ---------- Scheduling ----------
NEW_INTERVAL = timedelta(days=1)
LEARNING_INTERVAL = timedelta(days=3)
MASTERED_INTERVAL = timedelta(days=10)
FORGOT_INTERVAL = timedelta(minutes=10)

FAST_MASTERY_WINDOW = timedelta(days=3)

# ---------- Daily Mission ----------
MISSION_MIN_SIZE = 3
MISSION_RATIO = 0.2

# ---------- Recovery Quiz ----------
DISTRACTOR_COUNT = 3

# ---------- Persistence ----------
ITEMS_FILE = "items.json"
STATS_FILE = "stats.json"
HISTORY_FILE = "history.json"
COLLECTIONS_FILE = "collections.json"
