"""Centralized constants for pacecast.

All magic numbers and tunable defaults live here so every layer
imports from a single source of truth.
"""

# ---------- SRS ladder ----------
# Hours until the next review, indexed by stage (0 = Apprentice 1).
SRS_INTERVAL_HOURS = (4, 8, 23, 47, 167, 335, 719, 2879)
MASTERY_STAGE = 4  # Guru
STAGE_LABELS = ("Apprentice 1", "Apprentice 2", "Apprentice 3", "Apprentice 4")

# ---------- Review windows ----------
DEFAULT_REVIEW_WINDOWS = (9, 18)  # 9am and 6pm (24h clock)
WINDOW_SEARCH_DAYS = 14

# ---------- Curriculum ----------
CEILING_LEVEL = 60
RUN_RESET_MAX_LEVEL = 5  # A drop back to this level or below starts a new run
MIN_COMPLETED_LEVELS = 2
RECENT_WINDOW = 5

# ---------- Percentiles ----------
FAST_PERCENTILE = 0.25
SLOW_PERCENTILE = 0.75
LEVEL_UP_STRAGGLER_SHARE = 0.1  # Dependent items allowed below mastery at level-up

# ---------- Speedup decomposition ----------
AVG_MISTAKE_COST_HOURS = 20.5
EST_REVIEWS_PER_LEVEL = 100
BLEND_FACTOR = 0.4
LEECH_THRESHOLD = 4

# ---------- Data source ----------
API_URL = "https://api.wanikani.com/v2"
API_REVISION = "20170710"
REQUEST_TIMEOUT = 30.0

# ---------- Demo data ----------
DEMO_SEED = 42
DEMO_CURRENT_LEVEL = 32
DEMO_OUTCOME_ITEMS = 120
DEMO_BLOCKING_ITEMS = 12
