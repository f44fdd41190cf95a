"""Static constants for the gym CLI."""

from __future__ import annotations

MAX_WEIGHT = 300.0
HISTORY_LIMIT = 50

MIN_TARGET_SETS = 1
MAX_TARGET_SETS = 12
DEFAULT_TARGET_SETS = 3

DEFAULT_START_WEIGHT = 20.0
DEFAULT_WEIGHT_STEP = 2.5

DEFAULT_REST_SECONDS = 90
DEFAULT_REST_INCREMENT = 30

PLANS_SLOT = "plans"
HISTORY_SLOT = "history"
ACTIVE_SLOT = "active"

EXPORT_FORMATS = ("json", "markdown", "csv")
