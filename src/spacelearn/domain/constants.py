"""Centralized constants for SpaceLearn.

Scheduling thresholds and storage defaults live here so every layer
imports from a single source of truth.
"""

# ---------- Interval ladder ----------
INTERVALS = (1, 3, 7, 14, 30, 60)  # days since creation, indexed by step
MAX_STEP = len(INTERVALS) - 1

# ---------- Labels ----------
LABEL_WIDTH = 4  # "#0007"

# ---------- Storage ----------
DEFAULT_SUPABASE_TABLE = "revisoes"
REQUEST_TIMEOUT = 10.0
JSON_INDENT = 2
