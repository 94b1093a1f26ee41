"""Configuration constants.

Values here are protocol and compatibility constraints, not user settings.
For configurable values, see models.py.
"""

# =============================================================================
# Coverage Reports
# =============================================================================

DEFAULT_REPORT_PATH = "coverage/lcov.info"
"""Report location used when a tool call names none (relative to the working dir)."""

SUMMARY_DECIMALS = 1
"""Decimal places for line/branch percentages in summaries."""

DELTA_DECIMALS = 2
"""Decimal places for percentage-point deltas between two summaries."""

# =============================================================================
# Recording
# =============================================================================

STATE_DIR_NAME = ".covmcp"
"""Per-project state directory (config.yaml, recording/, server log)."""

DEFAULT_RECORDING_DIR = f"{STATE_DIR_NAME}/recording"
"""Where the single baseline snapshot lives."""

BASELINE_FILENAME = "baseline.json"

BASELINE_SCHEMA_VERSION = 1
"""Bumped whenever the on-disk baseline layout changes."""

# =============================================================================
# Protocol/Validation Constants
# =============================================================================

PORT_MIN = 0
PORT_MAX = 65535
"""Valid port range."""
