"""
Global configuration: input limits, simulation defaults and logging.
"""

import os

# === Workload limits ===
MAX_PROCESSES = 20
ARRIVAL_RANGE = (0, 100)
BURST_RANGE = (1, 100)
PRIORITY_RANGE = (0, 100)
QUANTUM_RANGE = (1, 20)
PID_PATTERN = r"^[A-Za-z0-9_-]+$"

# === Simulation defaults ===
DEFAULT_QUANTUM = 2
MLQ_SYSTEM_PRIORITY_MAX = 2  # priority <= this goes to the round-robin queue
MLFQ_LEVELS = 3

# === Random workload generation ===
RANDOM_COUNT_RANGE = (3, 6)
RANDOM_ARRIVAL_RANGE = (0, 7)
RANDOM_BURST_RANGE = (1, 8)
RANDOM_PRIORITY_RANGE = (1, 5)

# === Logging ===
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")
DEFAULT_LOG_LEVEL = "WARNING"


def log_level() -> str:
    """Level named by SCHEDSIM_LOG_LEVEL; unknown names fall back to WARNING."""
    level = os.environ.get("SCHEDSIM_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
    return level if level in LOG_LEVELS else DEFAULT_LOG_LEVEL
