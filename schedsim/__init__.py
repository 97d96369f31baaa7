"""
schedsim: a discrete-time CPU scheduling simulator.

Runs eleven scheduling policies over a workload of processes and reports
per-process metrics, a Gantt chart, averages and a decision log.
"""

from .algorithms import ALGORITHMS, run_algorithm
from .compare import compare_algorithms
from .errors import InvalidInput, SchedulerError, UnsupportedAlgorithm
from .models import Algorithm, GanttBlock, Process, ProcessResult, SchedulerOutput

__all__ = [
    "ALGORITHMS",
    "Algorithm",
    "GanttBlock",
    "InvalidInput",
    "Process",
    "ProcessResult",
    "SchedulerError",
    "SchedulerOutput",
    "UnsupportedAlgorithm",
    "compare_algorithms",
    "run_algorithm",
]
