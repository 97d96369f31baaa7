from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

from .algorithms import ALGORITHMS
from .config import DEFAULT_QUANTUM
from .models import Algorithm, ComparisonEntry, Process, SchedulerOutput

logger = logging.getLogger(__name__)


def _run_one(algorithm: Algorithm, processes: Sequence[Process], quantum: int) -> SchedulerOutput:
    return ALGORITHMS[algorithm](processes, quantum=quantum)


def compare_algorithms(
    processes: Sequence[Process],
    quantum: int = DEFAULT_QUANTUM,
    parallel: bool = False,
    max_workers: Optional[int] = None,
) -> List[ComparisonEntry]:
    """
    Run every algorithm on the same workload and rank them by average
    turnaround time, best first.

    Solvers share no state, so with ``parallel`` they run on a thread pool.
    Either way all of them must finish before the ranking is built; the first
    failure is re-raised and no partial ranking is returned. Ties keep the
    enumeration order of ``Algorithm``.
    """
    algorithms = list(Algorithm)
    workload = tuple(processes)

    if parallel:
        with ThreadPoolExecutor(max_workers=max_workers or len(algorithms)) as pool:
            outputs = list(pool.map(lambda algorithm: _run_one(algorithm, workload, quantum), algorithms))
    else:
        outputs = [_run_one(algorithm, workload, quantum) for algorithm in algorithms]

    entries = [
        ComparisonEntry(
            algorithm=output.algorithm,
            average_turnaround_time=output.average_turnaround_time,
            average_waiting_time=output.average_waiting_time,
        )
        for output in outputs
    ]
    ranking = sorted(entries, key=lambda e: e.average_turnaround_time)

    logger.debug(
        "ranking (quantum=%d): %s",
        quantum,
        ", ".join(f"{e.algorithm.alias}={e.average_turnaround_time:.2f}" for e in ranking),
    )
    return ranking


def best_and_worst(ranking: Sequence[ComparisonEntry]) -> Tuple[ComparisonEntry, ComparisonEntry]:
    if not ranking:
        raise ValueError("Cannot pick best and worst from an empty ranking")
    return ranking[0], ranking[-1]
