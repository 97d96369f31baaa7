from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence, Tuple

from .models import Algorithm, DecisionEvent, GanttBlock, ProcessResult, SchedulerOutput, SystemMetrics

_DIGITS = re.compile(r"(\d+)")


def natural_key(pid: str) -> Tuple:
    """
    Sort key comparing digit runs numerically, so "P2" sorts before "P10".
    """
    parts = _DIGITS.split(pid)
    chunks = tuple(int(part) if idx % 2 else part.lower() for idx, part in enumerate(parts))
    return chunks, pid


def build_output(
    algorithm: Algorithm,
    quantum: Optional[int],
    results: Iterable[ProcessResult],
    gantt_chart: Sequence[GanttBlock],
    decision_log: Sequence[DecisionEvent] = (),
) -> SchedulerOutput:
    """
    Turn the raw, unordered per-process outcomes of a solver into the final
    output: averages, results sorted by id, and frozen chart and log.
    """
    ordered = sorted(results, key=lambda r: natural_key(r.pid))
    n = len(ordered)
    avg_turnaround = sum(r.turnaround_time for r in ordered) / n if n else 0.0
    avg_waiting = sum(r.waiting_time for r in ordered) / n if n else 0.0

    return SchedulerOutput(
        algorithm=algorithm,
        quantum=quantum,
        results=tuple(ordered),
        gantt_chart=tuple(gantt_chart),
        average_turnaround_time=avg_turnaround,
        average_waiting_time=avg_waiting,
        decision_log=tuple(decision_log),
    )


def compute_system_metrics(output: SchedulerOutput) -> SystemMetrics:
    """
    Compute throughput and CPU utilization from a finished schedule.

    Makespan runs from the first dispatch to the last completion.
    """
    if not output.results:
        return SystemMetrics(cpu_busy_time=0, makespan=0, throughput=0.0, cpu_utilization=0.0)

    makespan = max(r.end_time for r in output.results) - min(r.start_time for r in output.results)
    cpu_busy_time = sum(block.duration for block in output.gantt_chart)

    throughput = len(output.results) / makespan if makespan > 0 else 0.0
    cpu_utilization = cpu_busy_time / makespan if makespan > 0 else 0.0

    # A switch is any change of the running process between adjacent blocks.
    context_switches = sum(
        1 for prev, cur in zip(output.gantt_chart, output.gantt_chart[1:]) if prev.pid != cur.pid
    )

    return SystemMetrics(
        cpu_busy_time=cpu_busy_time,
        makespan=makespan,
        throughput=throughput,
        cpu_utilization=cpu_utilization,
        context_switches=context_switches,
    )


def summarize_process_metrics(results: List[ProcessResult]) -> dict:
    """
    Return averages of the key per-process metrics for quick comparison.
    """
    if not results:
        return {"avg_waiting": 0.0, "avg_turnaround": 0.0, "avg_response": 0.0}

    n = len(results)
    return {
        "avg_waiting": sum(r.waiting_time for r in results) / n,
        "avg_turnaround": sum(r.turnaround_time for r in results) / n,
        "avg_response": sum(r.response_time for r in results) / n,
    }
