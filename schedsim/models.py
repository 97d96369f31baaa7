from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


@dataclass(frozen=True)
class Process:
    pid: str
    arrival_time: int
    burst_time: int
    priority: int = 0


@dataclass(frozen=True)
class GanttBlock:
    """
    One contiguous slice of execution for a process in the Gantt chart.

    Idle CPU time is never a block; it shows up as a gap between the end of
    one block and the start of the next.
    """

    pid: str
    start_time: int
    end_time: int

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time


@dataclass(frozen=True)
class ProcessResult:
    pid: str
    arrival_time: int
    burst_time: int
    priority: int
    start_time: int
    end_time: int
    turnaround_time: int
    waiting_time: int

    @property
    def response_time(self) -> int:
        return self.start_time - self.arrival_time


class Action(str, Enum):
    IDLE = "idle"
    DISPATCH = "dispatch"
    PREEMPT = "preempt"
    REQUEUE = "requeue"
    DEMOTE = "demote"
    COMPLETE = "complete"


@dataclass(frozen=True)
class DecisionEvent:
    """
    One entry of the decision log: what the scheduler did at ``time`` and why.

    ``pid`` is None for idle periods.
    """

    time: int
    pid: Optional[str]
    action: Action
    rationale: str


class Algorithm(str, Enum):
    FCFS = "FCFS"
    SJF = "SJF (Non-Preemptive)"
    SRTF = "SRTF (Preemptive)"
    PRIORITY_NP = "Priority (Non-Preemptive)"
    PRIORITY_P = "Priority (Preemptive)"
    ROUND_ROBIN = "Round Robin"
    LJF = "LJF (Non-Preemptive)"
    LRTF = "LRTF (Preemptive)"
    HRRN = "HRRN"
    MLQ = "Multilevel Queue"
    MLFQ = "Multilevel Feedback Queue (MLFQ)"

    @property
    def alias(self) -> str:
        return _ALIASES[self]

    @property
    def uses_quantum(self) -> bool:
        return self in (Algorithm.ROUND_ROBIN, Algorithm.MLQ, Algorithm.MLFQ)


_ALIASES = {
    Algorithm.FCFS: "fcfs",
    Algorithm.SJF: "sjf",
    Algorithm.SRTF: "srtf",
    Algorithm.PRIORITY_NP: "priority-np",
    Algorithm.PRIORITY_P: "priority-p",
    Algorithm.ROUND_ROBIN: "rr",
    Algorithm.LJF: "ljf",
    Algorithm.LRTF: "lrtf",
    Algorithm.HRRN: "hrrn",
    Algorithm.MLQ: "mlq",
    Algorithm.MLFQ: "mlfq",
}


@dataclass(frozen=True)
class SchedulerOutput:
    algorithm: Algorithm
    quantum: Optional[int]
    results: Tuple[ProcessResult, ...] = ()
    gantt_chart: Tuple[GanttBlock, ...] = ()
    average_turnaround_time: float = 0.0
    average_waiting_time: float = 0.0
    decision_log: Tuple[DecisionEvent, ...] = ()


@dataclass(frozen=True)
class ComparisonEntry:
    algorithm: Algorithm
    average_turnaround_time: float
    average_waiting_time: float


@dataclass
class SystemMetrics:
    cpu_busy_time: int
    makespan: int
    throughput: float
    cpu_utilization: float
    context_switches: int = 0
