"""
Building blocks shared by the solvers: ready-set selection with the common
tie-break, idle advance, per-call bookkeeping of remaining work, and the
Gantt / decision-log builders.

Everything here is allocated per solver call; nothing is module-level state.
"""

from __future__ import annotations

from collections import deque
from typing import Callable, Deque, Dict, Iterable, List, Optional, Sequence, Tuple

from .models import Action, DecisionEvent, GanttBlock, Process, ProcessResult

SortKey = Callable[[Process], float]


def arrival_order(processes: Iterable[Process]) -> List[Process]:
    """Stable copy sorted by arrival time; equal arrivals keep input order."""
    return sorted(processes, key=lambda p: p.arrival_time)


def pick(ready: Sequence[Process], key: SortKey) -> Process:
    """
    Select the process minimizing ``key``; ties go to the earliest arrival and
    then to the first candidate in ``ready``.

    Max-policies pass a negated key.
    """
    return min(ready, key=lambda p: (key(p), p.arrival_time))


def response_ratio(p: Process, now: int) -> float:
    return (now - p.arrival_time + p.burst_time) / p.burst_time


class Ledger:
    """
    Remaining work, first dispatch and completion records for one run.
    """

    def __init__(self, processes: Sequence[Process]) -> None:
        self.processes = arrival_order(processes)
        self.remaining: Dict[str, int] = {p.pid: p.burst_time for p in processes}
        self.first_start: Dict[str, int] = {}
        self.results: List[ProcessResult] = []

    @property
    def done(self) -> bool:
        return len(self.results) == len(self.processes)

    def ready(self, now: int) -> List[Process]:
        return [p for p in self.processes if p.arrival_time <= now and self.remaining[p.pid] > 0]

    def next_arrival_after(self, now: int) -> Optional[int]:
        future = [p.arrival_time for p in self.processes if p.arrival_time > now and self.remaining[p.pid] > 0]
        return min(future) if future else None

    def run(self, p: Process, start: int, duration: int) -> bool:
        """
        Charge ``duration`` units of CPU to ``p`` starting at ``start``.

        Returns True when the process has no work left.
        """
        self.first_start.setdefault(p.pid, start)
        self.remaining[p.pid] -= duration
        return self.remaining[p.pid] == 0

    def finish(self, p: Process, end: int) -> ProcessResult:
        turnaround_time = end - p.arrival_time
        result = ProcessResult(
            pid=p.pid,
            arrival_time=p.arrival_time,
            burst_time=p.burst_time,
            priority=p.priority,
            start_time=self.first_start[p.pid],
            end_time=end,
            turnaround_time=turnaround_time,
            waiting_time=turnaround_time - p.burst_time,
        )
        self.results.append(result)
        return result


class ArrivalFeed:
    """
    Hands out processes once each, in arrival order, as the clock reaches
    their arrival time. Used by the queue-based policies to track which
    processes have already been admitted to a ready queue.
    """

    def __init__(self, processes: Sequence[Process]) -> None:
        self._pending: Deque[Process] = deque(arrival_order(processes))

    def admit(self, now: int) -> List[Process]:
        admitted = []
        while self._pending and self._pending[0].arrival_time <= now:
            admitted.append(self._pending.popleft())
        return admitted

    def admit_next(self) -> Process:
        """Admit the earliest pending process regardless of the clock."""
        return self._pending.popleft()


class GanttBuilder:
    def __init__(self) -> None:
        self._blocks: List[List] = []

    def add(self, pid: str, start: int, end: int) -> None:
        self._blocks.append([pid, start, end])

    def extend(self, pid: str, start: int, end: int) -> bool:
        """
        Grow the last block when it belongs to ``pid`` and ends at ``start``,
        otherwise open a new block. Returns True when a new block was opened.
        """
        if self._blocks and self._blocks[-1][0] == pid and self._blocks[-1][2] == start:
            self._blocks[-1][2] = end
            return False
        self.add(pid, start, end)
        return True

    def build(self) -> Tuple[GanttBlock, ...]:
        return tuple(GanttBlock(pid=pid, start_time=start, end_time=end) for pid, start, end in self._blocks)


class DecisionLog:
    def __init__(self) -> None:
        self._events: List[DecisionEvent] = []

    def record(self, time: int, pid: Optional[str], action: Action, rationale: str) -> None:
        self._events.append(DecisionEvent(time=time, pid=pid, action=action, rationale=rationale))

    def idle(self, start: int, until: int) -> None:
        self.record(start, None, Action.IDLE, f"no process ready until t={until}")

    def build(self) -> Tuple[DecisionEvent, ...]:
        return tuple(self._events)
