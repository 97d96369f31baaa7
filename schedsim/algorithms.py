from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque, Dict, List, Optional, Sequence, Union

from .config import DEFAULT_QUANTUM, MLFQ_LEVELS, MLQ_SYSTEM_PRIORITY_MAX
from .errors import InvalidInput, UnsupportedAlgorithm
from .metrics import build_output
from .models import Action, Algorithm, Process, SchedulerOutput
from .queues import ArrivalFeed, DecisionLog, GanttBuilder, Ledger, pick, response_ratio

logger = logging.getLogger(__name__)

Solver = Callable[..., SchedulerOutput]


def _finish(
    algorithm: Algorithm,
    quantum: Optional[int],
    ledger: Ledger,
    gantt: GanttBuilder,
    log: DecisionLog,
) -> SchedulerOutput:
    output = build_output(algorithm, quantum, ledger.results, gantt.build(), log.build())
    logger.debug(
        "%s: %d processes, %d blocks, avg turnaround %.2f",
        algorithm.value,
        len(output.results),
        len(output.gantt_chart),
        output.average_turnaround_time,
    )
    return output


def _require_quantum(algorithm: Algorithm, quantum: Optional[int]) -> int:
    if quantum is None or quantum < 1:
        raise InvalidInput(f"{algorithm.value} requires a positive quantum, got {quantum!r}")
    return quantum


def schedule_fcfs(processes: Sequence[Process], quantum: Optional[int] = None) -> SchedulerOutput:
    """
    First-Come First-Serve (non-preemptive) scheduling.
    """
    ledger = Ledger(processes)
    gantt = GanttBuilder()
    log = DecisionLog()

    time = 0
    for p in ledger.processes:
        if time < p.arrival_time:
            log.idle(time, p.arrival_time)
            time = p.arrival_time

        start_time = time
        end_time = start_time + p.burst_time

        log.record(start_time, p.pid, Action.DISPATCH, f"next in arrival order (arrived t={p.arrival_time})")
        gantt.add(p.pid, start_time, end_time)
        ledger.run(p, start_time, p.burst_time)
        ledger.finish(p, end_time)
        log.record(end_time, p.pid, Action.COMPLETE, "burst finished")

        time = end_time

    return _finish(Algorithm.FCFS, None, ledger, gantt, log)


def _run_to_completion(
    processes: Sequence[Process],
    algorithm: Algorithm,
    key: Callable[[Process, int], float],
    describe: Callable[[Process, int], str],
) -> SchedulerOutput:
    """
    Shared loop of the non-preemptive policies.

    At each decision point, among processes that have arrived and are not yet
    completed, run the one minimizing ``key(process, now)`` to completion.
    """
    ledger = Ledger(processes)
    gantt = GanttBuilder()
    log = DecisionLog()

    time = 0
    while not ledger.done:
        ready = ledger.ready(time)

        if not ready:
            # Nothing can change while idle, so jump to the next arrival.
            next_arrival = ledger.next_arrival_after(time)
            log.idle(time, next_arrival)
            time = next_arrival
            continue

        now = time
        p = pick(ready, lambda x: key(x, now))

        start_time = time
        end_time = start_time + p.burst_time

        log.record(start_time, p.pid, Action.DISPATCH, f"{describe(p, now)} among {len(ready)} ready")
        gantt.add(p.pid, start_time, end_time)
        ledger.run(p, start_time, p.burst_time)
        ledger.finish(p, end_time)
        log.record(end_time, p.pid, Action.COMPLETE, "burst finished")

        time = end_time

    return _finish(algorithm, None, ledger, gantt, log)


def schedule_sjf(processes: Sequence[Process], quantum: Optional[int] = None) -> SchedulerOutput:
    """
    Shortest Job First (non-preemptive): smallest burst time wins.
    """
    return _run_to_completion(
        processes,
        Algorithm.SJF,
        key=lambda p, now: p.burst_time,
        describe=lambda p, now: f"shortest burst {p.burst_time}",
    )


def schedule_priority_np(processes: Sequence[Process], quantum: Optional[int] = None) -> SchedulerOutput:
    """
    Static Priority scheduling (non-preemptive).

    Lower numeric priority value means higher priority.
    """
    return _run_to_completion(
        processes,
        Algorithm.PRIORITY_NP,
        key=lambda p, now: p.priority,
        describe=lambda p, now: f"highest priority {p.priority}",
    )


def schedule_ljf(processes: Sequence[Process], quantum: Optional[int] = None) -> SchedulerOutput:
    """
    Longest Job First (non-preemptive): largest burst time wins.
    """
    return _run_to_completion(
        processes,
        Algorithm.LJF,
        key=lambda p, now: -p.burst_time,
        describe=lambda p, now: f"longest burst {p.burst_time}",
    )


def schedule_hrrn(processes: Sequence[Process], quantum: Optional[int] = None) -> SchedulerOutput:
    """
    Highest Response Ratio Next.

    The ratio (wait + burst) / burst is recomputed from the current clock at
    every selection, so long-waiting jobs age their way to the front.
    """
    return _run_to_completion(
        processes,
        Algorithm.HRRN,
        key=lambda p, now: -response_ratio(p, now),
        describe=lambda p, now: f"highest response ratio {response_ratio(p, now):.2f}",
    )


def _preempt_every_unit(
    processes: Sequence[Process],
    algorithm: Algorithm,
    key: Callable[[Process, int], float],
    describe: Callable[[Process, int], str],
) -> SchedulerOutput:
    """
    Shared loop of the preemptive policies.

    The ready set is re-evaluated at every time unit with
    ``key(process, remaining)``; the winner runs for one unit. A tie never
    favors the running process.
    """
    ledger = Ledger(processes)
    gantt = GanttBuilder()
    log = DecisionLog()

    time = 0
    running: Optional[Process] = None
    while not ledger.done:
        ready = ledger.ready(time)

        if not ready:
            next_arrival = ledger.next_arrival_after(time)
            log.idle(time, next_arrival)
            time = next_arrival
            continue

        p = pick(ready, lambda x: key(x, ledger.remaining[x.pid]))

        if gantt.extend(p.pid, time, time + 1):
            if running is not None and ledger.remaining[running.pid] > 0:
                log.record(time, running.pid, Action.PREEMPT, f"{p.pid} takes over")
            log.record(time, p.pid, Action.DISPATCH, describe(p, ledger.remaining[p.pid]))
        running = p

        finished = ledger.run(p, time, 1)
        time += 1

        if finished:
            ledger.finish(p, time)
            log.record(time, p.pid, Action.COMPLETE, "burst finished")

    return _finish(algorithm, None, ledger, gantt, log)


def schedule_srtf(processes: Sequence[Process], quantum: Optional[int] = None) -> SchedulerOutput:
    """
    Shortest Remaining Time First (preemptive SJF).
    """
    return _preempt_every_unit(
        processes,
        Algorithm.SRTF,
        key=lambda p, remaining: remaining,
        describe=lambda p, remaining: f"shortest remaining time {remaining}",
    )


def schedule_priority_p(processes: Sequence[Process], quantum: Optional[int] = None) -> SchedulerOutput:
    return _preempt_every_unit(
        processes,
        Algorithm.PRIORITY_P,
        key=lambda p, remaining: p.priority,
        describe=lambda p, remaining: f"highest priority {p.priority}",
    )


def schedule_lrtf(processes: Sequence[Process], quantum: Optional[int] = None) -> SchedulerOutput:
    return _preempt_every_unit(
        processes,
        Algorithm.LRTF,
        key=lambda p, remaining: -remaining,
        describe=lambda p, remaining: f"longest remaining time {remaining}",
    )


def schedule_rr(processes: Sequence[Process], quantum: Optional[int] = DEFAULT_QUANTUM) -> SchedulerOutput:
    """
    Round Robin scheduling with a fixed time quantum.

    After each slice the processes that arrived meanwhile are enqueued first,
    and only then is the unfinished incumbent put back at the tail.
    """
    quantum = _require_quantum(Algorithm.ROUND_ROBIN, quantum)

    ledger = Ledger(processes)
    feed = ArrivalFeed(processes)
    gantt = GanttBuilder()
    log = DecisionLog()

    time = 0
    ready: Deque[Process] = deque(feed.admit(time))

    while not ledger.done:
        if not ready:
            # Jump to next arrival if CPU is idle
            nxt = feed.admit_next()
            log.idle(time, nxt.arrival_time)
            time = nxt.arrival_time
            ready.append(nxt)

        p = ready.popleft()
        run_time = min(quantum, ledger.remaining[p.pid])

        log.record(time, p.pid, Action.DISPATCH, f"head of ready queue, slice of {run_time}")
        gantt.add(p.pid, time, time + run_time)
        finished = ledger.run(p, time, run_time)
        time += run_time

        ready.extend(feed.admit(time))

        if finished:
            ledger.finish(p, time)
            log.record(time, p.pid, Action.COMPLETE, "burst finished")
        else:
            ready.append(p)
            log.record(time, p.pid, Action.REQUEUE, f"quantum expired, {ledger.remaining[p.pid]} left")

    return _finish(Algorithm.ROUND_ROBIN, quantum, ledger, gantt, log)


def schedule_mlq(processes: Sequence[Process], quantum: Optional[int] = DEFAULT_QUANTUM) -> SchedulerOutput:
    """
    Multilevel Queue with two static classes.

    - Priority <= MLQ_SYSTEM_PRIORITY_MAX: system queue, round robin.
    - Everything else: user queue, FCFS, served one unit at a time so that a
      system arrival takes the CPU at the next unit boundary. The user process
      keeps its place at the head of its queue until it finishes.
    """
    quantum = _require_quantum(Algorithm.MLQ, quantum)

    ledger = Ledger(processes)
    feed = ArrivalFeed(processes)
    gantt = GanttBuilder()
    log = DecisionLog()

    system_queue: Deque[Process] = deque()
    user_queue: Deque[Process] = deque()

    def classify(now: int) -> None:
        for p in feed.admit(now):
            if p.priority <= MLQ_SYSTEM_PRIORITY_MAX:
                system_queue.append(p)
            else:
                user_queue.append(p)

    time = 0
    previous: Optional[Process] = None
    while not ledger.done:
        classify(time)

        if system_queue:
            p = system_queue.popleft()
            if previous is not None and user_queue and previous is user_queue[0]:
                log.record(time, previous.pid, Action.PREEMPT, f"system queue process {p.pid} ready")
            run_time = min(quantum, ledger.remaining[p.pid])

            log.record(time, p.pid, Action.DISPATCH, f"system queue round robin, slice of {run_time}")
            gantt.add(p.pid, time, time + run_time)
            finished = ledger.run(p, time, run_time)
            time += run_time

            classify(time)

            if finished:
                ledger.finish(p, time)
                log.record(time, p.pid, Action.COMPLETE, "burst finished")
            else:
                system_queue.append(p)
                log.record(time, p.pid, Action.REQUEUE, f"quantum expired, {ledger.remaining[p.pid]} left")
        elif user_queue:
            p = user_queue[0]
            if previous is not p:
                log.record(time, p.pid, Action.DISPATCH, "system queue empty, user queue FCFS")

            gantt.add(p.pid, time, time + 1)
            finished = ledger.run(p, time, 1)
            time += 1

            if finished:
                user_queue.popleft()
                ledger.finish(p, time)
                log.record(time, p.pid, Action.COMPLETE, "burst finished")
        else:
            next_arrival = ledger.next_arrival_after(time)
            log.idle(time, next_arrival)
            time = next_arrival
            p = None

        previous = p

    return _finish(Algorithm.MLQ, quantum, ledger, gantt, log)


def schedule_mlfq(processes: Sequence[Process], quantum: Optional[int] = DEFAULT_QUANTUM) -> SchedulerOutput:
    """
    Multi-Level Feedback Queue with 3 levels.

    - New arrivals always enter the top queue (Q0).
    - Q0 is round robin with the quantum, Q1 with twice the quantum.
    - A process that uses its entire quantum without finishing is demoted one
      level. There is no promotion.
    - The bottom queue is FCFS, served one unit at a time from its head, so
      any new arrival in Q0 wins the next decision point.
    """
    quantum = _require_quantum(Algorithm.MLFQ, quantum)

    ledger = Ledger(processes)
    feed = ArrivalFeed(processes)
    gantt = GanttBuilder()
    log = DecisionLog()

    bottom = MLFQ_LEVELS - 1
    queues: List[Deque[Process]] = [deque() for _ in range(MLFQ_LEVELS)]
    quanta = [quantum * 2 ** level for level in range(bottom)]

    time = 0
    # Unfinished process that ran the previous unit at the bottom level.
    on_bottom: Optional[Process] = None
    while not ledger.done:
        queues[0].extend(feed.admit(time))

        # Pick highest-priority non-empty queue
        level = next((idx for idx, q in enumerate(queues) if q), None)
        if level is None:
            next_arrival = ledger.next_arrival_after(time)
            log.idle(time, next_arrival)
            time = next_arrival
            continue

        if level == bottom:
            p = queues[level][0]
            run_time = 1
            if on_bottom is not p:
                log.record(time, p.pid, Action.DISPATCH, f"Q{level} FCFS head")
        else:
            p = queues[level].popleft()
            if on_bottom is not None:
                log.record(time, on_bottom.pid, Action.PREEMPT, f"{p.pid} ready in Q{level}")
            run_time = min(quanta[level], ledger.remaining[p.pid])
            log.record(time, p.pid, Action.DISPATCH, f"Q{level} round robin, slice of {run_time}")

        gantt.add(p.pid, time, time + run_time)
        finished = ledger.run(p, time, run_time)
        time += run_time

        queues[0].extend(feed.admit(time))

        if finished:
            if level == bottom:
                queues[level].popleft()
            ledger.finish(p, time)
            log.record(time, p.pid, Action.COMPLETE, f"burst finished in Q{level}")
        elif level < bottom:
            queues[level + 1].append(p)
            log.record(time, p.pid, Action.DEMOTE, f"used full quantum of {run_time}, Q{level} -> Q{level + 1}")

        on_bottom = p if level == bottom and not finished else None

    return _finish(Algorithm.MLFQ, quantum, ledger, gantt, log)


ALGORITHMS: Dict[Algorithm, Solver] = {
    Algorithm.FCFS: schedule_fcfs,
    Algorithm.SJF: schedule_sjf,
    Algorithm.SRTF: schedule_srtf,
    Algorithm.PRIORITY_NP: schedule_priority_np,
    Algorithm.PRIORITY_P: schedule_priority_p,
    Algorithm.ROUND_ROBIN: schedule_rr,
    Algorithm.LJF: schedule_ljf,
    Algorithm.LRTF: schedule_lrtf,
    Algorithm.HRRN: schedule_hrrn,
    Algorithm.MLQ: schedule_mlq,
    Algorithm.MLFQ: schedule_mlfq,
}


def resolve_algorithm(name: Union[Algorithm, str]) -> Algorithm:
    """
    Map an Algorithm, its display name or its short alias to the Algorithm.
    """
    if isinstance(name, Algorithm):
        return name

    wanted = str(name).strip().lower()
    for algorithm in Algorithm:
        if wanted in (algorithm.alias, algorithm.value.lower()):
            return algorithm
    raise UnsupportedAlgorithm(name)


def run_algorithm(
    name: Union[Algorithm, str],
    processes: Sequence[Process],
    quantum: Optional[int] = DEFAULT_QUANTUM,
) -> SchedulerOutput:
    """
    Dispatch to the requested algorithm. Quantum is only consumed by
    Round Robin, MLQ and MLFQ.
    """
    algorithm = resolve_algorithm(name)
    func = ALGORITHMS[algorithm]
    return func(list(processes), quantum=quantum)
