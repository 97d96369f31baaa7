"""
Invariants every policy must hold on arbitrary workloads.
"""

from collections import defaultdict

import pytest

from schedsim.algorithms import run_algorithm
from schedsim.models import Action, Algorithm, Process
from schedsim.workload_io import generate_workload

WORKLOADS = [generate_workload(seed=seed) for seed in range(25)] + [
    generate_workload(count=20, seed=99),
    [
        Process("P1", 0, 5, 2),
        Process("P2", 2, 3, 1),
        Process("P3", 4, 1, 3),
        Process("P4", 6, 4, 2),
    ],
    [Process("gap", 40, 3, 0), Process("late-1", 90, 7, 4), Process("late_2", 90, 7, 4)],
]

CASES = [(algorithm, workload) for algorithm in Algorithm for workload in WORKLOADS]


def _ids(case):
    return case.alias if isinstance(case, Algorithm) else None


@pytest.fixture(params=[1, 2, 5])
def quantum(request):
    return request.param


@pytest.mark.parametrize("algorithm,workload", CASES, ids=_ids)
def test_result_formulas(algorithm, workload, quantum):
    res = run_algorithm(algorithm, workload, quantum=quantum)
    assert len(res.results) == len(workload)
    for r in res.results:
        assert r.turnaround_time == r.end_time - r.arrival_time
        assert r.waiting_time == r.turnaround_time - r.burst_time
        assert r.waiting_time >= 0
        assert r.end_time >= r.start_time >= r.arrival_time


@pytest.mark.parametrize("algorithm,workload", CASES, ids=_ids)
def test_gantt_conserves_burst_and_never_overlaps(algorithm, workload, quantum):
    res = run_algorithm(algorithm, workload, quantum=quantum)

    ran = defaultdict(int)
    for block in res.gantt_chart:
        assert block.end_time > block.start_time
        ran[block.pid] += block.duration
    assert dict(ran) == {p.pid: p.burst_time for p in workload}

    for prev, cur in zip(res.gantt_chart, res.gantt_chart[1:]):
        assert prev.end_time <= cur.start_time

    by_pid = {r.pid: r for r in res.results}
    for pid in ran:
        blocks = [b for b in res.gantt_chart if b.pid == pid]
        assert blocks[0].start_time == by_pid[pid].start_time
        assert blocks[-1].end_time == by_pid[pid].end_time


@pytest.mark.parametrize("algorithm,workload", CASES, ids=_ids)
def test_pure_and_repeatable(algorithm, workload, quantum):
    snapshot = list(workload)
    first = run_algorithm(algorithm, workload, quantum=quantum)
    second = run_algorithm(algorithm, workload, quantum=quantum)
    assert first == second
    assert workload == snapshot


@pytest.mark.parametrize("algorithm,workload", CASES, ids=_ids)
def test_decision_log_is_chronological(algorithm, workload, quantum):
    res = run_algorithm(algorithm, workload, quantum=quantum)
    times = [e.time for e in res.decision_log]
    assert times == sorted(times)
    completed = [e.pid for e in res.decision_log if e.action is Action.COMPLETE]
    assert sorted(completed) == sorted(p.pid for p in workload)


@pytest.mark.parametrize("workload", WORKLOADS)
def test_mlfq_jobs_within_quantum_never_demoted(workload):
    quantum = 4
    res = run_algorithm(Algorithm.MLFQ, workload, quantum=quantum)
    demoted = {e.pid for e in res.decision_log if e.action is Action.DEMOTE}
    for p in workload:
        if p.burst_time <= quantum:
            assert p.pid not in demoted
            assert [b.pid for b in res.gantt_chart].count(p.pid) == 1
