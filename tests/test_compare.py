import pytest

from schedsim.algorithms import ALGORITHMS, run_algorithm
from schedsim.compare import best_and_worst, compare_algorithms
from schedsim.models import Algorithm, Process
from schedsim.workload_io import generate_workload


def _procs():
    return [
        Process("P1", arrival_time=0, burst_time=5, priority=2),
        Process("P2", arrival_time=2, burst_time=3, priority=1),
        Process("P3", arrival_time=4, burst_time=1, priority=3),
        Process("P4", arrival_time=6, burst_time=4, priority=2),
    ]


def test_ranking_for_reference_workload():
    ranking = compare_algorithms(_procs(), quantum=2)
    assert [e.algorithm for e in ranking] == [
        Algorithm.SJF,
        Algorithm.SRTF,
        Algorithm.FCFS,
        Algorithm.HRRN,
        Algorithm.MLFQ,
        Algorithm.PRIORITY_NP,
        Algorithm.PRIORITY_P,
        Algorithm.LJF,
        Algorithm.ROUND_ROBIN,
        Algorithm.MLQ,
        Algorithm.LRTF,
    ]
    assert ranking[0].average_turnaround_time == 5.25
    assert ranking[-1].average_waiting_time == 5.25


@pytest.mark.parametrize("seed", range(5))
def test_ranking_matches_individual_runs(seed):
    procs = generate_workload(seed=seed)
    ranking = compare_algorithms(procs, quantum=3)
    expected = [(a, run_algorithm(a, procs, quantum=3).average_turnaround_time) for a in Algorithm]
    expected.sort(key=lambda pair: pair[1])
    assert [(e.algorithm, e.average_turnaround_time) for e in ranking] == expected


@pytest.mark.parametrize("seed", range(5))
def test_parallel_matches_sequential(seed):
    procs = generate_workload(seed=seed)
    sequential = compare_algorithms(procs, quantum=2)
    assert compare_algorithms(procs, quantum=2, parallel=True) == sequential
    assert compare_algorithms(procs, quantum=2, parallel=True, max_workers=2) == sequential


def test_ranking_is_repeatable():
    assert compare_algorithms(_procs()) == compare_algorithms(_procs())


@pytest.mark.parametrize("parallel", [False, True])
def test_one_failing_solver_aborts_the_comparison(monkeypatch, parallel):
    def broken(processes, quantum=None):
        raise RuntimeError("solver exploded")

    monkeypatch.setitem(ALGORITHMS, Algorithm.HRRN, broken)
    with pytest.raises(RuntimeError, match="solver exploded"):
        compare_algorithms(_procs(), parallel=parallel)


def test_best_and_worst():
    best, worst = best_and_worst(compare_algorithms(_procs()))
    assert best.algorithm is Algorithm.SJF
    assert worst.algorithm is Algorithm.LRTF
    with pytest.raises(ValueError):
        best_and_worst([])


def test_empty_workload_ties_keep_enumeration_order():
    ranking = compare_algorithms([])
    assert [e.algorithm for e in ranking] == list(Algorithm)
