import json
from pathlib import Path

import pytest

from schedsim import config
from schedsim.cli import build_parser, main


@pytest.fixture
def workload(tmp_path: Path) -> Path:
    path = tmp_path / "workload.json"
    path.write_text(json.dumps([
        {"id": "P1", "arrival_time": 0, "burst_time": 5, "priority": 2},
        {"id": "P2", "arrival_time": 2, "burst_time": 3, "priority": 1},
        {"id": "P3", "arrival_time": 4, "burst_time": 1, "priority": 3},
        {"id": "P4", "arrival_time": 6, "burst_time": 4, "priority": 2},
    ]))
    return path


def test_parser_defaults():
    args = build_parser().parse_args(["run", "-a", "rr", "-w", "x.json"])
    assert args.quantum == 2
    assert not args.log
    assert not args.verbose


def test_run_plain_with_log(workload, capsys):
    assert main(["run", "-a", "rr", "-w", str(workload), "--plain", "--log"]) == 0
    out = capsys.readouterr().out
    assert "Round Robin" in out
    assert "Gantt Chart:" in out
    assert "Decision log" in out
    assert "requeue" in out


def test_run_rich(workload, capsys):
    assert main(["run", "-a", "Priority (Preemptive)", "-w", str(workload)]) == 0
    out = capsys.readouterr().out
    assert "Per-process metrics" in out
    assert "6.50" in out


def test_compare(workload, capsys):
    assert main(["compare", "-w", str(workload), "--parallel"]) == 0
    out = capsys.readouterr().out
    assert "Algorithm comparison" in out
    assert out.index("SJF") < out.index("LRTF")


def test_generate_to_file(tmp_path: Path):
    target = tmp_path / "random.json"
    assert main(["generate", "-n", "4", "--seed", "3", "-o", str(target)]) == 0
    assert len(json.loads(target.read_text())) == 4


def test_generate_to_stdout(capsys):
    assert main(["generate", "--seed", "3"]) == 0
    assert '"id": "P1"' in capsys.readouterr().out


def test_unknown_algorithm_exit_code(workload, capsys):
    assert main(["run", "-a", "lottery", "-w", str(workload)]) == 2
    assert "Unknown or unimplemented algorithm" in capsys.readouterr().out


def test_quantum_out_of_range(workload, capsys):
    assert main(["compare", "-w", str(workload), "-q", "50"]) == 2
    assert "Quantum" in capsys.readouterr().out


def test_missing_workload_file(tmp_path: Path):
    assert main(["run", "-a", "fcfs", "-w", str(tmp_path / "nope.json")]) == 2


def test_compare_explains_winner_and_loser(workload, capsys):
    assert main(["compare", "-w", str(workload)]) == 0
    out = capsys.readouterr().out
    assert "Why SJF (Non-Preemptive) won" in out
    assert "Why LRTF (Preemptive) lost" in out
    assert "favouring long jobs" in out


def test_info_lists_every_algorithm(capsys):
    assert main(["info"]) == 0
    out = capsys.readouterr().out
    assert "Scheduling algorithms" in out
    for alias in ("fcfs", "hrrn", "mlfq"):
        assert alias in out


def test_info_single_algorithm(capsys):
    assert main(["info", "hrrn"]) == 0
    out = capsys.readouterr().out
    assert "HRRN" in out
    assert "Pros" in out
    assert "Cons" in out
    assert "Quantum" not in out


def test_info_unknown_algorithm(capsys):
    assert main(["info", "lottery"]) == 2
    assert "Unknown or unimplemented algorithm" in capsys.readouterr().out


def test_quantum_ignored_by_non_quantum_policy(workload, capsys):
    assert main(["run", "-a", "fcfs", "-w", str(workload), "-q", "50", "--plain"]) == 0
    assert "Quantum:" not in capsys.readouterr().out


def test_quantum_checked_for_round_robin(workload, capsys):
    assert main(["run", "-a", "rr", "-w", str(workload), "-q", "50"]) == 2
    assert "Quantum must be" in capsys.readouterr().out


def test_non_utf8_workload_exit_code(tmp_path: Path, capsys):
    path = tmp_path / "broken.csv"
    path.write_bytes(b"id,arrival_time,burst_time\nA\xff\xfe,0,3\n")
    assert main(["run", "-a", "fcfs", "-w", str(path)]) == 2
    assert "UTF-8" in capsys.readouterr().out


def test_unknown_log_level_falls_back(workload, monkeypatch, capsys):
    monkeypatch.setenv("SCHEDSIM_LOG_LEVEL", "chatty")
    assert main(["run", "-a", "fcfs", "-w", str(workload)]) == 0


@pytest.mark.parametrize("raw,level", [("debug", "DEBUG"), (" info ", "INFO"), ("chatty", "WARNING"), ("", "WARNING")])
def test_log_level_from_environment(monkeypatch, raw, level):
    monkeypatch.setenv("SCHEDSIM_LOG_LEVEL", raw)
    assert config.log_level() == level
