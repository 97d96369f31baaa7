from __future__ import annotations

import csv
import json
import logging
import random
import re
from dataclasses import asdict
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from . import config
from .errors import InvalidInput
from .models import Process

logger = logging.getLogger(__name__)

_PID = re.compile(config.PID_PATTERN)


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a validated list of Process
    objects.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        processes = _load_json(path)
    elif suffix == ".csv":
        processes = _load_csv(path)
    else:
        raise InvalidInput(f"Unsupported workload format: {suffix} (use .json or .csv)")

    validate_processes(processes)
    logger.info("loaded %d processes from %s", len(processes), path)
    return processes


def save_workload(processes: Sequence[Process], path: str | Path) -> Path:
    path = Path(path)
    with path.open("w", encoding="utf-8") as f:
        json.dump(workload_to_json(processes), f, indent=2)
        f.write("\n")
    return path


def workload_to_json(processes: Iterable[Process]) -> list:
    return [{"id" if k == "pid" else k: v for k, v in asdict(p).items()} for p in processes]


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8-sig") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise InvalidInput(f"{path} is not valid JSON: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise InvalidInput(f"{path} is not UTF-8 text: {exc}") from exc

    if not isinstance(raw, list):
        raise InvalidInput("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry) for entry in raw]


def _load_csv(path: Path) -> List[Process]:
    processes: List[Process] = []
    # utf-8-sig drops the byte order mark spreadsheet exports put in front of the header
    with path.open("r", encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        try:
            for row in reader:
                processes.append(_process_from_mapping(row))
        except UnicodeDecodeError as exc:
            raise InvalidInput(f"{path} is not UTF-8 text: {exc}") from exc
    return processes


def _as_int(value) -> int:
    """
    Whole numbers only: JSON booleans and fractional values are rejected
    rather than truncated.
    """
    if isinstance(value, bool):
        raise TypeError(f"expected an integer, got {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"expected an integer, got {value!r}")
        return int(value)
    if isinstance(value, str):
        return int(value.strip())
    if isinstance(value, int):
        return value
    raise TypeError(f"expected an integer, got {value!r}")


def _process_from_mapping(mapping) -> Process:
    try:
        pid = mapping["id"] if "id" in mapping else mapping["pid"]
        pid = str(pid).strip()
        arrival_time = _as_int(mapping["arrival_time"])
        burst_time = _as_int(mapping["burst_time"])
        priority_val = mapping.get("priority")
        priority = _as_int(priority_val) if priority_val not in (None, "") else 0
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise InvalidInput(f"Invalid process entry: {mapping!r}") from exc

    return Process(
        pid=pid,
        arrival_time=arrival_time,
        burst_time=burst_time,
        priority=priority,
    )


def _check_range(p: Process, field: str, bounds: Tuple[int, int]) -> None:
    value = getattr(p, field)
    low, high = bounds
    if not low <= value <= high:
        raise InvalidInput(f"{p.pid}: {field} must be between {low} and {high}, got {value}")


def validate_processes(processes: Sequence[Process]) -> None:
    """
    Reject workloads the simulator does not accept: empty or oversized lists,
    malformed or duplicate ids, and out-of-range numeric fields.
    """
    if not processes:
        raise InvalidInput("Workload must contain at least one process")
    if len(processes) > config.MAX_PROCESSES:
        raise InvalidInput(f"Workload has {len(processes)} processes, the limit is {config.MAX_PROCESSES}")

    seen: set[str] = set()
    for p in processes:
        if not _PID.fullmatch(p.pid):
            raise InvalidInput(f"Invalid process id {p.pid!r}: use letters, digits, '_' or '-'")
        if p.pid in seen:
            raise InvalidInput(f"Duplicate process id {p.pid!r}")
        seen.add(p.pid)

        _check_range(p, "arrival_time", config.ARRIVAL_RANGE)
        _check_range(p, "burst_time", config.BURST_RANGE)
        _check_range(p, "priority", config.PRIORITY_RANGE)


def validate_quantum(quantum: int) -> int:
    low, high = config.QUANTUM_RANGE
    if not isinstance(quantum, int) or not low <= quantum <= high:
        raise InvalidInput(f"Quantum must be an integer between {low} and {high}, got {quantum!r}")
    return quantum


def generate_workload(count: Optional[int] = None, seed: Optional[int] = None) -> List[Process]:
    """
    Build a random workload for experiments. The same seed always yields the
    same workload.
    """
    rng = random.Random(seed)
    if count is None:
        count = rng.randint(*config.RANDOM_COUNT_RANGE)
    if not 1 <= count <= config.MAX_PROCESSES:
        raise InvalidInput(f"Process count must be between 1 and {config.MAX_PROCESSES}, got {count}")

    processes = [
        Process(
            pid=f"P{i + 1}",
            arrival_time=rng.randint(*config.RANDOM_ARRIVAL_RANGE),
            burst_time=rng.randint(*config.RANDOM_BURST_RANGE),
            priority=rng.randint(*config.RANDOM_PRIORITY_RANGE),
        )
        for i in range(count)
    ]
    logger.info("generated %d processes (seed=%s)", count, seed)
    return processes
