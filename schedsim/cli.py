from __future__ import annotations

import argparse
import json
import logging
import time
from pathlib import Path
from typing import Sequence

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import config
from .algorithms import resolve_algorithm, run_algorithm
from .compare import best_and_worst, compare_algorithms
from .errors import SchedulerError
from .gantt import build_rich_gantt, render_gantt
from .guide import GUIDES, comparison_analysis, guide_for
from .metrics import compute_system_metrics, summarize_process_metrics
from .models import Algorithm, ComparisonEntry, SchedulerOutput
from .workload_io import generate_workload, load_workload, save_workload, validate_quantum, workload_to_json

logger = logging.getLogger(__name__)

ALIASES = [algorithm.alias for algorithm in Algorithm]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="Discrete-time CPU scheduling simulator (FCFS, SJF, SRTF, Priority, RR, LJF, LRTF, HRRN, MLQ, MLFQ).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload file.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help=f"Algorithm to use ({', '.join(ALIASES)}).",
    )
    run_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=config.DEFAULT_QUANTUM,
        help=f"Time quantum for rr / mlq / mlfq (default: {config.DEFAULT_QUANTUM}).",
    )
    run_parser.add_argument(
        "--log",
        action="store_true",
        help="Print the scheduler's decision log.",
    )
    run_parser.add_argument(
        "--plain",
        action="store_true",
        help="Draw the Gantt chart as plain text.",
    )
    run_parser.add_argument(
        "--step",
        action="store_true",
        help="Show a simple time-stepped simulation in the terminal.",
    )
    run_parser.add_argument(
        "--step-delay",
        type=float,
        default=0.3,
        help="Seconds to wait between steps when --step is used (default: 0.3).",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run every algorithm on the same workload and rank them by average turnaround.",
    )
    compare_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=config.DEFAULT_QUANTUM,
        help=f"Time quantum used for rr / mlq / mlfq (default: {config.DEFAULT_QUANTUM}).",
    )
    compare_parser.add_argument(
        "--parallel",
        action="store_true",
        help="Run the algorithms concurrently on a thread pool.",
    )

    generate_parser = subparsers.add_parser("generate", help="Generate a random workload.")
    generate_parser.add_argument(
        "--count",
        "-n",
        type=int,
        default=None,
        help="Number of processes (default: random between 3 and 6).",
    )
    generate_parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for a reproducible workload.",
    )
    generate_parser.add_argument(
        "--output",
        "-o",
        default=None,
        help="Write the workload to this JSON file instead of stdout.",
    )

    info_parser = subparsers.add_parser("info", help="Describe a scheduling algorithm, or list them all.")
    info_parser.add_argument(
        "algorithm",
        nargs="?",
        default=None,
        help=f"Algorithm to describe ({', '.join(ALIASES)}).",
    )

    return parser


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else config.log_level()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


def _print_result(result: SchedulerOutput, console: Console, plain: bool = False) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm.value}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()

    if plain:
        console.print(render_gantt(result.gantt_chart), highlight=False, markup=False)
    else:
        panel, time_marks = build_rich_gantt(result.gantt_chart)
        console.print(panel)
        if time_marks:
            console.print(time_marks)

    console.print()

    headers = [
        "PID",
        "Arrive",
        "Burst",
        "Priority",
        "Start",
        "End",
        "Wait",
        "Turnaround",
        "Response",
    ]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h in {"PID", "Priority"} else "right"
        proc_table.add_column(h, justify=justify)

    for r in result.results:
        proc_table.add_row(
            r.pid,
            str(r.arrival_time),
            str(r.burst_time),
            str(r.priority),
            str(r.start_time),
            str(r.end_time),
            str(r.waiting_time),
            str(r.turnaround_time),
            str(r.response_time),
        )

    console.print(proc_table)
    console.print()

    summary = summarize_process_metrics(list(result.results))
    system = compute_system_metrics(result)

    sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Avg waiting", f"{result.average_waiting_time:.2f}")
    sys_table.add_row("Avg turnaround", f"{result.average_turnaround_time:.2f}")
    sys_table.add_row("Avg response", f"{summary['avg_response']:.2f}")
    sys_table.add_row("Makespan", str(system.makespan))
    sys_table.add_row("Throughput (proc/time)", f"{system.throughput:.3f}")
    sys_table.add_row("CPU utilization", f"{system.cpu_utilization*100:.1f}%")
    sys_table.add_row("Context switches", str(system.context_switches))

    console.print(sys_table)


def _print_decisions(result: SchedulerOutput, console: Console) -> None:
    table = Table(title="Decision log", box=box.SIMPLE_HEAVY)
    table.add_column("Time", justify="right")
    table.add_column("Process", justify="center")
    table.add_column("Action")
    table.add_column("Why")

    for event in result.decision_log:
        table.add_row(str(event.time), event.pid or "-", event.action.value, event.rationale)

    console.print(table)


def _print_ranking(ranking: Sequence[ComparisonEntry], quantum: int, console: Console) -> None:
    best, worst = best_and_worst(ranking)

    table = Table(title=f"Algorithm comparison (quantum {quantum})", box=box.SIMPLE_HEAVY)
    table.add_column("Rank", justify="right")
    table.add_column("Algorithm")
    table.add_column("Avg turnaround", justify="right")
    table.add_column("Avg waiting", justify="right")

    for rank, entry in enumerate(ranking, start=1):
        style = "green" if entry is best else "red" if entry is worst else None
        table.add_row(
            str(rank),
            entry.algorithm.value,
            f"{entry.average_turnaround_time:.2f}",
            f"{entry.average_waiting_time:.2f}",
            style=style,
        )

    console.print(table)

    winner_text, loser_text = comparison_analysis(best, worst)
    console.print()
    console.print(f"[bold green]Why {best.algorithm.value} won:[/bold green] {winner_text}")
    console.print(f"[bold red]Why {worst.algorithm.value} lost:[/bold red] {loser_text}")


def _animate_result(result: SchedulerOutput, delay: float, console: Console) -> None:
    """
    Simple time-stepped textual simulation using the computed schedule.
    """
    blocks = result.gantt_chart
    if not blocks:
        console.print("[red]No execution to animate.[/red]")
        return

    makespan = blocks[-1].end_time
    console.print(f"[bold]Simulating {result.algorithm.value}[/bold] (duration {makespan} time units)")
    console.print("[dim]Press Ctrl+C to skip animation.[/dim]")

    for t in range(makespan):
        running = next((b for b in blocks if b.start_time <= t < b.end_time), None)
        if running is None:
            console.print(f"t={t:2d}: [dim]idle[/dim]")
        else:
            bar = "█" * (t - running.start_time + 1)
            console.print(f"t={t:2d}: {running.pid} [green]{bar}[/green]")
        time.sleep(delay)


def _command_run(args: argparse.Namespace, console: Console) -> int:
    algorithm = resolve_algorithm(args.algorithm)
    processes = load_workload(Path(args.workload))
    if algorithm.uses_quantum:
        validate_quantum(args.quantum)
    result = run_algorithm(algorithm, processes, quantum=args.quantum)

    if args.step:
        try:
            _animate_result(result, delay=args.step_delay, console=console)
        except KeyboardInterrupt:
            console.print("[yellow]Animation skipped.[/yellow]")

    _print_result(result, console, plain=args.plain)
    if args.log:
        console.print()
        _print_decisions(result, console)
    return 0


def _command_compare(args: argparse.Namespace, console: Console) -> int:
    processes = load_workload(Path(args.workload))
    validate_quantum(args.quantum)
    ranking = compare_algorithms(processes, quantum=args.quantum, parallel=args.parallel)
    _print_ranking(ranking, args.quantum, console)
    return 0


def _command_generate(args: argparse.Namespace, console: Console) -> int:
    processes = generate_workload(count=args.count, seed=args.seed)
    if args.output:
        path = save_workload(processes, args.output)
        console.print(f"Wrote {len(processes)} processes to [green]{path}[/green]")
    else:
        console.print_json(json.dumps(workload_to_json(processes)))
    return 0


def _command_info(args: argparse.Namespace, console: Console) -> int:
    if args.algorithm is None:
        table = Table(title="Scheduling algorithms", box=box.SIMPLE_HEAVY)
        table.add_column("Alias")
        table.add_column("Algorithm")
        table.add_column("Basis")
        for algorithm, guide in GUIDES.items():
            table.add_row(algorithm.alias, algorithm.value, guide.basis)
        console.print(table)
        return 0

    algorithm = resolve_algorithm(args.algorithm)
    guide = guide_for(algorithm)
    console.print(f"[bold]{algorithm.value}[/bold] ({algorithm.alias})")
    console.print(guide.description)
    console.print(f"[bold]Basis:[/bold] {guide.basis}")
    console.print(f"[bold]Example:[/bold] {guide.example}")
    if algorithm.uses_quantum:
        console.print(f"[bold]Quantum:[/bold] yes (default {config.DEFAULT_QUANTUM})")
    console.print("[bold green]Pros[/bold green]")
    for item in guide.pros:
        console.print(f"  + {item}")
    console.print("[bold red]Cons[/bold red]")
    for item in guide.cons:
        console.print(f"  - {item}")
    return 0


COMMANDS = {
    "run": _command_run,
    "compare": _command_compare,
    "generate": _command_generate,
    "info": _command_info,
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    console = Console()

    try:
        return COMMANDS[args.command](args, console)
    except (SchedulerError, OSError) as exc:
        logger.debug("command %s failed", args.command, exc_info=True)
        console.print(f"[red]Error: {exc}[/red]")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
