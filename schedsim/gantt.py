from __future__ import annotations

from typing import Dict, Sequence

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import GanttBlock

COLORS = ["blue", "green", "magenta", "yellow", "red", "cyan", "bright_blue", "bright_green"]


def _time_mark(time_marks: str, t: int) -> str:
    return time_marks + f"{t:>3}"


def render_gantt(blocks: Sequence[GanttBlock]) -> str:
    """
    Plain-text Gantt chart; idle gaps are drawn as dots.
    """
    if not blocks:
        return "(no execution)"

    line = "|"
    labels = " "
    time_marks = "0"
    last_time = 0

    for block in blocks:
        idle_gap = block.start_time - last_time
        if idle_gap > 0:
            line += "." * idle_gap
            labels += " " * idle_gap
            time_marks = _time_mark(time_marks, block.start_time)

        width = block.duration
        line += "=" * width
        labels += block.pid[:width].ljust(width)
        last_time = block.end_time
        time_marks = _time_mark(time_marks, last_time)

    line += "|"

    return "\n".join(
        [
            "Gantt Chart:",
            line,
            labels,
            time_marks,
        ]
    )


def build_rich_gantt(blocks: Sequence[GanttBlock]) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.
    """
    if not blocks:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    pid_to_color: Dict[str, str] = {}

    def pid_color(pid: str) -> str:
        if pid not in pid_to_color:
            idx = len(pid_to_color) % len(COLORS)
            pid_to_color[pid] = COLORS[idx]
        return pid_to_color[pid]

    timeline = Text()
    labels = Text()
    time_marks = "0"
    last_time = 0

    for block in blocks:
        idle_gap = block.start_time - last_time
        if idle_gap > 0:
            timeline.append("." * idle_gap, style="dim")
            labels.append(" " * idle_gap)
            time_marks = _time_mark(time_marks, block.start_time)

        width = block.duration
        color = pid_color(block.pid)

        timeline.append(" " * width, style=f"on {color}")
        labels.append(block.pid[:width].ljust(width), style="bold")

        last_time = block.end_time
        time_marks = _time_mark(time_marks, last_time)

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)

    panel = Panel.fit(table, title="Gantt Chart")
    return panel, time_marks
