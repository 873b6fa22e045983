from __future__ import annotations

from typing import Dict, List

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import TimelineInterval


def interval_label(interval: TimelineInterval) -> str:
    return "idle" if interval.is_idle else f"P{interval.pid}"


def format_timeline(intervals: List[TimelineInterval]) -> str:
    """
    One-line textual Gantt chart, e.g. ``| P1 (0-5) | P2 (5-8) |``.
    """
    if not intervals:
        return "(no execution)"
    return "|" + "".join(
        f" {interval_label(i)} ({i.start_time}-{i.end_time}) |" for i in intervals
    )


def build_rich_gantt(intervals: List[TimelineInterval]) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.
    """
    if not intervals:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    colors = ["red", "green", "yellow", "blue", "magenta", "cyan"]
    pid_to_color: Dict[int, str] = {}

    def pid_color(pid: int) -> str:
        if pid not in pid_to_color:
            idx = len(pid_to_color) % len(colors)
            pid_to_color[pid] = colors[idx]
        return pid_to_color[pid]

    timeline = Text()
    labels = Text()
    time_marks = str(intervals[0].start_time)

    for interval in intervals:
        width = max(1, interval.duration)
        if interval.is_idle:
            timeline.append("." * width, style="dim")
            labels.append(" " * width)
        else:
            timeline.append(" " * width, style=f"on {pid_color(interval.pid)}")
            labels.append(interval_label(interval)[:width].ljust(width), style="bold")
        time_marks += f"{interval.end_time:>{max(3, width)}}"

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)

    panel = Panel.fit(table, title="Gantt Chart")
    return panel, time_marks
