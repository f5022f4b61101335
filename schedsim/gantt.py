from __future__ import annotations

from typing import Dict, List, Sequence

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ExecutionInterval

PALETTE = ["red", "green", "yellow", "blue", "magenta", "cyan"]


def color_for_names(timeline: Sequence[ExecutionInterval]) -> Dict[str, str]:
    """
    Assign palette colors per process name in order of first appearance.
    """
    colors: Dict[str, str] = {}
    for iv in timeline:
        if iv.name not in colors:
            colors[iv.name] = PALETTE[len(colors) % len(PALETTE)]
    return colors


def _place_mark(marks: str, t: int) -> str:
    # Last digit of t lands in column t, the slice boundary.
    text = str(t)
    pad = t - len(marks) - len(text) + 1
    return marks + " " * max(1, pad) + text


def time_marks_for(timeline: Sequence[ExecutionInterval]) -> str:
    marks = "0"
    clock = 0
    for iv in timeline:
        if iv.start > clock:
            marks = _place_mark(marks, iv.start)
        marks = _place_mark(marks, iv.end)
        clock = iv.end
    return marks


def _segments(timeline: Sequence[ExecutionInterval]):
    """
    Yield (interval or None, width) pairs covering the chart, None for idle gaps.
    """
    clock = 0
    for iv in timeline:
        if iv.start > clock:
            yield None, iv.start - clock
        yield iv, iv.duration
        clock = iv.end


def render_gantt(timeline: List[ExecutionInterval]) -> str:
    """
    Plain-text Gantt chart; idle gaps are drawn as dots.
    """
    if not timeline:
        return "(no execution)"

    timeline = sorted(timeline, key=lambda iv: iv.start)

    bars = ["|"]
    labels = [" "]
    for iv, width in _segments(timeline):
        if iv is None:
            bars.append("." * width)
            labels.append(" " * width)
        else:
            bars.append("=" * width)
            labels.append(iv.name[:width].ljust(width))
    bars.append("|")

    return "\n".join(["Gantt Chart:", "".join(bars), "".join(labels), time_marks_for(timeline)])


def build_rich_gantt(timeline: List[ExecutionInterval]) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.
    """
    if not timeline:
        return Panel("No execution", title="Gantt Chart"), ""

    timeline = sorted(timeline, key=lambda iv: iv.start)
    colors = color_for_names(timeline)

    bars = Text()
    labels = Text()
    for iv, width in _segments(timeline):
        if iv is None:
            bars.append(" " * width)
            labels.append(" " * width)
            continue
        bars.append(" " * width, style=f"on {colors[iv.name]}")
        labels.append(iv.name[:width].ljust(width), style="bold")

    grid = Table.grid(padding=(0, 0))
    grid.add_row(bars)
    grid.add_row(labels)

    return Panel.fit(grid, title="Gantt Chart"), time_marks_for(timeline)
