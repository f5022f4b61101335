from __future__ import annotations

from .models import SchedulingResult


def summarize(result: SchedulingResult) -> dict:
    """
    Return averages and CPU usage figures for a finished run.
    """
    n = len(result.waiting_time)
    avg_waiting = result.average_waiting_time
    avg_turnaround = sum(result.turnaround_time.values()) / n if n else 0.0

    total_time = result.timeline[-1].end if result.timeline else 0
    cpu_busy_time = sum(iv.end - iv.start for iv in result.timeline)
    cpu_utilization = cpu_busy_time / total_time if total_time > 0 else 0.0

    return {
        "avg_waiting": avg_waiting,
        "avg_turnaround": avg_turnaround,
        "total_time": total_time,
        "cpu_busy_time": cpu_busy_time,
        "cpu_utilization": cpu_utilization,
    }
