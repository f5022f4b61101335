from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, List, Optional, Sequence, Set

from .models import (
    ExecutionInterval,
    InvalidInput,
    ProcessSpec,
    SchedulingResult,
    display_group,
)


@dataclass
class _Pending:
    """
    Private per-run copy of a process carrying its remaining work.
    """

    pid: str
    name: str
    arrival: int
    remaining: int


def _validate(processes: Sequence[ProcessSpec]) -> None:
    if not processes:
        raise InvalidInput("At least one process is required")

    seen: Set[str] = set()
    for p in processes:
        if p.burst <= 0:
            raise InvalidInput(f"Process {p.pid} has non-positive burst time {p.burst}")
        if p.arrival < 0:
            raise InvalidInput(f"Process {p.pid} has negative arrival time {p.arrival}")
        if p.pid in seen:
            raise InvalidInput(f"Duplicate process id {p.pid}")
        seen.add(p.pid)


def _interval(pid: str, name: str, start: int, end: int) -> ExecutionInterval:
    return ExecutionInterval(pid=pid, name=name, start=start, end=end, display_group=display_group(pid))


def _finish(
    algorithm: str,
    quantum: Optional[int],
    processes: Sequence[ProcessSpec],
    timeline: List[ExecutionInterval],
    waiting: Dict[str, int],
    turnaround: Dict[str, int],
) -> SchedulingResult:
    average = sum(waiting.values()) / len(processes)
    return SchedulingResult(
        algorithm=algorithm,
        quantum=quantum,
        timeline=timeline,
        waiting_time=waiting,
        turnaround_time=turnaround,
        average_waiting_time=average,
    )


def fcfs(processes: Sequence[ProcessSpec], quantum: Optional[int] = None) -> SchedulingResult:
    """
    First-Come First-Serve (non-preemptive).

    Processes run in submission order; arrival times are not consulted, so
    waiting time is the start time and turnaround is the completion time.
    """
    _validate(processes)

    time = 0
    timeline: List[ExecutionInterval] = []
    waiting: Dict[str, int] = {}
    turnaround: Dict[str, int] = {}

    for p in processes:
        start = time
        end = start + p.burst

        timeline.append(_interval(p.pid, p.name, start, end))
        waiting[p.pid] = start
        turnaround[p.pid] = end

        time = end

    return _finish("FCFS", None, processes, timeline, waiting, turnaround)


def round_robin(processes: Sequence[ProcessSpec], quantum: Optional[int] = None) -> SchedulingResult:
    """
    Round Robin with a fixed time quantum and staggered arrivals.

    Turnaround is the completion time measured from zero, and every process
    waiting in the ready queue is charged the full length of each slice.
    """
    if quantum is None or quantum <= 0:
        raise InvalidInput("Round Robin requires a positive quantum")
    _validate(processes)

    pending = [_Pending(pid=p.pid, name=p.name, arrival=p.arrival, remaining=p.burst) for p in processes]

    time = 0
    timeline: List[ExecutionInterval] = []
    waiting: Dict[str, int] = {p.pid: 0 for p in pending}
    turnaround: Dict[str, int] = {}

    ready: Deque[_Pending] = deque()
    queued: Set[str] = set()

    def admit(running: Optional[_Pending] = None) -> None:
        for p in pending:
            if p is running or p.pid in queued:
                continue
            if p.remaining > 0 and p.arrival <= time:
                ready.append(p)
                queued.add(p.pid)

    admit()

    while ready or any(p.remaining > 0 for p in pending):
        if not ready:
            # CPU idle: jump to the next arrival without emitting an interval.
            time = min(p.arrival for p in pending if p.remaining > 0)
            admit()
            continue

        p = ready.popleft()
        queued.discard(p.pid)

        run_time = min(quantum, p.remaining)
        start = time
        time += run_time
        p.remaining -= run_time

        timeline.append(_interval(p.pid, p.name, start, time))

        # Arrivals during the slice go ahead of the preempted process.
        admit(running=p)

        if p.remaining > 0:
            ready.append(p)
            queued.add(p.pid)
        else:
            turnaround[p.pid] = time

        for other in ready:
            if other is not p and other.remaining > 0:
                waiting[other.pid] += run_time

    return _finish("Round Robin", quantum, processes, timeline, waiting, turnaround)


ALGORITHMS = {
    "fcfs": fcfs,
    "rr": round_robin,
}


def run_algorithm(
    name: str, processes: Sequence[ProcessSpec], quantum: Optional[int] = None
) -> SchedulingResult:
    """
    Dispatch to the requested algorithm. Quantum is ignored by FCFS.
    """
    name = name.lower()
    if name not in ALGORITHMS:
        raise ValueError(f"Unknown algorithm '{name}' (use one of: {', '.join(ALGORITHMS)})")

    func = ALGORITHMS[name]
    return func(processes, quantum=quantum)
