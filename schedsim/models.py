from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union


class InvalidInput(ValueError):
    """
    Raised when a process list or quantum cannot be scheduled.
    """


@dataclass(frozen=True)
class ProcessSpec:
    pid: str
    name: str
    burst: int
    arrival: int = 0
    priority: Optional[Union[int, float]] = None

    def __post_init__(self) -> None:
        if not self.name:
            object.__setattr__(self, "name", self.pid)


@dataclass
class ExecutionInterval:
    """
    One contiguous slice of execution for a process, half-open [start, end).
    """

    pid: str
    name: str
    start: int
    end: int
    display_group: int = 0

    @property
    def duration(self) -> int:
        return self.end - self.start


@dataclass
class SchedulingResult:
    algorithm: str
    quantum: Optional[int]
    timeline: List[ExecutionInterval] = field(default_factory=list)
    waiting_time: Dict[str, int] = field(default_factory=dict)
    turnaround_time: Dict[str, int] = field(default_factory=dict)
    average_waiting_time: float = 0.0


def display_group(pid: str) -> int:
    # Stable 1..6 bucket used only for coloring.
    return sum(ord(ch) for ch in pid) % 6 + 1
