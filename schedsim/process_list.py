from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Iterator, List, Optional, Union

from .models import InvalidInput, ProcessSpec
from .workload_io import round_half_up

logger = logging.getLogger(__name__)

Number = Union[int, float]


def _whole(value: Optional[Number], label: str) -> int:
    if value is None or not math.isfinite(value):
        raise InvalidInput(f"{label} must be a finite number")
    return round_half_up(value)


class ProcessList:
    """
    Editable list of processes built up by manual entry.

    Ids always follow list position (P1..Pn); removing an entry renumbers
    the ones after it.
    """

    def __init__(self, processes: Optional[List[ProcessSpec]] = None) -> None:
        self._items: List[ProcessSpec] = list(processes or [])
        self._renumber()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[ProcessSpec]:
        return iter(list(self._items))

    def __getitem__(self, index: int) -> ProcessSpec:
        return self._items[index]

    def _make(self, pid: str, name: Optional[str], burst: Number, priority, arrival: Number) -> ProcessSpec:
        burst = _whole(burst, "Burst time")
        if burst <= 0:
            raise InvalidInput("Burst time must be greater than 0")
        arrival = _whole(arrival, "Arrival time")
        if arrival < 0:
            raise InvalidInput("Arrival time must not be negative")
        return ProcessSpec(pid=pid, name=name or pid, burst=burst, arrival=arrival, priority=priority)

    def add(
        self,
        name: Optional[str],
        burst: Number,
        priority: Optional[Number] = None,
        arrival: Number = 0,
    ) -> ProcessSpec:
        pid = f"P{len(self._items) + 1}"
        proc = self._make(pid, name, burst, priority, arrival)
        self._items.append(proc)
        logger.debug("Added %s", proc)
        return proc

    def edit(
        self,
        index: int,
        name: Optional[str],
        burst: Number,
        priority: Optional[Number] = None,
        arrival: Number = 0,
    ) -> ProcessSpec:
        current = self._items[index]
        proc = self._make(current.pid, name, burst, priority, arrival)
        self._items[index] = proc
        logger.debug("Edited %s", proc)
        return proc

    def remove(self, index: int) -> ProcessSpec:
        removed = self._items.pop(index)
        self._renumber()
        return removed

    def clear(self) -> None:
        self._items.clear()

    def snapshot(self) -> List[ProcessSpec]:
        """
        Independent copy of the current entries for a scheduling run.
        """
        return [replace(p) for p in self._items]

    def _renumber(self) -> None:
        self._items = [replace(p, pid=f"P{idx + 1}") for idx, p in enumerate(self._items)]
