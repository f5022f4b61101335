from __future__ import annotations

import csv
import json
import logging
import math
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from .models import ProcessSpec

logger = logging.getLogger(__name__)

NAME_KEYS = ("name", "Nombre", "Proceso", "proceso")
BURST_KEYS = ("burst", "Burst", "Tiempo", "Tiempo de ejecución", "Tiempo de ejecucion", "burst_time")
ARRIVAL_KEYS = ("arrival", "Llegada", "llegada", "arrival_time")
PRIORITY_KEYS = ("priority", "prioridad", "Prioridad")


def load_workload(path: str | Path) -> List[ProcessSpec]:
    """
    Load a workload from a JSON or CSV file into a list of ProcessSpec objects.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        rows = _load_json(path)
    elif suffix == ".csv":
        rows = _load_csv(path)
    else:
        raise ValueError(f"Unsupported workload format: {suffix} (use .json or .csv)")

    processes = parse_rows(rows)
    logger.debug("Loaded %d processes from %s", len(processes), path)
    return processes


def _load_json(path: Path) -> List[Mapping[str, Any]]:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON workload {path}: {exc}") from exc

    if not isinstance(raw, list):
        raise ValueError("JSON workload must be a list of process objects")

    return raw


def _load_csv(path: Path) -> List[Mapping[str, Any]]:
    with path.open("r", encoding="utf-8-sig", newline="") as f:
        return list(csv.DictReader(f))


def _first(row: Mapping[str, Any], keys: Sequence[str]) -> Any:
    # First key present with a non-null value wins.
    for key in keys:
        value = row.get(key)
        if value is not None:
            return value
    return None


def _to_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def parse_rows(rows: Iterable[Mapping[str, Any]]) -> List[ProcessSpec]:
    """
    Turn loosely keyed rows (manual entry, CSV, spreadsheet exports) into
    ProcessSpec objects with ids P1, P2, ... by position.

    A burst that cannot be read as a number becomes 0; the scheduler rejects it.
    """
    processes: List[ProcessSpec] = []
    for i, row in enumerate(rows):
        if not isinstance(row, Mapping):
            raise ValueError(f"Invalid process entry: {row!r}")

        pid = f"P{i + 1}"

        name = _first(row, NAME_KEYS)
        name = str(name) if name not in (None, "") else pid

        burst_val = _first(row, BURST_KEYS)
        burst_num = _to_number(burst_val)
        if burst_num is None:
            logger.warning("Process %s (%s): unreadable burst %r, using 0", pid, name, burst_val)
            burst = 0
        else:
            burst = round_half_up(burst_num)

        arrival_val = _first(row, ARRIVAL_KEYS)
        arrival_num = _to_number(arrival_val)
        if arrival_num is None:
            if arrival_val not in (None, ""):
                logger.warning("Process %s (%s): unreadable arrival %r, using 0", pid, name, arrival_val)
            arrival = 0
        else:
            arrival = round_half_up(arrival_num)

        priority_val = _first(row, PRIORITY_KEYS)
        priority = _to_number(priority_val)
        if priority is not None and priority.is_integer():
            priority = int(priority)

        processes.append(ProcessSpec(pid=pid, name=name, burst=burst, arrival=arrival, priority=priority))

    return processes
