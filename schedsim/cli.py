from __future__ import annotations

import argparse
import logging
import math
from pathlib import Path
from typing import List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .algorithms import ALGORITHMS, run_algorithm
from .gantt import build_rich_gantt, render_gantt
from .metrics import summarize
from .models import InvalidInput, ProcessSpec, SchedulingResult
from .process_list import ProcessList
from .workload_io import load_workload, round_half_up

logger = logging.getLogger(__name__)

DEFAULT_QUANTUM = 2


def coerce_quantum(value: float | int | None) -> int:
    """
    Round a user supplied quantum and clamp it to at least 1.
    """
    if value is None:
        return DEFAULT_QUANTUM
    if not math.isfinite(value):
        raise InvalidInput(f"Quantum must be a finite number, got {value}")
    return max(1, round_half_up(value))


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="CPU scheduling simulator (FCFS, Round Robin).",
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
        choices=sorted(ALGORITHMS),
        type=str.lower,
        help="Algorithm to use (fcfs, rr).",
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
        type=float,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum for round-robin (ignored by FCFS, default: {DEFAULT_QUANTUM}).",
    )
    run_parser.add_argument(
        "--plain",
        action="store_true",
        help="Print a plain-text Gantt chart instead of a colored one.",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run FCFS and Round Robin on the same workload and compare averages.",
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
        type=float,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum used for round-robin (default: {DEFAULT_QUANTUM}).",
    )

    menu_parser = subparsers.add_parser(
        "menu",
        help="Interactive editor to enter processes and run an algorithm.",
    )
    menu_parser.add_argument(
        "--workload",
        "-w",
        default=None,
        help="Optional workload file to preload into the editor.",
    )
    menu_parser.add_argument(
        "--quantum",
        "-q",
        type=float,
        default=DEFAULT_QUANTUM,
        help=f"Default quantum to prefill for round-robin (default: {DEFAULT_QUANTUM}).",
    )

    return parser


def _print_processes(processes: Sequence[ProcessSpec], console: Console) -> None:
    table = Table(title="Processes", box=box.SIMPLE_HEAVY)
    for h in ("#", "ID", "Name", "Burst", "Arrive", "Priority"):
        table.add_column(h, justify="left" if h == "Name" else "right")

    for idx, p in enumerate(processes, start=1):
        table.add_row(
            str(idx),
            p.pid,
            p.name,
            str(p.burst),
            str(p.arrival),
            "" if p.priority is None else str(p.priority),
        )

    console.print(table)


def _print_result(
    result: SchedulingResult,
    processes: Sequence[ProcessSpec],
    console: Console,
    plain: bool = False,
) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()

    if plain:
        console.print(render_gantt(result.timeline), markup=False, highlight=False)
    else:
        panel, time_marks = build_rich_gantt(result.timeline)
        console.print(panel)
        if time_marks:
            # Panel border and padding take two columns.
            console.print("  " + time_marks, highlight=False)

    console.print()

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in ("ID", "Name", "Burst", "Arrive", "Wait", "Turnaround", "Priority"):
        justify = "left" if h == "Name" else "right"
        proc_table.add_column(h, justify=justify)

    for p in processes:
        proc_table.add_row(
            p.pid,
            p.name,
            str(p.burst),
            str(p.arrival),
            str(result.waiting_time[p.pid]),
            str(result.turnaround_time[p.pid]),
            "" if p.priority is None else str(p.priority),
        )

    console.print(proc_table)
    console.print()

    summary = summarize(result)
    sys_table = Table(title="Summary", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Avg waiting", f"{summary['avg_waiting']:.2f}")
    sys_table.add_row("Avg turnaround", f"{summary['avg_turnaround']:.2f}")
    sys_table.add_row("Total time", str(summary["total_time"]))
    sys_table.add_row("CPU utilization", f"{summary['cpu_utilization'] * 100:.1f}%")

    console.print(sys_table)


def _compare(processes: List[ProcessSpec], quantum: int, console: Console, title: str) -> None:
    summary_table = Table(title=title, box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Total time", justify="right")

    for alg in ALGORITHMS:
        result = run_algorithm(alg, processes, quantum=quantum)
        summary = summarize(result)
        summary_table.add_row(
            result.algorithm,
            "" if result.quantum is None else str(result.quantum),
            f"{summary['avg_waiting']:.2f}",
            f"{summary['avg_turnaround']:.2f}",
            str(summary["total_time"]),
        )

    console.print(summary_table)


def _ask(prompt: str) -> str:
    return input(prompt).strip()


def _ask_number(prompt: str, default: Optional[float] = None) -> Optional[float]:
    raw = _ask(prompt)
    if not raw:
        return default
    return float(raw)


def _read_entry(current: Optional[ProcessSpec] = None) -> tuple:
    name_default = current.name if current else ""
    name = _ask(f"Name [{name_default}]: ") or name_default
    burst = _ask_number(
        f"Burst time [{current.burst if current else ''}]: ",
        default=current.burst if current else None,
    )
    arrival = _ask_number(
        f"Arrival time [{current.arrival if current else 0}]: ",
        default=current.arrival if current else 0,
    )
    priority = _ask_number(
        "Priority (optional): ",
        default=current.priority if current else None,
    )
    return name, burst, priority, arrival


def _pick_index(entries: ProcessList, console: Console) -> Optional[int]:
    if not len(entries):
        console.print("[red]No processes yet.[/red]")
        return None
    choice = _ask(f"Process number [1-{len(entries)}]: ")
    try:
        idx = int(choice) - 1
    except ValueError:
        console.print("[red]Invalid selection.[/red]")
        return None
    if not 0 <= idx < len(entries):
        console.print("[red]Invalid selection.[/red]")
        return None
    return idx


def _interactive_menu(default_workload: Optional[str], default_quantum: int, console: Console) -> None:
    entries = ProcessList()
    quantum = default_quantum

    if default_workload:
        entries = ProcessList(load_workload(default_workload))

    actions = [
        ("a", "Add process"),
        ("e", "Edit process"),
        ("d", "Delete process"),
        ("c", "Clear all"),
        ("l", "Load workload file"),
        ("f", "Run FCFS"),
        ("r", "Run Round Robin"),
        ("m", "Compare FCFS and Round Robin"),
    ]

    while True:
        console.print("\n[bold cyan]Scheduler Menu[/bold cyan] [dim](q to quit)[/dim]")
        if len(entries):
            _print_processes(list(entries), console)
        else:
            console.print("[dim]No processes entered.[/dim]")
        for key, label in actions:
            console.print(f"  [yellow]{key}[/yellow]. [white]{label}[/white]")

        choice = _ask("Choice: ").lower()
        if choice in {"q", "quit", "exit"}:
            return

        try:
            if choice == "a":
                name, burst, priority, arrival = _read_entry()
                entries.add(name, burst, priority=priority, arrival=arrival)
            elif choice == "e":
                idx = _pick_index(entries, console)
                if idx is not None:
                    name, burst, priority, arrival = _read_entry(entries[idx])
                    entries.edit(idx, name, burst, priority=priority, arrival=arrival)
            elif choice == "d":
                idx = _pick_index(entries, console)
                if idx is not None and _ask("Delete process? [y/N]: ").lower() == "y":
                    entries.remove(idx)
            elif choice == "c":
                if _ask("Clear all processes? [y/N]: ").lower() == "y":
                    entries.clear()
            elif choice == "l":
                path = _ask("Workload path: ")
                if path:
                    entries = ProcessList(load_workload(path))
            elif choice in {"f", "r", "m"}:
                if not len(entries):
                    console.print("[red]Add at least one process.[/red]")
                    continue
                if choice != "f":
                    q_in = _ask_number(f"Quantum [{quantum}]: ", default=quantum)
                    quantum = coerce_quantum(q_in)
                processes = entries.snapshot()
                if choice == "m":
                    _compare(processes, quantum, console, "Algorithm comparison")
                else:
                    alg = "fcfs" if choice == "f" else "rr"
                    result = run_algorithm(alg, processes, quantum=quantum)
                    _print_result(result, processes, console)
            else:
                console.print("[red]Invalid selection.[/red]")
        except (ValueError, OSError) as exc:
            console.print(f"[red]Error: {exc}[/red]")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    console = Console()

    try:
        quantum = coerce_quantum(args.quantum)

        if args.command == "run":
            processes = load_workload(Path(args.workload))
            logger.debug("Running %s with quantum %d", args.algorithm, quantum)
            result = run_algorithm(args.algorithm, processes, quantum=quantum)
            _print_result(result, processes, console, plain=args.plain)
            return 0

        if args.command == "compare":
            workload_path = Path(args.workload)
            processes = load_workload(workload_path)
            _compare(processes, quantum, console, f"Algorithm comparison: {workload_path}")
            return 0

        if args.command == "menu":
            _interactive_menu(args.workload, quantum, console)
            return 0
    except (ValueError, OSError) as exc:
        console.print(f"[red]Error: {exc}[/red]")
        return 2

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
