"""
CPU scheduling simulator.

Runs First-Come First-Serve and Round Robin over a list of processes and
renders the resulting timeline and waiting/turnaround statistics.
"""

__all__ = ["cli"]
