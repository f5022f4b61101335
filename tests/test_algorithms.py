import pytest

from schedsim.algorithms import fcfs, round_robin, run_algorithm
from schedsim.models import InvalidInput, ProcessSpec, display_group


def _proc(pid, burst, arrival=0, priority=None):
    return ProcessSpec(pid, name=pid, burst=burst, arrival=arrival, priority=priority)


def _spans(result):
    return [(iv.pid, iv.start, iv.end) for iv in result.timeline]


WORKLOADS = [
    [_proc("P1", 5), _proc("P2", 3)],
    [_proc("P1", 2), _proc("P2", 3), _proc("P3", 1)],
    [_proc("P1", 3), _proc("P2", 2, arrival=1), _proc("P3", 7, arrival=2)],
    [_proc("P1", 2), _proc("P2", 1, arrival=5), _proc("P3", 4, arrival=5)],
    [_proc("P1", 1, arrival=3), _proc("P2", 6, arrival=0), _proc("P3", 2, arrival=9)],
]


def test_fcfs_scenario():
    res = fcfs([_proc("P1", 2), _proc("P2", 3), _proc("P3", 1)])
    assert _spans(res) == [("P1", 0, 2), ("P2", 2, 5), ("P3", 5, 6)]
    assert res.waiting_time == {"P1": 0, "P2": 2, "P3": 5}
    assert res.turnaround_time == {"P1": 2, "P2": 5, "P3": 6}
    assert res.average_waiting_time == 7 / 3
    assert res.quantum is None


def test_fcfs_ignores_arrival_and_keeps_submission_order():
    res = fcfs([_proc("P1", 4, arrival=10), _proc("P2", 1, arrival=0)])
    assert _spans(res) == [("P1", 0, 4), ("P2", 4, 5)]
    assert res.waiting_time == {"P1": 0, "P2": 4}


@pytest.mark.parametrize("processes", WORKLOADS)
def test_fcfs_waiting_is_sum_of_previous_bursts(processes):
    res = fcfs(processes)
    elapsed = 0
    for p in processes:
        assert res.waiting_time[p.pid] == elapsed
        assert res.turnaround_time[p.pid] == res.waiting_time[p.pid] + p.burst
        elapsed += p.burst


def test_rr_scenario_two_processes():
    res = round_robin([_proc("P1", 5), _proc("P2", 3)], quantum=2)
    assert _spans(res) == [
        ("P1", 0, 2),
        ("P2", 2, 4),
        ("P1", 4, 6),
        ("P2", 6, 7),
        ("P1", 7, 8),
    ]
    assert res.waiting_time == {"P1": 3, "P2": 4}
    assert res.turnaround_time == {"P1": 8, "P2": 7}
    assert res.average_waiting_time == 3.5
    assert res.quantum == 2


def test_rr_single_process():
    res = round_robin([_proc("P1", 4)], quantum=2)
    assert _spans(res) == [("P1", 0, 2), ("P1", 2, 4)]
    assert res.waiting_time == {"P1": 0}
    assert res.turnaround_time == {"P1": 4}


def test_rr_last_slice_shorter_than_quantum():
    res = round_robin([_proc("P1", 7)], quantum=3)
    assert [iv.end - iv.start for iv in res.timeline] == [3, 3, 1]


def test_rr_staggered_arrivals():
    res = round_robin([_proc("P1", 3), _proc("P2", 2, arrival=1)], quantum=2)
    assert _spans(res) == [("P1", 0, 2), ("P2", 2, 4), ("P1", 4, 5)]
    assert res.waiting_time == {"P1": 2, "P2": 2}
    # Completion time, not adjusted by arrival.
    assert res.turnaround_time == {"P1": 5, "P2": 4}


def test_rr_arrival_at_slice_end_goes_before_requeue():
    res = round_robin([_proc("P1", 4), _proc("P2", 1, arrival=2)], quantum=2)
    assert _spans(res) == [("P1", 0, 2), ("P2", 2, 3), ("P1", 3, 5)]


def test_rr_idle_gap_emits_no_interval():
    res = round_robin([_proc("P1", 2), _proc("P2", 1, arrival=5)], quantum=2)
    assert _spans(res) == [("P1", 0, 2), ("P2", 5, 6)]
    assert res.waiting_time == {"P1": 0, "P2": 0}
    assert res.turnaround_time == {"P1": 2, "P2": 6}


def test_rr_charges_full_slice_to_late_arrivals():
    res = round_robin([_proc("P1", 4), _proc("P2", 2, arrival=1)], quantum=4)
    assert _spans(res) == [("P1", 0, 4), ("P2", 4, 6)]
    assert res.waiting_time["P2"] == 4


def test_rr_large_quantum_matches_fcfs():
    processes = [_proc("P1", 3), _proc("P2", 1), _proc("P3", 4)]
    rr = round_robin(processes, quantum=4)
    fc = fcfs(processes)
    assert _spans(rr) == _spans(fc)
    assert rr.waiting_time == fc.waiting_time


@pytest.mark.parametrize("quantum", [1, 2, 3, 5])
@pytest.mark.parametrize("processes", WORKLOADS)
def test_rr_timeline_invariants(processes, quantum):
    res = round_robin(processes, quantum=quantum)
    by_pid = {p.pid: p for p in processes}

    for p in processes:
        assert sum(iv.end - iv.start for iv in res.timeline if iv.pid == p.pid) == p.burst

    for prev, cur in zip(res.timeline, res.timeline[1:]):
        assert prev.end <= cur.start

    for iv in res.timeline:
        assert iv.start >= by_pid[iv.pid].arrival
        assert 0 < iv.end - iv.start <= quantum
        assert iv.end <= res.turnaround_time[iv.pid]

    assert set(res.waiting_time) == set(by_pid)
    assert set(res.turnaround_time) == set(by_pid)
    assert res.average_waiting_time == sum(res.waiting_time.values()) / len(processes)


@pytest.mark.parametrize("processes", WORKLOADS)
def test_fcfs_average_is_mean(processes):
    res = fcfs(processes)
    assert res.average_waiting_time == sum(res.waiting_time.values()) / len(processes)


def test_input_is_not_mutated():
    processes = [_proc("P1", 5), _proc("P2", 3, arrival=1)]
    before = list(processes)
    round_robin(processes, quantum=2)
    fcfs(processes)
    assert processes == before


@pytest.mark.parametrize("func", [fcfs, lambda ps: round_robin(ps, quantum=2)])
def test_empty_input_rejected(func):
    with pytest.raises(InvalidInput):
        func([])


@pytest.mark.parametrize("burst", [0, -3])
def test_non_positive_burst_rejected(burst):
    with pytest.raises(InvalidInput):
        fcfs([_proc("P1", burst)])
    with pytest.raises(InvalidInput):
        round_robin([_proc("P1", burst)], quantum=2)


@pytest.mark.parametrize("quantum", [None, 0, -1])
def test_rr_requires_positive_quantum(quantum):
    with pytest.raises(InvalidInput):
        round_robin([_proc("P1", 3)], quantum=quantum)


def test_duplicate_ids_rejected():
    with pytest.raises(InvalidInput):
        fcfs([_proc("P1", 1), _proc("P1", 2)])


def test_priority_is_ignored():
    plain = round_robin([_proc("P1", 3), _proc("P2", 3)], quantum=1)
    prioritized = round_robin([_proc("P1", 3, priority=9), _proc("P2", 3, priority=-1)], quantum=1)
    assert _spans(plain) == _spans(prioritized)


def test_display_group_is_stable():
    res = fcfs([_proc("P1", 1), _proc("P2", 1)])
    assert [iv.display_group for iv in res.timeline] == [display_group("P1"), display_group("P2")]
    assert all(1 <= display_group(pid) <= 6 for pid in ("P1", "P9", "P10", "P123"))


def test_run_algorithm_dispatch():
    processes = [_proc("P1", 3)]
    assert run_algorithm("FCFS", processes).algorithm == "FCFS"
    assert run_algorithm("rr", processes, quantum=1).algorithm == "Round Robin"
    with pytest.raises(ValueError):
        run_algorithm("sjf", processes)


def test_negative_arrival_rejected():
    with pytest.raises(InvalidInput):
        fcfs([_proc("P1", 1, arrival=-1)])
    with pytest.raises(InvalidInput):
        round_robin([_proc("P1", 1), _proc("P2", 2, arrival=-1)], quantum=2)
