import pytest

from scheduler_sim.engine import run_scheduler
from scheduler_sim.metrics import compute_system_metrics, evaluate, summarize_process_metrics
from scheduler_sim.models import (
    IoEpisode,
    LifecycleState,
    ProcessSpec,
    ProcessState,
    SimulationResult,
    TimelineInterval,
)
from scheduler_sim.policies import Algorithm


def test_metrics_for_io_process():
    spec = ProcessSpec(1, arrival_time=0, burst_time=5, io_episodes=[IoEpisode(2, 3)])
    report = evaluate(run_scheduler([spec], Algorithm.FCFS))

    [p] = report.processes
    assert p.turnaround_time == 8
    assert p.io_time == 3
    assert p.waiting_time == 0
    assert p.response_time == 0

    system = report.system
    assert system.cpu_busy_time == 5
    assert system.idle_time == 3
    assert system.makespan == 8
    assert system.cpu_utilization == pytest.approx(5 / 8)
    assert system.throughput == pytest.approx(1 / 8)


def test_averages():
    specs = [
        ProcessSpec(1, arrival_time=0, burst_time=5),
        ProcessSpec(2, arrival_time=1, burst_time=3),
        ProcessSpec(3, arrival_time=2, burst_time=8),
    ]
    report = evaluate(run_scheduler(specs, Algorithm.FCFS))
    assert report.avg_waiting == pytest.approx((0 + 4 + 6) / 3)
    assert report.avg_turnaround == pytest.approx((5 + 7 + 14) / 3)
    assert report.avg_response == pytest.approx((0 + 4 + 6) / 3)


def test_waiting_time_is_clamped():
    spec = ProcessSpec(1, arrival_time=0, burst_time=5, io_episodes=[IoEpisode(2, 3)])
    state = ProcessState.from_spec(spec)
    state.lifecycle = LifecycleState.COMPLETED
    state.first_dispatch_time = 0
    state.response_time = 0
    state.completion_time = 6
    result = SimulationResult(
        algorithm="FCFS",
        preemptive=False,
        quantum=None,
        timeline=[TimelineInterval(1, 0, 6)],
        final_states={1: state},
    )

    [p] = evaluate(result).processes
    assert p.turnaround_time == 6
    assert p.waiting_time == 0


def test_no_completions_means_no_data():
    state = ProcessState.from_spec(ProcessSpec(1, arrival_time=0, burst_time=5))
    result = SimulationResult(algorithm="FCFS", preemptive=False, quantum=None, final_states={1: state})

    report = evaluate(result)
    assert not report.has_data
    assert report.avg_waiting is None
    assert report.avg_turnaround is None
    assert report.system.makespan == 0


def test_summary_of_empty_list():
    assert summarize_process_metrics([]) == {"avg_waiting": None, "avg_turnaround": None, "avg_response": None}


def test_system_metrics_ignore_idle_intervals():
    timeline = [TimelineInterval(0, 0, 2), TimelineInterval(1, 2, 6)]
    system = compute_system_metrics(timeline, completed=1)
    assert system.cpu_busy_time == 4
    assert system.idle_time == 2
    assert system.cpu_utilization == pytest.approx(4 / 6)
