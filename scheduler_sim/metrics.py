from __future__ import annotations

from typing import List

from .models import (
    EvaluationReport,
    ProcessMetrics,
    SimulationResult,
    SystemMetrics,
    TimelineInterval,
)


def compute_process_metrics(result: SimulationResult) -> List[ProcessMetrics]:
    """
    Per-process figures for every completed process, in pid order.
    Unfinished processes (a stuck run) are left out.
    """
    metrics: List[ProcessMetrics] = []
    for state in result.completed_states():
        spec = state.spec
        turnaround = state.completion_time - spec.arrival_time
        # I/O time is not waiting; clamp in case of edge interactions.
        waiting = max(0, turnaround - spec.burst_time - spec.total_io_time)

        metrics.append(
            ProcessMetrics(
                pid=spec.pid,
                arrival_time=spec.arrival_time,
                burst_time=spec.burst_time,
                io_time=spec.total_io_time,
                first_dispatch_time=state.first_dispatch_time,
                completion_time=state.completion_time,
                waiting_time=waiting,
                turnaround_time=turnaround,
                response_time=state.response_time,
                priority=spec.priority,
            )
        )
    return sorted(metrics, key=lambda m: m.pid)


def compute_system_metrics(timeline: List[TimelineInterval], completed: int) -> SystemMetrics:
    """
    Throughput and CPU utilization over the span covered by the timeline.
    """
    if not timeline:
        return SystemMetrics(cpu_busy_time=0, idle_time=0, makespan=0, throughput=0.0, cpu_utilization=0.0)

    makespan = max(interval.end_time for interval in timeline)
    cpu_busy_time = sum(interval.duration for interval in timeline if not interval.is_idle)
    idle_time = sum(interval.duration for interval in timeline if interval.is_idle)

    throughput = completed / makespan if makespan > 0 else 0.0
    cpu_utilization = cpu_busy_time / makespan if makespan > 0 else 0.0

    return SystemMetrics(
        cpu_busy_time=cpu_busy_time,
        idle_time=idle_time,
        makespan=makespan,
        throughput=throughput,
        cpu_utilization=cpu_utilization,
    )


def evaluate(result: SimulationResult) -> EvaluationReport:
    """
    Derive the full report for a run. Averages stay ``None`` when nothing
    completed rather than dividing by zero.
    """
    processes = compute_process_metrics(result)
    summary = summarize_process_metrics(processes)
    return EvaluationReport(
        processes=processes,
        avg_waiting=summary["avg_waiting"],
        avg_turnaround=summary["avg_turnaround"],
        avg_response=summary["avg_response"],
        system=compute_system_metrics(result.timeline, len(processes)),
    )


def summarize_process_metrics(processes: List[ProcessMetrics]) -> dict:
    """
    Return averages of the key per-process metrics for quick comparison.
    """
    if not processes:
        return {"avg_waiting": None, "avg_turnaround": None, "avg_response": None}

    n = len(processes)
    return {
        "avg_waiting": sum(p.waiting_time for p in processes) / n,
        "avg_turnaround": sum(p.turnaround_time for p in processes) / n,
        "avg_response": sum(p.response_time for p in processes) / n,
    }
