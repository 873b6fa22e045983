from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Tuple

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .config import SchedulerConfig
from .engine import run_scheduler
from .errors import SchedulerError
from .gantt import build_rich_gantt, format_timeline
from .generator import generate_workload
from .metrics import evaluate
from .models import EvaluationReport, ProcessSpec, SimulationResult
from .policies import Algorithm
from .workload_io import load_workload, save_workload


# Every algorithm variant, in the order the comparison table lists them.
COMPARE_SET: List[Tuple[Algorithm, bool]] = [
    (Algorithm.FCFS, False),
    (Algorithm.SJF, False),
    (Algorithm.SJF, True),
    (Algorithm.PRIORITY, False),
    (Algorithm.PRIORITY, True),
    (Algorithm.ROUND_ROBIN, False),
]


def _add_config_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help="Time quantum for round-robin (default: 4).",
    )
    parser.add_argument(
        "--max-processes",
        type=int,
        default=None,
        help="Reject workloads with more processes than this (default: 100).",
    )
    parser.add_argument(
        "--max-ticks",
        type=int,
        default=None,
        help="Watchdog tick ceiling (default: 10000).",
    )
    parser.add_argument(
        "--merge-slices",
        action="store_true",
        help="Merge back-to-back round-robin slices of the same process in the Gantt chart.",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scheduler-sim",
        description="Tick-driven CPU scheduling simulator with I/O (FCFS, SJF, Priority, RR).",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log every scheduling event.")

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run one scheduling algorithm on a workload file.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help="Algorithm to use (fcfs, sjf, priority, rr).",
    )
    run_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    run_parser.add_argument(
        "--preemptive",
        "-p",
        action="store_true",
        help="Preemptive variant (SJF and Priority only).",
    )
    _add_config_arguments(run_parser)

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run every algorithm variant on the same workload and compare average metrics.",
    )
    compare_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    _add_config_arguments(compare_parser)

    generate_parser = subparsers.add_parser("generate", help="Write a random workload file.")
    generate_parser.add_argument("--count", "-n", type=int, default=5, help="Number of processes (default: 5).")
    generate_parser.add_argument("--seed", "-s", type=int, default=None, help="Random seed for a reproducible set.")
    generate_parser.add_argument(
        "--output",
        "-o",
        required=True,
        help="Destination .json or .csv file.",
    )

    return parser


def config_from_args(args: argparse.Namespace) -> SchedulerConfig:
    config = SchedulerConfig()
    overrides = {}
    if getattr(args, "quantum", None) is not None:
        overrides["time_quantum"] = args.quantum
    if getattr(args, "max_processes", None) is not None:
        overrides["max_processes"] = args.max_processes
    if getattr(args, "max_ticks", None) is not None:
        overrides["max_ticks"] = args.max_ticks
    if getattr(args, "merge_slices", False):
        overrides["merge_quantum_slices"] = True
    return replace(config, **overrides).validate()


def _fmt(value: Optional[float]) -> str:
    return "n/a" if value is None else f"{value:.2f}"


def _print_specs(specs: List[ProcessSpec], console: Console) -> None:
    table = Table(title="Processes", box=box.SIMPLE_HEAVY)
    for h in ("PID", "Arrive", "Burst", "Priority", "I/O (request:duration)"):
        table.add_column(h, justify="right")

    for s in sorted(specs, key=lambda s: s.pid):
        io = " ".join(f"{e.request_at}:{e.duration}" for e in s.io_episodes) or "-"
        table.add_row(f"P{s.pid}", str(s.arrival_time), str(s.burst_time), str(s.priority), io)

    console.print(table)


def _print_result(result: SimulationResult, report: EvaluationReport, console: Console) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.label}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")
    if result.diagnostic is not None:
        console.print(f"[red]{result.diagnostic}; unfinished: {list(result.diagnostic.unfinished)}[/red]")

    console.print()

    panel, time_marks = build_rich_gantt(result.timeline)
    console.print(panel)
    if time_marks:
        console.print(time_marks)
    console.print(format_timeline(result.timeline))

    console.print()

    headers = [
        "PID",
        "Arrive",
        "Burst",
        "I/O",
        "First run",
        "Complete",
        "Wait",
        "Turnaround",
        "Response",
        "Priority",
    ]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h in {"PID", "Priority"} else "right"
        proc_table.add_column(h, justify=justify)

    for p in report.processes:
        proc_table.add_row(
            f"P{p.pid}",
            str(p.arrival_time),
            str(p.burst_time),
            str(p.io_time),
            str(p.first_dispatch_time),
            str(p.completion_time),
            str(p.waiting_time),
            str(p.turnaround_time),
            str(p.response_time),
            str(p.priority),
        )

    console.print(proc_table)
    console.print()

    if not report.has_data:
        console.print("[yellow]No processes were completed to evaluate.[/yellow]")
        return

    system = report.system
    sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Avg waiting", _fmt(report.avg_waiting))
    sys_table.add_row("Avg turnaround", _fmt(report.avg_turnaround))
    sys_table.add_row("Avg response", _fmt(report.avg_response))
    sys_table.add_row("Makespan", str(system.makespan))
    sys_table.add_row("Throughput (proc/time)", f"{system.throughput:.3f}")
    sys_table.add_row("CPU utilization", f"{system.cpu_utilization*100:.1f}%")

    console.print(sys_table)


def _run_compare(specs: List[ProcessSpec], config: SchedulerConfig, console: Console) -> None:
    summary_table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Completed", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg response", justify="right")

    for algorithm, preemptive in COMPARE_SET:
        result = run_scheduler(specs, algorithm, preemptive=preemptive, config=config)
        report = evaluate(result)
        summary_table.add_row(
            result.label,
            "" if result.quantum is None else str(result.quantum),
            f"{len(report.processes)}/{len(specs)}",
            _fmt(report.avg_waiting),
            _fmt(report.avg_turnaround),
            _fmt(report.avg_response),
        )

    console.print(summary_table)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    console = Console()

    try:
        if args.command == "run":
            config = config_from_args(args)
            specs = load_workload(Path(args.workload))
            result = run_scheduler(specs, args.algorithm, preemptive=args.preemptive, config=config)
            _print_specs(specs, console)
            _print_result(result, evaluate(result), console)
            return 0 if not result.stuck else 2

        if args.command == "compare":
            config = config_from_args(args)
            specs = load_workload(Path(args.workload))
            _print_specs(specs, console)
            _run_compare(specs, config, console)
            return 0

        if args.command == "generate":
            specs = generate_workload(args.count, seed=args.seed)
            path = save_workload(specs, args.output)
            _print_specs(specs, console)
            console.print(f"[green]Wrote {len(specs)} processes to {path}[/green]")
            return 0
    except (SchedulerError, ValueError, OSError) as exc:
        console.print(f"[red]Error: {exc}[/red]")
        return 1

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
