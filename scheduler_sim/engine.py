from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, List, Optional, Union

from .config import SchedulerConfig
from .errors import CapacityError, ConfigurationError, SpecValidationError
from .models import (
    LifecycleState,
    ProcessSpec,
    ProcessState,
    SimulationResult,
    StuckDiagnostic,
)
from .policies import Algorithm, OrderingPolicy, should_preempt
from .queues import OrderedQueue
from .timeline import TimelineRecorder


logger = logging.getLogger(__name__)


class TickOutcome(Enum):
    CONTINUING = "continuing"
    BLOCKED = "blocked"
    COMPLETED = "completed"


def validate_specs(specs: Iterable[ProcessSpec], config: SchedulerConfig) -> List[ProcessSpec]:
    """
    Check a process set against the run configuration before simulating.
    Nothing is ever truncated or substituted: a bad set is rejected whole.
    """
    specs = list(specs)
    if not specs:
        raise ConfigurationError("At least one process is required")
    if len(specs) > config.max_processes:
        raise CapacityError(f"{len(specs)} processes exceed the ceiling of {config.max_processes}")

    seen = set()
    for spec in specs:
        if not isinstance(spec, ProcessSpec):
            raise ConfigurationError(f"Expected ProcessSpec, got {type(spec).__name__}")
        if spec.pid in seen:
            raise SpecValidationError(f"Duplicate pid {spec.pid}")
        if len(spec.io_episodes) > config.max_io_episodes:
            raise CapacityError(
                f"P{spec.pid} has {len(spec.io_episodes)} I/O episodes, "
                f"at most {config.max_io_episodes} allowed"
            )
        seen.add(spec.pid)

    return specs


class SimulationContext:
    """
    Everything one run owns: the process arena, both queues, the clock and
    the Gantt recorder. A context is built from the immutable specs and
    thrown away afterwards, so runs never share state.
    """

    def __init__(
        self,
        specs: List[ProcessSpec],
        algorithm: Algorithm,
        preemptive: bool,
        config: SchedulerConfig,
    ) -> None:
        self.algorithm = algorithm
        self.preemptive = preemptive and algorithm.supports_preemption
        self.config = config

        self.processes: List[ProcessState] = [
            ProcessState.from_spec(spec) for spec in sorted(specs, key=lambda s: (s.arrival_time, s.pid))
        ]

        capacity = len(self.processes)
        self.ready_queue = OrderedQueue("ready", capacity=capacity)
        self.ready_queue.configure(algorithm.ready_policy)
        self.waiting_queue = OrderedQueue("waiting", OrderingPolicy.IO_COMPLETION, capacity=capacity)
        self.recorder = TimelineRecorder()

        self.current_time = 0
        self.running: Optional[ProcessState] = None
        self.dispatch_start = 0
        self.completed_count = 0

    @property
    def total(self) -> int:
        return len(self.processes)

    @property
    def finished(self) -> bool:
        return (
            self.completed_count == self.total
            and self.running is None
            and not self.ready_queue
            and not self.waiting_queue
        )

    def _make_ready(self, process: ProcessState, at: int) -> None:
        process.lifecycle = LifecycleState.READY
        process.last_queue_entry_time = at
        self.ready_queue.insert(process)

    def admit_arrivals(self) -> None:
        for process in self.processes:
            if process.lifecycle is LifecycleState.NOT_ARRIVED and process.arrival_time <= self.current_time:
                self._make_ready(process, self.current_time)
                logger.debug(f"t={self.current_time}: P{process.pid} arrived")

    def complete_io(self) -> None:
        while True:
            head = self.waiting_queue.peek_min()
            if head is None or head.io_completes_at > self.current_time:
                break
            process = self.waiting_queue.extract_min()
            process.ticks_this_episode = 0
            self._make_ready(process, self.current_time)
            logger.debug(f"t={self.current_time}: P{process.pid} finished I/O")

    def check_preemption(self) -> None:
        if not self.preemptive or self.running is None:
            return

        candidate = self.ready_queue.peek_min()
        if candidate is None or not should_preempt(self.algorithm, candidate, self.running):
            return

        process = self.running
        self.recorder.record(process.pid, self.dispatch_start, self.current_time)
        process.quantum_used = 0
        self._make_ready(process, self.current_time)
        self.running = None
        logger.debug(f"t={self.current_time}: P{candidate.pid} preempts P{process.pid}")

    def dispatch(self) -> None:
        if self.running is not None:
            return

        process = self.ready_queue.extract_min()
        if process is None:
            return

        process.lifecycle = LifecycleState.RUNNING
        if not process.started:
            process.started = True
            process.first_dispatch_time = self.current_time
            process.response_time = self.current_time - process.arrival_time
        process.accumulated_waiting += self.current_time - process.last_queue_entry_time
        process.quantum_used = 0

        self.running = process
        self.dispatch_start = self.current_time
        logger.debug(f"t={self.current_time}: dispatch P{process.pid}")

    def run_one_tick(self, process: ProcessState) -> TickOutcome:
        """
        Give ``process`` one tick of CPU. I/O request points count cumulative
        CPU ticks, so each episode fires exactly once however often the
        process was preempted in between.
        """
        process.remaining_burst -= 1
        process.ticks_this_episode += 1
        process.total_ticks_consumed += 1

        episode = process.next_io_episode
        if episode is not None and process.total_ticks_consumed == episode.request_at:
            process.lifecycle = LifecycleState.BLOCKED_ON_IO
            process.io_completes_at = self.current_time + 1 + episode.duration
            process.next_io_index += 1
            self.waiting_queue.insert(process)
            return TickOutcome.BLOCKED

        if process.remaining_burst == 0:
            process.lifecycle = LifecycleState.COMPLETED
            process.completion_time = self.current_time + 1
            return TickOutcome.COMPLETED

        return TickOutcome.CONTINUING

    def execute(self) -> None:
        process = self.running
        if process is None:
            return

        outcome = self.run_one_tick(process)
        process.quantum_used += 1
        end = self.current_time + 1

        if outcome is not TickOutcome.CONTINUING:
            self.recorder.record(process.pid, self.dispatch_start, end)
            self.running = None
            if outcome is TickOutcome.COMPLETED:
                self.completed_count += 1
                logger.debug(f"t={end}: P{process.pid} completed")
            else:
                logger.debug(f"t={end}: P{process.pid} blocked on I/O until t={process.io_completes_at}")
            return

        if self.algorithm is Algorithm.ROUND_ROBIN and process.quantum_used >= self.config.time_quantum:
            self.recorder.record(process.pid, self.dispatch_start, end)
            if not self.config.merge_quantum_slices:
                self.recorder.seal()
            self._make_ready(process, end)
            self.running = None
            logger.debug(f"t={end}: P{process.pid} used its quantum")

    def next_event_time(self) -> Optional[int]:
        candidates = [p.arrival_time for p in self.processes if p.lifecycle is LifecycleState.NOT_ARRIVED]
        head = self.waiting_queue.peek_min()
        if head is not None:
            candidates.append(head.io_completes_at)
        return min(candidates) if candidates else None

    def idle_until_next_event(self) -> bool:
        """
        Fast-forward over a stretch where nothing can run. Returns ``False``
        when there is nothing left to wait for.
        """
        if self.running is not None or self.ready_queue:
            return True

        earliest = self.next_event_time()
        if earliest is None:
            return False
        if earliest > self.current_time:
            if earliest > self.config.max_ticks:
                # The next event lies past the watchdog ceiling; let the run trip it.
                self.current_time = self.config.max_ticks + 1
                return True
            self.recorder.record_idle(self.current_time, earliest)
            self.current_time = earliest
        return True

    def step(self) -> None:
        """
        One tick, in the fixed order admission, I/O completion, preemption,
        dispatch, execution.
        """
        self.admit_arrivals()
        self.complete_io()
        self.check_preemption()
        self.dispatch()
        self.execute()
        self.current_time += 1

    def _diagnose(self) -> StuckDiagnostic:
        unfinished = tuple(sorted(p.pid for p in self.processes if not p.is_completed))
        return StuckDiagnostic(
            elapsed_ticks=self.current_time,
            completed=self.completed_count,
            total=self.total,
            unfinished=unfinished,
        )

    def run(self) -> SimulationResult:
        diagnostic: Optional[StuckDiagnostic] = None

        # Leading idle gap is recorded from tick 0, so the timeline covers the whole run.
        if not self.idle_until_next_event():
            diagnostic = self._diagnose()

        while diagnostic is None:
            if self.current_time > self.config.max_ticks:
                diagnostic = self._diagnose()
                logger.warning(f"{self.algorithm.display_name}: {diagnostic}")
                break

            self.step()

            if self.finished:
                break
            if not self.idle_until_next_event():
                diagnostic = self._diagnose()
                logger.warning(f"{self.algorithm.display_name}: no pending events, {diagnostic}")
                break

        if self.running is not None:
            # Close the open slice so a partial timeline still accounts for it.
            self.recorder.record(self.running.pid, self.dispatch_start, self.current_time)

        logger.info(
            f"{self.algorithm.display_name} finished at t={self.current_time}: "
            f"{self.completed_count}/{self.total} completed, {len(self.recorder)} Gantt intervals"
        )

        return SimulationResult(
            algorithm=self.algorithm.display_name,
            preemptive=self.preemptive,
            quantum=self.config.time_quantum if self.algorithm is Algorithm.ROUND_ROBIN else None,
            timeline=self.recorder.intervals,
            final_states={p.pid: p for p in sorted(self.processes, key=lambda p: p.pid)},
            elapsed_ticks=self.current_time,
            diagnostic=diagnostic,
        )


def run_scheduler(
    specs: Iterable[ProcessSpec],
    algorithm: Union[Algorithm, str],
    preemptive: bool = False,
    config: Optional[SchedulerConfig] = None,
) -> SimulationResult:
    """
    Simulate ``specs`` under one scheduling discipline.

    ``preemptive`` only affects SJF and Priority: FCFS cannot be preempted
    and round-robin preempts on quantum expiry regardless. Invalid input
    raises a ``ConfigurationError``; a run that hits the tick ceiling returns
    a partial result whose ``diagnostic`` is set.
    """
    config = (config or SchedulerConfig()).validate()
    algorithm = Algorithm.parse(algorithm)
    specs = validate_specs(specs, config)

    if preemptive and not algorithm.supports_preemption:
        logger.debug(f"{algorithm.display_name} ignores the preemptive flag")

    context = SimulationContext(specs, algorithm, preemptive, config)
    return context.run()
