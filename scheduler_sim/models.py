from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .errors import SpecValidationError


IDLE_PID = 0


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class IoEpisode:
    """
    One I/O wait, triggered once the process has consumed ``request_at``
    CPU ticks in total and lasting ``duration`` ticks.
    """

    request_at: int
    duration: int


@dataclass(frozen=True)
class ProcessSpec:
    """
    Immutable description of a process. Lower ``priority`` is more urgent.
    """

    pid: int
    arrival_time: int
    burst_time: int
    priority: int = 0
    io_episodes: Tuple[IoEpisode, ...] = ()

    def __post_init__(self) -> None:
        # Any sequence of episodes is accepted; it is stored as a tuple.
        object.__setattr__(self, "io_episodes", tuple(self.io_episodes))

        if not _is_int(self.pid) or self.pid <= IDLE_PID:
            raise SpecValidationError(f"pid must be a positive integer (0 is reserved for idle), got {self.pid!r}")
        for name in ("arrival_time", "burst_time", "priority"):
            value = getattr(self, name)
            if not _is_int(value):
                raise SpecValidationError(f"P{self.pid}: {name} must be an integer, got {value!r}")
        if self.arrival_time < 0:
            raise SpecValidationError(f"P{self.pid}: arrival_time must be >= 0, got {self.arrival_time}")
        if self.burst_time <= 0:
            raise SpecValidationError(f"P{self.pid}: burst_time must be > 0, got {self.burst_time}")

        previous = 0
        for idx, episode in enumerate(self.io_episodes):
            if not isinstance(episode, IoEpisode):
                raise SpecValidationError(f"P{self.pid}: I/O episode {idx} must be an IoEpisode, got {episode!r}")
            if not (_is_int(episode.request_at) and _is_int(episode.duration)):
                raise SpecValidationError(f"P{self.pid}: I/O episode {idx} needs integer fields, got {episode!r}")
            if not 0 < episode.request_at < self.burst_time:
                raise SpecValidationError(
                    f"P{self.pid}: I/O episode {idx} requests at tick {episode.request_at}, "
                    f"expected 0 < request_at < {self.burst_time}"
                )
            if episode.request_at <= previous:
                raise SpecValidationError(
                    f"P{self.pid}: I/O request points must be strictly increasing "
                    f"(episode {idx} at {episode.request_at} after {previous})"
                )
            # A zero-length episode makes the process ready again on the next tick.
            if episode.duration < 0:
                raise SpecValidationError(
                    f"P{self.pid}: I/O episode {idx} duration must be >= 0, got {episode.duration}"
                )
            previous = episode.request_at

    @property
    def total_io_time(self) -> int:
        return sum(e.duration for e in self.io_episodes)


class LifecycleState(Enum):
    NOT_ARRIVED = "Not arrived"
    READY = "Ready"
    RUNNING = "Running"
    BLOCKED_ON_IO = "Blocked on I/O"
    COMPLETED = "Completed"


@dataclass
class ProcessState:
    """
    Mutable per-run record for one process. Created fresh from a
    ``ProcessSpec`` at the start of every run and mutated only by the engine.
    """

    spec: ProcessSpec
    remaining_burst: int = 0
    ticks_this_episode: int = 0
    total_ticks_consumed: int = 0
    next_io_index: int = 0
    lifecycle: LifecycleState = LifecycleState.NOT_ARRIVED
    io_completes_at: int = 0
    started: bool = False
    first_dispatch_time: Optional[int] = None
    response_time: Optional[int] = None
    completion_time: Optional[int] = None
    accumulated_waiting: int = 0
    last_queue_entry_time: int = 0
    quantum_used: int = 0

    @classmethod
    def from_spec(cls, spec: ProcessSpec) -> "ProcessState":
        return cls(spec=spec, remaining_burst=spec.burst_time, last_queue_entry_time=spec.arrival_time)

    @property
    def pid(self) -> int:
        return self.spec.pid

    @property
    def arrival_time(self) -> int:
        return self.spec.arrival_time

    @property
    def priority(self) -> int:
        return self.spec.priority

    @property
    def next_io_episode(self) -> Optional[IoEpisode]:
        if self.next_io_index < len(self.spec.io_episodes):
            return self.spec.io_episodes[self.next_io_index]
        return None

    @property
    def is_completed(self) -> bool:
        return self.lifecycle is LifecycleState.COMPLETED


@dataclass
class TimelineInterval:
    """
    One contiguous span of CPU occupancy in the Gantt chart.
    ``pid == 0`` marks an idle CPU.
    """

    pid: int
    start_time: int
    end_time: int

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time

    @property
    def is_idle(self) -> bool:
        return self.pid == IDLE_PID

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.pid, self.start_time, self.end_time)


@dataclass(frozen=True)
class StuckDiagnostic:
    elapsed_ticks: int
    completed: int
    total: int
    unfinished: Tuple[int, ...] = ()

    def __str__(self) -> str:
        return (
            f"simulation possibly stuck after {self.elapsed_ticks} ticks, "
            f"completed {self.completed}/{self.total}"
        )


@dataclass
class SimulationResult:
    algorithm: str
    preemptive: bool
    quantum: Optional[int]
    timeline: List[TimelineInterval] = field(default_factory=list)
    final_states: Dict[int, ProcessState] = field(default_factory=dict)
    elapsed_ticks: int = 0
    diagnostic: Optional[StuckDiagnostic] = None

    @property
    def stuck(self) -> bool:
        return self.diagnostic is not None

    @property
    def label(self) -> str:
        if self.algorithm in {"SJF", "Priority"}:
            mode = "preemptive" if self.preemptive else "non-preemptive"
            return f"{self.algorithm} ({mode})"
        return self.algorithm

    def completed_states(self) -> List[ProcessState]:
        return [s for s in self.final_states.values() if s.is_completed]


@dataclass
class ProcessMetrics:
    pid: int
    arrival_time: int
    burst_time: int
    io_time: int
    first_dispatch_time: int
    completion_time: int
    waiting_time: int
    turnaround_time: int
    response_time: int
    priority: int = 0


@dataclass
class SystemMetrics:
    cpu_busy_time: int
    idle_time: int
    makespan: int
    throughput: float
    cpu_utilization: float


@dataclass
class EvaluationReport:
    """
    Averages are ``None`` when no process completed.
    """

    processes: List[ProcessMetrics] = field(default_factory=list)
    avg_waiting: Optional[float] = None
    avg_turnaround: Optional[float] = None
    avg_response: Optional[float] = None
    system: Optional[SystemMetrics] = None

    @property
    def has_data(self) -> bool:
        return bool(self.processes)
