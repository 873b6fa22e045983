from __future__ import annotations

from dataclasses import dataclass

from .errors import ConfigurationError


DEFAULT_TIME_QUANTUM = 4
DEFAULT_MAX_PROCESSES = 100
DEFAULT_MAX_IO_EPISODES = 5
DEFAULT_MAX_TICKS = 10_000


@dataclass(frozen=True)
class SchedulerConfig:
    """
    Externally supplied knobs for a simulation run.

    ``merge_quantum_slices`` controls whether a round-robin slice that ends
    on a quantum boundary is merged with an immediate re-dispatch of the same
    process. By default each quantum stays a separate Gantt interval.
    """

    time_quantum: int = DEFAULT_TIME_QUANTUM
    max_processes: int = DEFAULT_MAX_PROCESSES
    max_io_episodes: int = DEFAULT_MAX_IO_EPISODES
    max_ticks: int = DEFAULT_MAX_TICKS
    merge_quantum_slices: bool = False

    def validate(self) -> "SchedulerConfig":
        if self.time_quantum <= 0:
            raise ConfigurationError(f"time_quantum must be positive, got {self.time_quantum}")
        if self.max_processes <= 0:
            raise ConfigurationError(f"max_processes must be positive, got {self.max_processes}")
        if self.max_io_episodes < 0:
            raise ConfigurationError(f"max_io_episodes cannot be negative, got {self.max_io_episodes}")
        if self.max_ticks <= 0:
            raise ConfigurationError(f"max_ticks must be positive, got {self.max_ticks}")
        return self
