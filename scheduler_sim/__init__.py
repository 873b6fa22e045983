"""
Scheduler simulation package.

Tick-driven simulation of CPU scheduling (FCFS, SJF, Priority, Round Robin)
with I/O episodes, producing a Gantt timeline and performance metrics.
"""

from .config import SchedulerConfig
from .engine import run_scheduler
from .errors import CapacityError, ConfigurationError, SchedulerError, SpecValidationError
from .metrics import evaluate
from .models import IoEpisode, ProcessSpec, SimulationResult, TimelineInterval
from .policies import Algorithm

__all__ = [
    "Algorithm",
    "CapacityError",
    "ConfigurationError",
    "IoEpisode",
    "ProcessSpec",
    "SchedulerConfig",
    "SchedulerError",
    "SimulationResult",
    "SpecValidationError",
    "TimelineInterval",
    "evaluate",
    "run_scheduler",
]
