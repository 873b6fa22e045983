from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, Tuple, Union

from .errors import ConfigurationError
from .models import ProcessState


SortKey = Tuple[int, ...]


def _fcfs_key(p: ProcessState) -> SortKey:
    return (p.arrival_time, p.pid)


def _sjf_key(p: ProcessState) -> SortKey:
    # Remaining (not initial) burst, so preemptive SJF behaves as SRTF.
    return (p.remaining_burst, p.arrival_time, p.pid)


def _priority_key(p: ProcessState) -> SortKey:
    return (p.priority, p.arrival_time, p.pid)


def _round_robin_key(p: ProcessState) -> SortKey:
    return (p.last_queue_entry_time, p.pid)


def _io_completion_key(p: ProcessState) -> SortKey:
    return (p.io_completes_at, p.pid)


class OrderingPolicy(Enum):
    """
    Total orders used by the ordered queues. Every key ends with the pid,
    so ties are always broken by pid ascending.
    """

    FCFS = "fcfs"
    SJF = "sjf"
    PRIORITY = "priority"
    ROUND_ROBIN = "rr"
    IO_COMPLETION = "io"

    def key(self, process: ProcessState) -> SortKey:
        return _KEYS[self](process)


_KEYS: Dict[OrderingPolicy, Callable[[ProcessState], SortKey]] = {
    OrderingPolicy.FCFS: _fcfs_key,
    OrderingPolicy.SJF: _sjf_key,
    OrderingPolicy.PRIORITY: _priority_key,
    OrderingPolicy.ROUND_ROBIN: _round_robin_key,
    OrderingPolicy.IO_COMPLETION: _io_completion_key,
}


class Algorithm(Enum):
    FCFS = "fcfs"
    SJF = "sjf"
    PRIORITY = "priority"
    ROUND_ROBIN = "rr"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def ready_policy(self) -> OrderingPolicy:
        return OrderingPolicy(self.value)

    @property
    def supports_preemption(self) -> bool:
        """
        Whether the ``preemptive`` flag changes anything. FCFS is
        non-preemptible and round-robin preempts on quantum expiry only.
        """
        return self in (Algorithm.SJF, Algorithm.PRIORITY)

    @classmethod
    def parse(cls, value: Union["Algorithm", str]) -> "Algorithm":
        if isinstance(value, Algorithm):
            return value
        name = str(value).strip().lower()
        name = _ALIASES.get(name, name)
        try:
            return cls(name)
        except ValueError:
            raise ConfigurationError(
                f"Unknown algorithm '{value}' (use fcfs, sjf, priority or rr)"
            ) from None


_DISPLAY_NAMES = {
    Algorithm.FCFS: "FCFS",
    Algorithm.SJF: "SJF",
    Algorithm.PRIORITY: "Priority",
    Algorithm.ROUND_ROBIN: "Round Robin",
}

_ALIASES = {
    "round_robin": "rr",
    "round-robin": "rr",
    "roundrobin": "rr",
}


def should_preempt(algorithm: Algorithm, candidate: ProcessState, running: ProcessState) -> bool:
    """
    Preemption predicate for the preemptive variants. Only a strictly better
    candidate displaces the running process.
    """
    if algorithm is Algorithm.SJF:
        return candidate.remaining_burst < running.remaining_burst
    if algorithm is Algorithm.PRIORITY:
        return candidate.priority < running.priority
    return False
