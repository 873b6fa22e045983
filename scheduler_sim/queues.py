from __future__ import annotations

import heapq
from typing import Dict, List, Optional, Tuple

from .errors import CapacityError, ConfigurationError
from .models import ProcessState
from .policies import OrderingPolicy, SortKey


_Entry = Tuple[SortKey, ProcessState]


class OrderedQueue:
    """
    Binary-heap priority queue of ``ProcessState`` references.

    The ordering policy is installed with :meth:`configure`, so the same
    queue type serves every algorithm. Sort keys are taken when a process is
    inserted; the engine never changes the fields a key depends on while the
    process sits in the queue.
    """

    def __init__(self, name: str, policy: Optional[OrderingPolicy] = None, capacity: Optional[int] = None) -> None:
        self.name = name
        self.capacity = capacity
        self._policy = policy
        self._heap: List[_Entry] = []
        self._members: Dict[int, ProcessState] = {}

    @property
    def policy(self) -> Optional[OrderingPolicy]:
        return self._policy

    def configure(self, policy: OrderingPolicy) -> None:
        """
        Install a new ordering policy, re-keying anything already queued.
        """
        self._policy = policy
        self._heap = [(policy.key(p), p) for _, p in self._heap]
        heapq.heapify(self._heap)

    def insert(self, process: ProcessState) -> None:
        if self._policy is None:
            raise ConfigurationError(f"{self.name} queue has no ordering policy configured")
        if process.pid in self._members:
            raise ValueError(f"P{process.pid} is already in the {self.name} queue")
        if self.capacity is not None and len(self._heap) >= self.capacity:
            raise CapacityError(f"{self.name} queue is full ({self.capacity} processes)")

        heapq.heappush(self._heap, (self._policy.key(process), process))
        self._members[process.pid] = process

    def extract_min(self) -> Optional[ProcessState]:
        if not self._heap:
            return None
        _, process = heapq.heappop(self._heap)
        del self._members[process.pid]
        return process

    def peek_min(self) -> Optional[ProcessState]:
        if not self._heap:
            return None
        return self._heap[0][1]

    def remove_by_id(self, pid: int) -> Optional[ProcessState]:
        """
        Pull a specific process out of the queue, wherever it sits in the heap.
        """
        if pid not in self._members:
            return None

        index = next(i for i, (_, p) in enumerate(self._heap) if p.pid == pid)
        last = self._heap.pop()
        if index < len(self._heap):
            self._heap[index] = last
            heapq.heapify(self._heap)
        return self._members.pop(pid)

    def size(self) -> int:
        return len(self._heap)

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    def __contains__(self, pid: object) -> bool:
        return pid in self._members

    def snapshot(self) -> List[ProcessState]:
        """
        Queued processes in extraction order, without disturbing the heap.
        """
        return [p for _, p in sorted(self._heap, key=lambda entry: entry[0])]
