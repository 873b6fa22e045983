from __future__ import annotations

from typing import List

from .models import IDLE_PID, TimelineInterval


class TimelineRecorder:
    """
    Run-length encodes CPU occupancy into Gantt intervals.

    A span that continues the previous interval (same pid, touching
    boundary) extends it instead of opening a new one. :meth:`seal` closes
    the last interval for good, so a process re-dispatched right after its
    quantum expired still shows up as a separate slice.
    """

    def __init__(self) -> None:
        self._intervals: List[TimelineInterval] = []
        self._sealed = False

    def record(self, pid: int, start: int, end: int) -> None:
        if end <= start:
            return

        if self._intervals and not self._sealed:
            last = self._intervals[-1]
            if last.pid == pid and last.end_time == start:
                last.end_time = end
                return

        self._intervals.append(TimelineInterval(pid=pid, start_time=start, end_time=end))
        self._sealed = False

    def record_idle(self, start: int, end: int) -> None:
        self.record(IDLE_PID, start, end)

    def seal(self) -> None:
        self._sealed = True

    @property
    def intervals(self) -> List[TimelineInterval]:
        return list(self._intervals)

    def __len__(self) -> int:
        return len(self._intervals)
