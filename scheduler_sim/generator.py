from __future__ import annotations

import logging
import random
from typing import List, Optional

from .config import SchedulerConfig
from .errors import CapacityError, ConfigurationError
from .models import IoEpisode, ProcessSpec


logger = logging.getLogger(__name__)


def _random_io_episodes(rng: random.Random, burst_time: int, max_episodes: int) -> List[IoEpisode]:
    count = rng.randrange(max_episodes) if max_episodes > 0 else 0
    if count == 0:
        return []

    # Spread request points over the burst, one per segment plus some jitter.
    segment = burst_time // (count + 1)
    episodes: List[IoEpisode] = []
    previous = 0
    for j in range(count):
        request_at = segment * (j + 1) + rng.randint(0, segment // 2)
        request_at = min(request_at, burst_time - 1)
        duration = rng.randint(2, 9)
        # Clamping can collapse two points; keep request points strictly increasing.
        if request_at <= previous:
            continue
        episodes.append(IoEpisode(request_at=request_at, duration=duration))
        previous = request_at
    return episodes


def generate_workload(
    count: int,
    seed: Optional[int] = None,
    config: Optional[SchedulerConfig] = None,
) -> List[ProcessSpec]:
    """
    Random process set: arrivals in 0..19, bursts in 5..24, priorities in
    0..9 and up to ``max_io_episodes - 1`` I/O episodes of 2..9 ticks each.
    Pids run from 1 to ``count``.
    """
    config = (config or SchedulerConfig()).validate()
    if count <= 0:
        raise ConfigurationError(f"Process count must be positive, got {count}")
    if count > config.max_processes:
        raise CapacityError(f"Cannot generate {count} processes, ceiling is {config.max_processes}")

    rng = random.Random(seed)
    specs: List[ProcessSpec] = []
    for pid in range(1, count + 1):
        arrival_time = rng.randrange(20)
        burst_time = rng.randint(5, 24)
        priority = rng.randrange(10)
        specs.append(
            ProcessSpec(
                pid=pid,
                arrival_time=arrival_time,
                burst_time=burst_time,
                priority=priority,
                io_episodes=_random_io_episodes(rng, burst_time, config.max_io_episodes),
            )
        )

    logger.info(f"Generated {count} processes (seed={seed})")
    return specs
