from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Iterable, List

from .models import IoEpisode, ProcessSpec


logger = logging.getLogger(__name__)

CSV_FIELDS = ["pid", "arrival_time", "burst_time", "priority", "io"]


def load_workload(path: str | Path) -> List[ProcessSpec]:
    """
    Load a workload from a JSON or CSV file into a list of ProcessSpec objects.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        specs = _load_json(path)
    elif suffix == ".csv":
        specs = _load_csv(path)
    else:
        raise ValueError(f"Unsupported workload format: {suffix} (use .json or .csv)")

    logger.info(f"Loaded {len(specs)} processes from {path}")
    return specs


def save_workload(specs: Iterable[ProcessSpec], path: str | Path) -> Path:
    """
    Write a workload in the format implied by the file suffix.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    specs = list(specs)

    if suffix == ".json":
        with path.open("w", encoding="utf-8") as f:
            json.dump([_spec_to_mapping(s) for s in specs], f, indent=2)
    elif suffix == ".csv":
        with path.open("w", encoding="utf-8", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
            writer.writeheader()
            for s in specs:
                row = _spec_to_mapping(s)
                row["io"] = ";".join(f"{e['request_at']}:{e['duration']}" for e in row["io"])
                writer.writerow(row)
    else:
        raise ValueError(f"Unsupported workload format: {suffix} (use .json or .csv)")

    logger.info(f"Saved {len(specs)} processes to {path}")
    return path


def _load_json(path: Path) -> List[ProcessSpec]:
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, list):
        raise ValueError("JSON workload must be a list of process objects")

    return [_spec_from_mapping(entry) for entry in raw]


def _load_csv(path: Path) -> List[ProcessSpec]:
    specs: List[ProcessSpec] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            specs.append(_spec_from_mapping(row))
    return specs


def _parse_io(value) -> List[IoEpisode]:
    """
    Accept either a list of ``{"request_at", "duration"}`` objects (JSON)
    or a ``request:duration;request:duration`` string (CSV).
    """
    if value in (None, ""):
        return []
    if isinstance(value, str):
        episodes = []
        for chunk in value.split(";"):
            request_at, duration = chunk.split(":")
            episodes.append(IoEpisode(request_at=int(request_at), duration=int(duration)))
        return episodes
    return [IoEpisode(request_at=int(e["request_at"]), duration=int(e["duration"])) for e in value]


def _spec_from_mapping(mapping) -> ProcessSpec:
    try:
        pid = int(mapping["pid"])
        arrival_time = int(mapping["arrival_time"])
        burst_time = int(mapping["burst_time"])
        priority_val = mapping.get("priority")
        priority = int(priority_val) if priority_val not in (None, "") else 0
        io_episodes = _parse_io(mapping.get("io"))
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise ValueError(f"Invalid process entry: {mapping!r}") from exc

    return ProcessSpec(
        pid=pid,
        arrival_time=arrival_time,
        burst_time=burst_time,
        priority=priority,
        io_episodes=io_episodes,
    )


def _spec_to_mapping(spec: ProcessSpec) -> dict:
    return {
        "pid": spec.pid,
        "arrival_time": spec.arrival_time,
        "burst_time": spec.burst_time,
        "priority": spec.priority,
        "io": [{"request_at": e.request_at, "duration": e.duration} for e in spec.io_episodes],
    }
