from pathlib import Path

import pytest

from scheduler_sim.errors import SpecValidationError
from scheduler_sim.models import IoEpisode, ProcessSpec
from scheduler_sim.workload_io import load_workload, save_workload


def test_load_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":1,"arrival_time":0,"burst_time":6,"priority":1,'
                 '"io":[{"request_at":2,"duration":3}]},'
                 '{"pid":2,"arrival_time":1,"burst_time":2}]')
    procs = load_workload(p)
    assert isinstance(procs[0], ProcessSpec)
    assert procs[0].io_episodes == (IoEpisode(2, 3),)
    assert procs[1].priority == 0
    assert procs[1].arrival_time == 1


def test_load_csv(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time,priority,io\n1,0,9,1,2:3;5:1\n2,1,2,,\n")
    procs = load_workload(p)
    assert procs[0].pid == 1
    assert procs[0].io_episodes == (IoEpisode(2, 3), IoEpisode(5, 1))
    assert procs[1].priority == 0
    assert procs[1].io_episodes == ()


def test_save_then_load(tmp_path: Path):
    specs = [
        ProcessSpec(1, arrival_time=0, burst_time=9, priority=2, io_episodes=[IoEpisode(3, 4)]),
        ProcessSpec(2, arrival_time=5, burst_time=4, priority=7),
    ]
    for name in ("w.json", "w.csv"):
        assert load_workload(save_workload(specs, tmp_path / name)) == specs


def test_malformed_entry(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":1,"burst_time":3}]')
    with pytest.raises(ValueError, match="Invalid process entry"):
        load_workload(p)


def test_invalid_spec_values(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time\n1,0,0\n")
    with pytest.raises(SpecValidationError):
        load_workload(p)


def test_unsupported_suffix(tmp_path: Path):
    with pytest.raises(ValueError, match="Unsupported"):
        load_workload(tmp_path / "w.txt")
