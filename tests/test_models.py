import pytest

from scheduler_sim.errors import SpecValidationError
from scheduler_sim.models import IoEpisode, LifecycleState, ProcessSpec, ProcessState


def test_io_episodes_stored_as_tuple():
    spec = ProcessSpec(1, arrival_time=0, burst_time=10, io_episodes=[IoEpisode(2, 3), IoEpisode(6, 4)])
    assert isinstance(spec.io_episodes, tuple)
    assert spec.total_io_time == 7


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(pid=0, arrival_time=0, burst_time=3),
        dict(pid=1, arrival_time=-1, burst_time=3),
        dict(pid=1, arrival_time=0, burst_time=0),
        dict(pid=1, arrival_time=0, burst_time=5, io_episodes=[IoEpisode(0, 2)]),
        dict(pid=1, arrival_time=0, burst_time=5, io_episodes=[IoEpisode(5, 2)]),
        dict(pid=1, arrival_time=0, burst_time=9, io_episodes=[IoEpisode(4, 2), IoEpisode(4, 1)]),
        dict(pid=1, arrival_time=0, burst_time=9, io_episodes=[IoEpisode(6, 2), IoEpisode(3, 1)]),
        dict(pid=1, arrival_time=0, burst_time=9, io_episodes=[IoEpisode(3, -1)]),
        dict(pid=1, arrival_time=0, burst_time=2.5),
        dict(pid=1, arrival_time="3", burst_time=2),
        dict(pid=1, arrival_time=0, burst_time=True),
        dict(pid=1, arrival_time=0, burst_time=4, priority=1.5),
        dict(pid=1, arrival_time=0, burst_time=9, io_episodes=[(2, 3)]),
        dict(pid=1, arrival_time=0, burst_time=9, io_episodes=[IoEpisode(2.0, 3)]),
        dict(pid=1, arrival_time=0, burst_time=9, io_episodes=[IoEpisode(2, "3")]),
    ],
)
def test_invalid_specs_rejected(kwargs):
    with pytest.raises(SpecValidationError):
        ProcessSpec(**kwargs)


def test_validation_error_is_a_value_error():
    with pytest.raises(ValueError, match="burst_time"):
        ProcessSpec(1, arrival_time=0, burst_time=-2)


def test_fresh_state_from_spec():
    spec = ProcessSpec(4, arrival_time=2, burst_time=6, priority=3, io_episodes=[IoEpisode(2, 1)])
    state = ProcessState.from_spec(spec)
    assert state.pid == 4
    assert state.remaining_burst == 6
    assert state.lifecycle is LifecycleState.NOT_ARRIVED
    assert state.first_dispatch_time is None
    assert state.next_io_episode == IoEpisode(2, 1)

    state.next_io_index = 1
    assert state.next_io_episode is None


def test_zero_length_io_episode_allowed():
    spec = ProcessSpec(1, arrival_time=0, burst_time=4, io_episodes=[IoEpisode(2, 0)])
    assert spec.total_io_time == 0


def test_float_burst_rejected_before_simulating():
    with pytest.raises(SpecValidationError, match="burst_time must be an integer"):
        ProcessSpec(1, arrival_time=0, burst_time=2.5)
