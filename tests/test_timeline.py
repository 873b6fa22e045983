from scheduler_sim.timeline import TimelineRecorder


def _tuples(recorder):
    return [i.as_tuple() for i in recorder.intervals]


def test_contiguous_same_pid_is_merged():
    r = TimelineRecorder()
    r.record(1, 0, 3)
    r.record(1, 3, 5)
    assert _tuples(r) == [(1, 0, 5)]


def test_gap_or_other_pid_starts_new_interval():
    r = TimelineRecorder()
    r.record(1, 0, 2)
    r.record(2, 2, 4)
    r.record(1, 4, 6)
    r.record(1, 7, 8)
    assert _tuples(r) == [(1, 0, 2), (2, 2, 4), (1, 4, 6), (1, 7, 8)]


def test_seal_prevents_merge_once():
    r = TimelineRecorder()
    r.record(1, 0, 4)
    r.seal()
    r.record(1, 4, 8)
    r.record(1, 8, 9)
    assert _tuples(r) == [(1, 0, 4), (1, 4, 9)]


def test_empty_spans_are_ignored():
    r = TimelineRecorder()
    r.record(1, 3, 3)
    r.record_idle(5, 4)
    assert len(r) == 0


def test_idle_intervals_use_pid_zero():
    r = TimelineRecorder()
    r.record_idle(0, 3)
    r.record(1, 3, 4)
    intervals = r.intervals
    assert intervals[0].is_idle
    assert intervals[0].duration == 3
    assert not intervals[1].is_idle
