from scheduler_sim.gantt import build_rich_gantt, format_timeline
from scheduler_sim.models import TimelineInterval


def test_format_timeline():
    timeline = [TimelineInterval(1, 0, 2), TimelineInterval(0, 2, 5), TimelineInterval(1, 5, 8)]
    assert format_timeline(timeline) == "| P1 (0-2) | idle (2-5) | P1 (5-8) |"


def test_empty_timeline():
    assert format_timeline([]) == "(no execution)"
    _, marks = build_rich_gantt([])
    assert marks == ""


def test_rich_gantt_time_marks():
    _, marks = build_rich_gantt([TimelineInterval(1, 0, 5), TimelineInterval(2, 5, 8)])
    assert marks.split() == ["0", "5", "8"]
