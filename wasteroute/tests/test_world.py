import pytest

from wasteroute.engine.entities import TruckState
from wasteroute.engine.metrics import compute_progress
from wasteroute.engine.world import build_points, layout_position
from wasteroute.settings import DEFAULT_TASKS


def test_default_tasks_on_diagonal():
    points = build_points(DEFAULT_TASKS)
    assert [(p.x, p.y) for p in points] == [(20.0, 20.0), (35.0, 35.0), (50.0, 50.0), (65.0, 65.0), (80.0, 80.0)]
    assert [p.status for p in points] == ["urgent", "normal", "normal", "urgent", "normal"]


def test_explicit_coordinates_win_over_layout():
    points = build_points([{"id": 1, "urgency": "normal", "x": 5, "y": 7}, {"id": 2}])
    assert (points[0].x, points[0].y) == (5.0, 7.0)
    assert (points[1].x, points[1].y) == layout_position(1)


def test_build_points_validates_input():
    with pytest.raises(ValueError):
        build_points([{"id": 1, "urgency": "completed"}])
    with pytest.raises(ValueError):
        build_points([{"id": 1, "fill_level": 120}])


def test_progress_counts():
    points = build_points(DEFAULT_TASKS)
    points[0].completed = True
    points[2].completed = True
    progress = compute_progress(points, TruckState(x=0.0, y=0.0, distance_traveled=12.5), ticks=7)
    assert progress == {
        "completed": 2,
        "total": 5,
        "remaining": 3,
        "urgent_remaining": 1,
        "completion_rate": 40.0,
        "distance_traveled": 12.5,
        "ticks": 7,
    }


def test_progress_empty():
    progress = compute_progress([], TruckState(x=0.0, y=0.0), ticks=0)
    assert progress["completion_rate"] == 0.0
    assert progress["total"] == 0


def test_build_points_requires_id():
    with pytest.raises(ValueError, match="missing id"):
        build_points([{"address": "1 Nowhere Rd", "urgency": "normal"}])
