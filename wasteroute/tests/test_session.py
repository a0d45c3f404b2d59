import pytest

from wasteroute.engine.entities import CompletionEvent, Point
from wasteroute.engine.session import RouteSession
from wasteroute.engine.world import build_points
from wasteroute.settings import DEFAULT_TASKS


def _session(**kwargs) -> RouteSession:
    return RouteSession(build_points(DEFAULT_TASKS), start=(10.0, 90.0), speed=2.0, **kwargs)


def _run_until_idle(session: RouteSession, limit: int = 1000):
    events = []
    for _ in range(limit):
        events.extend(session.tick())
        if not session.simulator.active:
            break
    return events


def test_inactive_session_does_not_plan_or_move():
    session = _session()
    assert session.route == []
    assert session.tick() == []
    assert session.snapshot()["truck"]["x"] == 10.0


def test_activation_plans_from_truck_position():
    session = _session()
    session.set_active(True)
    ids = [p.id for p in session.route]
    assert sorted(ids) == [1, 2, 3, 4, 5]
    # Pine St is urgent and closest to the depot corner once discounted.
    assert ids[0] == 4
    assert session.simulator.state == "active"


def test_full_run_completes_in_planned_order():
    completed = []
    session = _session(completion_sink=completed.append)
    session.set_active(True)
    planned = [p.id for p in session.route]

    events = _run_until_idle(session)

    assert [e.point_id for e in events] == planned
    assert [e.point_id for e in completed] == planned
    snap = session.snapshot()
    assert all(task["status"] == "completed" for task in snap["tasks"])
    assert snap["selected_id"] == planned[-1]
    assert snap["progress"]["completed"] == 5
    assert snap["progress"]["remaining"] == 0
    assert snap["route"] == []
    # Host flag stays on; only the simulator goes idle.
    assert snap["active"] is True
    assert snap["simulator_state"] == "idle"


def test_completion_is_idempotent():
    sink = []
    session = _session(completion_sink=sink.append)
    event = CompletionEvent(point_id=2, tick=0, x=0.0, y=0.0)

    assert session.apply_completion(event) is True
    once = session.snapshot()
    assert session.apply_completion(event) is False

    assert session.snapshot() == once
    assert len(sink) == 1


def test_completion_for_unknown_id_is_noop():
    session = _session()
    assert session.apply_completion(CompletionEvent(point_id=99, tick=0, x=0.0, y=0.0)) is False
    assert session.selected_id is None


def test_manual_completion_removes_from_route():
    session = _session()
    session.set_active(True)

    result = session.update_status(4, "completed")

    assert result.applied is True
    assert 4 not in [p.id for p in session.route]
    assert session.selected_id == 4
    events = _run_until_idle(session)
    assert 4 not in [e.point_id for e in events]


def test_update_status_rejections():
    session = _session()
    assert session.update_status(42, "completed").reason == "unknown_task"
    assert session.update_status(1, "urgent").reason == "unchanged"
    refused = session.update_status(1, "normal")
    assert refused.applied is False
    assert refused.reason == "urgency_immutable"
    assert session.store.get(1).urgency == "urgent"

    session.update_status(1, "completed")
    assert session.update_status(1, "completed").reason == "already_completed"
    assert session.update_status(1, "urgent").reason == "already_completed"
    assert session.store.get(1).completed is True

    with pytest.raises(ValueError):
        session.update_status(1, "done")


def test_stop_freezes_truck_and_pending_tick_is_noop():
    session = _session()
    session.set_active(True)
    for _ in range(3):
        session.tick()
    session.set_active(False)
    frozen = session.snapshot()["truck"]

    # A tick scheduled before stop fires afterwards.
    assert session.tick() == []
    assert session.snapshot()["truck"] == frozen
    assert session.route == []


def test_restart_replans_remaining_from_current_position():
    session = _session()
    session.set_active(True)
    first = session.route[0].id
    for _ in range(200):
        if first not in [p.id for p in session.route]:
            break
        session.tick()
    session.set_active(False)
    session.set_active(True)
    assert first not in [p.id for p in session.route]
    assert len(session.route) == 4


def test_set_tasks_keeps_completed_and_replans():
    session = _session()
    session.set_active(True)
    session.update_status(2, "completed")

    session.set_tasks(build_points(DEFAULT_TASKS[:3]))

    ids = [p.id for p in session.route]
    assert sorted(ids) == [1, 3]
    assert session.store.get(2).completed is True
    assert len(session.store) == 3


def test_set_tasks_drops_stale_selection():
    session = _session()
    session.select(5)
    session.set_tasks(build_points(DEFAULT_TASKS[:2]))
    assert session.selected_id is None


def test_duplicate_task_ids_rejected():
    session = _session()
    points = [Point(id=1, x=1, y=1, urgency="normal"), Point(id=1, x=2, y=2, urgency="normal")]
    with pytest.raises(ValueError):
        session.set_tasks(points)


def test_invalid_urgency_factors_rejected():
    with pytest.raises(ValueError):
        RouteSession([], urgency_factors={"urgent": 0.5})


def test_replan_only_while_active():
    session = _session()
    assert session.replan() == []
    session.set_active(True)
    assert len(session.replan()) == 5


def test_snapshot_shape():
    session = _session()
    snap = session.snapshot()
    assert set(snap) == {
        "tick",
        "active",
        "simulator_state",
        "truck",
        "selected_id",
        "route",
        "route_length",
        "tasks",
        "progress",
    }
    assert snap["tasks"][0] == {
        "id": 1,
        "address": "123 Main St",
        "x": 20.0,
        "y": 20.0,
        "urgency": "urgent",
        "fill_level": 90.0,
        "status": "urgent",
    }
