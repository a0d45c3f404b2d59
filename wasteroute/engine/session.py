from __future__ import annotations

"""
File: wasteroute/engine/session.py
Purpose: Route session tying the task store, sequencer and simulator together.
Key responsibilities:
- Plan on activation and halt motion on deactivation.
- Apply arrivals and manual overrides to the task store.
- Emit completion events and build serializable snapshots.
"""

import logging
from typing import Callable, Iterable, Mapping

from wasteroute.engine.entities import (
    TASK_STATUSES,
    CompletionEvent,
    Point,
    TruckState,
    UpdateResult,
)
from wasteroute.engine.metrics import compute_progress
from wasteroute.engine.sequencer import DEFAULT_URGENCY_FACTORS, plan, route_length
from wasteroute.engine.simulator import MotionSimulator
from wasteroute.engine.store import TaskStore

logger = logging.getLogger("wasteroute-engine")


class RouteSession:
    """One driver session: a task store, a truck and its planned route."""
    def __init__(
        self,
        points: Iterable[Point],
        start: tuple[float, float] = (10.0, 90.0),
        speed: float = 2.0,
        arrival_radius: float | None = None,
        urgency_factors: Mapping[str, float] = DEFAULT_URGENCY_FACTORS,
        completion_sink: Callable[[CompletionEvent], None] | None = None,
    ) -> None:
        """Initialize the session with points and motion parameters."""
        for urgency in ("urgent", "normal"):
            if urgency not in urgency_factors:
                raise ValueError(f"missing urgency factor: {urgency}")
            if urgency_factors[urgency] < 0:
                raise ValueError(f"urgency factor must be >= 0: {urgency}")
        self.store = TaskStore(points)
        self.truck = TruckState(x=float(start[0]), y=float(start[1]))
        self.urgency_factors = dict(urgency_factors)
        self.completion_sink = completion_sink
        self.simulator = MotionSimulator(
            self.truck,
            speed=speed,
            arrival_radius=arrival_radius,
            is_open=self.store.is_open,
        )
        self.active = False
        self.selected_id: int | None = None

    @property
    def ticks(self) -> int:
        return self.simulator.ticks

    @property
    def route(self) -> list[Point]:
        """Remaining planned stops, head first."""
        return list(self.simulator.sequence)

    def set_active(self, active: bool) -> None:
        """Host toggle: plan and start on rising edge, halt on falling edge."""
        if active == self.active:
            return
        self.active = active
        if active:
            self._plan_and_start()
        else:
            self.simulator.stop()
            logger.info("route stopped x=%.3f y=%.3f", self.truck.x, self.truck.y)

    def toggle(self) -> bool:
        self.set_active(not self.active)
        return self.active

    def replan(self) -> list[Point]:
        """Rebuild the sequence from the current truck position while active."""
        if not self.active:
            return []
        return self._plan_and_start()

    def set_tasks(self, points: Iterable[Point]) -> None:
        """Replace the point set; the queued sequence is discarded."""
        self.store.replace(points)
        self.simulator.stop()
        if self.selected_id is not None and self.selected_id not in self.store:
            self.selected_id = None
        logger.info("tasks replaced total=%s pending=%s", len(self.store), len(self.store.pending()))
        if self.active:
            self._plan_and_start()

    def select(self, point_id: int) -> bool:
        """Highlight a task without changing its status."""
        if point_id not in self.store:
            return False
        self.selected_id = point_id
        return True

    def update_status(self, point_id: int, status: str) -> UpdateResult:
        """External override channel. Only completion changes state."""
        if status not in TASK_STATUSES:
            raise ValueError(f"invalid status: {status}")
        point = self.store.get(point_id)
        if point is None:
            return UpdateResult(task_id=point_id, applied=False, reason="unknown_task")
        if point.completed:
            return UpdateResult(task_id=point_id, applied=False, reason="already_completed")
        if status != "completed":
            if status == point.urgency:
                return UpdateResult(task_id=point_id, applied=False, reason="unchanged")
            logger.warning("urgency change refused task_id=%s from=%s to=%s", point_id, point.urgency, status)
            return UpdateResult(task_id=point_id, applied=False, reason="urgency_immutable")

        event = CompletionEvent(
            point_id=point_id,
            tick=self.ticks,
            x=round(self.truck.x, 3),
            y=round(self.truck.y, 3),
            source="manual",
        )
        self.simulator.drop(point_id)
        self.apply_completion(event)
        return UpdateResult(task_id=point_id, applied=True, reason="completed")

    def tick(self) -> list[CompletionEvent]:
        """Advance the truck one step. No-op while inactive."""
        if not self.active:
            return []
        events = self.simulator.tick()
        applied = [event for event in events if self.apply_completion(event)]
        if applied and not self.store.pending():
            logger.info("all tasks completed ticks=%s distance=%.3f", self.ticks, self.truck.distance_traveled)
        return applied

    def snapshot(self) -> dict:
        """Return a serializable snapshot of current session state."""
        origin = (self.truck.x, self.truck.y)
        route = self.route
        return {
            "tick": self.ticks,
            "active": self.active,
            "simulator_state": self.simulator.state,
            "truck": {
                "x": round(self.truck.x, 3),
                "y": round(self.truck.y, 3),
                "distance_traveled": round(self.truck.distance_traveled, 3),
            },
            "selected_id": self.selected_id,
            "route": [p.id for p in route],
            "route_length": round(route_length(origin, route), 3),
            "tasks": [
                {
                    "id": p.id,
                    "address": p.address,
                    "x": p.x,
                    "y": p.y,
                    "urgency": p.urgency,
                    "fill_level": p.fill_level,
                    "status": p.status,
                }
                for p in self.store
            ],
            "progress": compute_progress(self.store, self.truck, self.ticks),
        }

    def _plan_and_start(self) -> list[Point]:
        origin = (self.truck.x, self.truck.y)
        route = plan(origin, self.store.pending(), self.urgency_factors)
        self.simulator.start(route)
        logger.info(
            "route planned stops=%s order=%s length=%.3f",
            len(route),
            [p.id for p in route],
            route_length(origin, route),
        )
        return route

    def apply_completion(self, event: CompletionEvent) -> bool:
        """Complete the task in the store and select it; duplicates are no-ops."""
        if not self.store.complete(event.point_id):
            return False
        self.selected_id = event.point_id
        if self.completion_sink is not None:
            self.completion_sink(event)
        return True
