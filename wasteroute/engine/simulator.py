from __future__ import annotations

"""
File: wasteroute/engine/simulator.py
Purpose: Tick-driven truck motion toward the head of the planned sequence.
Key responsibilities:
- Advance the truck a fixed step per tick along a straight line.
- Detect arrival within the arrival radius and pop the reached point.
- Drop stale or externally completed points from the queue.
"""

import logging
from math import hypot
from typing import Callable, Iterable

from wasteroute.engine.entities import CompletionEvent, Point, SimulatorState, TruckState

logger = logging.getLogger("wasteroute-engine")


class MotionSimulator:
    """Stepper holding the truck position and the remaining sequence."""
    def __init__(
        self,
        truck: TruckState,
        speed: float = 2.0,
        arrival_radius: float | None = None,
        is_open: Callable[[int], bool] | None = None,
    ) -> None:
        """Initialize with a truck and motion parameters."""
        if speed <= 0:
            raise ValueError("speed must be > 0")
        if arrival_radius is None:
            arrival_radius = speed
        if arrival_radius < speed / 2:
            raise ValueError("arrival_radius must be >= speed / 2")
        self.truck = truck
        self.speed = float(speed)
        self.arrival_radius = float(arrival_radius)
        self.is_open = is_open
        self.sequence: list[Point] = []
        self.state: SimulatorState = "idle"
        self.ticks = 0

    @property
    def active(self) -> bool:
        return self.state == "active"

    @property
    def target(self) -> Point | None:
        """Current head of the sequence, if any."""
        return self.sequence[0] if self.sequence else None

    def start(self, route: Iterable[Point]) -> None:
        """Seed the sequence and go active when there is somewhere to go."""
        self.sequence = list(route)
        self.state = "active" if self.sequence else "idle"
        logger.info("simulator start stops=%s state=%s", len(self.sequence), self.state)

    def stop(self) -> None:
        """Go idle and discard the queued sequence. Position is kept."""
        if self.state == "active":
            logger.info("simulator stop x=%.3f y=%.3f", self.truck.x, self.truck.y)
        self.state = "idle"
        self.sequence = []

    def drop(self, point_id: int) -> bool:
        """Remove a point from the queued sequence. Returns True if it was queued."""
        before = len(self.sequence)
        self.sequence = [p for p in self.sequence if p.id != point_id]
        dropped = len(self.sequence) != before
        if not self.sequence:
            self.state = "idle"
        return dropped

    def tick(self) -> list[CompletionEvent]:
        """Advance one tick and return arrivals (at most one)."""
        if self.state != "active":
            return []

        self._drop_stale_head()
        target = self.target
        if target is None:
            self.state = "idle"
            return []

        self.ticks += 1
        dx = target.x - self.truck.x
        dy = target.y - self.truck.y
        distance = hypot(dx, dy)

        if distance > 0:
            # No clamping: overshoot is caught by the radius check below.
            ratio = self.speed / distance
            self.truck.x += dx * ratio
            self.truck.y += dy * ratio
            self.truck.distance_traveled += self.speed
            remaining = hypot(target.x - self.truck.x, target.y - self.truck.y)
        else:
            remaining = 0.0

        if remaining > self.arrival_radius:
            return []

        self.sequence.pop(0)
        event = CompletionEvent(
            point_id=target.id,
            tick=self.ticks,
            x=round(self.truck.x, 3),
            y=round(self.truck.y, 3),
            source="arrival",
        )
        logger.info("arrived point_id=%s tick=%s remaining_stops=%s", target.id, self.ticks, len(self.sequence))
        if not self.sequence:
            self.state = "idle"
        return [event]

    def _drop_stale_head(self) -> None:
        """Pop leading points the store no longer considers open."""
        if self.is_open is None:
            return
        while self.sequence and not self.is_open(self.sequence[0].id):
            stale = self.sequence.pop(0)
            logger.info("dropped stale stop point_id=%s", stale.id)
