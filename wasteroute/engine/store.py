from __future__ import annotations

"""
File: wasteroute/engine/store.py
Purpose: In-memory task store owning point status.
Key responsibilities:
- Hold points keyed by id in host order.
- Apply terminal, idempotent completion.
"""

import logging
from typing import Iterable, Iterator

from wasteroute.engine.entities import Point

logger = logging.getLogger("wasteroute-store")


class TaskStore:
    """Mutable mapping of task id to point, preserving insertion order."""
    def __init__(self, points: Iterable[Point] = ()) -> None:
        self._points: dict[int, Point] = {}
        self.replace(points)

    def replace(self, points: Iterable[Point]) -> None:
        """Swap in a new point set; ids completed before stay completed."""
        previous = self._points
        fresh: dict[int, Point] = {}
        for point in points:
            if point.id in fresh:
                raise ValueError(f"duplicate task id: {point.id}")
            old = previous.get(point.id)
            if old is not None and old.completed:
                point.completed = True
            fresh[point.id] = point
        self._points = fresh

    def get(self, point_id: int) -> Point | None:
        return self._points.get(point_id)

    def __contains__(self, point_id: object) -> bool:
        return point_id in self._points

    def __iter__(self) -> Iterator[Point]:
        return iter(list(self._points.values()))

    def __len__(self) -> int:
        return len(self._points)

    def pending(self) -> list[Point]:
        """Points not yet completed, in host order."""
        return [p for p in self._points.values() if not p.completed]

    def is_open(self, point_id: int) -> bool:
        """True if the id exists and is not completed."""
        point = self._points.get(point_id)
        return point is not None and not point.completed

    def complete(self, point_id: int) -> bool:
        """Mark a point completed. Returns False for unknown or already completed ids."""
        point = self._points.get(point_id)
        if point is None:
            logger.debug("complete ignored unknown task_id=%s", point_id)
            return False
        if point.completed:
            return False
        point.completed = True
        logger.info("task completed task_id=%s address=%s", point.id, point.address)
        return True
