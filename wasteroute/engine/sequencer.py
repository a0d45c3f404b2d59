from __future__ import annotations

"""
File: wasteroute/engine/sequencer.py
Purpose: Urgency-weighted nearest-neighbor route ordering.
Key responsibilities:
- Score candidates by distance times an urgency discount.
- Build a deterministic visiting order over non-completed points.
"""

from math import hypot
from typing import Iterable, Mapping

from wasteroute.engine.entities import Point

DEFAULT_URGENCY_FACTORS: dict[str, float] = {"urgent": 0.5, "normal": 1.0}


def _distance(ax: float, ay: float, bx: float, by: float) -> float:
    """Euclidean distance helper."""
    return hypot(ax - bx, ay - by)


def score(
    origin: tuple[float, float],
    point: Point,
    factors: Mapping[str, float] = DEFAULT_URGENCY_FACTORS,
) -> float:
    """Distance from origin to point, discounted by the point's urgency."""
    return _distance(origin[0], origin[1], point.x, point.y) * factors[point.urgency]


def plan(
    origin: tuple[float, float],
    points: Iterable[Point],
    factors: Mapping[str, float] = DEFAULT_URGENCY_FACTORS,
) -> list[Point]:
    """Return a visiting order for the non-completed points.

    Greedy: from the current position pick the lowest score, move there and
    repeat. Ties keep the earliest point in input order.
    """
    remaining = [p for p in points if not p.completed]
    route: list[Point] = []
    current = (float(origin[0]), float(origin[1]))

    while remaining:
        best_idx = 0
        best_score = float("inf")
        for idx, point in enumerate(remaining):
            s = score(current, point, factors)
            if s < best_score:
                best_score = s
                best_idx = idx
        nxt = remaining.pop(best_idx)
        route.append(nxt)
        current = (nxt.x, nxt.y)

    return route


def route_length(origin: tuple[float, float], route: Iterable[Point]) -> float:
    """Total polyline length from origin through every stop in order."""
    total = 0.0
    cx, cy = origin
    for point in route:
        total += _distance(cx, cy, point.x, point.y)
        cx, cy = point.x, point.y
    return total
