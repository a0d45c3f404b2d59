from __future__ import annotations

"""
File: wasteroute/engine/metrics.py
Purpose: Compute route progress from point and truck state.
"""

from typing import Iterable

from wasteroute.engine.entities import Point, TruckState


def compute_progress(points: Iterable[Point], truck: TruckState, ticks: int) -> dict[str, float | int]:
    """Completed/remaining counts, completion rate and distance driven."""
    points = list(points)
    total = len(points)
    completed = sum(1 for p in points if p.completed)
    urgent_remaining = sum(1 for p in points if not p.completed and p.urgency == "urgent")
    completion_rate = (completed / total * 100.0) if total else 0.0

    return {
        "completed": completed,
        "total": total,
        "remaining": total - completed,
        "urgent_remaining": urgent_remaining,
        "completion_rate": round(completion_rate, 6),
        "distance_traveled": round(truck.distance_traveled, 6),
        "ticks": ticks,
    }
