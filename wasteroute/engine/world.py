from __future__ import annotations

"""
File: wasteroute/engine/world.py
Purpose: Build points from host task records.
Key responsibilities:
- Validate urgency classes and fill levels.
- Place tasks without coordinates on the dashboard diagonal.
"""

from typing import Any, Iterable

from wasteroute.engine.entities import URGENCY_CLASSES, Point


def layout_position(index: int, origin: float = 20.0, spacing: float = 15.0) -> tuple[float, float]:
    """Diagonal placement used when a task carries no coordinates."""
    offset = origin + index * spacing
    return offset, offset


def build_points(
    tasks: Iterable[dict[str, Any]],
    origin: float = 20.0,
    spacing: float = 15.0,
) -> list[Point]:
    """Convert task dicts into points in host order."""
    points: list[Point] = []
    for index, task in enumerate(tasks):
        urgency = str(task.get("urgency", "normal"))
        if urgency not in URGENCY_CLASSES:
            raise ValueError(f"invalid urgency: {urgency}")
        fill_level = float(task.get("fill_level", 0.0))
        if not 0.0 <= fill_level <= 100.0:
            raise ValueError(f"fill_level out of range: {fill_level}")

        if task.get("id") is None:
            raise ValueError("task missing id")
        x, y = task.get("x"), task.get("y")
        if x is None or y is None:
            x, y = layout_position(index, origin, spacing)

        points.append(
            Point(
                id=int(task["id"]),
                x=float(x),
                y=float(y),
                urgency=urgency,  # type: ignore[arg-type]
                fill_level=fill_level,
                address=str(task.get("address", "")),
                completed=bool(task.get("completed", False)),
            )
        )
    return points
