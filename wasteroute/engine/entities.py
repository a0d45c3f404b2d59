from __future__ import annotations

"""
File: wasteroute/engine/entities.py
Purpose: Core dataclasses and type aliases for route engine state.
"""

from dataclasses import dataclass
from typing import Literal


Urgency = Literal["urgent", "normal"]
TaskStatus = Literal["urgent", "normal", "completed"]
SimulatorState = Literal["idle", "active"]
CompletionSource = Literal["arrival", "manual"]

URGENCY_CLASSES: frozenset[str] = frozenset({"urgent", "normal"})
TASK_STATUSES: frozenset[str] = frozenset({"urgent", "normal", "completed"})


@dataclass
class Point:
    """A pickup location tracked by the task store."""
    id: int
    x: float
    y: float
    urgency: Urgency
    fill_level: float = 0.0
    address: str = ""
    completed: bool = False

    @property
    def status(self) -> TaskStatus:
        """Display status: completion wins over urgency."""
        if self.completed:
            return "completed"
        return self.urgency


@dataclass
class TruckState:
    """Continuous truck position and odometer."""
    x: float
    y: float
    distance_traveled: float = 0.0


@dataclass(frozen=True)
class CompletionEvent:
    """A point reached by the truck or completed by the host."""
    point_id: int
    tick: int
    x: float
    y: float
    source: CompletionSource = "arrival"


@dataclass(frozen=True)
class UpdateResult:
    """Outcome of a status override request."""
    task_id: int
    applied: bool
    reason: str
