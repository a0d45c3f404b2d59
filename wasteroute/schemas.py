from __future__ import annotations

"""
File: wasteroute/schemas.py
Purpose: Pydantic models for the host API request/response contracts.
Key responsibilities:
- Validate task lists and status overrides.
- Define the status override result schema.
"""

from pydantic import BaseModel, Field
from typing import Literal, Optional


Urgency = Literal["urgent", "normal"]
TaskStatus = Literal["urgent", "normal", "completed"]


class TaskIn(BaseModel):
    """Task supplied by the host; coordinates are optional."""
    id: int
    address: str = ""
    urgency: Urgency = "normal"
    fill_level: float = Field(default=0.0, ge=0, le=100)
    x: Optional[float] = Field(default=None, ge=0, le=100)
    y: Optional[float] = Field(default=None, ge=0, le=100)
    completed: bool = False


class TaskOut(BaseModel):
    """Task row as shown in the task list."""
    id: int
    address: str
    x: float
    y: float
    urgency: Urgency
    fill_level: float
    status: TaskStatus


class StatusUpdate(BaseModel):
    """Request body for a manual status override."""
    status: TaskStatus


class UpdateResultOut(BaseModel):
    """Response payload for a status override."""
    task_id: int
    applied: bool
    reason: str
