from __future__ import annotations

"""
File: wasteroute/main.py
Purpose: FastAPI host for the waste collection route engine.
Key responsibilities:
- Own the task list and the start/stop toggle.
- Accept manual status overrides.
- Stream session snapshots to dashboard clients over WebSocket.
Key entrypoints:
- create_app()
- /api/* endpoints, /ws
Config/env vars:
- APP_HOST, APP_PORT, TICK_INTERVAL_MS
- TRUCK_START_X, TRUCK_START_Y, TRUCK_SPEED, ARRIVAL_RADIUS
- URGENT_FACTOR, NORMAL_FACTOR, PIN_ORIGIN, PIN_SPACING
"""

import logging
from typing import Any

from fastapi import FastAPI, HTTPException, WebSocket
import uvicorn

from wasteroute.engine.session import RouteSession
from wasteroute.engine.world import build_points
from wasteroute.runner import TickLoop
from wasteroute.schemas import StatusUpdate, TaskIn, TaskOut, UpdateResultOut
from wasteroute.settings import DEFAULT_TASKS, Settings, settings, urgency_factors
from wasteroute.ws import SnapshotHub

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s wasteroute %(message)s")
logger = logging.getLogger("wasteroute")


def build_session(cfg: Settings = settings) -> RouteSession:
    """Create a session seeded with the default demo tasks."""
    points = build_points(DEFAULT_TASKS, origin=cfg.pin_origin, spacing=cfg.pin_spacing)
    return RouteSession(
        points,
        start=(cfg.truck_start_x, cfg.truck_start_y),
        speed=cfg.truck_speed,
        arrival_radius=cfg.arrival_radius,
        urgency_factors=urgency_factors(cfg),
    )


def create_app(cfg: Settings = settings) -> FastAPI:
    """Build the API with its own session, tick loop and snapshot hub."""
    app = FastAPI(title="wasteroute", version="1.0.0")
    hub = SnapshotHub()
    session = build_session(cfg)
    session.completion_sink = lambda event: logger.info(
        "completion task_id=%s source=%s tick=%s", event.point_id, event.source, event.tick
    )
    loop = TickLoop(session, interval_s=cfg.tick_interval_ms / 1000.0, snapshot_sink=hub.publish)

    app.state.cfg = cfg
    app.state.session = session
    app.state.loop = loop
    app.state.hub = hub

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        """Halt the tick task on service shutdown."""
        loop.stop()

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Liveness/readiness endpoint."""
        return {"status": "ok"}

    @app.get("/api/config")
    async def config() -> dict[str, Any]:
        """Return engine parameters and the default task list."""
        return {
            "engine": {
                "tick_interval_ms": cfg.tick_interval_ms,
                "truck_start": {"x": cfg.truck_start_x, "y": cfg.truck_start_y},
                "truck_speed": cfg.truck_speed,
                "arrival_radius": session.simulator.arrival_radius,
                "urgency_factors": urgency_factors(cfg),
            },
            "default_tasks": DEFAULT_TASKS,
        }

    @app.get("/api/tasks", response_model=list[TaskOut])
    async def list_tasks() -> list[dict[str, Any]]:
        """Task list rows in host order."""
        return session.snapshot()["tasks"]

    @app.put("/api/tasks", response_model=list[TaskOut])
    async def replace_tasks(tasks: list[TaskIn]) -> list[dict[str, Any]]:
        """Replace the task list and replan if the route is running."""
        try:
            points = build_points(
                [task.model_dump() for task in tasks],
                origin=cfg.pin_origin,
                spacing=cfg.pin_spacing,
            )
            session.set_tasks(points)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        await loop.publish()
        return session.snapshot()["tasks"]

    @app.post("/api/tasks/{task_id}/status", response_model=UpdateResultOut)
    async def update_status(task_id: int, body: StatusUpdate) -> dict[str, Any]:
        """Manual override; only completion changes state."""
        result = session.update_status(task_id, body.status)
        if result.reason == "unknown_task":
            raise HTTPException(status_code=404, detail=f"unknown task: {task_id}")
        if result.applied:
            await loop.publish()
        return {"task_id": result.task_id, "applied": result.applied, "reason": result.reason}

    @app.post("/api/tasks/{task_id}/select")
    async def select_task(task_id: int) -> dict[str, Any]:
        """Highlight a task on the map without completing it."""
        if not session.select(task_id):
            raise HTTPException(status_code=404, detail=f"unknown task: {task_id}")
        await loop.publish()
        return session.snapshot()

    @app.post("/api/route/start")
    async def start_route() -> dict[str, Any]:
        loop.start()
        await loop.publish()
        return session.snapshot()

    @app.post("/api/route/stop")
    async def stop_route() -> dict[str, Any]:
        loop.stop()
        await loop.publish()
        return session.snapshot()

    @app.post("/api/route/toggle")
    async def toggle_route() -> dict[str, Any]:
        """Start/stop button."""
        loop.toggle()
        await loop.publish()
        return session.snapshot()

    @app.post("/api/route/replan")
    async def replan_route() -> dict[str, Any]:
        """Explicit replan from the current truck position."""
        session.replan()
        await loop.publish()
        return session.snapshot()

    @app.get("/api/snapshot")
    async def snapshot() -> dict[str, Any]:
        """Current truck position, route and task statuses."""
        return session.snapshot()

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket) -> None:
        """WebSocket endpoint streaming session snapshots."""
        await hub.attach(websocket, session.snapshot())
        try:
            while True:
                await websocket.receive_text()
        except Exception:  # noqa: BLE001
            await hub.detach(websocket)

    return app


app = create_app()


def main() -> None:
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
