from __future__ import annotations

"""
File: wasteroute/runner.py
Purpose: Fixed-cadence asyncio loop that drives route session ticks.
Key responsibilities:
- Start/stop the periodic tick task together with the session toggle.
- Publish snapshots after ticks that changed state.
Key entrypoints:
- TickLoop.start(), TickLoop.stop()
Config/env vars:
- TICK_INTERVAL_MS
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable

from wasteroute.engine.session import RouteSession

logger = logging.getLogger("wasteroute-runner")

SnapshotSink = Callable[[dict[str, Any]], Awaitable[Any]]


class TickLoop:
    """Owns the single periodic task mutating a route session."""
    def __init__(
        self,
        session: RouteSession,
        interval_s: float,
        snapshot_sink: SnapshotSink | None = None,
    ) -> None:
        if interval_s <= 0:
            raise ValueError("interval_s must be > 0")
        self.session = session
        self.interval_s = interval_s
        self.snapshot_sink = snapshot_sink
        self.task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self.task is not None and not self.task.done()

    def start(self) -> None:
        """Activate the session and schedule the tick task on the running loop."""
        self.session.set_active(True)
        if self.running:
            return
        self.task = asyncio.create_task(self._run())
        logger.info("tick loop started interval_s=%s", self.interval_s)

    def stop(self) -> None:
        """Deactivate synchronously; a tick already scheduled becomes a no-op."""
        self.session.set_active(False)
        if self.task is not None:
            self.task.cancel()
            self.task = None
            logger.info("tick loop stopped")

    def toggle(self) -> bool:
        if self.session.active:
            self.stop()
        else:
            self.start()
        return self.session.active

    async def publish(self) -> None:
        """Send the current snapshot to the sink, if any."""
        if self.snapshot_sink is None:
            return
        await self.snapshot_sink(self.session.snapshot())

    async def _run(self) -> None:
        """Tick on a fixed interval until the session is deactivated."""
        try:
            while self.session.active:
                await asyncio.sleep(self.interval_s)
                if not self.session.active:
                    break
                was_moving = self.session.simulator.active
                self.session.tick()
                if was_moving:
                    await self.publish()
        except asyncio.CancelledError:
            raise
        except Exception as exc:  # noqa: BLE001
            logger.exception("tick loop error: %s", exc)
            self.session.set_active(False)
