from __future__ import annotations

"""
File: wasteroute/ws.py
Purpose: Snapshot fan-out to dashboard WebSocket clients.
Key responsibilities:
- Hand every new client the current session snapshot.
- Skip snapshots identical to the last one published.
- Evict clients whose send fails.
"""

import asyncio
import json
import logging
from typing import Any

from fastapi import WebSocket

logger = logging.getLogger("wasteroute-ws")


def encode_snapshot(snapshot: dict[str, Any]) -> str:
    """Compact, key-sorted JSON so equal snapshots encode identically."""
    return json.dumps(snapshot, separators=(",", ":"), sort_keys=True)


class SnapshotHub:
    """Push route session snapshots to connected dashboards."""
    def __init__(self) -> None:
        self.clients: set[WebSocket] = set()
        self.last_payload: str | None = None
        self.published = 0
        self._lock = asyncio.Lock()

    async def attach(self, websocket: WebSocket, snapshot: dict[str, Any]) -> None:
        """Accept a client and send it the current state before any broadcast."""
        await websocket.accept()
        await websocket.send_text(encode_snapshot(snapshot))
        async with self._lock:
            self.clients.add(websocket)
        logger.info("dashboard attached clients=%s", len(self.clients))

    async def detach(self, websocket: WebSocket) -> None:
        async with self._lock:
            self.clients.discard(websocket)

    async def publish(self, snapshot: dict[str, Any]) -> int:
        """Send a snapshot to every client. Returns how many received it."""
        payload = encode_snapshot(snapshot)
        if payload == self.last_payload:
            return 0
        self.last_payload = payload
        self.published += 1

        async with self._lock:
            clients = list(self.clients)
        delivered = 0
        dead: list[WebSocket] = []
        for client in clients:
            try:
                await client.send_text(payload)
                delivered += 1
            except Exception:  # noqa: BLE001
                dead.append(client)
        if dead:
            async with self._lock:
                self.clients.difference_update(dead)
            logger.info("dashboard evicted clients=%s tick=%s", len(dead), snapshot.get("tick"))
        return delivered
