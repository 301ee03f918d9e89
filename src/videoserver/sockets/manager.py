from __future__ import annotations

import asyncio
import logging
from typing import Set
from fastapi import WebSocket


logger = logging.getLogger(__name__)


class WSManager:
    def __init__(self, service_name: str) -> None:
        self.service_name = service_name
        self._conns: Set[WebSocket] = set()
        self._tasks: Set[asyncio.Task] = set()
        self._lock = asyncio.Lock()

    async def connect(self, ws: WebSocket) -> None:
        await ws.accept()
        async with self._lock:
            self._conns.add(ws)
            await ws.send_json({"type": "connected", "payload": {"service": self.service_name}})

    async def disconnect(self, ws: WebSocket) -> None:
        async with self._lock:
            self._conns.discard(ws)

    async def broadcast(self, message: dict) -> None:
        async with self._lock:
            conns = list(self._conns)
        for c in conns:
            try:
                await c.send_json(message)
            except Exception:
                # Drop broken connections lazily
                logger.debug("Dropping unreachable socket")
                await self.disconnect(c)

    async def send(self, ws: WebSocket, name: str, payload: dict) -> None:
        await ws.send_json({"type": name, "payload": payload})

    def notify(self, name: str, payload: dict) -> None:
        """Fire-and-forget broadcast usable from timer callbacks."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running loop; %s not delivered", name)
            return
        task = loop.create_task(self.broadcast({"type": name, "payload": payload}))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def emit_error(self, ws: WebSocket, message: str) -> None:
        await ws.send_json({"type": "error", "payload": {"message": message}})
