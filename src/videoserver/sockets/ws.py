from __future__ import annotations

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
import asyncio
import json
import logging

from player.core.protocol import CURRENT_VIDEO
from player.errors import ProtocolError
from ..state import get_controller, get_ws_manager


router = APIRouter()


@router.websocket("/ws/{service_name}")
async def player_ws(ws: WebSocket, service_name: str):
    logger = logging.getLogger("videoserver.ws")
    controller = get_controller(ws)
    ws_manager = get_ws_manager(ws)
    if service_name != controller.config.service_name:
        await ws.close(code=1008)
        return
    await ws_manager.connect(ws)
    logger.info("WebSocket connected (service=%s)", service_name)
    try:
        # Bring a freshly (re)loaded client up to date without waiting for the next resync tick
        current = controller.current
        if current is not None:
            await ws_manager.send(ws, CURRENT_VIDEO, current.to_payload())
        while True:
            # Receive a text frame; tolerate non-JSON frames and transient errors.
            try:
                raw = await ws.receive_text()
            except WebSocketDisconnect as e:
                # Normal disconnect path (client closed or network drop)
                logger.info("WebSocket disconnect (service=%s, code=%s)", service_name, getattr(e, "code", None))
                break
            except RuntimeError as e:
                # Starlette raises a RuntimeError with a generic message when the socket
                # is not in CONNECTED state (either not yet accepted or already closed).
                logger.info("WebSocket not connected/closed (service=%s): %s", service_name, str(e))
                break

            try:
                data = json.loads(raw) if raw else {}
            except ValueError:
                data = {}
            if not isinstance(data, dict):
                data = {}

            typ = data.get("type") or data.get("notification")
            if typ == "ping":
                try:
                    await ws.send_json({"type": "pong"})
                except Exception:
                    # Best-effort pong; keep the loop alive
                    logger.debug("Failed to send pong (service=%s)", service_name)
                continue
            if not typ:
                await ws_manager.emit_error(ws, "Frame without a notification type")
                continue

            payload = data.get("payload")
            try:
                await controller.handle(str(typ), payload if isinstance(payload, dict) else {})
            except ProtocolError as e:
                logger.warning("Rejected %s frame: %s", e.notification, e)
                await ws_manager.emit_error(ws, str(e))
            # Yield so timers scheduled by the handler (delay 0) can fire between frames
            await asyncio.sleep(0)
    except Exception:
        # Catch-all to avoid silent teardown on unexpected errors
        logger.exception("WebSocket handler error (service=%s)", service_name)
    finally:
        await ws_manager.disconnect(ws)
