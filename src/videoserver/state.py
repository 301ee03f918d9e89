from __future__ import annotations

from starlette.requests import HTTPConnection

from player.core.controller import PlayerController
from .sockets.manager import WSManager


def get_controller(conn: HTTPConnection) -> PlayerController:
    """The PlayerController owned by the app serving this request or socket."""
    return conn.app.state.controller


def get_ws_manager(conn: HTTPConnection) -> WSManager:
    return conn.app.state.ws_manager
