from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Mapping, Optional

from pydantic import ValidationError

from player.core.playlist import PlaylistStore
from player.core.protocol import (
    CURRENT_VIDEO,
    NEXT,
    RESET,
    SET_CONFIG,
    CurrentVideoPayload,
    NextPayload,
    SetConfigPayload,
)
from player.core.selector import CurrentVideoSelector
from player.core.state import VideoDescriptor
from player.errors import ProtocolError


logger = logging.getLogger(__name__)

Notify = Callable[[str, dict], None]


class SyncProtocolHandler:
    """Turns inbound notifications into store/selector calls and emits CURRENT_VIDEO.

    Delivery is best-effort: the only recovery for a client that missed a
    notification is the periodic ``resync``.
    """

    def __init__(
        self,
        store: PlaylistStore,
        selector: CurrentVideoSelector,
        notify: Notify,
        *,
        prefix: str = "",
        default_timeout_ms: int = 1,
    ) -> None:
        self.store = store
        self.selector = selector
        self._notify = notify
        self._prefix = f"{prefix}-" if prefix else ""
        self._default_timeout_ms = default_timeout_ms
        self._ever_selected = False

    # --- Inbound ------------------------------------------------------------
    async def handle(self, name: str, payload: Optional[Mapping[str, Any]] = None) -> None:
        notification = name[len(self._prefix):] if self._prefix and name.startswith(self._prefix) else name
        data = dict(payload or {})
        try:
            if notification == SET_CONFIG:
                cfg = SetConfigPayload.model_validate(data)
                await self.set_config(cfg.videos, cfg.shuffle)
            elif notification == NEXT:
                nxt = NextPayload.model_validate(data)
                self.next(nxt.index, nxt.timeout_ms)
            elif notification == RESET:
                self.reset()
            else:
                raise ProtocolError(f"Unknown notification: {name}", notification=name)
        except ValidationError as e:
            raise ProtocolError(f"Invalid {notification} payload: {e}", notification=notification) from e

    async def set_config(self, videos: list[str], shuffle: bool) -> bool:
        generation = self.store.generation
        changed = await self.store.apply_config(videos, shuffle)
        if self.store.generation != generation:
            # A RESET landed while this configuration was being reconciled
            return False
        if len(self.store) == 0:
            self.selector.clear()
            return changed
        if (changed or not self._ever_selected) and self.selector.is_empty:
            self.selector.set_current_video(0, 0)
        return changed

    def next(self, index: Optional[int], timeout_ms: Optional[int]) -> bool:
        if self.selector.pending:
            return False
        n = len(self.store)
        if n == 0 or self.selector.current is None:
            return False
        # A missing index means "one before the start": (n - 1 + 1) mod n == 0
        from_index = index if index is not None else n - 1
        hint = timeout_ms if timeout_ms is not None else self._default_timeout_ms
        return self.selector.advance(from_index, hint)

    def reset(self) -> None:
        self.selector.clear()
        self.store.clear()
        self.store.release()
        self._ever_selected = False
        logger.info("Player state reset")

    # --- Outbound -----------------------------------------------------------
    def on_commit(self, descriptor: VideoDescriptor) -> None:
        self._ever_selected = True
        self._emit(descriptor)

    def resync(self) -> bool:
        """Re-send the committed selection, if any."""
        current = self.selector.current
        if current is None:
            return False
        self._emit(current)
        return True

    async def run_resync(self, interval_s: float) -> None:
        while True:
            try:
                self.resync()
            except Exception:
                logger.exception("Periodic resync failed")
            await asyncio.sleep(max(0.05, interval_s))

    def _emit(self, descriptor: VideoDescriptor) -> None:
        payload = CurrentVideoPayload(**descriptor.to_payload()).model_dump()
        self._notify(CURRENT_VIDEO, payload)
