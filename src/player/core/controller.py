from __future__ import annotations

import random
from typing import Any, Callable, Optional

from player.core.playlist import PlaylistStore
from player.core.selector import CurrentVideoSelector
from player.core.state import Config, VideoDescriptor
from player.core.sync import SyncProtocolHandler
from player.core.timer import AsyncioScheduler, Scheduler
from player.fs import FileSystem, LocalFileSystem


class PlayerController:
    """One player instance: playlist store, selector and protocol handler wired together.

    Filesystem, scheduler, randomness and the outbound notification sink are
    injected so tests can drive time and file presence deterministically.
    """

    def __init__(
        self,
        config: Config,
        notify: Callable[[str, dict], None],
        *,
        fs: Optional[FileSystem] = None,
        scheduler: Optional[Scheduler] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config
        self.fs: FileSystem = fs or LocalFileSystem()
        self.store = PlaylistStore(self.fs, rng=rng)
        self.selector = CurrentVideoSelector(
            self.store,
            scheduler or AsyncioScheduler(),
            self._on_commit,
            advance_decrement_ms=config.advance_decrement_ms,
        )
        self.sync = SyncProtocolHandler(
            self.store,
            self.selector,
            notify,
            prefix=config.service_name,
            default_timeout_ms=config.default_timeout_ms,
        )

    def _on_commit(self, descriptor: VideoDescriptor) -> None:
        self.sync.on_commit(descriptor)

    @property
    def current(self) -> Optional[VideoDescriptor]:
        return self.selector.current

    async def handle(self, name: str, payload: Optional[dict] = None) -> None:
        await self.sync.handle(name, payload)

    async def apply_initial_config(self) -> bool:
        """Seed the playlist from the configured videos, if any."""
        if not self.config.videos:
            return False
        return await self.sync.set_config(list(self.config.videos), self.config.shuffle)

    def snapshot(self) -> dict[str, Any]:
        current = self.selector.current
        return {
            "items": [v.to_payload() for v in self.store.videos],
            "shuffle": self.store.shuffle,
            "busy": self.store.busy,
            "status": self.selector.status,
            "current": current.to_payload() if current else None,
        }
