from __future__ import annotations

import logging
from typing import Callable, Optional

from player.core.playlist import PlaylistStore
from player.core.state import VideoDescriptor
from player.core.timer import Scheduler, TimerHandle


logger = logging.getLogger(__name__)

EMPTY = "empty"
TRANSITIONING = "transitioning"
PLAYING = "playing"


class CurrentVideoSelector:
    """Holds the committed current video and at most one scheduled transition."""

    def __init__(
        self,
        store: PlaylistStore,
        scheduler: Scheduler,
        on_commit: Callable[[VideoDescriptor], None],
        *,
        advance_decrement_ms: int = 50,
    ) -> None:
        self._store = store
        self._scheduler = scheduler
        self._on_commit = on_commit
        self._decrement_ms = max(0, int(advance_decrement_ms))
        self._current: Optional[VideoDescriptor] = None
        self._pending: Optional[TimerHandle] = None

    @property
    def current(self) -> Optional[VideoDescriptor]:
        return self._current

    @property
    def pending(self) -> bool:
        return self._pending is not None

    @property
    def status(self) -> str:
        if self._pending is not None:
            return TRANSITIONING
        if self._current is None:
            return EMPTY
        return PLAYING

    @property
    def is_empty(self) -> bool:
        return self.status == EMPTY

    def set_current_video(self, index: int, delay_ms: int) -> bool:
        """Schedule a commit of ``index`` after ``delay_ms``; False if one is already pending."""
        if self._pending is not None:
            return False
        self._pending = self._scheduler.call_later(max(0, int(delay_ms)), lambda: self._commit(index))
        logger.debug("Transition to index %d scheduled in %d ms", index, delay_ms)
        return True

    def advance(self, from_index: int, timeout_hint_ms: int) -> bool:
        n = len(self._store)
        if n == 0:
            self.clear()
            return False
        next_index = (from_index + 1) % n
        if self._current is not None and next_index == self._current.index:
            return False
        return self.set_current_video(next_index, max(0, timeout_hint_ms - self._decrement_ms))

    def clear(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        if self._current is not None:
            logger.info("Selection cleared")
        self._current = None

    def _commit(self, index: int) -> None:
        self._pending = None
        videos = self._store.videos
        if not videos:
            # Playlist emptied while the transition was pending
            self._current = None
            return
        self._current = videos[index % len(videos)]
        logger.info("Current video: [%d] %s", self._current.index, self._current.name)
        self._on_commit(self._current)
