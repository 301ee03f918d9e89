from __future__ import annotations

import asyncio
import logging
import random
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from player.core.state import VideoDescriptor
from player.fs import FileSystem


logger = logging.getLogger(__name__)


def existing_unique(fs: FileSystem, paths: Iterable[str]) -> List[str]:
    """Drop duplicates (first occurrence wins) and paths that are not files right now."""
    seen: set[str] = set()
    out: List[str] = []
    for p in paths:
        if p in seen:
            continue
        seen.add(p)
        if fs.exists(p):
            out.append(p)
    return out


class PlaylistStore:
    """Ordered list of video descriptors, rebuilt from configuration pushes.

    Rebuilds happen only when the set of existing requested paths differs from
    the current playlist or the shuffle flag flips, so the client's periodic
    re-send of an unchanged configuration never reshuffles or re-indexes.
    """

    def __init__(self, fs: FileSystem, rng: Optional[random.Random] = None) -> None:
        self._fs = fs
        self._rng = rng or random.Random()
        self._videos: Tuple[VideoDescriptor, ...] = ()
        self._shuffle = False
        self._busy = False
        self._generation = 0

    # --- Busy guard ---------------------------------------------------------
    def try_acquire(self) -> bool:
        """Take the busy guard; False when another configuration is in progress."""
        if self._busy:
            return False
        self._busy = True
        return True

    def release(self) -> None:
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def generation(self) -> int:
        """Bumped by clear(); a reconcile started under an older value is discarded."""
        return self._generation

    # --- Read access ---------------------------------------------------------
    @property
    def videos(self) -> Tuple[VideoDescriptor, ...]:
        return self._videos

    @property
    def shuffle(self) -> bool:
        return self._shuffle

    @property
    def paths(self) -> List[str]:
        return [v.path for v in self._videos]

    def __len__(self) -> int:
        return len(self._videos)

    # --- Mutation ------------------------------------------------------------
    async def apply_config(self, requested_paths: Sequence[str], shuffle: bool) -> bool:
        """Reconcile the playlist with ``requested_paths``; return True when it was rebuilt.

        A call made while another one holds the busy guard is dropped. If clear()
        runs while the disk work is in flight, the result is discarded and the
        guard, which no longer belongs to this call, is left alone.
        """
        if not self.try_acquire():
            logger.debug("Playlist busy; dropping configuration (%d paths)", len(requested_paths))
            return False
        generation = self._generation
        try:
            current_paths = self.paths
            loop = asyncio.get_running_loop()
            rebuilt = await loop.run_in_executor(
                None,
                lambda: self._reconcile(list(requested_paths), current_paths, bool(shuffle)),
            )
            if generation != self._generation:
                logger.debug("Playlist cleared during reconcile; discarding result")
                return False
            if rebuilt is None:
                return False
            self._videos = rebuilt
            self._shuffle = bool(shuffle)
            logger.info(
                "Playlist rebuilt: %d videos (shuffle=%s)", len(self._videos), self._shuffle
            )
            return True
        finally:
            if generation == self._generation:
                self.release()

    def _reconcile(
        self, requested: List[str], current: List[str], shuffle: bool
    ) -> Optional[Tuple[VideoDescriptor, ...]]:
        # Runs in a worker thread: every fs call may block
        wanted = existing_unique(self._fs, requested)
        have = existing_unique(self._fs, current)
        dropped = len(requested) - len(wanted)
        if dropped:
            logger.debug("Skipped %d duplicate or missing paths", dropped)
        added = set(wanted) - set(have)
        removed = set(have) - set(wanted)
        if not added and not removed and shuffle == self._shuffle:
            logger.debug("Playlist unchanged (%d videos)", len(have))
            return None
        order = list(wanted)
        if shuffle:
            self._rng.shuffle(order)
        return tuple(self._describe(order))

    def _describe(self, paths: List[str]) -> List[VideoDescriptor]:
        out: List[VideoDescriptor] = []
        for p in paths:
            try:
                size = self._fs.size(p)
            except OSError:
                # Vanished between the existence check and the stat
                logger.debug("Skipping %s: stat failed", p)
                continue
            out.append(
                VideoDescriptor(
                    index=len(out),
                    name=Path(p).name,
                    path=p,
                    size=size,
                    mime_type=self._fs.mime_type(p),
                )
            )
        return out

    def clear(self) -> None:
        self._videos = ()
        self._shuffle = False
        self._generation += 1
