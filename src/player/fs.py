from __future__ import annotations

import mimetypes
import os
from typing import BinaryIO, Protocol


DEFAULT_MIME_TYPE = "application/octet-stream"

# Container types some platforms leave out of their mime tables
mimetypes.add_type("video/mp4", ".m4v")
mimetypes.add_type("video/webm", ".webm")
mimetypes.add_type("video/x-matroska", ".mkv")


class FileSystem(Protocol):
    """The slice of the filesystem the player core depends on."""

    def exists(self, path: str) -> bool: ...

    def size(self, path: str) -> int: ...

    def mime_type(self, path: str) -> str: ...

    def open_read_stream(self, path: str) -> BinaryIO: ...


class LocalFileSystem:
    """FileSystem backed by the local disk. All calls block; run them off the event loop."""

    def exists(self, path: str) -> bool:
        try:
            return os.path.isfile(path)
        except (OSError, ValueError):
            return False

    def size(self, path: str) -> int:
        return os.stat(path).st_size

    def mime_type(self, path: str) -> str:
        mt, _ = mimetypes.guess_type(path)
        return mt or DEFAULT_MIME_TYPE

    def open_read_stream(self, path: str) -> BinaryIO:
        return open(path, "rb")
