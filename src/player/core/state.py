# core/state.py

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

# ---------- Config ----------
@dataclass
class Config:
    profile: str
    service_name: str = "MMM-VideoServerPlayer"
    host: str = "127.0.0.1"
    port: int = 8090
    resync_interval_s: float = 1.0
    advance_decrement_ms: int = 50
    default_timeout_ms: int = 1
    chunk_size: int = 64 * 1024
    videos: list[str] = field(default_factory=list)
    shuffle: bool = False
    log_level: str = "INFO"


# ---------- Video Descriptor ----------
@dataclass(frozen=True)
class VideoDescriptor:
    index: int
    name: str
    path: str
    size: int
    mime_type: str

    def to_payload(self) -> dict[str, Any]:
        # Wire form of CURRENT_VIDEO
        return {
            "index": self.index,
            "name": self.name,
            "path": self.path,
            "size": self.size,
            "type": self.mime_type,
        }
