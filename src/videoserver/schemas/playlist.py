from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, Field

from player.core.protocol import CurrentVideoPayload


class PlaylistResponse(BaseModel):
    items: List[CurrentVideoPayload] = []
    shuffle: bool = False
    busy: bool = False
    status: str = Field(pattern=r"^(empty|transitioning|playing)$")
    current: Optional[CurrentVideoPayload] = None
