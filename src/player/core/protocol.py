from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


SET_CONFIG = "SET_CONFIG"
NEXT = "NEXT"
RESET = "RESET"
CURRENT_VIDEO = "CURRENT_VIDEO"


class SetConfigPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    videos: List[str] = Field(default_factory=list)
    shuffle: bool = False


class NextPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    index: Optional[int] = None
    timeout_ms: Optional[int] = Field(default=None, alias="timeoutMs")


class CurrentVideoPayload(BaseModel):
    index: int
    name: str
    path: str
    size: int
    type: str
