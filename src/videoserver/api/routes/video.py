from __future__ import annotations

import asyncio
import logging
from typing import BinaryIO, Iterator

from fastapi import APIRouter, Request, Response
from fastapi.responses import StreamingResponse

from ...schemas.playlist import PlaylistResponse
from ...state import get_controller


router = APIRouter()
logger = logging.getLogger(__name__)

# The same URL serves different bytes over time; nothing may cache it
NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


def _iter_file(stream: BinaryIO, size: int, chunk_size: int) -> Iterator[bytes]:
    """Yield at most ``size`` bytes so the body never disagrees with Content-Length."""
    remaining = size
    while remaining > 0:
        chunk = stream.read(min(chunk_size, remaining))
        if not chunk:
            break
        remaining -= len(chunk)
        yield chunk


class FileStreamResponse(StreamingResponse):
    """StreamingResponse that owns an open file and closes it when the response ends.

    The close happens whether the body completed, the read failed or the
    client went away, not whenever the body iterator is garbage-collected.
    """

    def __init__(self, stream: BinaryIO, size: int, chunk_size: int, **kwargs) -> None:
        self._stream = stream
        super().__init__(_iter_file(stream, size, chunk_size), **kwargs)

    async def __call__(self, scope, receive, send) -> None:
        try:
            await super().__call__(scope, receive, send)
        finally:
            self._stream.close()


@router.get("/video")
async def stream_video(request: Request) -> Response:
    controller = get_controller(request)
    video = controller.current
    if video is None:
        return Response(status_code=503, headers=NO_CACHE_HEADERS)

    loop = asyncio.get_running_loop()
    try:
        stream = await loop.run_in_executor(None, controller.fs.open_read_stream, video.path)
    except OSError as e:
        logger.warning("Cannot open %s: %s", video.path, e)
        return Response(status_code=503, headers=NO_CACHE_HEADERS)

    logger.debug("Streaming [%d] %s (%d bytes)", video.index, video.name, video.size)
    headers = dict(NO_CACHE_HEADERS)
    headers["Content-Length"] = str(video.size)
    # Sync iterators are drained in Starlette's threadpool, off the event loop
    return FileStreamResponse(
        stream,
        video.size,
        controller.config.chunk_size,
        media_type=video.mime_type,
        headers=headers,
    )


@router.get("/playlist", response_model=PlaylistResponse)
async def get_playlist(request: Request) -> PlaylistResponse:
    return PlaylistResponse(**get_controller(request).snapshot())
