from __future__ import annotations

import os
import asyncio
import logging
import random
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from player.core.config import load_config
from player.core.controller import PlayerController
from player.core.state import Config
from player.core.timer import Scheduler
from player.fs import FileSystem

from .api.routes.health import router as health_router
from .api.routes.video import router as video_router
from .sockets.ws import router as ws_router
from .sockets.manager import WSManager


logger = logging.getLogger(__name__)


def create_app(
    config: Optional[Config] = None,
    *,
    fs: Optional[FileSystem] = None,
    scheduler: Optional[Scheduler] = None,
    rng: Optional[random.Random] = None,
) -> FastAPI:
    cfg = config or load_config(os.getenv("VIDEOSERVER_PROFILE", "default"))
    app = FastAPI(title="Video Server Player", version=os.getenv("APP_VERSION", "0.1.0"))

    # The presentation client usually lives on another origin (e.g. the mirror UI)
    web_origin = os.getenv("WEB_ORIGIN", "http://localhost:8080")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[web_origin, "http://127.0.0.1:8080"],
        allow_credentials=False,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    ws_manager = WSManager(cfg.service_name)
    app.state.ws_manager = ws_manager
    app.state.controller = PlayerController(
        cfg, ws_manager.notify, fs=fs, scheduler=scheduler, rng=rng
    )

    app.include_router(health_router)
    app.include_router(video_router, prefix=f"/{cfg.service_name}", tags=["video"])
    app.include_router(ws_router)

    @app.on_event("startup")
    async def _start_background() -> None:
        controller: PlayerController = app.state.controller
        logger.info("Started (service=%s)", cfg.service_name)
        try:
            await controller.apply_initial_config()
        except Exception:
            logger.exception("Initial playlist could not be applied")
        app.state._resync_task = asyncio.create_task(
            controller.sync.run_resync(cfg.resync_interval_s)
        )

    @app.on_event("shutdown")
    async def _stop_background() -> None:
        # Stop resync loop
        t = getattr(app.state, "_resync_task", None)
        if t:
            t.cancel()
        # Pending transitions must not fire into a closed loop
        app.state.controller.selector.clear()

    return app
