from __future__ import annotations

from fastapi import APIRouter, Request

from ...state import get_controller

router = APIRouter(tags=["meta"])


@router.get("/health")
async def health() -> dict:
    return {"status": "ok"}


@router.get("/meta")
async def meta(request: Request) -> dict:
    controller = get_controller(request)
    return {
        "app": "Video Server Player",
        "version": request.app.version,
        "service": controller.config.service_name,
        "videos": len(controller.store),
    }
