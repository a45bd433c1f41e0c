from __future__ import annotations

from fastapi import APIRouter

from featuregraph import __version__

router = APIRouter()


@router.get("/health/live")
async def live():
    return {"status": "ok", "version": __version__}
