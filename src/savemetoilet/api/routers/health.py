from __future__ import annotations

from fastapi import APIRouter, Depends

from savemetoilet import __version__
from savemetoilet.api.dependencies import get_collector
from savemetoilet.api.response import now_millis
from savemetoilet.providers.paged import SeoulToiletCollector

router = APIRouter(prefix="/api/v1/test", tags=["health"])


@router.get("/health")
async def health() -> dict[str, object]:
    return {
        "status": "UP",
        "message": "SaveMeToilet Backend is running",
        "timestamp": now_millis(),
        "version": __version__,
    }


@router.get("/connection")
async def connection(collector: SeoulToiletCollector = Depends(get_collector)) -> dict[str, object]:
    connected = await collector.test_connection()
    return {
        "success": connected,
        "message": "Seoul API connection succeeded" if connected else "Seoul API connection failed",
        "timestamp": now_millis(),
    }
