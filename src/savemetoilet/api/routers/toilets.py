from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from savemetoilet.api.dependencies import get_collector
from savemetoilet.api.errors import ApiError
from savemetoilet.api.response import toilet_payload
from savemetoilet.core.models import ToiletDataset
from savemetoilet.providers.paged import SeoulToiletCollector

router = APIRouter(prefix="/api/v1/test/toilets", tags=["toilets"])
logger = logging.getLogger(__name__)

MAX_SAMPLE_LIMIT = 100


async def _fetch_dataset(collector: SeoulToiletCollector, failure_message: str) -> ToiletDataset:
    try:
        return await collector.fetch_all()
    except Exception as exc:
        logger.exception("toilet_route_fetch_failed")
        raise ApiError("TOILET_FETCH_FAILED", f"{failure_message}: {exc}", 500) from exc


def _status_message(dataset: ToiletDataset, success_message: str) -> str:
    if dataset.complete:
        return success_message
    reasons = ", ".join(sorted({item.reason for item in dataset.diagnostics}))
    return f"{success_message} (partial: {reasons})"


@router.get("/sample")
async def sample_toilets(
    limit: int = 10,
    collector: SeoulToiletCollector = Depends(get_collector),
) -> dict[str, object]:
    limit = max(0, min(limit, MAX_SAMPLE_LIMIT))
    dataset = await _fetch_dataset(collector, "Toilet sample lookup failed")
    sample = dataset.records[:limit]
    return {
        "success": True,
        "total_count": len(dataset.records),
        "sample_count": len(sample),
        "complete": dataset.complete,
        "toilets": [toilet_payload(record) for record in sample],
        "message": _status_message(dataset, "Toilet sample lookup succeeded"),
    }


@router.get("/count")
async def count_toilets(collector: SeoulToiletCollector = Depends(get_collector)) -> dict[str, object]:
    dataset = await _fetch_dataset(collector, "Toilet count lookup failed")
    return {
        "success": True,
        "total_count": len(dataset.records),
        "complete": dataset.complete,
        "message": _status_message(dataset, "Toilet count lookup succeeded"),
    }
