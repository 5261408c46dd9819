from __future__ import annotations

import time

from savemetoilet.core.models import ToiletRecord


def now_millis() -> int:
    return int(time.time() * 1000)


def error_response(message: str) -> dict[str, object]:
    return {"success": False, "message": message}


def toilet_payload(record: ToiletRecord) -> dict[str, object]:
    # Upstream field names, which the frontend reads directly.
    return {
        "POI_ID": record.poi_id,
        "FNAME": record.name,
        "ANAME": record.type_name,
        "CNAME": record.category,
        "X_WGS84": record.longitude,
        "Y_WGS84": record.latitude,
        "INSERTDATE": record.inserted_at,
        "UPDATEDATE": record.updated_at,
    }
