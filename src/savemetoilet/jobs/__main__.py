from __future__ import annotations

import asyncio
import json
import os
import sys
from dataclasses import asdict

from savemetoilet.api.response import toilet_payload
from savemetoilet.config import load_settings
from savemetoilet.core.models import ToiletDataset
from savemetoilet.observability import configure_logging
from savemetoilet.providers.factory import build_collector


def _parse_non_negative_int(name: str, default: str) -> int:
    value = int(os.getenv(name, default))
    if value < 0:
        raise RuntimeError(f"{name} must be >= 0")
    return value


def build_summary(dataset: ToiletDataset, sample_size: int) -> dict[str, object]:
    return {
        "total_count": dataset.total_count,
        "fetched_count": len(dataset.records),
        "complete": dataset.complete,
        "diagnostics": [asdict(item) for item in dataset.diagnostics],
        "sample": [toilet_payload(record) for record in dataset.records[:sample_size]],
    }


def main() -> None:
    configure_logging(os.getenv("TOILET_JOB_LOG_LEVEL", "INFO"))
    settings = load_settings()
    if not settings.key.get_secret_value():
        raise RuntimeError("missing required environment variable: SEOUL_API_KEY")
    sample_size = _parse_non_negative_int("TOILET_JOB_SAMPLE_SIZE", "5")

    collector = build_collector(settings)
    dataset = asyncio.run(collector.fetch_all())
    json.dump(build_summary(dataset, sample_size), sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")
    if not dataset.complete:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
