from __future__ import annotations

from savemetoilet.config import SeoulApiSettings
from savemetoilet.core.metrics import InMemoryFetchMetricsCollector
from savemetoilet.providers.paged import SeoulToiletCollector
from savemetoilet.providers.seoul import SeoulToiletFetcher


def build_collector(
    settings: SeoulApiSettings,
    metrics: InMemoryFetchMetricsCollector | None = None,
) -> SeoulToiletCollector:
    fetcher = SeoulToiletFetcher(
        base_url=settings.base_url,
        api_key=settings.key.get_secret_value(),
        service_name=settings.toilet_service,
        connect_timeout_seconds=settings.connect_timeout_seconds,
        read_timeout_seconds=settings.timeout_seconds,
        max_response_bytes=settings.max_response_bytes,
    )
    return SeoulToiletCollector(
        fetcher=fetcher,
        page_size=settings.page_size,
        max_attempts=settings.max_attempts,
        retry_delay_seconds=settings.retry_delay_seconds,
        pacing_seconds=settings.pacing_seconds,
        probe_timeout_seconds=settings.probe_timeout_seconds,
        retry_malformed=settings.retry_malformed,
        metrics=metrics,
    )
