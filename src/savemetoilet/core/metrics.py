from __future__ import annotations

from collections import defaultdict


class InMemoryFetchMetricsCollector:
    def __init__(self) -> None:
        self.page_request_count = 0
        self.retry_count = 0
        self.fetched_records = 0
        self.upstream_errors_total: dict[str, int] = defaultdict(int)
        self.fetch_run_total: dict[str, int] = defaultdict(int)
        self.last_run_duration_seconds = 0.0

    def increment_page_request(self) -> None:
        self.page_request_count += 1

    def increment_retry(self) -> None:
        self.retry_count += 1

    def increment_upstream_error(self, kind: str) -> None:
        self.upstream_errors_total[kind] += 1

    def add_fetched_records(self, count: int) -> None:
        if count <= 0:
            return
        self.fetched_records += count

    def observe_run(self, outcome: str, duration_seconds: float) -> None:
        self.fetch_run_total[outcome] += 1
        self.last_run_duration_seconds = duration_seconds
