from __future__ import annotations

from prometheus_client import CollectorRegistry, Gauge, generate_latest

from savemetoilet.core.metrics import InMemoryFetchMetricsCollector


class FetchPrometheusExporter:
    def __init__(self) -> None:
        self._registry = CollectorRegistry()
        self._page_requests = Gauge(
            "seoul_api_page_requests_total",
            "Page requests issued against the Seoul open data API",
            registry=self._registry,
        )
        self._retries = Gauge(
            "seoul_api_retries_total",
            "Page requests retried after an upstream error",
            registry=self._registry,
        )
        self._fetched_records = Gauge(
            "toilet_records_fetched_total",
            "Toilet records assembled across all runs",
            registry=self._registry,
        )
        self._upstream_errors = Gauge(
            "seoul_api_errors_total",
            "Upstream errors grouped by kind",
            labelnames=("kind",),
            registry=self._registry,
        )
        self._runs = Gauge(
            "toilet_fetch_runs_total",
            "Full dataset retrievals grouped by outcome",
            labelnames=("outcome",),
            registry=self._registry,
        )
        self._last_run_duration = Gauge(
            "toilet_fetch_last_run_duration_seconds",
            "Duration of the latest full dataset retrieval",
            registry=self._registry,
        )

    def render(self, metrics: InMemoryFetchMetricsCollector) -> str:
        self._page_requests.set(metrics.page_request_count)
        self._retries.set(metrics.retry_count)
        self._fetched_records.set(metrics.fetched_records)
        for kind, count in metrics.upstream_errors_total.items():
            self._upstream_errors.labels(kind=kind).set(count)
        for outcome, count in metrics.fetch_run_total.items():
            self._runs.labels(outcome=outcome).set(count)
        self._last_run_duration.set(metrics.last_run_duration_seconds)
        return generate_latest(self._registry).decode("utf-8")
