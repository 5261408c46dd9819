from __future__ import annotations

from savemetoilet.config import load_settings
from savemetoilet.core.metrics import InMemoryFetchMetricsCollector
from savemetoilet.core.prometheus_exporter import FetchPrometheusExporter
from savemetoilet.providers.factory import build_collector
from savemetoilet.providers.paged import SeoulToiletCollector

_fetch_metrics = InMemoryFetchMetricsCollector()
_fetch_exporter = FetchPrometheusExporter()
_collector = build_collector(load_settings(), metrics=_fetch_metrics)


def get_collector() -> SeoulToiletCollector:
    return _collector


def get_fetch_metrics() -> InMemoryFetchMetricsCollector:
    return _fetch_metrics


def get_fetch_exporter() -> FetchPrometheusExporter:
    return _fetch_exporter
