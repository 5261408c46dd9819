from savemetoilet.core.metrics import InMemoryFetchMetricsCollector
from savemetoilet.core.prometheus_exporter import FetchPrometheusExporter


def test_fetch_prometheus_exporter_renders_metrics() -> None:
    metrics = InMemoryFetchMetricsCollector()
    metrics.increment_page_request()
    metrics.increment_page_request()
    metrics.increment_retry()
    metrics.increment_upstream_error("timeout")
    metrics.increment_upstream_error("503")
    metrics.add_fetched_records(1000)
    metrics.add_fetched_records(0)
    metrics.observe_run("partial", 3.5)

    output = FetchPrometheusExporter().render(metrics)

    assert "seoul_api_page_requests_total 2.0" in output
    assert "seoul_api_retries_total 1.0" in output
    assert "toilet_records_fetched_total 1000.0" in output
    assert 'seoul_api_errors_total{kind="timeout"} 1.0' in output
    assert 'seoul_api_errors_total{kind="503"} 1.0' in output
    assert 'toilet_fetch_runs_total{outcome="partial"} 1.0' in output
    assert "toilet_fetch_last_run_duration_seconds 3.5" in output
