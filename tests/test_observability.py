from __future__ import annotations

import logging

from savemetoilet.observability import HealthProbeAccessLogFilter, quiet_http_client_logs


def _access_record(path: str, status: int) -> logging.LogRecord:
    return logging.LogRecord(
        name="uvicorn.access",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg='%s - "%s %s HTTP/%s" %d',
        args=("127.0.0.1:12345", "GET", path, "1.1", status),
        exc_info=None,
    )


def test_access_filter_drops_successful_health_probes() -> None:
    probe_filter = HealthProbeAccessLogFilter()
    assert probe_filter.filter(_access_record("/api/v1/test/health", 200)) is False
    assert probe_filter.filter(_access_record("/api/v1/test/health/", 200)) is False
    assert probe_filter.filter(_access_record("/api/v1/test/health?probe=k8s", 200)) is False


def test_access_filter_keeps_other_requests() -> None:
    probe_filter = HealthProbeAccessLogFilter()
    assert probe_filter.filter(_access_record("/api/v1/test/health", 503)) is True
    assert probe_filter.filter(_access_record("/api/v1/test/toilets/count", 200)) is True


def test_access_filter_ignores_unrelated_records() -> None:
    record = logging.LogRecord("uvicorn.access", logging.INFO, __file__, 1, "plain message", None, None)
    assert HealthProbeAccessLogFilter().filter(record) is True


def test_http_client_url_logging_is_quieted() -> None:
    quiet_http_client_logs()
    assert logging.getLogger("httpx").getEffectiveLevel() == logging.WARNING
