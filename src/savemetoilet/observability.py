from __future__ import annotations

import logging

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider

HEALTH_PROBE_PATHS = ("/api/v1/test/health",)

_configured = False
_access_filter_configured = False


class HealthProbeAccessLogFilter(logging.Filter):
    """Drops uvicorn access lines for successful health probes.

    uvicorn formats access records as
    ``'%s - "%s %s HTTP/%s" %d'`` with args
    ``(client, method, path, http_version, status)``.
    """

    def __init__(self, paths: tuple[str, ...] = HEALTH_PROBE_PATHS) -> None:
        super().__init__()
        self._paths = frozenset(path.rstrip("/") or "/" for path in paths)

    def filter(self, record: logging.LogRecord) -> bool:
        args = record.args
        if not isinstance(args, tuple) or len(args) != 5:
            return True
        _, _, path, _, status = args
        if not isinstance(path, str) or status != 200:
            return True
        path = path.partition("?")[0].rstrip("/") or "/"
        return path not in self._paths


def configure_logging(level: str | int = logging.INFO) -> None:
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    quiet_http_client_logs()


def quiet_http_client_logs() -> None:
    # httpx logs full request URLs, and the Seoul API key is part of the path.
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)


def configure_otel(service_name: str) -> None:
    global _configured
    if _configured:
        return
    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    trace.set_tracer_provider(provider)
    _configured = True


def configure_access_log_filter() -> None:
    global _access_filter_configured
    if _access_filter_configured:
        return
    logging.getLogger("uvicorn.access").addFilter(HealthProbeAccessLogFilter())
    _access_filter_configured = True
