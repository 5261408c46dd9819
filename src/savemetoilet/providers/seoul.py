from __future__ import annotations

import logging
from collections.abc import Callable
from urllib.parse import quote

import httpx
from opentelemetry import trace

from savemetoilet.core.exceptions import (
    UpstreamHttpStatusError,
    UpstreamPayloadError,
    UpstreamTimeoutError,
    UpstreamTransportError,
)
from savemetoilet.core.models import FetchRange, PageResponse
from savemetoilet.providers.schemas import parse_page

logger = logging.getLogger(__name__)

_REDACTED = "***"
DEFAULT_MAX_RESPONSE_BYTES = 5 * 1024 * 1024


class SeoulToiletFetcher:
    """Issues one bounded-range request against the Seoul open data API."""

    provider_name = "seoul_open_data"

    def __init__(
        self,
        base_url: str,
        api_key: str,
        service_name: str = "SearchPublicToiletPOIService",
        connect_timeout_seconds: float = 5.0,
        read_timeout_seconds: float = 30.0,
        max_response_bytes: int = DEFAULT_MAX_RESPONSE_BYTES,
        client_factory: Callable[[], httpx.AsyncClient] | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._service_name = service_name
        self._timeout = httpx.Timeout(
            connect=connect_timeout_seconds,
            read=read_timeout_seconds,
            write=read_timeout_seconds,
            pool=connect_timeout_seconds,
        )
        self._max_response_bytes = max_response_bytes
        self._client_factory = client_factory
        self._tracer = trace.get_tracer("savemetoilet")

    @property
    def service_name(self) -> str:
        return self._service_name

    def open_client(self) -> httpx.AsyncClient:
        factory = self._client_factory or (lambda: httpx.AsyncClient(timeout=self._timeout))
        return factory()

    def build_path(self, fetch_range: FetchRange, redact: bool = False) -> str:
        key = _REDACTED if redact else quote(self._api_key, safe="")
        return f"/{key}/json/{self._service_name}/{fetch_range.start}/{fetch_range.end}/"

    async def fetch(
        self,
        fetch_range: FetchRange,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> PageResponse:
        if client is None:
            async with self.open_client() as owned_client:
                return await self._request(owned_client, fetch_range, timeout)
        return await self._request(client, fetch_range, timeout)

    async def _request(
        self,
        client: httpx.AsyncClient,
        fetch_range: FetchRange,
        timeout: float | None,
    ) -> PageResponse:
        url = f"{self._base_url}{self.build_path(fetch_range)}"
        span_range = f"{fetch_range.start}-{fetch_range.end}"
        logger.debug(
            "seoul_page_request",
            extra={"path": self.build_path(fetch_range, redact=True), "range": span_range},
        )
        with self._tracer.start_as_current_span("seoul.fetch_page") as span:
            span.set_attribute("seoul.range.start", fetch_range.start)
            span.set_attribute("seoul.range.end", fetch_range.end)
            try:
                if timeout is None:
                    response = await client.get(url)
                else:
                    response = await client.get(url, timeout=timeout)
            except httpx.TimeoutException as exc:
                raise UpstreamTimeoutError(f"seoul api timeout: range={span_range}") from exc
            except httpx.HTTPError as exc:
                raise UpstreamTransportError(f"seoul api request error: range={span_range}") from exc

            span.set_attribute("http.status_code", response.status_code)
            if response.status_code != 200:
                logger.error(
                    "seoul_page_http_error",
                    extra={"status_code": response.status_code, "range": span_range},
                )
                raise UpstreamHttpStatusError(
                    response.status_code,
                    f"seoul api returned status={response.status_code}, range={span_range}",
                )

            if len(response.content) > self._max_response_bytes:
                raise UpstreamPayloadError(
                    f"seoul api body exceeds {self._max_response_bytes} bytes: range={span_range}"
                )
            try:
                payload = response.json()
            except ValueError as exc:
                raise UpstreamPayloadError(f"seoul api returned non-json body: range={span_range}") from exc
            page = parse_page(payload, self._service_name)
            span.set_attribute("seoul.record_count", len(page.records))
            return page
