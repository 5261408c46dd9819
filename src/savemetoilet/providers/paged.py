from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from time import perf_counter

import httpx

from savemetoilet.core.exceptions import FetchInterrupted, UpstreamError, UpstreamHttpStatusError, UpstreamPayloadError
from savemetoilet.core.metrics import InMemoryFetchMetricsCollector
from savemetoilet.core.models import (
    MAX_PAGE_SIZE,
    FetchDiagnostic,
    FetchRange,
    PageResponse,
    ToiletDataset,
)
from savemetoilet.core.retry import with_fixed_delay
from savemetoilet.providers.seoul import SeoulToiletFetcher

logger = logging.getLogger(__name__)

COUNT_PROBE_RANGE = FetchRange(start=1, end=1)


class SeoulToiletCollector:
    """Walks the whole restroom index range one page at a time.

    Pages are fetched strictly in order with a short pause between requests,
    so the assembled dataset keeps upstream page order and intra-page order.
    Upstream failures never escape :meth:`fetch_all`; they are recorded on the
    returned dataset as diagnostics.
    """

    def __init__(
        self,
        fetcher: SeoulToiletFetcher,
        page_size: int = MAX_PAGE_SIZE,
        max_attempts: int = 3,
        retry_delay_seconds: float = 2.0,
        pacing_seconds: float = 0.1,
        probe_timeout_seconds: float = 10.0,
        retry_malformed: bool = True,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        metrics: InMemoryFetchMetricsCollector | None = None,
    ) -> None:
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise ValueError(f"page_size must be between 1 and {MAX_PAGE_SIZE}")
        self._fetcher = fetcher
        self._page_size = page_size
        self._max_attempts = max_attempts
        self._retry_delay_seconds = retry_delay_seconds
        self._pacing_seconds = pacing_seconds
        self._probe_timeout_seconds = probe_timeout_seconds
        self._retry_malformed = retry_malformed
        self._sleep = sleep
        self._metrics = metrics

    def plan_ranges(self, total_count: int) -> list[FetchRange]:
        ranges: list[FetchRange] = []
        cursor = 1
        while cursor <= total_count:
            end = min(cursor + self._page_size - 1, total_count)
            ranges.append(FetchRange(start=cursor, end=end))
            cursor = end + 1
        return ranges

    async def fetch_page(
        self,
        fetch_range: FetchRange,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> PageResponse:
        async def _request_once() -> PageResponse:
            if self._metrics:
                self._metrics.increment_page_request()
            try:
                return await self._fetcher.fetch(fetch_range, client=client, timeout=timeout)
            except UpstreamError as exc:
                self._observe_error(exc)
                raise

        return await with_fixed_delay(
            _request_once,
            attempts=self._max_attempts,
            delay_seconds=self._retry_delay_seconds,
            should_retry=self._is_retryable_error,
            on_retry=self._on_retry,
            sleep=self._sleep,
        )

    async def fetch_all(self) -> ToiletDataset:
        logger.info("toilet_fetch_all_started", extra={"service": self._fetcher.service_name})
        started = perf_counter()
        dataset = ToiletDataset()
        try:
            async with self._fetcher.open_client() as client:
                await self._walk(client, dataset)
        except Exception as exc:
            logger.exception("toilet_fetch_all_aborted", extra={"record_count": len(dataset.records)})
            dataset.diagnostics.append(
                FetchDiagnostic(stage="walk", reason="unexpected", message=f"{type(exc).__name__}: {exc}")
            )
        self._observe_run(dataset, perf_counter() - started)
        logger.info(
            "toilet_fetch_all_completed",
            extra={
                "total_count": dataset.total_count,
                "record_count": len(dataset.records),
                "complete": dataset.complete,
            },
        )
        return dataset

    async def test_connection(self) -> bool:
        logger.info("seoul_connection_test_started")
        try:
            async with asyncio.timeout(self._probe_timeout_seconds):
                page = await self.fetch_page(COUNT_PROBE_RANGE, timeout=self._probe_timeout_seconds)
        except Exception:
            logger.exception("seoul_connection_test_failed")
            return False
        connected = page.has_envelope and page.result is not None and page.result.is_success
        if connected:
            logger.info("seoul_connection_test_succeeded")
        else:
            logger.error(
                "seoul_connection_test_unexpected_result",
                extra={"result_code": page.result.code if page.result else None},
            )
        return connected

    async def _walk(self, client: httpx.AsyncClient, dataset: ToiletDataset) -> None:
        try:
            first = await self.fetch_page(COUNT_PROBE_RANGE, client=client)
        except UpstreamError as exc:
            logger.error("toilet_count_probe_failed", extra={"error_kind": exc.kind})
            dataset.diagnostics.append(self._diagnostic("count_probe", exc, COUNT_PROBE_RANGE))
            return
        if not first.has_envelope:
            result_code = first.result.code if first.result else None
            message = first.result.message if first.result else "service envelope missing"
            logger.error("toilet_count_probe_envelope_missing", extra={"result_code": result_code})
            dataset.diagnostics.append(
                FetchDiagnostic(
                    stage="count_probe",
                    reason="envelope_missing",
                    message=message,
                    fetch_range=COUNT_PROBE_RANGE,
                )
            )
            return

        dataset.total_count = first.total_count
        logger.info("toilet_total_count_resolved", extra={"total_count": dataset.total_count})
        ranges = self.plan_ranges(dataset.total_count)
        for index, fetch_range in enumerate(ranges):
            try:
                page = await self.fetch_page(fetch_range, client=client)
            except UpstreamError as exc:
                logger.error(
                    "toilet_page_failed",
                    extra={"start": fetch_range.start, "end": fetch_range.end, "error_kind": exc.kind},
                )
                dataset.diagnostics.append(self._diagnostic("page", exc, fetch_range))
                return

            if page.has_rows:
                dataset.extend(page.records)
                logger.debug(
                    "toilet_page_appended",
                    extra={"added": len(page.records), "record_count": len(dataset.records)},
                )
            else:
                logger.warning("toilet_page_rows_missing", extra={"start": fetch_range.start, "end": fetch_range.end})
                dataset.diagnostics.append(
                    FetchDiagnostic(
                        stage="page",
                        reason="rows_missing",
                        message=f"page {fetch_range.start}-{fetch_range.end} carried no row list",
                        fetch_range=fetch_range,
                    )
                )

            if index < len(ranges) - 1:
                try:
                    await self._pause()
                except FetchInterrupted as exc:
                    logger.warning("toilet_fetch_interrupted", extra={"record_count": len(dataset.records)})
                    dataset.diagnostics.append(self._diagnostic("pacing", exc, fetch_range))
                    return

    async def _pause(self) -> None:
        try:
            await self._sleep(self._pacing_seconds)
        except asyncio.CancelledError as exc:
            # The walk returns partial results instead of propagating cancellation.
            task = asyncio.current_task()
            if task is not None:
                task.uncancel()
            raise FetchInterrupted("pacing wait cancelled") from exc

    def _is_retryable_error(self, exc: UpstreamError) -> bool:
        if isinstance(exc, UpstreamPayloadError):
            return self._retry_malformed
        return True

    def _on_retry(self, attempt: int, delay: float, exc: UpstreamError) -> None:
        logger.warning(
            "seoul_page_retry",
            extra={"attempt": attempt, "delay_seconds": delay, "error_kind": exc.kind},
        )
        if self._metrics:
            self._metrics.increment_retry()

    def _observe_error(self, exc: UpstreamError) -> None:
        if not self._metrics:
            return
        if isinstance(exc, UpstreamHttpStatusError):
            self._metrics.increment_upstream_error(str(exc.status_code))
        else:
            self._metrics.increment_upstream_error(exc.kind)

    def _observe_run(self, dataset: ToiletDataset, duration_seconds: float) -> None:
        if not self._metrics:
            return
        self._metrics.add_fetched_records(len(dataset.records))
        if dataset.complete:
            outcome = "complete"
        elif dataset.records:
            outcome = "partial"
        else:
            outcome = "failed"
        self._metrics.observe_run(outcome, duration_seconds)

    @staticmethod
    def _diagnostic(stage: str, exc: Exception, fetch_range: FetchRange | None) -> FetchDiagnostic:
        reason = getattr(exc, "kind", type(exc).__name__)
        return FetchDiagnostic(stage=stage, reason=reason, message=str(exc), fetch_range=fetch_range)
