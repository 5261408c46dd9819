import asyncio
from typing import Awaitable, Callable, TypeVar

from savemetoilet.core.exceptions import UpstreamError

T = TypeVar("T")


async def with_fixed_delay(
    operation: Callable[[], Awaitable[T]],
    attempts: int = 3,
    delay_seconds: float = 2.0,
    should_retry: Callable[[UpstreamError], bool] | None = None,
    on_retry: Callable[[int, float, UpstreamError], None] | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    if attempts < 1:
        raise ValueError("attempts must be >= 1")
    attempt = 0
    while True:
        try:
            return await operation()
        except UpstreamError as exc:
            attempt += 1
            if attempt >= attempts:
                raise
            if should_retry and not should_retry(exc):
                raise
            if on_retry:
                on_retry(attempt, delay_seconds, exc)
            await sleep(delay_seconds)
