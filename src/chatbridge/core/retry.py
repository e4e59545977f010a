"""Retry composition for streaming entry points."""

from __future__ import annotations

import asyncio
import functools
import logging
import time
from collections.abc import AsyncIterator, Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any, TypeVar

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

RATE_LIMIT_STATUS = 429
RETRY_AFTER_HEADERS = ("retry-after", "x-ratelimit-reset", "ratelimit-reset")


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """How often and how patiently a failed stream is re-attempted.

    Attributes
    ----------
    max_retries:
        Total number of attempts, including the first one.
    base_delay:
        Seconds to wait before the second attempt; doubles every attempt.
    max_delay:
        Upper bound in seconds for the exponential delay.
    retry_all_errors:
        Retry every ``Exception`` instead of only rate-limit responses.
    """

    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 10.0
    retry_all_errors: bool = False

    def __post_init__(self) -> None:
        if self.max_retries < 1:
            msg = "max_retries must be at least 1"
            raise ValueError(msg)
        if self.base_delay < 0 or self.max_delay < 0:
            msg = "retry delays cannot be negative"
            raise ValueError(msg)

    def is_retryable(self, error: BaseException) -> bool:
        if not isinstance(error, Exception):
            return False
        return self.retry_all_errors or error_status(error) == RATE_LIMIT_STATUS

    def delay_for(self, error: BaseException, attempt: int, *, now: float | None = None) -> float:
        """Seconds to wait after the zero-based ``attempt`` failed with ``error``."""

        hinted = retry_after_seconds(error, now=time.time() if now is None else now)
        if hinted is not None:
            return hinted
        return min(self.max_delay, self.base_delay * (2**attempt))


def error_status(error: BaseException) -> int | None:
    """Return the HTTP status attached to a transport error, if any."""

    for attribute in ("status_code", "status"):
        value = getattr(error, attribute, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


def retry_after_seconds(error: BaseException, *, now: float) -> float | None:
    """Interpret rate-limit reset headers as a delay in seconds.

    Values larger than the current epoch time are absolute reset timestamps;
    smaller values are relative delays.
    """

    headers = _error_headers(error)
    if headers is None:
        return None

    for name in RETRY_AFTER_HEADERS:
        raw = headers.get(name)
        if raw is None:
            continue
        try:
            value = float(str(raw).strip())
        except ValueError:
            continue
        if value > now:
            return max(value - now, 0.0)
        return max(value, 0.0)
    return None


def _error_headers(error: BaseException) -> Mapping[str, Any] | None:
    response = getattr(error, "response", None)
    headers = getattr(response, "headers", None)
    if headers is None:
        headers = getattr(error, "headers", None)
    if headers is None:
        return None
    if isinstance(headers, Mapping):
        return {str(key).lower(): value for key, value in headers.items()}
    return None


def with_retry(
    factory: Callable[..., AsyncIterator[T]],
    policy: RetryPolicy | None = None,
    *,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> Callable[..., AsyncIterator[T]]:
    """Wrap an async-generator factory so retryable failures re-invoke it.

    Each attempt restarts ``factory`` from scratch. Items yielded by a failed
    attempt have already reached the consumer and are not retracted.
    """

    active = policy or RetryPolicy()

    @functools.wraps(factory)
    async def wrapper(*args: Any, **kwargs: Any) -> AsyncIterator[T]:
        for attempt in range(active.max_retries):
            stream = factory(*args, **kwargs)
            try:
                async for item in stream:
                    yield item
                return
            except Exception as exc:
                is_last = attempt == active.max_retries - 1
                if is_last or not active.is_retryable(exc):
                    raise
                delay = active.delay_for(exc, attempt)
                LOGGER.warning(
                    "%s, retrying in %.1fs (attempt %d/%d)",
                    type(exc).__name__,
                    delay,
                    attempt + 1,
                    active.max_retries,
                )
                await sleep(delay)
            finally:
                closer = getattr(stream, "aclose", None)
                if closer is not None:
                    await closer()

    return wrapper


__all__ = [
    "RATE_LIMIT_STATUS",
    "RetryPolicy",
    "error_status",
    "retry_after_seconds",
    "with_retry",
]
