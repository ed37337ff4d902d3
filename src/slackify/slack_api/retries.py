"""Retry decisions and backoff for Slack Web API calls.

* :func:`should_retry` -- is a failed attempt worth repeating?
* :func:`compute_backoff` -- how long to wait before the next attempt.

Slack signals rate limiting with HTTP 429 and a ``Retry-After`` header in
whole seconds; that value always wins over the computed backoff.
"""

from __future__ import annotations

import random

import httpx

RETRYABLE_STATUSES: frozenset[int] = frozenset({429, 500, 502, 503, 504})

_RETRYABLE_EXCEPTIONS: tuple[type[Exception], ...] = (
    httpx.TimeoutException,
    httpx.NetworkError,
)


def should_retry(
    status_code: int | None,
    exception: Exception | None,
    attempt: int,
    max_attempts: int,
) -> bool:
    """Decide whether attempt number *attempt* (0-indexed) should be repeated.

    Network timeouts and connection errors are retryable, as are 429 and
    5xx gateway statuses.  Nothing is retried once *max_attempts* attempts
    have been made.
    """
    if attempt + 1 >= max_attempts:
        return False
    if exception is not None:
        return isinstance(exception, _RETRYABLE_EXCEPTIONS)
    return status_code in RETRYABLE_STATUSES


def compute_backoff(
    attempt: int,
    base: float = 1.0,
    maximum: float = 30.0,
    jitter: bool = True,
    retry_after: float | None = None,
) -> float:
    """Seconds to wait before the next attempt.

    ``retry_after`` (from a 429 response) is used as-is; otherwise the delay
    is ``base * 2 ** attempt`` capped at *maximum*.  With *jitter* the
    computed delay is scaled to between 50 % and 100 % of its value.
    """
    if retry_after is not None:
        return retry_after

    delay = min(base * (2 ** attempt), maximum)
    if jitter:
        delay *= 0.5 + random.random() * 0.5
    return delay
