"""Synchronous HTTP transport for the Slack Web API.

Each call follows one lifecycle:

1. POST the JSON payload to ``{base_url}/{method}`` with the bot token.
2. On ``2xx`` -- parse the body; ``"ok": false`` raises a typed error.
3. On ``429`` -- sleep for ``Retry-After`` seconds and retry.
4. On ``5xx`` / network error -- exponential backoff and retry.
5. On other ``4xx`` -- raise :class:`SlackifyAPIError` immediately.
6. When attempts run out -- raise :class:`SlackifyRetryExhaustedError`
   (or :class:`SlackifyNetworkError` if the last failure was a network one).
"""

from __future__ import annotations

import json as _json
import sys
import time
from typing import Any

import httpx

from slackify.config import SlackifyConfig
from slackify.errors import (
    SlackifyAPIError,
    SlackifyAuthError,
    SlackifyNetworkError,
    SlackifyNotFoundError,
    SlackifyRetryExhaustedError,
)
from slackify.observability import NoopMetricsHook, get_logger
from slackify.utils.redact import redact

from .retries import RETRYABLE_STATUSES, compute_backoff, should_retry

log = get_logger("slackify.transport")

# Slack ``error`` strings that mean the token is unusable.
_AUTH_ERRORS: frozenset[str] = frozenset({
    "not_authed",
    "invalid_auth",
    "account_inactive",
    "token_revoked",
    "token_expired",
    "no_permission",
    "missing_scope",
})

_NOT_FOUND_ERRORS: frozenset[str] = frozenset({
    "channel_not_found",
    "user_not_found",
    "thread_not_found",
})


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _parse_retry_after(response: httpx.Response) -> float | None:
    """Extract the ``Retry-After`` header value as a float, or ``None``."""
    raw = response.headers.get("retry-after")
    if raw is None:
        return None
    try:
        return float(raw)
    except (ValueError, TypeError):
        return None


def _raise_for_slack_error(method: str, body: dict, status_code: int) -> None:
    """Raise the typed error for a ``"ok": false`` response body."""
    slack_error = str(body.get("error", "unknown_error"))
    context = {"method": method, "slack_error": slack_error, "status_code": status_code}
    if "response_metadata" in body:
        context["response_metadata"] = body["response_metadata"]

    if slack_error in _AUTH_ERRORS:
        raise SlackifyAuthError(
            message=f"Authentication failed on {method}: {slack_error}",
            context=context,
        )
    if slack_error in _NOT_FOUND_ERRORS:
        raise SlackifyNotFoundError(
            message=f"Not found on {method}: {slack_error}",
            context=context,
        )
    raise SlackifyAPIError(
        message=f"Slack rejected {method}: {slack_error}",
        context=context,
    )


def _dump_payload(
    method: str,
    payload: dict | None,
    response_status: int | None,
    response_body: Any | None,
    token: str | None = None,
) -> None:
    """Write a redacted debug dump of the request/response to stderr."""
    dump: dict[str, Any] = {"method": method}
    if payload is not None:
        dump["request_body"] = payload
    if response_status is not None:
        dump["response_status"] = response_status
    if response_body is not None:
        dump["response_body"] = response_body
    print(
        _json.dumps(redact(dump, token), indent=2, default=str, ensure_ascii=False),
        file=sys.stderr,
    )


# ---------------------------------------------------------------------------
# Sync transport
# ---------------------------------------------------------------------------

class SlackTransport:
    """Synchronous Web API transport with auth and retry.

    Parameters
    ----------
    config:
        A :class:`SlackifyConfig` controlling base URL, token, timeouts,
        and retry behaviour.
    transport:
        Optional ``httpx`` transport, e.g. :class:`httpx.MockTransport` in
        tests.
    """

    def __init__(
        self,
        config: SlackifyConfig,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config = config
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()
        self._client = httpx.Client(
            base_url=config.base_url.rstrip("/") + "/",
            headers={
                "Authorization": f"Bearer {config.token}",
                "Content-Type": "application/json; charset=utf-8",
            },
            timeout=httpx.Timeout(config.timeout_seconds),
            proxy=config.http_proxy,
            transport=transport,
        )

    # -- public API --------------------------------------------------------

    def call(self, method: str, payload: dict | None = None) -> dict:
        """Invoke a Web API *method* (e.g. ``chat.postMessage``).

        Parameters
        ----------
        method:
            Web API method name.
        payload:
            JSON body.

        Returns
        -------
        dict
            The parsed response body (always has ``"ok": true``).

        Raises
        ------
        SlackifyAuthError
            On token/scope errors.
        SlackifyNotFoundError
            When the channel or thread does not exist.
        SlackifyAPIError
            On any other ``"ok": false`` body or non-retryable 4xx.
        SlackifyRetryExhaustedError
            When all retry attempts ended in 429/5xx.
        SlackifyNetworkError
            When all retry attempts ended in transport failures.
        """
        max_attempts = self._config.retry_max_attempts
        last_status: int | None = None

        for attempt in range(max_attempts):
            t0 = time.monotonic()
            try:
                response = self._client.post(method, json=payload)
            except (httpx.TimeoutException, httpx.NetworkError) as exc:
                self._metrics.increment(
                    "slackify.requests_total", tags={"method": method, "status": "error"},
                )
                log.warning(
                    "Request network error",
                    extra={"extra_fields": {
                        "op": "call", "method": method,
                        "attempt": attempt + 1, "error": str(exc),
                    }},
                )
                if not should_retry(None, exc, attempt, max_attempts):
                    raise SlackifyNetworkError(
                        message=f"Network error on {method}: {exc}",
                        context={"url": f"{self._config.base_url}/{method}", "attempt": attempt + 1},
                        cause=exc,
                    ) from exc
                self._sleep_before_retry(method, attempt, "network_error")
                continue

            elapsed_ms = (time.monotonic() - t0) * 1000
            status = response.status_code
            last_status = status
            self._metrics.increment(
                "slackify.requests_total", tags={"method": method, "status": str(status)},
            )
            self._metrics.timing(
                "slackify.request_duration_ms", elapsed_ms, tags={"method": method},
            )

            if 200 <= status < 300:
                body = self._parse_body(response)
                if self._config.debug_dump_payload:
                    _dump_payload(method, payload, status, body, self._config.token)
                if not body.get("ok", False):
                    _raise_for_slack_error(method, body, status)
                return body

            if status not in RETRYABLE_STATUSES:
                raise SlackifyAPIError(
                    message=f"HTTP {status} on {method}",
                    context={"method": method, "status_code": status,
                             "body": response.text[:500]},
                )

            if not should_retry(status, None, attempt, max_attempts):
                break

            if status == 429:
                retry_after = _parse_retry_after(response)
                log.warning(
                    "Rate limited by Slack",
                    extra={"extra_fields": {
                        "op": "call", "method": method,
                        "retry_after": retry_after, "attempt": attempt + 1,
                    }},
                )
                self._sleep_before_retry(method, attempt, "rate_limited", retry_after)
            else:
                self._sleep_before_retry(method, attempt, "server_error")

        raise SlackifyRetryExhaustedError(
            message=(
                f"All {max_attempts} attempts exhausted for {method} "
                f"(last status: {last_status})"
            ),
            context={"attempts": max_attempts, "last_status_code": last_status},
        )

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def __enter__(self) -> SlackTransport:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # -- internals ---------------------------------------------------------

    def _parse_body(self, response: httpx.Response) -> dict:
        try:
            body = response.json()
        except ValueError as exc:
            raise SlackifyAPIError(
                message="Slack returned a non-JSON response body",
                context={"status_code": response.status_code, "body": response.text[:500]},
                cause=exc,
            ) from exc
        if not isinstance(body, dict):
            raise SlackifyAPIError(
                message="Slack returned an unexpected response body",
                context={"status_code": response.status_code},
            )
        return body

    def _sleep_before_retry(
        self,
        method: str,
        attempt: int,
        reason: str,
        retry_after: float | None = None,
    ) -> None:
        delay = compute_backoff(
            attempt,
            base=self._config.retry_base_delay,
            maximum=self._config.retry_max_delay,
            jitter=self._config.retry_jitter,
            retry_after=retry_after,
        )
        self._metrics.increment(
            "slackify.retries_total", tags={"method": method, "reason": reason},
        )
        time.sleep(delay)
