"""Metrics hook protocol and no-op default.

slackify reports counters and timings for conversions and Web API calls.
Without a configured backend :class:`NoopMetricsHook` absorbs them.  Any
object with matching ``increment`` and ``timing`` methods can be passed as
``SlackifyConfig(metrics=...)`` to forward them to StatsD, Prometheus, etc.

Emitted metric names:

* ``slackify.conversions_total``          -- counter, tag ``status``
* ``slackify.units_total``                -- counter, tag ``kind``
* ``slackify.conversion_warnings_total``  -- counter, tag ``code``
* ``slackify.conversion_duration_ms``     -- timing
* ``slackify.requests_total``             -- counter, tags ``method``, ``status``
* ``slackify.retries_total``              -- counter, tags ``method``, ``reason``
* ``slackify.request_duration_ms``        -- timing, tag ``method``
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol a metrics backend must satisfy."""

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment the counter *name* by *value*."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration of *ms* milliseconds under *name*."""
        ...


class NoopMetricsHook:
    """Discards every data point, so call sites never need a ``None`` check."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass
