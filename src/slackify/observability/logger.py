"""Structured JSON logging for slackify.

Each record becomes one JSON line, so conversion and posting events can be
shipped to a log pipeline without a parsing step::

    {"ts": "2026-10-19T08:00:00.000000+00:00", "level": "INFO",
     "logger": "slackify.client", "message": "Message posted",
     "op": "post_markdown", "channel": "C123", "blocks": 4}

Structured fields ride on ``extra={"extra_fields": {...}}``.  They pass
through :func:`~slackify.utils.redact.redact` before serialization, so a
field such as ``token`` never reaches the log in clear text.

Usage::

    from slackify.observability import get_logger

    log = get_logger("slackify.client")
    log.info("Message posted", extra={"extra_fields": {"channel": "C123"}})
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

from slackify.utils.redact import redact

LOG_LEVEL_ENV = "SLACKIFY_LOG_LEVEL"
"""Environment variable consulted for the default level (e.g. ``DEBUG``)."""


class StructuredFormatter(logging.Formatter):
    """Render log records as single-line JSON objects.

    Guaranteed keys: ``ts`` (ISO-8601 UTC), ``level``, ``logger`` and
    ``message``.  Redacted ``extra_fields`` are merged at the top level;
    ``exception`` is added when the record carries exception info.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra_fields = getattr(record, "extra_fields", None)
        if isinstance(extra_fields, dict):
            entry.update(redact(extra_fields))

        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


_ROOT_LOGGER = "slackify"
_configured = False


def _resolve_level(level: int | str | None) -> int:
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "WARNING")
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        return resolved if isinstance(resolved, int) else logging.WARNING
    return level


def get_logger(
    name: str = _ROOT_LOGGER,
    *,
    level: int | str | None = None,
    stream: Any | None = None,
) -> logging.Logger:
    """Return a logger under the ``slackify`` hierarchy.

    The first call installs a single :class:`StructuredFormatter` handler on
    the ``slackify`` root logger; child loggers (``slackify.converter``,
    ``slackify.transport``) propagate to it and never get their own handler.

    Parameters
    ----------
    name:
        Logger name.  Names outside the ``slackify`` namespace are placed
        under it (``"x"`` becomes ``"slackify.x"``).
    level:
        Level for the root logger, applied on the first call or whenever it
        is passed explicitly.  Defaults to ``$SLACKIFY_LOG_LEVEL`` or
        ``WARNING``.
    stream:
        Handler output stream on first configuration.  Defaults to
        ``sys.stderr``.
    """
    global _configured

    root = logging.getLogger(_ROOT_LOGGER)
    if not _configured:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(StructuredFormatter())
        root.addHandler(handler)
        root.setLevel(_resolve_level(level))
        root.propagate = False
        _configured = True
    elif level is not None:
        root.setLevel(_resolve_level(level))

    if name != _ROOT_LOGGER and not name.startswith(_ROOT_LOGGER + "."):
        name = f"{_ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
