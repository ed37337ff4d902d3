"""SDK configuration for slackify.

:class:`SlackifyConfig` is a dataclass that captures every tuneable knob
exposed by the SDK.  Instances are passed to :class:`SlackifyClient` and to
:class:`MarkdownToSlackConverter`; neither mutates them, so one config may be
shared between threads.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Literal

# ---------------------------------------------------------------------------
# Slack Block Kit limits
# ---------------------------------------------------------------------------

HEADER_TEXT_LIMIT = 150
"""Maximum characters Slack accepts in a ``header`` block's plain_text."""

SECTION_TEXT_LIMIT = 3000
"""Maximum characters Slack accepts in a ``section`` block's mrkdwn text."""


# ---------------------------------------------------------------------------
# Configuration dataclass
# ---------------------------------------------------------------------------

@dataclass
class SlackifyConfig:
    """Complete configuration for a slackify client or converter.

    Every parameter has a sensible default.  ``token`` is only needed when
    posting through :class:`SlackifyClient`; pure conversion works without it.

    Parameters
    ----------
    token:
        Slack bot token (``xoxb-...``).  Never logged.
    base_url:
        Web API root URL.  Override for proxy or testing environments.
    normalize_newlines:
        Promote every single line break to a paragraph break before parsing,
        so each source line becomes its own output unit.
    flatten_emphasis:
        How paragraphs are flattened into mrkdwn.

        * ``"single"`` -- one pending emphasis level; only the next text
          fragment is wrapped.
        * ``"stack"`` -- every fragment inside an emphasis span is wrapped by
          all enclosing delimiters.
    escape_mrkdwn:
        Escape ``&``, ``<`` and ``>`` in flattened paragraph text.
    quote_style:
        How block quotes are rendered.

        * ``"raw"`` -- literal source lines as one unstyled run.
        * ``"styled"`` -- inline emphasis, code and links become styled runs.
    header_max_chars:
        Header text longer than this produces a ``HEADER_OVERFLOW`` warning.
    section_max_chars:
        Flattened paragraph text longer than this produces a
        ``TEXT_OVERFLOW`` warning.
    retry_max_attempts:
        Maximum number of attempts per request for retryable failures.
    retry_base_delay:
        Base delay (seconds) for exponential backoff.
    retry_max_delay:
        Upper cap (seconds) on computed backoff delay.
    retry_jitter:
        Add random jitter to backoff intervals.
    timeout_seconds:
        HTTP request timeout in seconds.
    http_proxy:
        Optional HTTP/HTTPS proxy URL.
    debug_dump_ast:
        Write the normalised Mistune AST to *stderr* on each conversion.
    debug_dump_payload:
        Write the (redacted) Block Kit payload to *stderr*.
    """

    # ── Core ────────────────────────────────────────────────────────────
    token: str = ""

    base_url: str = "https://slack.com/api"

    # ── Conversion ──────────────────────────────────────────────────────
    normalize_newlines: bool = True

    flatten_emphasis: Literal["single", "stack"] = "single"

    escape_mrkdwn: bool = True

    quote_style: Literal["raw", "styled"] = "raw"

    header_max_chars: int = HEADER_TEXT_LIMIT

    section_max_chars: int = SECTION_TEXT_LIMIT

    # ── Retry ───────────────────────────────────────────────────────────
    retry_max_attempts: int = 3

    retry_base_delay: float = 1.0

    retry_max_delay: float = 30.0

    retry_jitter: bool = True

    # ── HTTP ────────────────────────────────────────────────────────────
    timeout_seconds: float = 10.0

    http_proxy: str | None = None

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    # ── Debug ───────────────────────────────────────────────────────────
    debug_dump_ast: bool = False

    debug_dump_payload: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        from urllib.parse import urlparse

        parsed = urlparse(self.base_url)
        if parsed.scheme == "http" and parsed.hostname not in (
            "localhost",
            "127.0.0.1",
            "::1",
        ):
            raise ValueError(
                f"base_url uses insecure HTTP for non-local host '{parsed.hostname}'. "
                "Use HTTPS to protect your bot token, or target localhost for testing."
            )

        if self.flatten_emphasis not in ("single", "stack"):
            raise ValueError(
                f"flatten_emphasis must be 'single' or 'stack', got {self.flatten_emphasis!r}"
            )
        if self.quote_style not in ("raw", "styled"):
            raise ValueError(f"quote_style must be 'raw' or 'styled', got {self.quote_style!r}")
        if self.header_max_chars < 1:
            raise ValueError(f"header_max_chars must be >= 1, got {self.header_max_chars}")
        if self.section_max_chars < 1:
            raise ValueError(f"section_max_chars must be >= 1, got {self.section_max_chars}")
        if self.retry_max_attempts < 1:
            raise ValueError(f"retry_max_attempts must be >= 1, got {self.retry_max_attempts}")
        if self.retry_base_delay < 0:
            raise ValueError(f"retry_base_delay must be >= 0, got {self.retry_base_delay}")
        if self.retry_max_delay < 0:
            raise ValueError(f"retry_max_delay must be >= 0, got {self.retry_max_delay}")
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")

    def __repr__(self) -> str:
        """Mask the token to prevent accidental credential leakage."""
        parts: list[str] = []
        for f in dataclasses.fields(self):
            val = getattr(self, f.name)
            if f.name == "token":
                masked = f"...{val[-4:]}" if len(val) >= 4 else "****"
                parts.append(f"token='{masked}'")
            else:
                parts.append(f"{f.name}={val!r}")
        return f"SlackifyConfig({', '.join(parts)})"
