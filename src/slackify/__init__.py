"""slackify -- Markdown to Slack Block Kit SDK.

Public re-exports
-----------------

* **Client:** :class:`SlackifyClient`
* **Configuration:** :class:`SlackifyConfig`
* **Errors:** Every :class:`SlackifyError` subclass and :class:`ErrorCode`
* **Models:** Output units, runs, and result dataclasses
* **Helpers:** :func:`convert_markdown`

Usage::

    from slackify import convert_markdown

    result = convert_markdown("# Hello\\nWorld")
    blocks = result.blocks
"""

from __future__ import annotations

# ── Client ──────────────────────────────────────────────────────────────
from slackify.client import SlackifyClient

# ── Configuration ───────────────────────────────────────────────────────
from slackify.config import SlackifyConfig

# ── Converter ───────────────────────────────────────────────────────────
from slackify.converter.md_to_slack import MarkdownToSlackConverter

# ── Errors ──────────────────────────────────────────────────────────────
from slackify.errors import (
    ErrorCode,
    SlackifyAPIError,
    SlackifyAuthError,
    SlackifyConversionError,
    SlackifyError,
    SlackifyNetworkError,
    SlackifyNotFoundError,
    SlackifyRetryExhaustedError,
)

# ── Models ──────────────────────────────────────────────────────────────
from slackify.models import (
    ConversionResult,
    ConversionWarning,
    FlattenedTextUnit,
    HeaderUnit,
    LinkRun,
    NodeKind,
    PostResult,
    Quote,
    RichList,
    Section,
    StructuredUnit,
    TextRun,
    TextStyle,
)

__version__ = "0.1.0"


def convert_markdown(markdown: str, config: SlackifyConfig | None = None) -> ConversionResult:
    """Convert *markdown* to output units with *config* (defaults if omitted)."""
    return MarkdownToSlackConverter(config or SlackifyConfig()).convert(markdown)


__all__ = [
    "ConversionResult",
    "ConversionWarning",
    "ErrorCode",
    "FlattenedTextUnit",
    "HeaderUnit",
    "LinkRun",
    "MarkdownToSlackConverter",
    "NodeKind",
    "PostResult",
    "Quote",
    "RichList",
    "Section",
    "SlackifyAPIError",
    "SlackifyAuthError",
    "SlackifyClient",
    "SlackifyConfig",
    "SlackifyConversionError",
    "SlackifyError",
    "SlackifyNetworkError",
    "SlackifyNotFoundError",
    "SlackifyRetryExhaustedError",
    "StructuredUnit",
    "TextRun",
    "TextStyle",
    "__version__",
    "convert_markdown",
]
