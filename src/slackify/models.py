"""Public data models for the slackify SDK.

This module contains the syntax-node kind enumeration, the inline run and
output-unit variants produced by the converter, and the result types
returned by the public API.  All types are plain dataclasses with no
behaviour beyond what is needed for structural equality.

Output units form a small closed hierarchy::

    OutputUnit      = HeaderUnit | StructuredUnit | FlattenedTextUnit
    StructuredElement = Section | RichList | Quote
    Run             = TextRun | LinkRun
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class NodeKind(str, Enum):
    """Canonical syntax node kinds produced by :class:`ASTNormalizer`."""

    HEADING = "heading"
    PARAGRAPH = "paragraph"
    LIST = "list"
    LIST_ITEM = "list_item"
    FENCED_CODE = "block_code"
    CODE_SPAN = "codespan"
    BLOCKQUOTE = "block_quote"
    LINK = "link"
    EMPHASIS = "emphasis"
    TEXT = "text"
    OTHER = "other"


# ---------------------------------------------------------------------------
# Inline runs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TextStyle:
    """Composable inline style.

    ``code`` never combines with ``bold`` or ``italic``: a code span's run
    always carries exactly ``TextStyle(code=True)``.
    """

    bold: bool = False
    italic: bool = False
    code: bool = False

    @property
    def is_default(self) -> bool:
        return not (self.bold or self.italic or self.code)


@dataclass(frozen=True)
class TextRun:
    """A fragment of text rendered with one style."""

    text: str
    style: TextStyle = field(default_factory=TextStyle)


@dataclass(frozen=True)
class LinkRun:
    """A hyperlink fragment; ``text`` is the concatenated label."""

    url: str
    text: str = ""


Run = Union[TextRun, LinkRun]


# ---------------------------------------------------------------------------
# Structured elements
# ---------------------------------------------------------------------------

@dataclass
class Section:
    """An ordered sequence of runs rendered as one rich-text section."""

    runs: list[Run] = field(default_factory=list)


@dataclass
class RichList:
    """A single-level list; each item is a :class:`Section`."""

    items: list[Section] = field(default_factory=list)
    ordered: bool = False


@dataclass
class Quote:
    """A block quote holding one sequence of runs."""

    runs: list[Run] = field(default_factory=list)


StructuredElement = Union[Section, RichList, Quote]


# ---------------------------------------------------------------------------
# Output units
# ---------------------------------------------------------------------------

@dataclass
class HeaderUnit:
    """A plain-text title (Slack ``header`` block)."""

    text: str


@dataclass
class StructuredUnit:
    """A rich-structured unit (Slack ``rich_text`` block)."""

    elements: list[StructuredElement] = field(default_factory=list)


@dataclass
class FlattenedTextUnit:
    """A single mrkdwn-encoded string (Slack ``section`` block)."""

    text: str


OutputUnit = Union[HeaderUnit, StructuredUnit, FlattenedTextUnit]


# ---------------------------------------------------------------------------
# Conversion warnings and results
# ---------------------------------------------------------------------------

@dataclass
class ConversionWarning:
    """A non-fatal issue encountered during conversion.

    Attributes
    ----------
    code:
        A machine-readable warning code (e.g. ``"TEXT_OVERFLOW"``).
    message:
        A human-readable description of the issue.
    context:
        Arbitrary structured data for diagnostics.
    """

    code: str
    message: str
    context: dict = field(default_factory=dict)


@dataclass
class ConversionResult:
    """Output of the Markdown-to-Slack conversion.

    Attributes
    ----------
    units:
        One output unit per recognized top-level block, in document order.
    warnings:
        Non-fatal issues discovered during conversion.
    """

    units: list[OutputUnit] = field(default_factory=list)
    warnings: list[ConversionWarning] = field(default_factory=list)

    @property
    def blocks(self) -> list[dict]:
        """The units serialized as Slack Block Kit payload dicts."""
        from slackify.converter.assembler import to_slack_blocks

        return to_slack_blocks(self.units)


@dataclass
class PostResult:
    """Result of :meth:`SlackifyClient.post_markdown`.

    Attributes
    ----------
    channel:
        The channel ID Slack reports the message was posted to.
    ts:
        The message timestamp (Slack's message ID).
    blocks_sent:
        Number of Block Kit blocks in the posted message.
    fallback_used:
        ``True`` when conversion failed and the raw Markdown was posted as
        plain text instead.
    warnings:
        Non-fatal conversion warnings.
    """

    channel: str
    ts: str
    blocks_sent: int
    fallback_used: bool = False
    warnings: list[ConversionWarning] = field(default_factory=list)
