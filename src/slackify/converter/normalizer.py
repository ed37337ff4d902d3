"""Newline pre-normalization.

Markdown treats a single line break inside a paragraph as a soft break, so
``"line one\\nline two"`` parses as one paragraph.  Chat messages read better
when every source line becomes its own unit, so before parsing each lone
``\\n`` is promoted to a paragraph break (``\\n\\n``).  Runs of two or more
newlines already separate paragraphs and are left alone.

Fenced code regions are copied through untouched: their line breaks are
content, not paragraph structure.
"""

from __future__ import annotations

import re

# A newline with no newline on either side.
_SINGLE_NEWLINE_RE = re.compile(r"(?<!\n)\n(?!\n)")

# An opening fence line through its matching closing fence (or end of input).
_FENCED_BLOCK_RE = re.compile(
    r"^ {0,3}(?P<fence>`{3,}|~{3,})[^\n]*\n"
    r".*?"
    r"(?:^ {0,3}(?P=fence)[`~]*[ \t]*$|\Z)",
    re.MULTILINE | re.DOTALL,
)


def normalize_newlines(markdown: str) -> str:
    """Promote every single line break outside code fences to a paragraph break.

    The transform is idempotent: normalizing already-normalized text returns
    it unchanged.

    Examples
    --------
    >>> normalize_newlines("line one\\nline two")
    'line one\\n\\nline two'
    >>> normalize_newlines("a\\n\\nb")
    'a\\n\\nb'
    """
    text = markdown.replace("\r\n", "\n").replace("\r", "\n")

    parts: list[str] = []
    pos = 0
    for match in _FENCED_BLOCK_RE.finditer(text):
        parts.append(_promote(text[pos:match.start()]))
        parts.append(match.group(0))
        pos = match.end()
    parts.append(_promote(text[pos:]))
    return "".join(parts)


def _promote(prose: str) -> str:
    return _SINGLE_NEWLINE_RE.sub("\n\n", prose)
