"""Flatten inline AST tokens into a Slack mrkdwn string.

This is the *flattening* formatting mode, used for paragraphs, which Slack
receives as a single ``section`` text in its own inline dialect:

=============  =================
Markdown       mrkdwn
=============  =================
``**bold**``   ``*bold*``
``*italic*``   ``_italic_``
`` `code` ``   `` `code` ``
``[l](u)``     ``<u|l>``
=============  =================

Two emphasis strategies are available:

* ``"single"`` -- one pending emphasis level.  An emphasis token sets it;
  the next text-bearing token (text, code span or link) is wrapped in the
  matching delimiter and the level is cleared.  Later fragments inside the
  same span, and any enclosing level, are emitted without delimiters.
* ``"stack"`` -- each emphasis span wraps everything it contains, so nested
  bold and italic compose (``*a _b_ c*``).

Escaping follows Slack's rule that only ``&``, ``<`` and ``>`` are control
characters in message text.
"""

from __future__ import annotations

from typing import Literal

from slackify.converter.rich_text import extract_text
from slackify.models import NodeKind

# Delimiters by emphasis level: 2 = strong, 1 = light.
EMPHASIS_DELIMITERS: dict[int, str] = {
    2: "*",
    1: "_",
}


def escape_mrkdwn(text: str) -> str:
    """Escape the three mrkdwn control characters.

    >>> escape_mrkdwn("a < b & c")
    'a &lt; b &amp; c'
    """
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def flatten_inline(
    children: list[dict],
    *,
    strategy: Literal["single", "stack"] = "single",
    escape: bool = True,
) -> str:
    """Render inline AST tokens as one mrkdwn string.

    Parameters
    ----------
    children:
        Inline tokens of a paragraph, in document order.
    strategy:
        Emphasis handling, ``"single"`` or ``"stack"`` (see module docs).
    escape:
        Escape ``&``, ``<`` and ``>`` in text and code content.

    Returns
    -------
    str
        The flattened mrkdwn text.
    """
    if strategy == "stack":
        return "".join(_flatten_stacked(children, escape))
    parts, _ = _flatten_single(children, None, escape)
    return "".join(parts)


def _flatten_single(
    tokens: list[dict],
    pending: int | None,
    escape: bool,
) -> tuple[list[str], int | None]:
    """Flatten *tokens* carrying one pending emphasis level.

    Returns the rendered fragments and the pending level left over for the
    tokens that follow.
    """
    parts: list[str] = []
    for token in tokens:
        token_type = token.get("type", "")

        if token_type == NodeKind.EMPHASIS:
            pending = token.get("attrs", {}).get("level", 1)
            child_parts, pending = _flatten_single(
                token.get("children", []), pending, escape,
            )
            parts.extend(child_parts)
            continue

        if token_type == NodeKind.TEXT:
            fragment = _escape(token.get("raw", ""), escape)
            if not fragment:
                continue
        elif token_type == NodeKind.CODE_SPAN:
            fragment = f"`{_escape(token.get('raw', ''), escape)}`"
        elif token_type == NodeKind.LINK:
            fragment = _link(token, escape)
        else:
            child_parts, pending = _flatten_single(
                token.get("children", []), pending, escape,
            )
            parts.extend(child_parts)
            continue

        if pending is not None:
            fragment = _wrap(fragment, pending)
            pending = None
        parts.append(fragment)

    return parts, pending


def _flatten_stacked(tokens: list[dict], escape: bool) -> list[str]:
    """Flatten *tokens*, wrapping each emphasis span around its contents."""
    parts: list[str] = []
    for token in tokens:
        token_type = token.get("type", "")

        if token_type == NodeKind.EMPHASIS:
            inner = "".join(_flatten_stacked(token.get("children", []), escape))
            if inner:
                parts.append(_wrap(inner, token.get("attrs", {}).get("level", 1)))
        elif token_type == NodeKind.TEXT:
            parts.append(_escape(token.get("raw", ""), escape))
        elif token_type == NodeKind.CODE_SPAN:
            parts.append(f"`{_escape(token.get('raw', ''), escape)}`")
        elif token_type == NodeKind.LINK:
            parts.append(_link(token, escape))
        else:
            parts.extend(_flatten_stacked(token.get("children", []), escape))
    return parts


def _link(token: dict, escape: bool) -> str:
    url = token.get("attrs", {}).get("url", "")
    label = _escape(extract_text(token.get("children", [])), escape)
    if not label:
        return f"<{url}>"
    return f"<{url}|{label}>"


def _wrap(text: str, level: int) -> str:
    delimiter = EMPHASIS_DELIMITERS.get(level, EMPHASIS_DELIMITERS[1])
    return f"{delimiter}{text}{delimiter}"


def _escape(text: str, escape: bool) -> str:
    return escape_mrkdwn(text) if escape else text
