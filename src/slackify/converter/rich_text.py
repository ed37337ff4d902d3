"""Build styled text runs from normalized inline AST tokens.

This is the *structured* formatting mode, used wherever Slack accepts
rich-text elements (list items, quotes, code sections).  Each call threads
an immutable :class:`TextStyle` down the tree and returns a fresh list of
runs, so any subtree can be formatted in isolation.

Style composition:

* ``emphasis`` level 2 ORs in ``bold``, level 1 ORs in ``italic``.
* ``codespan`` always yields ``TextStyle(code=True)``, whatever the
  surrounding emphasis.
* ``link`` yields one :class:`LinkRun` carrying the label text.

Adjacent unstyled text runs are merged, so ``"a"`` followed by ``"b"`` from
two sibling text tokens comes out as the single run ``"ab"``.
"""

from __future__ import annotations

from slackify.models import LinkRun, NodeKind, Run, TextRun, TextStyle

_CODE_STYLE = TextStyle(code=True)


def build_runs(
    children: list[dict] | dict,
    style: TextStyle | None = None,
) -> list[Run]:
    """Convert inline AST tokens to a list of styled runs.

    Parameters
    ----------
    children:
        A single inline token or a list of sibling tokens.
    style:
        Style inherited from enclosing emphasis.  Defaults to unstyled.

    Returns
    -------
    list[Run]
        Runs in document order, with adjacent plain text merged.
    """
    if style is None:
        style = TextStyle()
    tokens = [children] if isinstance(children, dict) else children
    runs: list[Run] = []
    for token in tokens:
        runs.extend(_token_runs(token, style))
    return merge_plain_runs(runs)


def _token_runs(token: dict, style: TextStyle) -> list[Run]:
    """Format one token and its subtree."""
    token_type = token.get("type", "")

    if token_type == NodeKind.TEXT:
        return [TextRun(token.get("raw", ""), style)]

    if token_type == NodeKind.EMPHASIS:
        level = token.get("attrs", {}).get("level", 1)
        child_style = TextStyle(
            bold=style.bold or level == 2,
            italic=style.italic or level == 1,
        )
        runs: list[Run] = []
        for child in token.get("children", []):
            runs.extend(_token_runs(child, child_style))
        return runs

    if token_type == NodeKind.CODE_SPAN:
        return [TextRun(token.get("raw", ""), _CODE_STYLE)]

    if token_type == NodeKind.LINK:
        url = token.get("attrs", {}).get("url", "")
        return [LinkRun(url, extract_text(token.get("children", [])))]

    # Transparent container: recurse with the inherited style
    runs = []
    for child in token.get("children", []):
        runs.extend(_token_runs(child, style))
    return runs


def merge_plain_runs(runs: list[Run]) -> list[Run]:
    """Collapse adjacent unstyled :class:`TextRun` objects into one.

    Styled runs and links act as boundaries: a pending plain buffer is
    flushed before each of them.  Plain text that merges to an empty string
    is dropped.
    """
    merged: list[Run] = []
    pending: list[str] = []

    def flush() -> None:
        text = "".join(pending)
        if text:
            merged.append(TextRun(text))
        pending.clear()

    for run in runs:
        if isinstance(run, TextRun) and run.style.is_default:
            pending.append(run.text)
            continue
        flush()
        merged.append(run)
    flush()
    return merged


def extract_text(children: list[dict]) -> str:
    """Recursively concatenate the literal text under *children*.

    Used for link labels, which Slack renders as one unstyled string.
    """
    parts: list[str] = []
    for token in children:
        token_type = token.get("type", "")
        if token_type in (NodeKind.TEXT, NodeKind.CODE_SPAN):
            parts.append(token.get("raw", ""))
        elif "children" in token:
            parts.append(extract_text(token["children"]))
    return "".join(parts)
