"""Parse Markdown and normalize to canonical AST tokens.

This module wraps mistune v3's AST renderer and normalises the raw token
stream into the closed set of node kinds in :class:`~slackify.models.NodeKind`.

Canonical block tokens:
    heading, paragraph, list, list_item, block_code, block_quote

Canonical inline tokens:
    text, emphasis (``attrs.level`` 1 or 2), codespan, link

Every other mistune token becomes ``other`` and keeps its children, so
the formatters can still see text nested inside it.

Tokens are plain dicts::

    {"type": "heading", "attrs": {"level": 1}, "source": "Title",
     "children": [{"type": "text", "raw": "Title"}]}

``source`` is the literal inline text of a heading or paragraph as written
in the Markdown, captured before mistune parses it.
"""

from __future__ import annotations

import mistune

from slackify.models import NodeKind

# ---------------------------------------------------------------------------
# Mistune-to-canonical type mapping
# ---------------------------------------------------------------------------

_BLOCK_TYPE_MAP: dict[str, NodeKind] = {
    "heading": NodeKind.HEADING,
    "paragraph": NodeKind.PARAGRAPH,
    "block_quote": NodeKind.BLOCKQUOTE,
    "list": NodeKind.LIST,
    "list_item": NodeKind.LIST_ITEM,
    "block_code": NodeKind.FENCED_CODE,
    # Tight list items hold their text in block_text
    "block_text": NodeKind.PARAGRAPH,
}

# Emphasis levels: 1 = light (italic), 2 = strong (bold)
_EMPHASIS_LEVELS: dict[str, int] = {
    "emphasis": 1,
    "strong": 2,
}

# Types that should be silently skipped during normalization
_SKIP_TYPES: frozenset[str] = frozenset({
    "blank_line",
})

# Breaks inside a paragraph are kept as literal newlines
_BREAK_TYPES: frozenset[str] = frozenset({
    "softbreak",
    "linebreak",
})


def _capture_source(md: mistune.Markdown, state: mistune.BlockState) -> None:
    """Copy each block's raw inline text to ``source`` before inline parsing."""
    _copy_source(state.tokens)


def _copy_source(tokens: list[dict]) -> None:
    for token in tokens:
        if "text" in token:
            token["source"] = token["text"]
        children = token.get("children")
        if children:
            _copy_source(children)


def create_parser() -> mistune.Markdown:
    """Build the mistune parser used by :class:`ASTNormalizer`."""
    parser = mistune.create_markdown(renderer="ast", plugins=["url"])
    parser.before_render_hooks.append(_capture_source)
    return parser


class ASTNormalizer:
    """Parse Markdown and normalize to canonical AST tokens.

    The wrapped parser is built once and never reconfigured afterwards, so a
    single instance can serve concurrent callers.
    """

    def __init__(self) -> None:
        self._parser = create_parser()

    def parse(self, markdown: str) -> list[dict]:
        """Parse markdown and return normalized AST token list."""
        raw_tokens = self._parser(markdown)
        if isinstance(raw_tokens, str):
            return []
        return self._normalize_tokens(raw_tokens)

    def _normalize_tokens(self, tokens: list[dict]) -> list[dict]:
        """Walk the token tree and normalize every node."""
        result: list[dict] = []
        for token in tokens:
            normalized = self._normalize_token(token)
            if normalized is not None:
                result.append(normalized)
        return result

    def _normalize_token(self, token: dict) -> dict | None:
        """Normalize a single token, returning None if it should be skipped."""
        raw_type = token.get("type", "")

        if raw_type in _SKIP_TYPES:
            return None

        if raw_type in _BLOCK_TYPE_MAP:
            return self._normalize_block(token, _BLOCK_TYPE_MAP[raw_type])

        if raw_type in _EMPHASIS_LEVELS:
            return {
                "type": NodeKind.EMPHASIS.value,
                "attrs": {"level": _EMPHASIS_LEVELS[raw_type]},
                "children": self._normalize_tokens(token.get("children", [])),
            }

        if raw_type == "text":
            return {"type": NodeKind.TEXT.value, "raw": token.get("raw", "")}

        if raw_type in _BREAK_TYPES:
            return {"type": NodeKind.TEXT.value, "raw": "\n"}

        if raw_type == "codespan":
            return {"type": NodeKind.CODE_SPAN.value, "raw": token.get("raw", "")}

        if raw_type == "link":
            return {
                "type": NodeKind.LINK.value,
                "attrs": {"url": token.get("attrs", {}).get("url", "")},
                "children": self._normalize_tokens(token.get("children", [])),
            }

        # Unknown token: keep its children so nested text stays reachable
        result: dict = {"type": NodeKind.OTHER.value, "source_type": raw_type}
        children = token.get("children")
        if children:
            result["children"] = self._normalize_tokens(children)
        return result

    def _normalize_block(self, token: dict, kind: NodeKind) -> dict:
        """Normalize a block-level token."""
        if kind is NodeKind.FENCED_CODE:
            # Indented code blocks are not a supported construct
            if token.get("style") == "indent":
                return {"type": NodeKind.OTHER.value, "source_type": "indented_code"}
            raw_code = token.get("raw", "")
            # Strip trailing newline added by mistune
            if raw_code.endswith("\n"):
                raw_code = raw_code[:-1]
            result: dict = {"type": kind.value, "raw": raw_code}
            info = (token.get("attrs") or {}).get("info")
            if info:
                result["attrs"] = {"info": info}
            return result

        result = {"type": kind.value}

        if kind is NodeKind.HEADING:
            result["attrs"] = {"level": token.get("attrs", {}).get("level", 1)}
        elif kind is NodeKind.LIST:
            result["attrs"] = {"ordered": bool(token.get("attrs", {}).get("ordered", False))}

        if "source" in token:
            result["source"] = token["source"]

        children = token.get("children")
        if children:
            result["children"] = self._normalize_tokens(children)

        return result

