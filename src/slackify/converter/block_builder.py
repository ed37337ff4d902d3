"""Convert normalized AST tokens to Slack output units.

Each recognized top-level block produces exactly one unit:

- heading -> header unit with the heading's literal source text
- paragraph -> flattened mrkdwn unit
- list -> one rich-text list, one section per item
- block_code / codespan -> one code-styled section
- block_quote -> one rich-text quote
- link -> one section holding the label text

Any other kind is skipped without a unit or a warning.  Container blocks
(lists, quotes) consume the children they need themselves; nothing below
the top level is dispatched on its own.
"""

from __future__ import annotations

from collections.abc import Callable as _Callable

from slackify.config import SlackifyConfig
from slackify.converter.assembler import (
    flattened_unit,
    header_unit,
    list_unit,
    quote_unit,
    section_unit,
)
from slackify.converter.mrkdwn import flatten_inline
from slackify.converter.rich_text import build_runs, extract_text, merge_plain_runs
from slackify.errors import SlackifyConversionError
from slackify.models import (
    ConversionWarning,
    NodeKind,
    OutputUnit,
    Run,
    Section,
    TextRun,
    TextStyle,
)
from slackify.observability import get_logger

log = get_logger("slackify.converter")

_CODE_STYLE = TextStyle(code=True)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def build_units(
    tokens: list[dict],
    config: SlackifyConfig,
) -> tuple[list[OutputUnit], list[ConversionWarning]]:
    """Convert normalized AST tokens to output units.

    Parameters
    ----------
    tokens:
        List of canonical AST tokens from :class:`ASTNormalizer`.
    config:
        SDK configuration.

    Returns
    -------
    tuple[list[OutputUnit], list[ConversionWarning]]
        (units, warnings)

    Raises
    ------
    SlackifyConversionError
        If a token cannot be walked.  No partial result is returned.
    """
    ctx = _BuildContext(config)
    for index, token in enumerate(tokens):
        try:
            unit = _process_token(token, ctx)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            node_type = token.get("type") if isinstance(token, dict) else type(token).__name__
            raise SlackifyConversionError(
                message=f"Malformed {node_type!r} node at index {index}: {exc}",
                context={"node_type": node_type, "index": index},
                cause=exc,
            ) from exc
        if unit is not None:
            ctx.units.append(unit)
    return ctx.units, ctx.warnings


class _BuildContext:
    """Mutable accumulator for the unit building pass."""

    __slots__ = ("config", "units", "warnings")

    def __init__(self, config: SlackifyConfig) -> None:
        self.config = config
        self.units: list[OutputUnit] = []
        self.warnings: list[ConversionWarning] = []

    def add_warning(self, code: str, message: str, **context: object) -> None:
        self.warnings.append(ConversionWarning(
            code=code, message=message, context=dict(context),
        ))


# ---------------------------------------------------------------------------
# Token dispatch
# ---------------------------------------------------------------------------

def _kind_of(token: dict) -> NodeKind:
    try:
        return NodeKind(token.get("type", ""))
    except ValueError:
        return NodeKind.OTHER


def _process_token(token: dict, ctx: _BuildContext) -> OutputUnit | None:
    """Process a single top-level token and return the unit it produces."""
    kind = _kind_of(token)
    handler = _BLOCK_HANDLERS.get(kind)
    if handler is None:
        log.debug(
            "Skipped unsupported block",
            extra={"extra_fields": {
                "op": "build_units",
                "node_type": token.get("source_type", token.get("type", "")),
            }},
        )
        return None
    return handler(token, ctx)


# ---------------------------------------------------------------------------
# Block builders
# ---------------------------------------------------------------------------

def _build_heading(token: dict, ctx: _BuildContext) -> OutputUnit:
    """Headings are plain titles: inline markup passes through verbatim."""
    text = token.get("source")
    if text is None:
        text = extract_text(token.get("children", []))
    text = text.strip()
    if len(text) > ctx.config.header_max_chars:
        ctx.add_warning(
            "HEADER_OVERFLOW",
            f"Header text is {len(text)} characters; Slack accepts "
            f"{ctx.config.header_max_chars}.",
            length=len(text),
            limit=ctx.config.header_max_chars,
        )
    return header_unit(text)


def _build_paragraph(token: dict, ctx: _BuildContext) -> OutputUnit:
    text = flatten_inline(
        token.get("children", []),
        strategy=ctx.config.flatten_emphasis,
        escape=ctx.config.escape_mrkdwn,
    )
    if len(text) > ctx.config.section_max_chars:
        ctx.add_warning(
            "TEXT_OVERFLOW",
            f"Section text is {len(text)} characters; Slack accepts "
            f"{ctx.config.section_max_chars}.",
            length=len(text),
            limit=ctx.config.section_max_chars,
        )
    return flattened_unit(text)


def _build_list(token: dict, ctx: _BuildContext) -> OutputUnit:
    """One section per direct list item, from the item's first block."""
    ordered = bool(token.get("attrs", {}).get("ordered", False))
    items: list[Section] = []

    for item in token.get("children", []):
        if _kind_of(item) is not NodeKind.LIST_ITEM:
            continue
        content = item.get("children", [])
        if content:
            runs = build_runs(content[0].get("children", []))
        else:
            runs = []
        items.append(Section(runs=runs))

    return list_unit(items, ordered)


def _build_code_block(token: dict, ctx: _BuildContext) -> OutputUnit:
    """Code is verbatim: one code-styled run, no inline formatting."""
    return section_unit([TextRun(token.get("raw", ""), _CODE_STYLE)])


def _build_block_quote(token: dict, ctx: _BuildContext) -> OutputUnit:
    paragraphs = [
        child for child in token.get("children", [])
        if _kind_of(child) is NodeKind.PARAGRAPH
    ]

    if ctx.config.quote_style == "styled":
        runs: list[Run] = []
        for i, paragraph in enumerate(paragraphs):
            if i:
                runs.append(TextRun("\n"))
            runs.extend(build_runs(paragraph.get("children", [])))
        return quote_unit(merge_plain_runs(runs))

    # Raw literal source of each paragraph, one unstyled run
    lines: list[str] = []
    for paragraph in paragraphs:
        source = paragraph.get("source")
        if source is None:
            source = extract_text(paragraph.get("children", []))
        lines.append(source.strip())
    return quote_unit([TextRun("\n".join(lines))])


def _build_link(token: dict, ctx: _BuildContext) -> OutputUnit:
    """A standalone link keeps its label; the destination is dropped."""
    return section_unit([TextRun(extract_text(token.get("children", [])))])


# ---------------------------------------------------------------------------
# Block handler dispatch table
# ---------------------------------------------------------------------------

_BlockHandler = _Callable[[dict, _BuildContext], OutputUnit]

_BLOCK_HANDLERS: dict[NodeKind, _BlockHandler] = {
    NodeKind.HEADING: _build_heading,
    NodeKind.PARAGRAPH: _build_paragraph,
    NodeKind.LIST: _build_list,
    NodeKind.FENCED_CODE: _build_code_block,
    NodeKind.CODE_SPAN: _build_code_block,
    NodeKind.BLOCKQUOTE: _build_block_quote,
    NodeKind.LINK: _build_link,
}
