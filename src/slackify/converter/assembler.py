"""Wrap formatter output in output-unit envelopes and serialize to Block Kit.

The constructors (:func:`header_unit`, :func:`flattened_unit`,
:func:`section_unit`, :func:`list_unit`, :func:`quote_unit`) are the only
place the block dispatcher creates units, so every block kind maps onto
exactly one envelope.

:func:`to_slack_blocks` turns units into Slack Block Kit dicts:

Header::

    {"type": "header",
     "text": {"type": "plain_text", "text": "Title", "emoji": true}}

Flattened text::

    {"type": "section", "text": {"type": "mrkdwn", "text": "*bold*"}}

Structured::

    {"type": "rich_text", "elements": [
        {"type": "rich_text_section", "elements": [
            {"type": "text", "text": "code", "style": {"code": true}}]},
        {"type": "rich_text_list", "style": "bullet", "elements": [...]},
        {"type": "rich_text_quote", "elements": [...]}]}

Text elements only carry ``style`` when it is not the default.
"""

from __future__ import annotations

from slackify.models import (
    FlattenedTextUnit,
    HeaderUnit,
    LinkRun,
    OutputUnit,
    Quote,
    RichList,
    Run,
    Section,
    StructuredElement,
    StructuredUnit,
    TextStyle,
)

# ---------------------------------------------------------------------------
# Unit constructors
# ---------------------------------------------------------------------------

def header_unit(text: str) -> HeaderUnit:
    return HeaderUnit(text=text)


def flattened_unit(text: str) -> FlattenedTextUnit:
    return FlattenedTextUnit(text=text)


def section_unit(runs: list[Run]) -> StructuredUnit:
    """One rich-text section holding *runs*."""
    return StructuredUnit(elements=[Section(runs=list(runs))])


def list_unit(items: list[Section], ordered: bool) -> StructuredUnit:
    """One rich-text list; each item is already a :class:`Section`."""
    return StructuredUnit(elements=[RichList(items=list(items), ordered=ordered)])


def quote_unit(runs: list[Run]) -> StructuredUnit:
    """One rich-text quote holding *runs*."""
    return StructuredUnit(elements=[Quote(runs=list(runs))])


# ---------------------------------------------------------------------------
# Block Kit serialization
# ---------------------------------------------------------------------------

def to_slack_blocks(units: list[OutputUnit]) -> list[dict]:
    """Serialize output units into Slack Block Kit block dicts, one per unit."""
    return [_unit_to_block(unit) for unit in units]


def _unit_to_block(unit: OutputUnit) -> dict:
    if isinstance(unit, HeaderUnit):
        return {
            "type": "header",
            "text": {"type": "plain_text", "text": unit.text, "emoji": True},
        }
    if isinstance(unit, FlattenedTextUnit):
        return {
            "type": "section",
            "text": {"type": "mrkdwn", "text": unit.text},
        }
    if isinstance(unit, StructuredUnit):
        return {
            "type": "rich_text",
            "elements": [_element_to_dict(element) for element in unit.elements],
        }
    raise TypeError(f"Unsupported output unit: {type(unit).__name__}")


def _element_to_dict(element: StructuredElement) -> dict:
    if isinstance(element, Section):
        return {
            "type": "rich_text_section",
            "elements": [_run_to_dict(run) for run in element.runs],
        }
    if isinstance(element, RichList):
        return {
            "type": "rich_text_list",
            "style": "ordered" if element.ordered else "bullet",
            "elements": [_element_to_dict(item) for item in element.items],
        }
    if isinstance(element, Quote):
        return {
            "type": "rich_text_quote",
            "elements": [_run_to_dict(run) for run in element.runs],
        }
    raise TypeError(f"Unsupported structured element: {type(element).__name__}")


def _run_to_dict(run: Run) -> dict:
    if isinstance(run, LinkRun):
        element: dict = {"type": "link", "url": run.url}
        if run.text:
            element["text"] = run.text
        return element
    element = {"type": "text", "text": run.text}
    if not run.style.is_default:
        element["style"] = _style_to_dict(run.style)
    return element


def _style_to_dict(style: TextStyle) -> dict:
    """Only the flags that are set; Slack treats missing flags as false."""
    return {
        name: True
        for name, value in (
            ("bold", style.bold),
            ("italic", style.italic),
            ("code", style.code),
        )
        if value
    }
