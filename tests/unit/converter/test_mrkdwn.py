"""Tests for converter/mrkdwn.py (flattening-mode formatter)."""

from __future__ import annotations

import pytest

from slackify.converter.mrkdwn import escape_mrkdwn, flatten_inline


def _text(raw):
    return {"type": "text", "raw": raw}


def _em(level, *children):
    return {"type": "emphasis", "attrs": {"level": level}, "children": list(children)}


def _link(url, *children):
    return {"type": "link", "attrs": {"url": url}, "children": list(children)}


class TestEscape:
    @pytest.mark.parametrize("raw,expected", [
        ("a & b", "a &amp; b"),
        ("<tag>", "&lt;tag&gt;"),
        ("&lt;", "&amp;lt;"),
        ("plain", "plain"),
    ])
    def test_control_characters(self, raw, expected):
        assert escape_mrkdwn(raw) == expected


class TestSingleStrategy:
    def test_plain_text_verbatim(self):
        assert flatten_inline([_text("Plain paragraph.")]) == "Plain paragraph."

    def test_strong_uses_asterisks(self):
        children = [_text("This is "), _em(2, _text("bold")), _text(".")]
        assert flatten_inline(children) == "This is *bold*."

    def test_emphasis_uses_underscores(self):
        assert flatten_inline([_em(1, _text("it"))]) == "_it_"

    def test_only_first_fragment_in_span_wrapped(self):
        children = [_em(2, _text("a"), _text("b"))]
        assert flatten_inline(children) == "*a*b"

    def test_innermost_level_wins(self):
        children = [_em(1, _em(2, _text("x")))]
        assert flatten_inline(children) == "*x*"

    def test_pending_level_consumed_after_span(self):
        children = [_em(2, _em(1, _text("x"))), _text(" y")]
        assert flatten_inline(children) == "_x_ y"

    def test_empty_emphasis_carries_to_next_text(self):
        children = [_em(2), _text("next")]
        assert flatten_inline(children) == "*next*"

    def test_codespan_keeps_backticks(self):
        assert flatten_inline([{"type": "codespan", "raw": "x"}]) == "`x`"

    def test_emphasised_codespan_wrapped(self):
        children = [_em(2, {"type": "codespan", "raw": "x"})]
        assert flatten_inline(children) == "*`x`*"

    def test_link(self):
        children = [_link("https://example.com", _text("label"))]
        assert flatten_inline(children) == "<https://example.com|label>"

    def test_link_without_label(self):
        assert flatten_inline([_link("https://example.com")]) == "<https://example.com>"

    def test_link_inside_emphasis(self):
        children = [_em(2, _link("https://u", _text("l")))]
        assert flatten_inline(children) == "*<https://u|l>*"

    def test_link_label_escaped(self):
        children = [_link("https://u", _text("a<b"))]
        assert flatten_inline(children) == "<https://u|a&lt;b>"

    def test_text_escaped(self):
        assert flatten_inline([_text("1 < 2 & 3")]) == "1 &lt; 2 &amp; 3"

    def test_escape_disabled(self):
        assert flatten_inline([_text("1 < 2")], escape=False) == "1 < 2"

    def test_newline_text_preserved(self):
        assert flatten_inline([_text("a"), _text("\n"), _text("b")]) == "a\nb"

    def test_unknown_container_transparent(self):
        children = [{"type": "other", "children": [_text("inner")]}]
        assert flatten_inline(children) == "inner"

    def test_empty(self):
        assert flatten_inline([]) == ""


class TestStackStrategy:
    def test_every_fragment_wrapped(self):
        children = [_em(2, _text("a"), _text("b"))]
        assert flatten_inline(children, strategy="stack") == "*ab*"

    def test_nested_levels_compose(self):
        children = [_em(2, _text("a "), _em(1, _text("b")), _text(" c"))]
        assert flatten_inline(children, strategy="stack") == "*a _b_ c*"

    def test_empty_span_dropped(self):
        children = [_em(2), _text("x")]
        assert flatten_inline(children, strategy="stack") == "x"

    def test_plain_and_link(self):
        children = [_text("see "), _link("https://u", _text("here"))]
        assert flatten_inline(children, strategy="stack") == "see <https://u|here>"
