"""Markdown → Slack Block Kit conversion pipeline.

Public API:

- :class:`MarkdownToSlackConverter` -- Markdown → output units.
- :class:`ASTNormalizer` -- parse and normalize Markdown to canonical AST.
- :func:`normalize_newlines` -- promote single line breaks to paragraphs.
- :func:`build_units` -- convert normalized AST to output units.
- :func:`build_runs` -- inline tokens → styled runs (structured mode).
- :func:`flatten_inline` -- inline tokens → mrkdwn string (flattening mode).
- :func:`to_slack_blocks` -- output units → Block Kit dicts.
"""

from slackify.converter.assembler import to_slack_blocks
from slackify.converter.ast_normalizer import ASTNormalizer
from slackify.converter.block_builder import build_units
from slackify.converter.md_to_slack import MarkdownToSlackConverter
from slackify.converter.mrkdwn import escape_mrkdwn, flatten_inline
from slackify.converter.normalizer import normalize_newlines
from slackify.converter.rich_text import build_runs, merge_plain_runs

__all__ = [
    "ASTNormalizer",
    "MarkdownToSlackConverter",
    "build_runs",
    "build_units",
    "escape_mrkdwn",
    "flatten_inline",
    "merge_plain_runs",
    "normalize_newlines",
    "to_slack_blocks",
]
