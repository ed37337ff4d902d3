"""Full Markdown-to-Slack conversion pipeline.

:class:`MarkdownToSlackConverter` runs four stages:

1. **Normalize newlines** -- every single line break becomes a paragraph
   break, so each source line turns into its own unit.
2. **Parse** -- Mistune parses the text into an AST.
3. **Normalize AST** -- :class:`ASTNormalizer` maps token types to
   :class:`~slackify.models.NodeKind`.
4. **Build** -- :func:`build_units` dispatches each top-level block to one
   output unit.

The result is a :class:`ConversionResult` holding the units and any
non-fatal warnings; ``result.blocks`` gives the Block Kit payload.
"""

from __future__ import annotations

import json
import sys
import time

from slackify.config import SlackifyConfig
from slackify.converter.ast_normalizer import ASTNormalizer
from slackify.converter.block_builder import build_units
from slackify.converter.normalizer import normalize_newlines
from slackify.errors import SlackifyConversionError
from slackify.models import ConversionResult
from slackify.observability import NoopMetricsHook, get_logger
from slackify.utils.redact import redact

log = get_logger("slackify.converter")


class MarkdownToSlackConverter:
    """Convert Markdown text to Slack output units.

    Parameters
    ----------
    config:
        SDK configuration controlling newline normalization, emphasis
        flattening, quote styling, and length warnings.

    Examples
    --------
    >>> from slackify.config import SlackifyConfig
    >>> converter = MarkdownToSlackConverter(SlackifyConfig())
    >>> result = converter.convert("# Hello\\nWorld")
    >>> len(result.units)
    2
    >>> result.blocks[0]["type"]
    'header'
    """

    def __init__(self, config: SlackifyConfig) -> None:
        self._config = config
        self._normalizer = ASTNormalizer()
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()

    def convert(self, markdown: str) -> ConversionResult:
        """Full pipeline: normalize -> parse -> build units.

        Parameters
        ----------
        markdown:
            Raw Markdown text to convert.

        Returns
        -------
        ConversionResult
            ``units`` in document order and ``warnings``.

        Raises
        ------
        SlackifyConversionError
            If the parsed tree cannot be walked.
        """
        t0 = time.monotonic()
        try:
            result = self._convert(markdown)
        except SlackifyConversionError as exc:
            self._metrics.increment("slackify.conversions_total", tags={"status": "error"})
            log.warning(
                "Conversion failed",
                extra={"extra_fields": {"op": "convert", "error": exc.message, **exc.context}},
            )
            raise

        elapsed_ms = (time.monotonic() - t0) * 1000
        self._metrics.increment("slackify.conversions_total", tags={"status": "ok"})
        self._metrics.timing("slackify.conversion_duration_ms", elapsed_ms)
        for unit in result.units:
            self._metrics.increment("slackify.units_total", tags={"kind": type(unit).__name__})
        for warning in result.warnings:
            self._metrics.increment(
                "slackify.conversion_warnings_total", tags={"code": warning.code},
            )
        log.debug(
            "Conversion complete",
            extra={"extra_fields": {
                "op": "convert",
                "units": len(result.units),
                "warnings": len(result.warnings),
                "duration_ms": round(elapsed_ms, 3),
            }},
        )
        return result

    def _convert(self, markdown: str) -> ConversionResult:
        if self._config.normalize_newlines:
            markdown = normalize_newlines(markdown)

        # Stage 2 & 3: Parse and normalize
        try:
            tokens = self._normalizer.parse(markdown)
        except (RecursionError, ValueError, TypeError) as exc:
            raise SlackifyConversionError(
                message=f"Markdown parser failed: {exc}",
                context={"length": len(markdown)},
                cause=exc,
            ) from exc

        if self._config.debug_dump_ast:
            print(
                "[slackify] Normalized AST:",
                json.dumps(tokens, indent=2, ensure_ascii=False),
                file=sys.stderr,
            )

        # Stage 4: Build output units
        units, warnings = build_units(tokens, self._config)
        result = ConversionResult(units=units, warnings=warnings)

        if self._config.debug_dump_payload:
            safe = redact({"blocks": result.blocks}, self._config.token)
            print(
                "[slackify] Block Kit payload:",
                json.dumps(safe["blocks"], indent=2, ensure_ascii=False),
                file=sys.stderr,
            )

        return result
