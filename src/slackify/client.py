"""Synchronous Slack SDK client.

:class:`SlackifyClient` combines the Markdown converter with the
``chat.postMessage`` wrapper.

Usage::

    from slackify import SlackifyClient

    with SlackifyClient(token="xoxb-...") as client:
        result = client.post_markdown("C0123456", "# Release\\n*done*")
        print(result.ts)
"""

from __future__ import annotations

from typing import Any

import httpx

from slackify.config import SlackifyConfig
from slackify.converter.md_to_slack import MarkdownToSlackConverter
from slackify.errors import SlackifyConversionError
from slackify.models import ConversionResult, PostResult
from slackify.observability import get_logger
from slackify.slack_api.chat import ChatAPI
from slackify.slack_api.transport import SlackTransport

log = get_logger("slackify.client")


class SlackifyClient:
    """Synchronous Slack SDK client.

    Parameters
    ----------
    token:
        Slack bot token.  **Required** for posting.
    transport:
        Optional ``httpx`` transport handed to the underlying HTTP client.
    **kwargs:
        All remaining keyword arguments are forwarded to
        :class:`SlackifyConfig`.
    """

    def __init__(
        self,
        token: str,
        *,
        transport: httpx.BaseTransport | None = None,
        **kwargs: Any,
    ) -> None:
        self._config = SlackifyConfig(token=token, **kwargs)
        self._transport = SlackTransport(self._config, transport=transport)
        self._chat = ChatAPI(self._transport)
        self._converter = MarkdownToSlackConverter(self._config)

    @property
    def config(self) -> SlackifyConfig:
        return self._config

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def convert(self, markdown: str) -> ConversionResult:
        """Convert *markdown* without posting it."""
        return self._converter.convert(markdown)

    # ------------------------------------------------------------------
    # Posting
    # ------------------------------------------------------------------

    def post_markdown(
        self,
        channel: str,
        markdown: str,
        *,
        thread_ts: str | None = None,
    ) -> PostResult:
        """Convert *markdown* and post it to *channel*.

        The raw Markdown always travels as the message ``text`` so
        notifications and clients without Block Kit support still show
        something readable.  If conversion fails the message is posted
        with ``text`` only and ``fallback_used`` is set.

        Parameters
        ----------
        channel:
            Channel ID to post to.
        markdown:
            Raw Markdown text.
        thread_ts:
            Parent message timestamp to reply in a thread.

        Returns
        -------
        PostResult

        Raises
        ------
        SlackifyAPIError
            (and subclasses) when Slack rejects the request.
        """
        try:
            conversion = self._converter.convert(markdown)
        except SlackifyConversionError as exc:
            log.warning(
                "Posting raw text after conversion failure",
                extra={"extra_fields": {
                    "op": "post_markdown", "channel": channel, "error": exc.message,
                }},
            )
            response = self._chat.post_message(channel, text=markdown, thread_ts=thread_ts)
            return PostResult(
                channel=response.get("channel", channel),
                ts=response.get("ts", ""),
                blocks_sent=0,
                fallback_used=True,
            )

        blocks = conversion.blocks
        response = self._chat.post_message(
            channel,
            blocks=blocks or None,
            text=markdown,
            thread_ts=thread_ts,
        )
        return PostResult(
            channel=response.get("channel", channel),
            ts=response.get("ts", ""),
            blocks_sent=len(blocks),
            warnings=list(conversion.warnings),
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the underlying HTTP transport."""
        self._transport.close()

    def __enter__(self) -> SlackifyClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
