"""Chat API wrapper for the Slack Web API.

:class:`ChatAPI` is a thin wrapper around ``chat.postMessage``.  All HTTP
concerns (auth, retries, error mapping) live in the transport.
"""

from __future__ import annotations

from typing import Any

from .transport import SlackTransport


class ChatAPI:
    """Synchronous wrapper for the ``chat.*`` methods.

    Parameters
    ----------
    transport:
        A configured :class:`SlackTransport` instance.
    """

    def __init__(self, transport: SlackTransport) -> None:
        self._transport = transport

    def post_message(
        self,
        channel: str,
        blocks: list[dict[str, Any]] | None = None,
        text: str | None = None,
        thread_ts: str | None = None,
    ) -> dict[str, Any]:
        """Post a message to *channel*.

        Parameters
        ----------
        channel:
            Channel ID (or name) to post to.
        blocks:
            Block Kit blocks.  Slack renders these in preference to *text*.
        text:
            Plain-text body; used for notifications and as the fallback
            when *blocks* cannot be displayed.
        thread_ts:
            Parent message timestamp to reply in a thread.

        Returns
        -------
        dict
            The ``chat.postMessage`` response, including ``channel`` and
            ``ts``.
        """
        body: dict[str, Any] = {"channel": channel}
        if blocks is not None:
            body["blocks"] = blocks
        if text is not None:
            body["text"] = text
        if thread_ts is not None:
            body["thread_ts"] = thread_ts
        return self._transport.call("chat.postMessage", body)
