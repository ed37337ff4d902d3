"""slackify.slack_api -- Slack Web API transport and method wrappers.

This sub-package provides:

* :mod:`.retries` -- Retry decision logic and exponential backoff.
* :mod:`.transport` -- HTTP transport with auth, retries, and error mapping.
* :mod:`.chat` -- ``chat.postMessage`` wrapper.
"""

from __future__ import annotations

from .chat import ChatAPI
from .retries import compute_backoff, should_retry
from .transport import SlackTransport

__all__ = [
    "ChatAPI",
    "SlackTransport",
    "compute_backoff",
    "should_retry",
]
