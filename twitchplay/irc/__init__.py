"""IRC subsystem package.

Framing, parsing and formatting of the Twitch chat protocol plus the shared
models and cross-thread queues. The worker and its host-facing receiver live
in ``irc.worker`` and ``irc.receiver``; they depend on ``config`` and are not
imported here.
"""

from .models import (  # noqa: F401
    ChatMessage,
    ConnectionEvent,
    ConnectionInfo,
    ConnectionStatus,
    InboundBatch,
    JoinChannel,
    OutboundRequest,
    WorkerState,
)
from .parser import ParseResult, parse_message  # noqa: F401
from .queues import SpscQueue  # noqa: F401

__all__ = [
    "ChatMessage",
    "ConnectionEvent",
    "ConnectionInfo",
    "ConnectionStatus",
    "InboundBatch",
    "JoinChannel",
    "OutboundRequest",
    "ParseResult",
    "SpscQueue",
    "WorkerState",
    "parse_message",
]
