"""TwitchPlay: Twitch chat (IRC) connection on a worker thread for polled hosts."""

from .client import TwitchChatClient
from .config.model import ConnectionSettings, Credentials
from .irc.models import ConnectionEvent, ConnectionStatus, InboundBatch
from .irc.receiver import TwitchMessageReceiver

__version__ = "1.0.0"

__all__ = [
    "ConnectionEvent",
    "ConnectionSettings",
    "ConnectionStatus",
    "Credentials",
    "InboundBatch",
    "TwitchChatClient",
    "TwitchMessageReceiver",
]
