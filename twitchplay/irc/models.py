"""Shared IRC data models (packaged)."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum, auto


class ConnectionStatus(Enum):
    # A connection and authentication was established.
    CONNECTED = auto()
    # Failed to connect.
    FAILED_TO_CONNECT = auto()
    # Failed to authenticate.
    FAILED_TO_AUTHENTICATE = auto()
    # A general error, doesn't mean the connection was terminated.
    ERROR = auto()
    # General message from the server.
    MESSAGE = auto()
    # Disconnected from server.
    DISCONNECTED = auto()

    @property
    def is_terminal(self) -> bool:
        """True when the worker emitting this status has stopped for good."""
        return self in _TERMINAL_STATUSES


_TERMINAL_STATUSES = frozenset(
    {
        ConnectionStatus.FAILED_TO_CONNECT,
        ConnectionStatus.FAILED_TO_AUTHENTICATE,
        ConnectionStatus.DISCONNECTED,
    }
)


class WorkerState(Enum):
    DISCONNECTED = auto()
    HANDSHAKING = auto()
    AWAITING_AUTH = auto()
    JOINED = auto()
    CLOSING = auto()
    TERMINATED = auto()


@dataclass(frozen=True, slots=True)
class ConnectionEvent:
    status: ConnectionStatus
    detail: str = ""


@dataclass(slots=True)
class InboundBatch:
    """Chat messages extracted from one receive cycle.

    ``usernames[i]`` sent ``messages[i]``; both lists always have the same length.
    """

    usernames: list[str] = field(default_factory=list)
    messages: list[str] = field(default_factory=list)

    def append(self, username: str, message: str) -> None:
        self.usernames.append(username)
        self.messages.append(message)

    def extend(self, other: InboundBatch) -> None:
        self.usernames.extend(other.usernames)
        self.messages.extend(other.messages)

    def __len__(self) -> int:
        return len(self.messages)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(zip(self.usernames, self.messages, strict=True))


@dataclass(frozen=True, slots=True)
class ChatMessage:
    body: str
    # Channel or user (whisper) to address; empty means the joined channel.
    channel: str = ""


@dataclass(frozen=True, slots=True)
class JoinChannel:
    # Empty means leave the current channel without joining another.
    channel: str = ""


OutboundRequest = ChatMessage | JoinChannel


@dataclass(frozen=True, slots=True)
class ConnectionInfo:
    token: str
    username: str
    channel: str


def normalize_channel(channel: str | None) -> str:
    """Lowercase a channel (or user) name and drop any leading '#'."""
    if not channel:
        return ""
    return channel.strip().lstrip("#").lower()
