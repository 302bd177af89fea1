"""Centralized internal error hierarchy.

These exceptions describe every way the connection worker can fail. They are
raised and caught inside the worker thread only; the worker converts each one
into a ConnectionEvent carrying ``status`` and the error message, so nothing
is ever thrown across the thread boundary.

Classes:
  InternalError              – Base for all internal errors.
  FatalConnectionError       – Ends the worker (non-zero exit code).
    HostResolutionError      – Server hostname did not resolve.
    SocketCreationError      – The OS refused to create the socket.
    ConnectFailedError       – TCP connect failed.
    HandshakeSendError       – PASS/NICK could not be written.
    AuthenticationError      – Welcome reply missing or wrong.
    ChannelJoinError         – Initial JOIN could not be written.
    UnexpectedDisconnectError – Server closed the connection mid-session.
  NoChannelError             – Chat send with no target (recoverable).
  ProtocolError              – Malformed outbound payload (recoverable).
"""

from __future__ import annotations

from collections.abc import Mapping

from ..irc.models import ConnectionStatus


class InternalError(Exception):
    """Base class for all internal errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.
        status: ConnectionStatus reported to the host for this error.
    """

    status: ConnectionStatus = ConnectionStatus.ERROR
    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class FatalConnectionError(InternalError):
    """Error after which the worker instance cannot continue."""


class HostResolutionError(FatalConnectionError):
    status = ConnectionStatus.FAILED_TO_CONNECT


class SocketCreationError(FatalConnectionError):
    status = ConnectionStatus.FAILED_TO_CONNECT


class ConnectFailedError(FatalConnectionError):
    status = ConnectionStatus.FAILED_TO_CONNECT


class HandshakeSendError(FatalConnectionError):
    status = ConnectionStatus.FAILED_TO_CONNECT


class AuthenticationError(FatalConnectionError):
    status = ConnectionStatus.FAILED_TO_AUTHENTICATE


class ChannelJoinError(FatalConnectionError):
    status = ConnectionStatus.FAILED_TO_AUTHENTICATE


class UnexpectedDisconnectError(FatalConnectionError):
    status = ConnectionStatus.DISCONNECTED


class NoChannelError(InternalError):
    """Chat message had no explicit target and no channel is joined."""


class ProtocolError(InternalError):
    """Outbound payload cannot be expressed as a single protocol line."""


__all__ = [
    "InternalError",
    "FatalConnectionError",
    "HostResolutionError",
    "SocketCreationError",
    "ConnectFailedError",
    "HandshakeSendError",
    "AuthenticationError",
    "ChannelJoinError",
    "UnexpectedDisconnectError",
    "NoChannelError",
    "ProtocolError",
]
