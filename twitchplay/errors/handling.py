from __future__ import annotations

import logging

from ..logs.logger import logger
from .internal import (
    AuthenticationError,
    ChannelJoinError,
    ConnectFailedError,
    HandshakeSendError,
    HostResolutionError,
    InternalError,
    NoChannelError,
    ProtocolError,
    SocketCreationError,
    UnexpectedDisconnectError,
)


def categorize_error(error: Exception) -> str:
    """Map an exception onto the short category used in error events."""
    if isinstance(error, HostResolutionError | SocketCreationError | ConnectFailedError):
        return "network"
    if isinstance(error, HandshakeSendError | AuthenticationError | ChannelJoinError):
        return "auth"
    if isinstance(error, UnexpectedDisconnectError):
        return "disconnect"
    if isinstance(error, NoChannelError | ProtocolError):
        return "protocol"
    if isinstance(error, InternalError):
        return "internal"
    if isinstance(error, OSError):
        return "socket"
    return "unexpected"


def log_error(
    message: str,
    error: Exception,
    user: str | None = None,
    *,
    exc_info: bool = False,
) -> None:
    """Logs an error message with the associated exception details.

    Args:
        message: A descriptive message about the error context.
        error: The exception instance to be logged.
        user: Optional username the error belongs to.
        exc_info: Attach the active traceback to the record.
    """
    data = error.data if isinstance(error, InternalError) else {}
    logger.log_event(
        "error",
        "logged",
        level=logging.ERROR,
        exc_info=exc_info,
        message=message,
        user=user,
        error=str(error),
        error_type=type(error).__name__,
        category=categorize_error(error),
        **data,
    )
