"""Tests for the internal error hierarchy and error logging helper."""

import logging

import pytest

from twitchplay.errors import (
    AuthenticationError,
    ChannelJoinError,
    ConnectFailedError,
    FatalConnectionError,
    HandshakeSendError,
    HostResolutionError,
    InternalError,
    NoChannelError,
    ProtocolError,
    SocketCreationError,
    UnexpectedDisconnectError,
    categorize_error,
    log_error,
)
from twitchplay.irc.models import ConnectionStatus


@pytest.mark.parametrize(
    "error_class,status,category",
    [
        (HostResolutionError, ConnectionStatus.FAILED_TO_CONNECT, "network"),
        (SocketCreationError, ConnectionStatus.FAILED_TO_CONNECT, "network"),
        (ConnectFailedError, ConnectionStatus.FAILED_TO_CONNECT, "network"),
        (HandshakeSendError, ConnectionStatus.FAILED_TO_CONNECT, "auth"),
        (AuthenticationError, ConnectionStatus.FAILED_TO_AUTHENTICATE, "auth"),
        (ChannelJoinError, ConnectionStatus.FAILED_TO_AUTHENTICATE, "auth"),
        (UnexpectedDisconnectError, ConnectionStatus.DISCONNECTED, "disconnect"),
    ],
)
def test_fatal_errors_map_to_terminal_status(error_class, status, category):
    error = error_class("boom")
    assert isinstance(error, FatalConnectionError)
    assert error.status is status
    assert error.status.is_terminal
    assert categorize_error(error) == category


@pytest.mark.parametrize("error_class", [NoChannelError, ProtocolError])
def test_recoverable_errors_report_error_status(error_class):
    error = error_class("nope")
    assert not isinstance(error, FatalConnectionError)
    assert error.status is ConnectionStatus.ERROR
    assert not error.status.is_terminal
    assert categorize_error(error) == "protocol"


def test_categorize_non_internal_errors():
    assert categorize_error(InternalError("x")) == "internal"
    assert categorize_error(ConnectionResetError()) == "socket"
    assert categorize_error(ValueError()) == "unexpected"


def test_error_data_is_copied():
    source = {"host": "h"}
    error = HostResolutionError("Could not resolve hostname!", data=source)
    source["host"] = "changed"
    assert error.data == {"host": "h"}
    assert InternalError("x").data == {}


def test_log_error_includes_message_and_error(caplog):
    caplog.set_level(logging.ERROR)
    log_error("Worker failed", ConnectFailedError("refused", data={"port": 6667}), "bot")
    record = caplog.records[0]
    assert record.levelno == logging.ERROR
    assert "Worker failed: refused" in record.message
    assert record.message.startswith("[bot")
