"""Host adapter: polls a TwitchMessageReceiver and fans events out to subscribers."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from pydantic import ValidationError

from .config.model import ConnectionSettings, Credentials
from .constants import CLIENT_POLL_INTERVAL_SECONDS
from .errors import log_error
from .irc.models import ConnectionStatus
from .irc.receiver import TwitchMessageReceiver
from .logs.logger import logger

MessageCallback = Callable[[str, str], None]
ConnectionCallback = Callable[[ConnectionStatus, str], None]


class TwitchChatClient:
    """Chat connection for a periodically polled host (game loop, asyncio task, UI timer).

    Subscribe with ``subscribe_messages(cb(username, message))`` and
    ``subscribe_connection(cb(status, detail))``, call ``connect``, then either
    call ``tick()`` from the host's own loop or ``await run()``.
    """

    def __init__(
        self,
        settings: ConnectionSettings | None = None,
        receiver_factory: Callable[
            [ConnectionSettings | None], TwitchMessageReceiver
        ] = TwitchMessageReceiver,
    ) -> None:
        self.settings = settings
        self._receiver_factory = receiver_factory
        self._receiver: TwitchMessageReceiver | None = None
        self._message_callbacks: list[MessageCallback] = []
        self._connection_callbacks: list[ConnectionCallback] = []

    @property
    def receiver(self) -> TwitchMessageReceiver | None:
        return self._receiver

    @property
    def active(self) -> bool:
        """True from ``connect`` until a terminal connection event was dispatched."""
        return self._receiver is not None

    # ------------------------------------------------------------------ #
    # Subscribers
    # ------------------------------------------------------------------ #
    def subscribe_messages(self, callback: MessageCallback) -> None:
        if callback not in self._message_callbacks:
            self._message_callbacks.append(callback)

    def unsubscribe_messages(self, callback: MessageCallback) -> None:
        if callback in self._message_callbacks:
            self._message_callbacks.remove(callback)

    def subscribe_connection(self, callback: ConnectionCallback) -> None:
        if callback not in self._connection_callbacks:
            self._connection_callbacks.append(callback)

    def unsubscribe_connection(self, callback: ConnectionCallback) -> None:
        if callback in self._connection_callbacks:
            self._connection_callbacks.remove(callback)

    # ------------------------------------------------------------------ #
    # Commands
    # ------------------------------------------------------------------ #
    def connect(self, token: str, username: str, channel: str = "") -> bool:
        """Start a connection; failures are broadcast as ERROR events."""
        if self._receiver is not None:
            self._broadcast_connection(
                ConnectionStatus.ERROR, "Already connected / connecting / pending!"
            )
            return False
        if not token or not username:
            self._broadcast_connection(
                ConnectionStatus.ERROR,
                "Invalid connection parameters. Check your strings.",
            )
            return False
        try:
            credentials = Credentials(token=token, username=username, channel=channel)
        except ValidationError as e:
            self._broadcast_connection(
                ConnectionStatus.ERROR,
                f"Invalid connection parameters. {e.errors()[0]['msg']}",
            )
            return False

        receiver = self._receiver_factory(self.settings)
        receiver.start(credentials)
        self._receiver = receiver
        return True

    def send_chat_message(self, message: str, channel: str = "") -> bool:
        """Queue a chat message; False when there is no active connection.

        Delivery problems (no channel, lost connection) arrive later as
        connection events.
        """
        if self._receiver is None:
            return False
        self._receiver.send_message(message, channel)
        return True

    def join_channel(self, channel: str) -> None:
        if self._receiver is None:
            return
        self._receiver.join_channel(channel)

    def disconnect(self) -> None:
        """Request a graceful stop; the final DISCONNECTED event arrives via tick()."""
        if self._receiver is None:
            return
        self._receiver.request_stop(wait_for_exit=False)

    def shutdown(self) -> None:
        """Stop and wait for the worker thread; pending events are discarded."""
        receiver, self._receiver = self._receiver, None
        if receiver is not None:
            receiver.request_stop(wait_for_exit=True)

    # ------------------------------------------------------------------ #
    # Polling
    # ------------------------------------------------------------------ #
    def tick(self) -> None:
        receiver = self._receiver
        if receiver is None:
            return

        still_connected = True
        for event in receiver.drain_connection_events():
            self._broadcast_connection(event.status, event.detail)
            if event.status.is_terminal:
                still_connected = False

        for username, message in receiver.drain_inbound():
            self._broadcast_message(username, message)

        if not still_connected:
            receiver.request_stop(wait_for_exit=False)
            self._receiver = None

    async def run(self, poll_interval: float = CLIENT_POLL_INTERVAL_SECONDS) -> None:
        """Tick on a fixed cadence until the connection has ended."""
        while self._receiver is not None:
            self.tick()
            await asyncio.sleep(poll_interval)

    def _broadcast_connection(self, status: ConnectionStatus, detail: str) -> None:
        level = logging.ERROR if status is ConnectionStatus.ERROR else logging.DEBUG
        logger.log_event(
            "client", "connection_event", level=level, status=status.name, detail=detail
        )
        for callback in list(self._connection_callbacks):
            try:
                callback(status, detail)
            except Exception as e:  # noqa: BLE001
                log_error("Connection subscriber failed", e, exc_info=True)

    def _broadcast_message(self, username: str, message: str) -> None:
        for callback in list(self._message_callbacks):
            try:
                callback(username, message)
            except Exception as e:  # noqa: BLE001
                log_error("Message subscriber failed", e, username, exc_info=True)
