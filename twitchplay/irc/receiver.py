"""Host-facing side of the chat connection.

``TwitchMessageReceiver`` owns the three queues, the stop flag and the worker
thread. Every method is meant to be called from the single host thread; none
of them blocks except ``request_stop(wait_for_exit=True)``.
"""

from __future__ import annotations

import logging
import threading

from ..config.model import ConnectionSettings, Credentials
from ..logs.logger import logger
from .models import (
    ChatMessage,
    ConnectionEvent,
    ConnectionInfo,
    InboundBatch,
    JoinChannel,
    OutboundRequest,
    WorkerState,
)
from .queues import SpscQueue
from .worker import ConnectionWorker


class TwitchMessageReceiver:
    """Runs one ConnectionWorker on a dedicated thread and exchanges data with it."""

    def __init__(self, settings: ConnectionSettings | None = None) -> None:
        self.settings = settings or ConnectionSettings()
        self._send_queue: SpscQueue[OutboundRequest] = SpscQueue()
        self._receive_queue: SpscQueue[InboundBatch] = SpscQueue()
        self._event_queue: SpscQueue[ConnectionEvent] = SpscQueue()
        self._stop_event = threading.Event()
        self._worker: ConnectionWorker | None = None
        self._thread: threading.Thread | None = None

    def __enter__(self) -> TwitchMessageReceiver:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # type: ignore[no-untyped-def]
        self.request_stop(wait_for_exit=True)

    def __del__(self) -> None:
        # Dropped without a stop: let the worker close its socket and exit
        stop_event = getattr(self, "_stop_event", None)
        if stop_event is not None:
            stop_event.set()

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #
    def start(self, credentials: Credentials) -> None:
        """Start the handshake on a new worker thread. Allowed once per instance."""
        if self._thread is not None:
            raise RuntimeError("TwitchMessageReceiver.start called more than once")
        self._worker = ConnectionWorker(
            credentials,
            self._send_queue,
            self._receive_queue,
            self._event_queue,
            self._stop_event,
            self.settings,
        )
        self._thread = threading.Thread(
            target=self._worker.run,
            name=f"twitch-irc-{credentials.username}",
            daemon=True,
        )
        logger.log_event(
            "irc", "worker_start", user=credentials.username, channel=credentials.channel
        )
        self._thread.start()

    def request_stop(self, wait_for_exit: bool = False) -> None:
        """Ask the worker to part and disconnect; optionally join its thread."""
        if self._thread is None:
            return
        self._stop_event.set()
        if wait_for_exit and self._thread is not threading.current_thread():
            self._thread.join()
            logger.log_event(
                "irc",
                "worker_joined",
                level=logging.DEBUG,
                user=self._worker.username if self._worker else None,
                exit_code=self.exit_code,
            )

    @property
    def started(self) -> bool:
        return self._thread is not None

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def exit_code(self) -> int | None:
        return self._worker.exit_code if self._worker else None

    @property
    def state(self) -> WorkerState:
        return self._worker.state if self._worker else WorkerState.DISCONNECTED

    # ------------------------------------------------------------------ #
    # Host -> worker
    # ------------------------------------------------------------------ #
    def enqueue_send(self, request: OutboundRequest) -> None:
        self._send_queue.enqueue(request)

    def send_message(self, message: str, channel: str = "") -> None:
        """Queue a chat message for ``channel`` (a user name whispers) or the joined channel."""
        self.enqueue_send(ChatMessage(body=message, channel=channel))

    def join_channel(self, channel: str) -> None:
        """Queue a switch to ``channel``; an empty name just leaves the current one."""
        self.enqueue_send(JoinChannel(channel=channel))

    # ------------------------------------------------------------------ #
    # Worker -> host
    # ------------------------------------------------------------------ #
    def pull_connection_event(self) -> ConnectionEvent | None:
        return self._event_queue.dequeue()

    def drain_connection_events(self) -> list[ConnectionEvent]:
        return self._event_queue.drain()

    def drain_inbound(self) -> InboundBatch:
        """Merge every pending batch into one, preserving receipt order."""
        merged = InboundBatch()
        for batch in self._receive_queue.drain():
            merged.extend(batch)
        return merged

    def snapshot_connection_info(self) -> ConnectionInfo | None:
        worker = self._worker
        if worker is None:
            return None
        return worker.credentials.to_connection_info(channel=worker.channel)

    def is_connected(self) -> bool:
        return self._worker is not None and self._worker.connected
