"""Connection worker: owns the chat socket and runs the connection state machine.

The worker runs on its own thread (see ``receiver.TwitchMessageReceiver``).
Everything it mutates is private to that thread; the host only sees copies
that travel through the three SPSC queues, plus a few single-word attributes
(``state``, ``channel``, ``connected``) that are rebound atomically.
"""

from __future__ import annotations

import logging
import select
import socket
import threading
import time
from collections import deque

from ..config.model import ConnectionSettings, Credentials
from ..constants import IRC_WELCOME_PHRASE, IRC_WELCOME_PREFIX
from ..errors import (
    AuthenticationError,
    ChannelJoinError,
    ConnectFailedError,
    FatalConnectionError,
    HandshakeSendError,
    HostResolutionError,
    NoChannelError,
    ProtocolError,
    SocketCreationError,
    UnexpectedDisconnectError,
    log_error,
)
from ..logs.logger import logger
from ..rate.rate_limiter import ChatRateLimiter
from .formatter import (
    encode_line,
    format_join,
    format_nick,
    format_part,
    format_pass,
    format_privmsg,
    has_line_break,
)
from .framing import LineFramer
from .models import (
    ChatMessage,
    ConnectionEvent,
    ConnectionStatus,
    InboundBatch,
    JoinChannel,
    OutboundRequest,
    WorkerState,
    normalize_channel,
)
from .parser import parse_message, split_lines
from .queues import SpscQueue

EXIT_OK = 0
EXIT_ERROR = 1


class ConnectionWorker:
    """Handshake, steady-state receive/send loop and teardown for one connection.

    ``run()`` is the whole lifetime of the instance: it returns ``EXIT_OK``
    after a requested stop and ``EXIT_ERROR`` after any failure. Failures are
    reported as ConnectionEvents, never raised to the caller.
    """

    def __init__(
        self,
        credentials: Credentials,
        send_queue: SpscQueue[OutboundRequest],
        receive_queue: SpscQueue[InboundBatch],
        event_queue: SpscQueue[ConnectionEvent],
        stop_event: threading.Event,
        settings: ConnectionSettings | None = None,
    ) -> None:
        self.credentials = credentials
        self.settings = settings or ConnectionSettings()
        self._send_queue = send_queue
        self._receive_queue = receive_queue
        self._event_queue = event_queue
        self._stop_event = stop_event

        self._sock: socket.socket | None = None
        self._socket_connected = False
        self._framer = LineFramer()
        self._outbox: deque[OutboundRequest] = deque()
        self._rate_limiter = ChatRateLimiter(self.settings.chat_min_interval)

        # Channel to join after auth, then the currently joined channel
        self.channel = credentials.channel
        self._in_channel = False
        self.waiting_for_auth = False
        self.connected = False
        self.state = WorkerState.DISCONNECTED
        self.exit_code: int | None = None

    @property
    def username(self) -> str:
        return self.credentials.username

    @property
    def rate_limiter(self) -> ChatRateLimiter:
        return self._rate_limiter

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #
    def run(self) -> int:
        code = EXIT_ERROR
        graceful = False
        try:
            self._sock = self._open_socket()
            self._socket_connected = True
            self._send_credentials()
            if self._await_welcome():
                self._steady_state()
            graceful = True
            code = EXIT_OK
        except FatalConnectionError as e:
            log_error("Connection worker stopped", e, self.username)
            self._emit(e.status, str(e))
        except Exception as e:  # noqa: BLE001
            log_error("Unexpected connection worker failure", e, self.username, exc_info=True)
            self._emit(
                ConnectionStatus.DISCONNECTED,
                f"Worker stopped after unexpected error: {e}",
            )
        finally:
            self.waiting_for_auth = False
            self.state = WorkerState.CLOSING
            if graceful:
                self._part_gracefully()
            self._close_socket()
            self.state = WorkerState.TERMINATED
            self.exit_code = code
            logger.log_event(
                "irc",
                "worker_exit",
                level=logging.DEBUG,
                user=self.username,
                exit_code=code,
                dropped_requests=len(self._outbox) + len(self._send_queue),
            )
        return code

    def _open_socket(self) -> socket.socket:
        self.state = WorkerState.HANDSHAKING
        host, port = self.settings.host, self.settings.port
        logger.log_event("irc", "connect_start", user=self.username, host=host, port=port)
        try:
            infos = socket.getaddrinfo(host, port, type=socket.SOCK_STREAM)
        except (OSError, UnicodeError) as e:
            raise HostResolutionError(
                "Could not resolve hostname!", data={"host": host, "reason": str(e)}
            ) from e
        if not infos:
            raise HostResolutionError("Could not resolve hostname!", data={"host": host})
        family, socktype, proto, _, address = infos[0]

        try:
            sock = socket.socket(family, socktype, proto)
        except OSError as e:
            raise SocketCreationError(
                "Could not create socket!", data={"reason": str(e)}
            ) from e

        try:
            sock.setsockopt(
                socket.SOL_SOCKET, socket.SO_RCVBUF, self.settings.receive_buffer_size
            )
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.settimeout(self.settings.connect_timeout)
            sock.connect(address)
            # Reads are polled with select; a write may block up to send_timeout
            sock.settimeout(self.settings.send_timeout)
        except OSError as e:
            sock.close()
            raise ConnectFailedError(
                "Connection to Twitch IRC failed!",
                data={"host": host, "port": port, "reason": str(e)},
            ) from e
        logger.log_event("irc", "connect_success", user=self.username, host=host)
        return sock

    def _send_credentials(self) -> None:
        pass_ok = self._send_line(format_pass(self.credentials.token))
        nick_ok = pass_ok and self._send_line(format_nick(self.username))
        if not nick_ok:
            raise HandshakeSendError("Could not send initial PASS and NICK messages for Auth")
        self.waiting_for_auth = True

    def _await_welcome(self) -> bool:
        """Wait for the 001 welcome reply. False when a stop arrived first."""
        self.state = WorkerState.AWAITING_AUTH
        poll = self.settings.poll_interval
        waited = 0.0
        while self.waiting_for_auth:
            if self._stop_event.is_set():
                logger.log_event("irc", "auth_aborted", user=self.username)
                return False
            data = self._receive()
            if data:
                self._accept_welcome(data)
                return True
            if not self._socket_connected:
                raise AuthenticationError("Connection closed by server during authentication")
            if waited >= self.settings.auth_timeout:
                raise AuthenticationError(
                    f"No welcome reply from server within {self.settings.auth_timeout:g}s"
                )
            time.sleep(poll)
            waited += poll
        return True

    def _accept_welcome(self, data: bytes) -> None:
        complete = self._framer.feed(data)
        reply = complete + self._framer.pending
        if not (reply.startswith(IRC_WELCOME_PREFIX) and IRC_WELCOME_PHRASE in reply):
            raise AuthenticationError(reply.strip() or "Unexpected authentication reply")

        lines = split_lines(complete)
        if not lines:
            # Unterminated welcome; it has been evaluated, don't parse it again
            self._framer.flush()
        welcome = lines[0] if lines else reply.strip()
        self.waiting_for_auth = False
        self.connected = True
        logger.log_event("irc", "auth_success", user=self.username)
        self._emit(ConnectionStatus.CONNECTED, welcome)

        if self.channel:
            if not self._send_line(format_join(self.channel)):
                raise ChannelJoinError("Failed to join channel", data={"target": self.channel})
            self._in_channel = True
            logger.log_event("irc", "join_send", user=self.username, channel=self.channel)

        # Anything after the welcome in the same read is ordinary traffic
        if len(lines) > 1:
            self._handle_text("\n".join(lines[1:]))

    def _steady_state(self) -> None:
        self.state = WorkerState.JOINED
        poll = self.settings.poll_interval
        while not self._stop_event.is_set():
            data = self._receive()
            if data:
                self._handle_text(self._framer.feed(data))
            if not self._socket_connected:
                raise UnexpectedDisconnectError("Lost connection to server")
            self._process_send_queue()
            time.sleep(poll)
            self._rate_limiter.tick(poll)

    def _part_gracefully(self) -> None:
        if not self._socket_connected:
            return
        if self._in_channel and self.channel:
            # Best effort; the socket is closed right after either way
            self._send_line(format_part(self.channel))
            self._in_channel = False
        self._emit(ConnectionStatus.DISCONNECTED, "Disconnected by request gracefully")

    def _close_socket(self) -> None:
        sock, self._sock = self._sock, None
        self._socket_connected = False
        self.connected = False
        if sock is None:
            return
        try:
            sock.close()
        except OSError as e:
            logger.log_event(
                "irc", "socket_close_error", level=logging.DEBUG, user=self.username, error=str(e)
            )

    # ------------------------------------------------------------------ #
    # Inbound
    # ------------------------------------------------------------------ #
    def _receive(self) -> bytes | None:
        if self._sock is None or not self._socket_connected:
            return None
        try:
            readable, _, _ = select.select([self._sock], [], [], 0)
            if not readable:
                return None
            data = self._sock.recv(self.settings.receive_chunk_size)
        except (BlockingIOError, InterruptedError, TimeoutError):
            return None
        except OSError as e:
            logger.log_event(
                "irc", "receive_error", level=logging.WARNING, user=self.username, error=str(e)
            )
            self._socket_connected = False
            return None
        if not data:
            self._socket_connected = False
            return None
        return data

    def _handle_text(self, text: str) -> None:
        if not text:
            return
        result = parse_message(text)
        for reply in result.replies:
            if self._send_line(reply):
                logger.log_event("irc", "pong_sent", level=logging.DEBUG, user=self.username)
        for line in result.server_messages:
            logger.log_event(
                "irc", "server_message", level=logging.DEBUG, user=self.username, raw=line
            )
            self._emit(ConnectionStatus.MESSAGE, line)
        if result.batch:
            for sender, body in result.batch:
                logger.log_event(
                    "irc",
                    "privmsg",
                    level=logging.DEBUG,
                    user=self.username,
                    channel=self.channel,
                    human=f"{sender}: {body}",
                )
            self._receive_queue.enqueue(result.batch)

    # ------------------------------------------------------------------ #
    # Outbound
    # ------------------------------------------------------------------ #
    def _process_send_queue(self) -> None:
        """Apply queued requests in order; a rate-limited chat holds back the rest.

        Nothing more is attempted once a write has failed; what is left stays
        in the outbox and is counted as dropped when the worker exits.
        """
        self._outbox.extend(self._send_queue.drain())
        while self._outbox and self._socket_connected:
            request = self._outbox[0]
            if isinstance(request, ChatMessage):
                if not self._send_chat(request):
                    logger.log_event(
                        "irc",
                        "send_deferred",
                        level=logging.DEBUG,
                        user=self.username,
                        queued=len(self._outbox),
                    )
                    return
            elif isinstance(request, JoinChannel):
                self._switch_channel(request.channel)
            self._outbox.popleft()

    def _send_chat(self, request: ChatMessage) -> bool:
        """Send one chat message. False only when the rate limiter defers it."""
        target = normalize_channel(request.channel) or self.channel
        try:
            self._validate_chat(request.body, target)
        except (NoChannelError, ProtocolError) as e:
            log_error("Chat message rejected", e, self.username)
            self._emit(ConnectionStatus.ERROR, str(e))
            return True

        if not self._rate_limiter.ready():
            self._rate_limiter.record_deferred()
            return False
        if not self._send_line(format_privmsg(target, request.body)):
            # The connection is gone; the steady loop reports the disconnect next
            self._emit(
                ConnectionStatus.ERROR,
                "Cannot send message. The connection to the server was lost.",
            )
            return True
        self._rate_limiter.record_sent()
        logger.log_event("irc", "chat_sent", level=logging.DEBUG, user=self.username, channel=target)
        return True

    def _validate_chat(self, body: str, target: str) -> None:
        if not target:
            raise NoChannelError(
                "Cannot send message. No channel specified, and not joined to a channel."
            )
        if has_line_break(body) or has_line_break(target):
            raise ProtocolError("Cannot send message. It must not contain line breaks.")
        if len(body) > self.settings.max_message_length:
            raise ProtocolError(
                "Cannot send message. It is longer than "
                f"{self.settings.max_message_length} characters.",
                data={"length": len(body)},
            )

    def _switch_channel(self, new_channel: str) -> None:
        if self._in_channel and self.channel:
            self._send_line(format_part(self.channel))
            logger.log_event("irc", "part_send", user=self.username, channel=self.channel)
        self._in_channel = False
        self.channel = normalize_channel(new_channel)
        if self.channel and self._send_line(format_join(self.channel)):
            self._in_channel = True
            logger.log_event("irc", "join_send", user=self.username, channel=self.channel)

    def _send_line(self, line: str) -> bool:
        if self._sock is None or not self._socket_connected:
            return False
        # A failed sendall may have written part of the line, so the stream
        # can't be trusted afterwards: any failure ends the connection.
        try:
            self._sock.sendall(encode_line(line))
        except TimeoutError:
            logger.log_event(
                "irc",
                "send_timeout",
                level=logging.WARNING,
                user=self.username,
                timeout=self.settings.send_timeout,
            )
            self._socket_connected = False
            return False
        except OSError as e:
            logger.log_event(
                "irc", "send_error", level=logging.WARNING, user=self.username, error=str(e)
            )
            self._socket_connected = False
            return False
        return True

    def _emit(self, status: ConnectionStatus, detail: str) -> None:
        self._event_queue.enqueue(ConnectionEvent(status, detail))
