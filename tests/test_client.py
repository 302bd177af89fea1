"""
Tests for TwitchChatClient, the polling host adapter
"""

import logging

import pytest

from twitchplay.client import TwitchChatClient
from twitchplay.irc.models import ConnectionEvent, ConnectionStatus, InboundBatch


class FakeReceiver:
    """Receiver double driven directly by the test."""

    def __init__(self, settings=None):
        self.settings = settings
        self.credentials = None
        self.events = []
        self.inbound = InboundBatch()
        self.sent = []
        self.joins = []
        self.stop_calls = []

    def start(self, credentials):
        self.credentials = credentials

    def request_stop(self, wait_for_exit=False):
        self.stop_calls.append(wait_for_exit)

    def send_message(self, message, channel=""):
        self.sent.append((message, channel))

    def join_channel(self, channel):
        self.joins.append(channel)

    def drain_connection_events(self):
        events, self.events = self.events, []
        return events

    def drain_inbound(self):
        batch, self.inbound = self.inbound, InboundBatch()
        return batch


class Recorder:
    def __init__(self):
        self.messages = []
        self.connection = []

    def on_message(self, username, message):
        self.messages.append((username, message))

    def on_connection(self, status, detail):
        self.connection.append((status, detail))


@pytest.fixture
def client():
    return TwitchChatClient(receiver_factory=FakeReceiver)


@pytest.fixture
def recorder(client):
    rec = Recorder()
    client.subscribe_messages(rec.on_message)
    client.subscribe_connection(rec.on_connection)
    return rec


class TestConnect:
    def test_connect_starts_receiver(self, client, recorder):
        assert client.connect("abc", "Bot", "#Chan") is True
        assert client.active
        creds = client.receiver.credentials
        assert (creds.token, creds.username, creds.channel) == ("oauth:abc", "bot", "chan")
        assert recorder.connection == []

    def test_connect_twice_reports_error(self, client, recorder):
        client.connect("abc", "bot")
        first = client.receiver

        assert client.connect("abc", "bot") is False

        assert client.receiver is first
        assert recorder.connection == [
            (ConnectionStatus.ERROR, "Already connected / connecting / pending!")
        ]

    @pytest.mark.parametrize("token,username", [("", "bot"), ("abc", ""), ("", "")])
    def test_empty_parameters(self, client, recorder, token, username):
        assert client.connect(token, username) is False
        assert client.active is False
        assert recorder.connection == [
            (ConnectionStatus.ERROR, "Invalid connection parameters. Check your strings.")
        ]

    def test_invalid_username(self, client, recorder):
        assert client.connect("abc", "two words") is False
        status, detail = recorder.connection[0]
        assert status is ConnectionStatus.ERROR
        assert detail.startswith("Invalid connection parameters.")
        assert "whitespace" in detail

    def test_settings_are_passed_to_factory(self, fast_settings):
        client = TwitchChatClient(settings=fast_settings, receiver_factory=FakeReceiver)
        client.connect("abc", "bot")
        assert client.receiver.settings is fast_settings


class TestCommands:
    def test_send_without_connection(self, client):
        assert client.send_chat_message("hi") is False

    def test_send_and_join_forwarded(self, client):
        client.connect("abc", "bot", "chan")
        assert client.send_chat_message("hi") is True
        assert client.send_chat_message("psst", "friend") is True
        client.join_channel("other")
        assert client.receiver.sent == [("hi", ""), ("psst", "friend")]
        assert client.receiver.joins == ["other"]

    def test_join_without_connection_is_ignored(self, client):
        client.join_channel("other")
        assert client.receiver is None

    def test_disconnect_requests_stop_without_waiting(self, client):
        client.connect("abc", "bot")
        client.disconnect()
        assert client.receiver.stop_calls == [False]
        # Still active until the DISCONNECTED event is ticked through
        assert client.active

    def test_shutdown_waits_and_drops_receiver(self, client):
        client.connect("abc", "bot")
        receiver = client.receiver
        client.shutdown()
        assert receiver.stop_calls == [True]
        assert client.active is False
        # Idempotent
        client.shutdown()


class TestTick:
    def test_tick_dispatches_events_then_messages(self, client, recorder):
        order = []
        client.subscribe_connection(lambda status, detail: order.append("event"))
        client.subscribe_messages(lambda username, message: order.append("message"))
        client.connect("abc", "bot", "chan")
        receiver = client.receiver
        receiver.events.append(ConnectionEvent(ConnectionStatus.CONNECTED, "welcome"))
        receiver.inbound.append("alice", "hi")
        receiver.inbound.append("bob", "yo")

        client.tick()

        assert recorder.connection == [(ConnectionStatus.CONNECTED, "welcome")]
        assert recorder.messages == [("alice", "hi"), ("bob", "yo")]
        assert order == ["event", "message", "message"]
        assert client.active

    def test_tick_without_receiver_is_noop(self, client, recorder):
        client.tick()
        assert recorder.connection == []

    @pytest.mark.parametrize(
        "status",
        [
            ConnectionStatus.DISCONNECTED,
            ConnectionStatus.FAILED_TO_CONNECT,
            ConnectionStatus.FAILED_TO_AUTHENTICATE,
        ],
    )
    def test_terminal_event_drops_receiver(self, client, recorder, status):
        client.connect("abc", "bot")
        receiver = client.receiver
        receiver.events.append(ConnectionEvent(status, "gone"))
        receiver.inbound.append("alice", "last words")

        client.tick()

        assert recorder.connection == [(status, "gone")]
        assert recorder.messages == [("alice", "last words")]
        assert receiver.stop_calls == [False]
        assert client.active is False
        # A new connection may be started afterwards
        assert client.connect("abc", "bot") is True

    def test_error_event_is_not_terminal(self, client, recorder):
        client.connect("abc", "bot")
        client.receiver.events.append(ConnectionEvent(ConnectionStatus.ERROR, "oops"))
        client.tick()
        assert client.active

    def test_failing_subscriber_does_not_block_others(self, client, recorder, caplog):
        def broken(username, message):
            raise RuntimeError("subscriber bug")

        client.unsubscribe_messages(recorder.on_message)
        client.subscribe_messages(broken)
        client.subscribe_messages(recorder.on_message)
        client.connect("abc", "bot")
        client.receiver.inbound.append("alice", "hi")
        caplog.set_level(logging.ERROR)

        client.tick()

        assert recorder.messages == [("alice", "hi")]
        assert any("Message subscriber failed" in r.message for r in caplog.records)

    def test_unsubscribe(self, client, recorder):
        client.unsubscribe_connection(recorder.on_connection)
        client.connect("abc", "bot")
        client.receiver.events.append(ConnectionEvent(ConnectionStatus.CONNECTED, "hi"))
        client.tick()
        assert recorder.connection == []

    def test_subscribe_is_idempotent(self, client, recorder):
        client.subscribe_messages(recorder.on_message)
        client.connect("abc", "bot")
        client.receiver.inbound.append("alice", "hi")
        client.tick()
        assert recorder.messages == [("alice", "hi")]


@pytest.mark.asyncio
async def test_run_until_disconnected(client, recorder):
    client.connect("abc", "bot")
    receiver = client.receiver
    receiver.events.append(ConnectionEvent(ConnectionStatus.CONNECTED, "welcome"))
    receiver.inbound.append("alice", "hi")

    def disconnect_after_first_message(username, message):
        receiver.events.append(
            ConnectionEvent(ConnectionStatus.DISCONNECTED, "Lost connection to server")
        )

    client.subscribe_messages(disconnect_after_first_message)

    await client.run(poll_interval=0)

    assert recorder.connection == [
        (ConnectionStatus.CONNECTED, "welcome"),
        (ConnectionStatus.DISCONNECTED, "Lost connection to server"),
    ]
    assert recorder.messages == [("alice", "hi")]
    assert client.active is False
