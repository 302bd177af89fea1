import socket
import threading
from unittest.mock import patch

import pytest

from tests.fixtures.fake_socket import SERVER_ADDRESS, WELCOME, FakeSocket
from twitchplay.config.model import ConnectionSettings, Credentials
from twitchplay.irc.queues import SpscQueue
from twitchplay.irc.worker import ConnectionWorker


@pytest.fixture
def fast_settings():
    return ConnectionSettings(
        host="irc.example.test",
        poll_interval=0.001,
        auth_timeout=0.05,
        chat_min_interval=0,
    )


@pytest.fixture
def credentials():
    return Credentials(token="abc123", username="Bot", channel="#Chan")


@pytest.fixture
def fake_socket():
    return FakeSocket([WELCOME])


@pytest.fixture
def patched_network(fake_socket):
    """Route getaddrinfo/socket.socket to the fake socket.

    select always reports the fake readable; its recv script decides whether
    data, "would block" or a close comes back.
    """
    address_info = [(socket.AF_INET, socket.SOCK_STREAM, 6, "", SERVER_ADDRESS)]
    with patch("socket.getaddrinfo", return_value=address_info) as resolver, patch(
        "socket.socket", return_value=fake_socket
    ) as socket_class, patch(
        "select.select", side_effect=lambda r, w, x, timeout=None: (list(r), [], [])
    ):
        yield resolver, socket_class


class WorkerHarness:
    def __init__(self, credentials, settings):
        self.send_queue = SpscQueue()
        self.receive_queue = SpscQueue()
        self.event_queue = SpscQueue()
        self.stop_event = threading.Event()
        self.worker = ConnectionWorker(
            credentials,
            self.send_queue,
            self.receive_queue,
            self.event_queue,
            self.stop_event,
            settings,
        )

    def run(self):
        return self.worker.run()

    def events(self):
        return self.event_queue.drain()


@pytest.fixture
def make_harness(credentials, fast_settings):
    def factory(creds=None, **overrides):
        settings = fast_settings.model_copy(update=overrides) if overrides else fast_settings
        return WorkerHarness(creds or credentials, settings)

    return factory
