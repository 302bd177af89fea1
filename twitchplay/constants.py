"""
Configuration constants for the TwitchPlay chat connection

This module contains all configurable constants used throughout the package.
Each constant can be overridden by setting an environment variable with the same name.
"""

import os


def _get_env_int(name: str, default: int) -> int:
    """Retrieve an integer value from an environment variable.

    Attempts to parse the environment variable as an integer. If the variable
    is not set or cannot be parsed, prints a warning and returns the default value.

    Args:
        name: The name of the environment variable to read.
        default: The default integer value to return if parsing fails.

    Returns:
        The parsed integer value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            print(
                f"Warning: Invalid integer value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_float(name: str, default: float) -> float:
    """Retrieve a float value from an environment variable.

    Attempts to parse the environment variable as a float. If the variable
    is not set or cannot be parsed, prints a warning and returns the default value.

    Args:
        name: The name of the environment variable to read.
        default: The default float value to return if parsing fails.

    Returns:
        The parsed float value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return float(value)
        except ValueError:
            print(
                f"Warning: Invalid float value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_str(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


# Server endpoint
IRC_SERVER_HOST = _get_env_str(
    "IRC_SERVER_HOST", "irc.chat.twitch.tv"
)  # Resolved with getaddrinfo on every connection attempt
IRC_SERVER_PORT = _get_env_int("IRC_SERVER_PORT", 6667)  # Standard IRC port

# Socket tuning
IRC_RECEIVE_BUFFER_SIZE = _get_env_int(
    "IRC_RECEIVE_BUFFER_SIZE", 2 * 1024 * 1024
)  # SO_RCVBUF requested for the chat socket
IRC_RECEIVE_CHUNK_SIZE = _get_env_int(
    "IRC_RECEIVE_CHUNK_SIZE", 65536
)  # Max bytes read per recv
IRC_CONNECT_TIMEOUT_SECONDS = _get_env_float(
    "IRC_CONNECT_TIMEOUT_SECONDS", 10.0
)  # Blocking connect timeout
IRC_SEND_TIMEOUT_SECONDS = _get_env_float(
    "IRC_SEND_TIMEOUT_SECONDS", 5.0
)  # Max time one outbound line may block before the connection is dropped

# Worker scheduling
IRC_POLL_INTERVAL_SECONDS = _get_env_float(
    "IRC_POLL_INTERVAL_SECONDS", 0.1
)  # Sleep between worker iterations (also the rate limiter tick)
IRC_AUTH_TIMEOUT_SECONDS = _get_env_float(
    "IRC_AUTH_TIMEOUT_SECONDS", 30.0
)  # Max wait for the welcome reply after PASS/NICK

# Chat send limits (20 messages / 30 s for regular accounts)
CHAT_MIN_SEND_INTERVAL_SECONDS = _get_env_float(
    "CHAT_MIN_SEND_INTERVAL_SECONDS", 1.5
)  # Minimum spacing between PRIVMSG sends
CHAT_MAX_MESSAGE_LENGTH = _get_env_int(
    "CHAT_MAX_MESSAGE_LENGTH", 500
)  # Twitch rejects longer chat bodies

# Protocol tokens
IRC_WELCOME_PREFIX = ":tmi.twitch.tv 001"
IRC_WELCOME_PHRASE = ":Welcome, GLHF!"
IRC_PING_PREFIX = "PING :"

# Host adapter
CLIENT_POLL_INTERVAL_SECONDS = _get_env_float(
    "CLIENT_POLL_INTERVAL_SECONDS", 0.05
)  # Cadence of TwitchChatClient.run()
