from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .. import constants
from ..irc.models import ConnectionInfo, normalize_channel

OAUTH_PREFIX = "oauth:"


class Credentials(BaseModel):
    """Login details for one chat connection.

    Attributes:
        token: OAuth access token, always carrying the 'oauth:' prefix.
        username: Login name, lowercase.
        channel: Channel to join once authenticated, lowercase without '#'.
            Empty means stay out of any channel until asked to join one.
    """

    model_config = ConfigDict(frozen=True)

    token: str = Field(min_length=1)
    username: str = Field(min_length=1)
    channel: str = ""

    @field_validator("token", mode="before")
    @classmethod
    def validate_token(cls, v: Any) -> str:
        """Strip whitespace and add the 'oauth:' prefix Twitch expects on PASS."""
        token = str(v or "").strip()
        if not token:
            raise ValueError("token must not be empty")
        if not token.startswith(OAUTH_PREFIX):
            token = f"{OAUTH_PREFIX}{token}"
        return token

    @field_validator("username", mode="before")
    @classmethod
    def validate_username(cls, v: Any) -> str:
        username = str(v or "").strip().lower()
        if not username:
            raise ValueError("username must not be empty")
        if any(ch.isspace() for ch in username):
            raise ValueError("username must not contain whitespace")
        return username

    @field_validator("channel", mode="before")
    @classmethod
    def validate_channel(cls, v: Any) -> str:
        """Lowercase and strip a leading '#'; None becomes empty."""
        channel = normalize_channel(str(v) if v is not None else "")
        if any(ch.isspace() for ch in channel):
            raise ValueError("channel must not contain whitespace")
        return channel

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Credentials:
        """Build credentials from TWITCH_TOKEN, TWITCH_USERNAME and TWITCH_CHANNEL."""
        env = os.environ if environ is None else environ
        return cls(
            token=env.get("TWITCH_TOKEN", ""),
            username=env.get("TWITCH_USERNAME", ""),
            channel=env.get("TWITCH_CHANNEL", ""),
        )

    def to_connection_info(self, channel: str | None = None) -> ConnectionInfo:
        return ConnectionInfo(
            token=self.token,
            username=self.username,
            channel=self.channel if channel is None else channel,
        )


class ConnectionSettings(BaseModel):
    """Tunables for the connection worker; defaults come from constants."""

    model_config = ConfigDict(frozen=True)

    host: str = Field(default=constants.IRC_SERVER_HOST, min_length=1)
    port: int = Field(default=constants.IRC_SERVER_PORT, gt=0, lt=65536)
    poll_interval: float = Field(default=constants.IRC_POLL_INTERVAL_SECONDS, gt=0)
    auth_timeout: float = Field(default=constants.IRC_AUTH_TIMEOUT_SECONDS, gt=0)
    connect_timeout: float = Field(
        default=constants.IRC_CONNECT_TIMEOUT_SECONDS, gt=0
    )
    send_timeout: float = Field(default=constants.IRC_SEND_TIMEOUT_SECONDS, gt=0)
    receive_buffer_size: int = Field(
        default=constants.IRC_RECEIVE_BUFFER_SIZE, gt=0
    )
    receive_chunk_size: int = Field(default=constants.IRC_RECEIVE_CHUNK_SIZE, gt=0)
    chat_min_interval: float = Field(
        default=constants.CHAT_MIN_SEND_INTERVAL_SECONDS, ge=0
    )
    max_message_length: int = Field(default=constants.CHAT_MAX_MESSAGE_LENGTH, gt=0)
