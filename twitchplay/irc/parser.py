"""IRC message parsing utilities (packaged).

Twitch chat lines look like::

    :alice!alice@alice.tmi.twitch.tv PRIVMSG #channel :message here

Only the first ':' after the prefix marker is structural. It separates the
meta segment (prefix, command, params) from the trailing text, and every
later ':' belongs to the message body.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..constants import IRC_PING_PREFIX
from .formatter import format_pong
from .models import InboundBatch

CHAT_COMMAND = "PRIVMSG"


@dataclass(frozen=True, slots=True)
class LineTokens:
    meta: str
    # None when the line has no trailing segment at all.
    trailing: str | None
    words: tuple[str, ...]

    @property
    def prefix(self) -> str | None:
        return self.words[0] if len(self.words) >= 2 else None

    @property
    def command(self) -> str | None:
        return self.words[1] if len(self.words) >= 2 else None


@dataclass(slots=True)
class ParseResult:
    batch: InboundBatch = field(default_factory=InboundBatch)
    # Wire lines to send back immediately (keepalive replies).
    replies: list[str] = field(default_factory=list)
    # Lines that are not user chat; surfaced verbatim as MESSAGE events.
    server_messages: list[str] = field(default_factory=list)


def split_lines(text: str) -> list[str]:
    """Split a blob on '\\n', dropping a trailing '\\r' and empty lines."""
    lines = []
    for line in text.split("\n"):
        if line.endswith("\r"):
            line = line[:-1]
        if line:
            lines.append(line)
    return lines


def tokenize_line(line: str) -> LineTokens:
    body = line[1:] if line.startswith(":") else line
    meta, sep, trailing = body.partition(":")
    return LineTokens(
        meta=meta,
        trailing=trailing if sep else None,
        words=tuple(meta.split()),
    )


def ping_host(line: str) -> str | None:
    """Return the host of a ``PING :<host>`` keepalive probe, else None."""
    if not line.startswith(IRC_PING_PREFIX):
        return None
    host = line[len(IRC_PING_PREFIX) :]
    if not host or any(ch.isspace() for ch in host):
        return None
    return host


def sender_from_prefix(prefix: str) -> str | None:
    """Nick before the first '!' of ``nick!user@host``; None for server prefixes."""
    nick, sep, _ = prefix.partition("!")
    if not sep or not nick:
        return None
    return nick


def parse_line(line: str, result: ParseResult) -> None:
    host = ping_host(line)
    if host is not None:
        result.replies.append(format_pong(host))
        return

    tokens = tokenize_line(line)
    if tokens.command != CHAT_COMMAND or tokens.prefix is None:
        result.server_messages.append(line)
        return

    sender = sender_from_prefix(tokens.prefix)
    if sender is None:
        result.server_messages.append(line)
        return

    # Events sent on behalf of a user without content only carry meta
    if not tokens.trailing:
        result.server_messages.append(tokens.meta.strip())
        return

    result.batch.append(sender, tokens.trailing)


def parse_message(text: str) -> ParseResult:
    """Parse a received blob into chat messages, keepalive replies and server lines.

    The blob may hold several newline separated lines; each is handled in order
    and treated as complete (line reassembly across reads is the framer's job).
    """
    result = ParseResult()
    for line in split_lines(text):
        parse_line(line, result)
    return result
