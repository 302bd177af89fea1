"""Outbound IRC line formatting."""

from __future__ import annotations

from .models import normalize_channel

LINE_TERMINATOR = "\n"


def format_command(line: str) -> str:
    """Return a raw protocol command terminated for the wire."""
    return f"{line}{LINE_TERMINATOR}"


def format_privmsg(channel: str, body: str) -> str:
    """Address ``body`` to a channel, or to a user's channel for a whisper."""
    return format_command(f"PRIVMSG #{normalize_channel(channel)} :{body}")


def format_join(channel: str) -> str:
    return format_command(f"JOIN #{normalize_channel(channel)}")


def format_part(channel: str) -> str:
    return format_command(f"PART #{normalize_channel(channel)}")


def format_pong(host: str) -> str:
    return format_command(f"PONG :{host}")


def format_pass(token: str) -> str:
    return format_command(f"PASS {token}")


def format_nick(username: str) -> str:
    return format_command(f"NICK {username}")


def encode_line(line: str) -> bytes:
    return line.encode("utf-8")


def has_line_break(text: str) -> bool:
    return "\r" in text or "\n" in text
