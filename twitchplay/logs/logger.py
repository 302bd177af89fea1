"""Structured event logger used across the package."""

from __future__ import annotations

import logging
import os

from .event_catalog import template_for

EVENT_COLUMN_WIDTH = 32
PREFIX_WIDTH = 24
CHAT_EVENT = "irc_privmsg"
CHAT_MARK = "💬"


def debug_enabled() -> bool:
    return os.environ.get("DEBUG", "false").lower() in ("true", "1", "yes")


def render_human_text(
    domain: str, action: str, fields: dict[str, object]
) -> tuple[str, bool]:
    """Return the catalog text for an event and whether it had to be derived.

    A template whose placeholders are not all supplied is returned unformatted.
    """
    template = template_for(domain, action)
    if template is None:
        return f"{domain.replace('_', ' ')}: {action.replace('_', ' ')}", True
    try:
        return template.format(**fields), False
    except (KeyError, IndexError, ValueError):
        return template, False


def format_prefix(user: str | None, channel: str | None) -> str:
    core = user or "system"
    if channel:
        core = f"{core}#{channel}"
    return f"[{core.ljust(PREFIX_WIDTH)[:PREFIX_WIDTH]}]"


def decorate_chat(human_text: str, channel: str | None) -> str:
    """Chat lines read as '💬 #channel alice: hello'."""
    text = human_text.removeprefix(CHAT_MARK).lstrip()
    return f"{CHAT_MARK} #{channel} {text}" if channel else f"{CHAT_MARK} {text}"


class BotLogger:
    """Project logger with lightweight structured event support.

    Conventions:
        * logger.log_event("irc", "join_send", user=username, channel=channel)
        * The record text is '<prefix> <human text>', where the human text comes
          from the JSON event catalog (or an explicit ``human`` override). With
          DEBUG set, the event name column and the remaining fields are added.
        * ``record.event`` and ``record.event_fields`` carry the raw event for
          handlers that want structured data.
        * Records propagate to the root logger; handlers and colors are
          installed by ``logging_config.LoggerConfigurator``.
    """

    def __init__(self, name: str = "twitchplay") -> None:
        self.logger = logging.getLogger(name)

    def log_event(
        self,
        domain: str,
        action: str,
        level: int = logging.INFO,
        human: str | None = None,
        *,
        exc_info: bool = False,
        **fields: object,
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return
        event_name = f"{domain}_{action}".lower()
        if human is None:
            human, derived = render_human_text(domain, action, fields)
            if derived:
                fields.setdefault("derived", True)

        user = fields.pop("user", None)
        channel = fields.pop("channel", None)
        user = user if isinstance(user, str) and user else None
        channel = channel if isinstance(channel, str) and channel else None
        if event_name == CHAT_EVENT:
            human = decorate_chat(human, channel)

        message = f"{format_prefix(user, channel)} {human}"
        if debug_enabled():
            message = self._with_debug_columns(event_name, message, fields)
        self.logger.log(
            level,
            message,
            exc_info=exc_info,
            extra={"event": event_name, "event_fields": dict(fields)},
        )

    @staticmethod
    def _with_debug_columns(
        event_name: str, message: str, fields: dict[str, object]
    ) -> str:
        if len(event_name) > EVENT_COLUMN_WIDTH:
            column = event_name[: EVENT_COLUMN_WIDTH - 1] + "…"
        else:
            column = event_name.ljust(EVENT_COLUMN_WIDTH)
        line = f"{column} {message}"
        if fields:
            context = ", ".join(f"{k}={v}" for k, v in fields.items())
            line = f"{line} ({context})"
        return line


logger = BotLogger()
