"""Project logging package.

Structured events (``BotLogger.log_event``) and the JSON catalog of their
human readable texts.
"""

from .event_catalog import (  # noqa: F401
    EVENT_TEMPLATES,
    load_event_templates,
    reload_event_templates,
    template_for,
)
from .logger import BotLogger, logger  # noqa: F401

__all__ = [
    "BotLogger",
    "logger",
    "EVENT_TEMPLATES",
    "load_event_templates",
    "reload_event_templates",
    "template_for",
]
