"""Human readable texts for structured log events.

``event_templates.json`` groups templates by domain::

    {"irc": {"connect_start": "🔌 Connecting to {host}:{port}"}}

and is flattened here into ``{(domain, action): template}``.
"""

from __future__ import annotations

import json
from pathlib import Path

TEMPLATES_PATH = Path(__file__).with_name("event_templates.json")

EVENT_TEMPLATES: dict[tuple[str, str], str] = {}


def load_event_templates(path: Path = TEMPLATES_PATH) -> dict[tuple[str, str], str]:
    """Read and flatten a template file.

    Non-string entries are skipped. A missing or unreadable file yields a
    single ``app/load_error`` template so logging keeps working without texts.
    """
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {("app", "load_error"): f"Event templates file missing: {path.name}"}
    except (OSError, ValueError) as e:
        return {("app", "load_error"): f"Failed to load event templates: {e}"[:200]}

    templates: dict[tuple[str, str], str] = {}
    if not isinstance(raw, dict):
        return templates
    for domain, actions in raw.items():
        if not isinstance(actions, dict):
            continue
        templates.update(
            ((domain, action), text)
            for action, text in actions.items()
            if isinstance(text, str)
        )
    return templates


def template_for(domain: str, action: str) -> str | None:
    return EVENT_TEMPLATES.get((domain, action))


def reload_event_templates(path: Path = TEMPLATES_PATH) -> None:
    # Mutate in place so modules holding a reference see the new texts
    EVENT_TEMPLATES.clear()
    EVENT_TEMPLATES.update(load_event_templates(path))


reload_event_templates()

__all__ = [
    "EVENT_TEMPLATES",
    "TEMPLATES_PATH",
    "load_event_templates",
    "reload_event_templates",
    "template_for",
]
