r"""
Logging configuration module for TwitchPlay.

Provides a clean, configurable logging setup using the colorlog library.
BotLogger records propagate to the root logger configured here.
"""

import logging
import os
import sys

import colorlog


def _debug_enabled() -> bool:
    return os.environ.get("DEBUG", "").lower() in ("true", "1", "yes")


class LoggerConfigurator:
    """Handles logging configuration cleanly using colorlog.

    Supports environment variable configuration for log levels.
    """

    def __init__(self, config=None):
        """Initialize the configurator.

        Args:
            config: Optional config dict; recognises 'stream' and 'datefmt'.
        """
        self.config = config or {}

    def build_formatter(self) -> colorlog.ColoredFormatter:
        return colorlog.ColoredFormatter(
            "%(asctime)s %(log_color)s%(levelname)-8s%(reset)s %(message_log_color)s%(message)s",
            datefmt=self.config.get("datefmt", "%Y-%m-%d %H:%M:%S"),
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "magenta",
            },
            secondary_log_colors={
                "message": {
                    "ERROR": "red",
                    "CRITICAL": "magenta",
                }
            },
            reset=True,
        )

    def configure(self) -> logging.Handler:
        """Configure the root logger with colored output using colorlog.

        Uses environment variables:
        - DEBUG: Set to 'true', '1', or 'yes' for DEBUG level, otherwise INFO

        Returns:
            The installed stream handler.
        """
        log_level = logging.DEBUG if _debug_enabled() else logging.INFO

        handler = logging.StreamHandler(self.config.get("stream", sys.stderr))
        handler.setFormatter(self.build_formatter())

        root_logger = logging.getLogger()
        for existing in list(root_logger.handlers):
            if getattr(existing, "_twitchplay_handler", False):
                root_logger.removeHandler(existing)
        handler._twitchplay_handler = True  # type: ignore[attr-defined]
        root_logger.addHandler(handler)
        root_logger.setLevel(log_level)
        logging.getLogger("twitchplay").setLevel(log_level)
        return handler


def configure_logging(config=None) -> logging.Handler:
    """Convenience wrapper used by the CLI entry point."""
    return LoggerConfigurator(config).configure()
