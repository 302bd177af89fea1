#!/usr/bin/env python3
"""
Main entry point for the TwitchPlay chat client
"""

import argparse
import asyncio
import logging
import os
import sys

from pydantic import ValidationError

from twitchplay.client import TwitchChatClient
from twitchplay.config.model import Credentials
from twitchplay.errors import log_error
from twitchplay.irc.models import ConnectionStatus
from twitchplay.logging_config import configure_logging
from twitchplay.logs.logger import logger


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Connect to Twitch chat and log traffic")
    parser.add_argument("--token", default=os.environ.get("TWITCH_TOKEN", ""))
    parser.add_argument("--username", default=os.environ.get("TWITCH_USERNAME", ""))
    parser.add_argument("--channel", default=os.environ.get("TWITCH_CHANNEL", ""))
    parser.add_argument(
        "--say", default="", help="Chat message to send once connected (optional)"
    )
    return parser.parse_args(argv)


async def main(argv=None) -> int:
    """Main function"""
    args = parse_args(argv)
    try:
        credentials = Credentials(
            token=args.token, username=args.username, channel=args.channel
        )
    except ValidationError as e:
        logger.log_event(
            "app", "invalid_credentials", level=logging.ERROR, error=e.errors()[0]["msg"]
        )
        return 2

    logger.log_event("app", "start", user=credentials.username)
    client = TwitchChatClient()

    def on_message(username: str, message: str) -> None:
        logger.log_event(
            "client",
            "chat_message",
            user=credentials.username,
            username=username,
            message=message,
        )

    def on_connection(status: ConnectionStatus, detail: str) -> None:
        if status is ConnectionStatus.CONNECTED and args.say:
            client.send_chat_message(args.say)

    client.subscribe_messages(on_message)
    client.subscribe_connection(on_connection)

    if not client.connect(credentials.token, credentials.username, credentials.channel):
        return 1
    try:
        await client.run()
    finally:
        # Cleanup resources
        client.shutdown()
        logger.log_event("app", "shutdown")
    return 0


if __name__ == "__main__":
    configure_logging()
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        logger.log_event("app", "interrupted", level=logging.WARNING)
        sys.exit(0)
    except Exception as e:
        log_error("Top-level error", e, exc_info=True)
        sys.exit(1)
