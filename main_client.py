#!/usr/bin/env python3
"""
Chat Relay Client - Main Entry Point

Usage:
    python main_client.py [host] [port]

Defaults to localhost:5000. Type /w <user> <message> to whisper and
quit, exit, /quit or /exit to leave.
"""

import asyncio
import sys

from common.constants import DEFAULT_HOST, DEFAULT_PORT
from client.chat.chat_client import ChatClient
from client.utils.config import ClientConfig
from client.utils.logger import logger


def parse_args(argv):
    """Return (host, port) from the optional positional arguments."""
    host = argv[0] if len(argv) >= 1 else DEFAULT_HOST
    port = DEFAULT_PORT
    if len(argv) >= 2:
        try:
            port = int(argv[1])
        except ValueError:
            logger.warning(f"Invalid port '{argv[1]}', using {DEFAULT_PORT}")
    return host, port


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    host, port = parse_args(argv)

    client = ChatClient(ClientConfig(host, port))
    try:
        asyncio.run(client.run())
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())
