#!/usr/bin/env python3
"""
Chat Relay Server - Main Entry Point

Usage:
    python main_server.py [port]

The server binds to all interfaces on the given port (default: 5000).
"""

import asyncio
import sys

from common.constants import DEFAULT_PORT, DEFAULT_SERVER_HOST
from server.main_server import RelayServer
from server.utils.config import ServerConfig
from server.utils.logger import logger


def parse_port(argv, default: int = DEFAULT_PORT) -> int:
    """Return the port given as the first argument, or the default."""
    if not argv:
        return default
    try:
        return int(argv[0])
    except ValueError:
        logger.warning(f"Invalid port '{argv[0]}', using {default}")
        return default


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    port = parse_port(argv)

    config = ServerConfig(DEFAULT_SERVER_HOST, port)
    logger.set_level(config.log_level)

    server = RelayServer(config)
    info = config.get_connection_info()
    logger.info(f"Chat relay starting on {info['host']}:{info['port']} ...")
    try:
        asyncio.run(server.serve_forever())
    except KeyboardInterrupt:
        logger.info("Server shutting down...")
    except OSError as e:
        logger.log_error("server", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
