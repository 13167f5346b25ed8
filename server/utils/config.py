"""
Server configuration module.

This module handles server-side configuration settings.
"""

import logging

from common.constants import DEFAULT_SERVER_HOST, DEFAULT_PORT, MAX_LINE_LENGTH, MAX_RECORDED_EVENTS


class ServerConfig:
    """Server configuration class."""

    def __init__(self, host: str = DEFAULT_SERVER_HOST, port: int = DEFAULT_PORT, log_level: int = logging.INFO):
        self.host = host
        self.port = port
        self.log_level = log_level

        # Longest accepted input line, in bytes
        self.max_line_length = MAX_LINE_LENGTH

        # Event sink settings
        self.max_recorded_events = MAX_RECORDED_EVENTS

    def get_connection_info(self):
        """Get connection information."""
        return {
            'host': self.host,
            'port': self.port
        }
