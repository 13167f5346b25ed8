"""
Shared constants for the chat relay.

This module contains all constants used across client and server components.
"""

# Network Configuration
DEFAULT_HOST = 'localhost'
DEFAULT_SERVER_HOST = '0.0.0.0'
DEFAULT_PORT = 5000

# Wire format
ENCODING = 'utf-8'
LINE_TERMINATOR = b'\n'
MAX_LINE_LENGTH = 64 * 1024  # bytes per line before the session is dropped

# Presence announcements are sent under this name
SERVER_SENDER = 'SERVER'

# Event sink
MAX_RECORDED_EVENTS = 1000

# Per-session outbox
MAX_OUTBOX_LINES = 1000  # queued lines before new ones are dropped
CLOSE_FLUSH_TIMEOUT = 5.0  # seconds to let queued lines go out on close


# Commands understood by the router
class Commands:
    QUIT = 'quit'
    EXIT = 'exit'
    WHISPER = '/w'

    QUIT_WORDS = ('quit', 'exit', '/quit', '/exit')


# Server to Client lines
class ServerLines:
    WELCOME = 'Welcome! Please enter your username:'
    INVALID_USERNAME = 'Invalid username. Closing connection.'
    CONNECTED_AS = 'Connected as: {name}'
    GOODBYE = 'Goodbye!'
    USER_NOT_FOUND = "User '{target}' not found."
    WHISPER_USAGE = 'Invalid whisper format. Use: /w username message'
