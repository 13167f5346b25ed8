"""
Protocol definitions for the chat relay.

This module defines the line formats used between client and server and
the parser that turns a raw input line into a command.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from common.constants import ENCODING, LINE_TERMINATOR, SERVER_SENDER, Commands, ServerLines


class CommandType(Enum):
    """Kinds of input line a session can send once active."""
    EMPTY = 'empty'
    QUIT = 'quit'
    WHISPER = 'whisper'
    BROADCAST = 'broadcast'


@dataclass
class Command:
    """Parsed input line."""
    type: CommandType
    text: str = ''
    target: Optional[str] = None


class CommandSyntaxError(ValueError):
    """Raised when a command line is recognised but malformed."""


def parse_command(line: str) -> Command:
    """
    Classify one input line.

    Whitespace around the line is ignored. ``quit``/``exit`` are matched
    case-insensitively with or without a leading slash. ``/w target text``
    needs both a target and a non-empty message; anything shorter raises
    CommandSyntaxError.
    """
    line = line.strip()
    if not line:
        return Command(CommandType.EMPTY)

    if line.lower() in Commands.QUIT_WORDS:
        return Command(CommandType.QUIT)

    parts = line.split(None, 2)
    if parts[0].lower() == Commands.WHISPER:
        if len(parts) < 3:
            raise CommandSyntaxError(ServerLines.WHISPER_USAGE)
        return Command(CommandType.WHISPER, text=parts[2], target=parts[1])

    return Command(CommandType.BROADCAST, text=line)


def encode_line(text: str) -> bytes:
    """Encode one outgoing line."""
    return text.encode(ENCODING) + LINE_TERMINATOR


def decode_line(data: bytes) -> str:
    """Decode one incoming line, dropping the terminator."""
    return data.decode(ENCODING, errors='replace').rstrip('\r\n')


def create_chat_line(sender: str, text: str) -> str:
    """Create a broadcast delivery line."""
    return f"[{sender}] {text}"


def create_whisper_from_line(sender: str, text: str) -> str:
    """Create a private delivery line for the recipient."""
    return f"[whisper from {sender}] {text}"


def create_whisper_to_line(target: str, text: str) -> str:
    """Create the private delivery echo for the sender."""
    return f"[whisper to {target}] {text}"


def create_user_joined_line(name: str, users: List[str]) -> str:
    """Create a user joined announcement."""
    return create_chat_line(SERVER_SENDER, f"{name} joined the chat. Users: {', '.join(users)}")


def create_user_left_line(name: str, users: List[str]) -> str:
    """Create a user left announcement."""
    return create_chat_line(SERVER_SENDER, f"{name} left the chat. Users: {', '.join(users)}")


def create_connected_line(name: str) -> str:
    return ServerLines.CONNECTED_AS.format(name=name)


def create_user_not_found_line(target: str) -> str:
    return ServerLines.USER_NOT_FOUND.format(target=target)
