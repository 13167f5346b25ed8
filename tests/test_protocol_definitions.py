#!/usr/bin/env python3
"""
Unit tests for command parsing and line formatting.
"""

import unittest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from common.constants import ServerLines
from common.protocol_definitions import (
    CommandType, CommandSyntaxError, parse_command, decode_line, encode_line,
    create_chat_line, create_whisper_from_line, create_whisper_to_line,
    create_user_joined_line, create_user_left_line, create_connected_line,
    create_user_not_found_line
)


class TestParseCommand(unittest.TestCase):
    """Test cases for parse_command."""

    def test_quit_words(self):
        """quit and exit match in any case, with or without a slash."""
        for line in ('/quit', '/exit', '/QUIT', '/Exit', 'quit', 'EXIT', '  /quit  '):
            with self.subTest(line=line):
                self.assertIs(parse_command(line).type, CommandType.QUIT)

    def test_quit_with_arguments_is_a_message(self):
        self.assertIs(parse_command('/quit now').type, CommandType.BROADCAST)

    def test_whisper(self):
        """The message keeps its inner spaces; the target is one token."""
        command = parse_command('/w bob  see you   later')
        self.assertIs(command.type, CommandType.WHISPER)
        self.assertEqual(command.target, 'bob')
        self.assertEqual(command.text, 'see you   later')

    def test_whisper_command_is_case_insensitive(self):
        command = parse_command('/W alice(1) secret')
        self.assertIs(command.type, CommandType.WHISPER)
        self.assertEqual(command.target, 'alice(1)')

    def test_whisper_missing_parts(self):
        """Fewer than two tokens after /w is a syntax error."""
        for line in ('/w', '/w bob', '/w   bob   '):
            with self.subTest(line=line):
                with self.assertRaises(CommandSyntaxError) as ctx:
                    parse_command(line)
                self.assertEqual(str(ctx.exception), ServerLines.WHISPER_USAGE)

    def test_slash_w_prefix_only_is_a_message(self):
        self.assertIs(parse_command('/wave hello').type, CommandType.BROADCAST)

    def test_broadcast_is_stripped(self):
        command = parse_command('  hello there \r')
        self.assertIs(command.type, CommandType.BROADCAST)
        self.assertEqual(command.text, 'hello there')

    def test_empty(self):
        self.assertIs(parse_command('   ').type, CommandType.EMPTY)


class TestLineFormats(unittest.TestCase):
    """Test the server to client line formats."""

    def test_chat_lines(self):
        self.assertEqual(create_chat_line('alice', 'hi'), '[alice] hi')
        self.assertEqual(create_whisper_from_line('alice', 'secret'), '[whisper from alice] secret')
        self.assertEqual(create_whisper_to_line('alice(1)', 'secret'), '[whisper to alice(1)] secret')

    def test_presence_lines(self):
        self.assertEqual(
            create_user_joined_line('bob', ['alice', 'bob']),
            '[SERVER] bob joined the chat. Users: alice, bob'
        )
        self.assertEqual(
            create_user_left_line('alice', ['alice(1)']),
            '[SERVER] alice left the chat. Users: alice(1)'
        )
        self.assertEqual(create_user_left_line('alice', []), '[SERVER] alice left the chat. Users: ')

    def test_reply_lines(self):
        self.assertEqual(create_connected_line('alice'), 'Connected as: alice')
        self.assertEqual(create_user_not_found_line('ghost'), "User 'ghost' not found.")

    def test_line_encoding(self):
        self.assertEqual(encode_line('héllo'), 'héllo'.encode('utf-8') + b'\n')
        self.assertEqual(decode_line(b'hello\r\n'), 'hello')
        self.assertEqual(decode_line(b'bad \xff byte\n'), 'bad � byte')


if __name__ == '__main__':
    unittest.main()
