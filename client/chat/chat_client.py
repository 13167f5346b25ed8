"""
Chat client module.

Console client for the relay: prints every line the server sends and
forwards every console line to the server.
"""

import asyncio
import sys
from typing import Callable, Optional

from common.constants import Commands
from common.protocol_definitions import encode_line, decode_line
from client.utils.config import ClientConfig
from client.utils.logger import logger


class ChatClient:
    """Client-side chat functionality."""

    def __init__(self, config: Optional[ClientConfig] = None, output: Callable[[str], None] = print):
        self.config = config or ClientConfig()
        self.output = output
        self.reader: Optional[asyncio.StreamReader] = None
        self.writer: Optional[asyncio.StreamWriter] = None
        self.running = False
        self.reader_task: Optional[asyncio.Task] = None

    async def connect(self) -> bool:
        """Open the connection and start printing server lines."""
        try:
            self.reader, self.writer = await asyncio.open_connection(self.config.host, self.config.port)
        except OSError as e:
            print(f"Unable to connect to server: {e}", file=sys.stderr)
            logger.log_connection(self.config.host, self.config.port, False)
            return False

        logger.log_connection(self.config.host, self.config.port, True)
        self.running = True
        self.reader_task = asyncio.create_task(self.read_loop())
        return True

    async def read_loop(self):
        """Print server lines until the connection ends."""
        try:
            while True:
                data = await self.reader.readline()
                if not data:
                    break
                self.output(decode_line(data))
        except (ConnectionError, OSError) as e:
            logger.debug(f"Read loop ended: {e}")
        finally:
            self.running = False

    async def send(self, line: str) -> bool:
        """Send one line to the server."""
        if not self.writer:
            print("[ERROR] Not connected to server", file=sys.stderr)
            return False

        try:
            self.writer.write(encode_line(line))
            await self.writer.drain()
            return True
        except (ConnectionError, OSError) as e:
            print(f"Failed to send: {e}", file=sys.stderr)
            return False

    @staticmethod
    def is_quit(line: str) -> bool:
        return line.strip().lower() in Commands.QUIT_WORDS

    async def run(self, read_input: Optional[Callable] = None):
        """
        Forward console input until a quit word, console EOF or disconnect.

        The first line is the requested username and is never taken as quit.

        ``read_input`` is a coroutine function returning the next line, or
        '' at end of input; it defaults to reading stdin in an executor.
        """
        if read_input is None:
            read_input = self.read_stdin

        if not await self.connect():
            return

        try:
            sent_name = False
            while self.running:
                line = await read_input()
                if not line:
                    break
                line = line.rstrip('\r\n')
                await self.send(line)
                if sent_name and self.is_quit(line):
                    break
                sent_name = True
            if self.reader_task is not None:
                # Let the server's farewell reach the console before closing
                await asyncio.wait([self.reader_task], timeout=self.config.close_grace)
        finally:
            await self.close()

    @staticmethod
    async def read_stdin() -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, sys.stdin.readline)

    async def close(self):
        """Close the connection. Safe to call more than once."""
        self.running = False
        if self.reader_task is not None and not self.reader_task.done():
            self.reader_task.cancel()
            await asyncio.gather(self.reader_task, return_exceptions=True)

        writer, self.writer = self.writer, None
        if writer is not None:
            try:
                writer.close()
                await writer.wait_closed()
            except (ConnectionError, OSError) as e:
                logger.debug(f"Error while closing connection: {e}")
