"""
In-memory stand-ins for asyncio streams used by the unit tests.
"""

import asyncio

from server.chat.registry import Registry
from server.chat.router import Router
from server.chat.session import Session, SessionState
from server.utils.events import EventSink


class FakeWriter:
    """Records written lines instead of sending them."""

    def __init__(self, peername=('127.0.0.1', 40000)):
        self.peername = peername
        self.buffer = b''
        self.closed = False
        self.fail_on_drain = False
        self.drain_gate = None  # asyncio.Event that drain() waits on, if set

    def write(self, data: bytes):
        self.buffer += data

    async def drain(self):
        if self.drain_gate is not None:
            await self.drain_gate.wait()
        if self.fail_on_drain:
            raise ConnectionResetError('connection reset by peer')

    def close(self):
        self.closed = True

    async def wait_closed(self):
        return None

    def is_closing(self) -> bool:
        return self.closed

    def get_extra_info(self, name, default=None):
        if name == 'peername':
            return self.peername
        return default

    @property
    def lines(self):
        return self.buffer.decode('utf-8').splitlines()


class ScriptedReader:
    """Returns the given chunks from readline(), raising any exception in the list."""

    def __init__(self, *items):
        self.items = list(items)

    async def readline(self) -> bytes:
        if not self.items:
            return b''
        item = self.items.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item


def make_reader(*lines, eof=True) -> asyncio.StreamReader:
    """A StreamReader pre-loaded with the given lines."""
    reader = asyncio.StreamReader()
    for line in lines:
        reader.feed_data(line.encode('utf-8') + b'\n')
    if eof:
        reader.feed_eof()
    return reader


class RelayFixture:
    """Registry, router and event sink wired together like the server does."""

    def __init__(self):
        self.registry = Registry()
        self.events = EventSink()
        self.router = Router(self.registry, self.events)
        self.sessions = []

    def new_session(self, *lines, eof=True, port=40000, **kwargs) -> Session:
        reader = make_reader(*lines, eof=eof)
        session = Session(reader, FakeWriter(('127.0.0.1', port)), self.registry, self.router, self.events, **kwargs)
        self.sessions.append(session)
        return session

    async def flush(self, *sessions):
        """Wait until the given sessions (default: all) have written their outboxes."""
        for session in sessions or self.sessions:
            await session.flush()

    def stop_writers(self):
        for session in self.sessions:
            if session.writer_task is not None:
                session.writer_task.cancel()

    async def active_session(self, name: str) -> Session:
        """A session that has already joined under ``name``."""
        session = self.new_session(eof=False)
        session.display_name = await self.registry.reserve(name, session)
        session.transition(SessionState.ACTIVE)
        return session
