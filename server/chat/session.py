"""
Session module.

One Session per accepted connection. A session negotiates a display name,
feeds input lines to the router while active, and cleans up after itself
on quit, disconnect or transport failure.

Output goes through a per-session outbox drained by a single writer task,
so a recipient that stops reading only ever holds up its own writes.
"""

import asyncio
from enum import Enum
from typing import Optional, TYPE_CHECKING

from common.constants import ServerLines, MAX_OUTBOX_LINES, CLOSE_FLUSH_TIMEOUT
from common.protocol_definitions import (
    encode_line, decode_line, create_connected_line,
    create_user_joined_line, create_user_left_line
)
from server.chat.errors import NegotiationError, TransportError, DeliveryFailure, InvalidTransition
from server.chat.registry import Registry
from server.utils.events import EventSink, EventKinds
from server.utils.logger import logger

if TYPE_CHECKING:
    from server.chat.router import Router


class SessionState(Enum):
    """Lifecycle states, in the only order a session may pass through them."""
    NEGOTIATING = 1
    ACTIVE = 2
    CLOSING = 3
    CLOSED = 4


class Session:
    """Server-side state for one client connection."""

    def __init__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter,
                 registry: Registry, router: 'Router', events: EventSink,
                 outbox_size: int = MAX_OUTBOX_LINES, flush_timeout: float = CLOSE_FLUSH_TIMEOUT):
        self.reader = reader
        self.writer = writer
        self.registry = registry
        self.router = router
        self.events = events

        self.display_name: Optional[str] = None
        self.state = SessionState.NEGOTIATING
        self.addr = writer.get_extra_info('peername')

        self.outbox = asyncio.Queue(maxsize=outbox_size)  # lines waiting for the writer task
        self.writer_task: Optional[asyncio.Task] = None
        self.flush_timeout = flush_timeout
        self.farewell_sent = False

    def __repr__(self):
        return f"<Session name={self.display_name!r} state={self.state.name}>"

    @property
    def is_active(self) -> bool:
        return self.state is SessionState.ACTIVE

    def transition(self, new_state: SessionState):
        """Move forward in the lifecycle. Staying in the same state is a no-op."""
        if new_state.value < self.state.value:
            raise InvalidTransition(f"{self!r} cannot go back to {new_state.name}")
        self.state = new_state

    def request_close(self):
        """Ask the read loop to stop after the current line."""
        if self.state in (SessionState.NEGOTIATING, SessionState.ACTIVE):
            self.transition(SessionState.CLOSING)

    def start_writer(self):
        """Start the task that owns all writes to this connection."""
        if self.writer_task is None:
            self.writer_task = asyncio.create_task(self.write_loop())

    def send(self, line: str) -> bool:
        """
        Queue one line for this session's connection without waiting for it.

        Returns False when the session is closed or its outbox is full. A full
        outbox is recorded in the event sink and the line is dropped.
        """
        if self.state is SessionState.CLOSED:
            return False

        self.start_writer()
        try:
            self.outbox.put_nowait(line)
        except asyncio.QueueFull:
            self.events.record(EventKinds.DELIVERY_FAILURE, self.display_name, "outbox full, line dropped")
            return False
        return True

    def send_farewell(self) -> bool:
        if self.farewell_sent:
            return False
        self.farewell_sent = True
        return self.send(ServerLines.GOODBYE)

    async def write_line(self, line: str):
        try:
            self.writer.write(encode_line(line))
            await self.writer.drain()
        except (ConnectionError, OSError) as e:
            raise DeliveryFailure(f"{type(e).__name__}: {e}") from e

    async def write_loop(self):
        """Write queued lines one at a time until cancelled."""
        while True:
            line = await self.outbox.get()
            try:
                await self.write_line(line)
            except DeliveryFailure as e:
                self.events.record(EventKinds.DELIVERY_FAILURE, self.display_name, str(e))
            finally:
                self.outbox.task_done()

    async def flush(self):
        """Wait until every queued line has been written or dropped."""
        if self.writer_task is not None:
            await self.outbox.join()

    async def stop_writer(self):
        """Give queued lines a bounded time to go out, then stop the writer task."""
        task, self.writer_task = self.writer_task, None
        if task is None:
            return
        try:
            await asyncio.wait_for(self.outbox.join(), self.flush_timeout)
        except asyncio.TimeoutError:
            self.events.record(EventKinds.DELIVERY_FAILURE, self.display_name,
                               f"{self.outbox.qsize()} line(s) not written before close")
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)

    async def read_line(self) -> Optional[str]:
        """Read the next line; None at end of stream."""
        try:
            data = await self.reader.readline()
        except (ConnectionError, OSError) as e:
            raise TransportError(f"read failed: {e}") from e
        except ValueError as e:
            # StreamReader raises ValueError when a line exceeds the reader limit
            raise TransportError(f"line too long: {e}") from e

        if not data:
            return None
        return decode_line(data)

    async def negotiate(self):
        """Ask for a name, reserve it and announce the join."""
        self.send(ServerLines.WELCOME)
        line = await self.read_line()
        requested = line.strip() if line is not None else ''
        if not requested:
            raise NegotiationError('no username given')

        self.display_name = await self.registry.reserve(requested, self)
        self.transition(SessionState.ACTIVE)
        logger.log_join(self.display_name, self.addr)

        users = await self.registry.snapshot_names()
        await self.router.broadcast(create_user_joined_line(self.display_name, users))
        self.send(create_connected_line(self.display_name))

    async def serve(self):
        """Hand each input line to the router until the session stops being active."""
        while self.is_active:
            line = await self.read_line()
            if line is None:
                logger.debug(f"End of stream from {self.display_name}")
                break
            await self.router.dispatch(self, line)

    async def close(self):
        """Leave the registry, announce the departure and release the connection."""
        if self.state is SessionState.CLOSED:
            return
        self.transition(SessionState.CLOSING)

        if self.display_name is not None:
            removed = await self.registry.remove(self.display_name, self)
            if removed:
                logger.log_leave(self.display_name)
                users = await self.registry.snapshot_names()
                await self.router.broadcast(create_user_left_line(self.display_name, users))
            if not self.writer.is_closing():
                self.send_farewell()

        await self.stop_writer()
        try:
            self.writer.close()
            await self.writer.wait_closed()
        except (ConnectionError, OSError) as e:
            logger.debug(f"Error while closing connection {self.addr}: {e}")

        self.transition(SessionState.CLOSED)

    async def run(self):
        """Drive the session through its whole lifecycle."""
        self.start_writer()
        try:
            await self.negotiate()
            await self.serve()
        except NegotiationError as e:
            self.events.record(EventKinds.NEGOTIATION_REJECTED, None, f"{self.addr}: {e}")
            logger.log_rejected(self.addr)
            self.send(ServerLines.INVALID_USERNAME)
        except TransportError as e:
            self.events.record(EventKinds.TRANSPORT_ERROR, self.display_name, str(e))
        finally:
            await self.close()
