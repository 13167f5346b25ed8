"""
Chat relay server.

Accepts TCP connections and runs one Session task per connection. The
registry, router and event sink are owned by the server instance and shared
by all of its sessions.
"""

import asyncio
from typing import Optional, Set

from server.chat.registry import Registry
from server.chat.router import Router
from server.chat.session import Session
from server.utils.config import ServerConfig
from server.utils.events import EventSink
from server.utils.logger import logger


class RelayServer:
    """Listener that spawns a session per accepted connection."""

    def __init__(self, config: Optional[ServerConfig] = None, registry: Optional[Registry] = None,
                 events: Optional[EventSink] = None):
        self.config = config or ServerConfig()
        self.registry = registry if registry is not None else Registry()
        self.events = events if events is not None else EventSink(self.config.max_recorded_events)
        self.router = Router(self.registry, self.events)

        self.server: Optional[asyncio.AbstractServer] = None
        self.session_tasks: Set[asyncio.Task] = set()
        self.bound_port: Optional[int] = None

    async def handle_client(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        """Handle individual client connection."""
        session = Session(reader, writer, self.registry, self.router, self.events)
        logger.log_connection(session.addr)

        task = asyncio.current_task()
        self.session_tasks.add(task)
        try:
            await session.run()
        except asyncio.CancelledError:
            logger.info(f"Connection cancelled for {session.addr}")
            raise
        except Exception as e:
            logger.log_error(f"session {session.display_name or session.addr}", e)
        finally:
            self.session_tasks.discard(task)

    async def start(self):
        """Open the listening socket."""
        self.server = await asyncio.start_server(
            self.handle_client,
            self.config.host,
            self.config.port,
            limit=self.config.max_line_length
        )

        sockets = self.server.sockets or []
        if sockets:
            self.bound_port = sockets[0].getsockname()[1]
        addr = ', '.join(str(sock.getsockname()) for sock in sockets)
        logger.info(f"Server listening on {addr}")

    async def serve_forever(self):
        """Start the server and accept connections until cancelled."""
        if self.server is None:
            await self.start()
        async with self.server:
            await self.server.serve_forever()

    async def stop(self):
        """Stop accepting connections and drop every in-flight session."""
        server, self.server = self.server, None
        if server is not None:
            server.close()

        # wait_closed() also waits for open connections, so cancel sessions first
        tasks = list(self.session_tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

        if server is not None:
            await server.wait_closed()
        logger.info("Server stopped")

    def session_count(self) -> int:
        """Number of registered sessions."""
        return len(self.registry)
