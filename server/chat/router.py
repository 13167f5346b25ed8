"""
Router module.

Turns an input line from an active session into a quit, a whisper or a
room-wide broadcast.
"""

from common.protocol_definitions import (
    CommandType, CommandSyntaxError, parse_command,
    create_chat_line, create_whisper_from_line, create_whisper_to_line,
    create_user_not_found_line
)
from server.chat.errors import RoutingError
from server.chat.registry import Registry
from server.utils.events import EventSink, EventKinds
from server.utils.logger import logger


class Router:
    """Dispatches parsed commands against the registry."""

    def __init__(self, registry: Registry, events: EventSink):
        self.registry = registry
        self.events = events

    async def dispatch(self, session, line: str) -> CommandType:
        """
        Route one input line from ``session``.

        Routing errors are answered to the sender only; the session stays
        active. Returns the type of the command that was handled.
        """
        try:
            command = parse_command(line)
            if command.type is CommandType.QUIT:
                session.send_farewell()
                session.request_close()
            elif command.type is CommandType.WHISPER:
                await self.whisper(session, command.target, command.text)
            elif command.type is CommandType.BROADCAST:
                delivered = await self.broadcast(create_chat_line(session.display_name, command.text))
                logger.log_broadcast(session.display_name, delivered)
            return command.type
        except CommandSyntaxError as e:
            self.reject(session, RoutingError(str(e)))
        except RoutingError as e:
            self.reject(session, e)
        return CommandType.EMPTY

    def reject(self, session, error: RoutingError):
        self.events.record(EventKinds.ROUTING_ERROR, session.display_name, str(error))
        session.send(str(error))

    async def whisper(self, sender, target: str, text: str):
        """Deliver ``text`` to ``target`` and echo it back to ``sender``."""
        recipient = await self.registry.lookup(target)
        if recipient is None:
            raise RoutingError(create_user_not_found_line(target))

        logger.log_whisper(sender.display_name, target)
        recipient.send(create_whisper_from_line(sender.display_name, text))
        sender.send(create_whisper_to_line(target, text))

    async def broadcast(self, line: str) -> int:
        """
        Send ``line`` to every registered session.

        Lines are only queued on each recipient's outbox, so a slow or
        broken connection never holds up the sender or the other recipients.
        Returns the number of sessions the line was queued for.
        """
        targets = await self.registry.broadcast_targets()
        return sum(1 for target in targets if target.send(line))
