"""
Server event sink module.

Per-session failures (dropped deliveries, broken connections, rejected
negotiations, routing errors) are recorded here instead of being discarded,
so operators see them in the log and tests can assert on them.
"""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from common.constants import MAX_RECORDED_EVENTS
from server.utils.logger import logger


class EventKinds:
    DELIVERY_FAILURE = 'delivery_failure'
    TRANSPORT_ERROR = 'transport_error'
    NEGOTIATION_REJECTED = 'negotiation_rejected'
    ROUTING_ERROR = 'routing_error'


@dataclass
class RelayEvent:
    """One recorded failure."""
    kind: str
    session: Optional[str]
    detail: str
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())


class EventSink:
    """Bounded in-memory record of relay events."""

    def __init__(self, maxlen: int = MAX_RECORDED_EVENTS):
        self.events = deque(maxlen=maxlen)

    def record(self, kind: str, session: Optional[str], detail: str) -> RelayEvent:
        """Store an event and log it."""
        event = RelayEvent(kind, session, detail)
        self.events.append(event)

        who = session if session is not None else 'unnamed session'
        if kind in (EventKinds.DELIVERY_FAILURE, EventKinds.TRANSPORT_ERROR):
            logger.warning(f"[{kind}] {who}: {detail}")
        else:
            logger.info(f"[{kind}] {who}: {detail}")
        return event

    def of_kind(self, kind: str) -> List[RelayEvent]:
        """Return recorded events of one kind, oldest first."""
        return [event for event in self.events if event.kind == kind]
