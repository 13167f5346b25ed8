"""
Session registry module.

Maps display names to live sessions. The registry is the only record of who
is connected; routing and presence announcements read from it.
"""

import asyncio
from typing import Dict, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from server.chat.session import Session


def candidate_names(requested_name: str):
    """Yield ``name``, ``name(1)``, ``name(2)``, ... without end."""
    yield requested_name
    suffix = 1
    while True:
        yield f"{requested_name}({suffix})"
        suffix += 1


class Registry:
    """Name -> Session index owned by one server instance."""

    def __init__(self):
        self.sessions: Dict[str, 'Session'] = {}  # name -> session, insertion ordered
        self.lock = asyncio.Lock()  # Protect shared state

    async def reserve(self, requested_name: str, session: 'Session') -> str:
        """
        Bind the first free name derived from ``requested_name`` to ``session``.

        The lookup for a free name and the insert happen in the same critical
        section, so two sessions asking for the same name always end up with
        different names.
        """
        async with self.lock:
            for name in candidate_names(requested_name):
                if name not in self.sessions:
                    self.sessions[name] = session
                    return name

    async def remove(self, name: str, session: Optional['Session'] = None) -> bool:
        """
        Remove the binding for ``name`` if present.

        When ``session`` is given the binding is only removed if it belongs to
        that session. Returns True if something was removed.
        """
        async with self.lock:
            current = self.sessions.get(name)
            if current is None:
                return False
            if session is not None and current is not session:
                return False
            del self.sessions[name]
            return True

    async def lookup(self, name: str) -> Optional['Session']:
        async with self.lock:
            return self.sessions.get(name)

    async def snapshot_names(self) -> List[str]:
        """Consistent copy of the registered names."""
        async with self.lock:
            return list(self.sessions.keys())

    async def broadcast_targets(self) -> List['Session']:
        """Sessions registered at the instant of the call."""
        async with self.lock:
            return list(self.sessions.values())

    def __len__(self) -> int:
        return len(self.sessions)

    def __contains__(self, name: str) -> bool:
        return name in self.sessions
