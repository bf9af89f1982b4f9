"""
Client registry.

Fixed-capacity table of connection slots shared by every session and the
admin console. Slot ``i`` always carries id ``i + 1`` while active, and the
lowest free slot is handed out first, so a freed id is reused by the next
connection.

Every operation runs under one ``asyncio.Lock``. The table is small, so a
linear scan inside a single exclusive section is all the structure needs.
"""

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, List, Optional, Tuple

from roomchat.common.constants import MAX_CLIENTS
from roomchat.server.transport import close_connection, peer_name
from roomchat.server.utils.logger import logger


@dataclass
class ClientSlot:
    """One connection's registration."""
    index: int
    writer: Optional[asyncio.StreamWriter] = None
    room: Optional[str] = None
    active: bool = False
    peer: str = ''

    @property
    def client_id(self) -> int:
        return self.index + 1


@dataclass(frozen=True)
class SlotSnapshot:
    """Read-only copy of a slot taken under the registry lock."""
    index: int
    active: bool
    client_id: int
    room: Optional[str]
    peer: str


class ClientRegistry:
    """Authoritative record of which slots are occupied, by whom, and in which room."""

    def __init__(self, capacity: int = MAX_CLIENTS):
        self._slots: List[ClientSlot] = [ClientSlot(index=i) for i in range(capacity)]
        self._lock = asyncio.Lock()
        self._disconnect_count = 0

    @property
    def capacity(self) -> int:
        return len(self._slots)

    @property
    def disconnect_count(self) -> int:
        """Lifetime number of slots that went from active to free."""
        return self._disconnect_count

    @property
    def active_count(self) -> int:
        return sum(1 for slot in self._slots if slot.active)

    def _active_slot(self, client_id: int) -> Optional[ClientSlot]:
        index = client_id - 1
        if index < 0 or index >= len(self._slots):
            return None
        slot = self._slots[index]
        return slot if slot.active else None

    async def register(self, writer: asyncio.StreamWriter) -> Optional[int]:
        """
        Claim the lowest free slot for a new connection.

        Returns the 1-based client id, or None when every slot is taken. A
        None result leaves the table untouched; the caller must reject and
        close the connection itself.
        """
        async with self._lock:
            for slot in self._slots:
                if not slot.active:
                    slot.active = True
                    slot.writer = writer
                    slot.room = None
                    slot.peer = peer_name(writer)
                    return slot.client_id
        return None

    async def unregister(self, client_id: int,
                         writer: Optional[asyncio.StreamWriter] = None) -> bool:
        """
        Free a slot and close its connection.

        Safe to call more than once for the same id: a disconnect detected by
        the read loop can race an explicit EXIT!, and only the first call has
        any effect. When ``writer`` is given the call is a no-op unless the
        slot still belongs to that connection, so a late call from a finished
        session never frees a newcomer that was handed the same id.
        """
        async with self._lock:
            slot = self._active_slot(client_id)
            if slot is None or (writer is not None and slot.writer is not writer):
                return False

            writer = slot.writer
            slot.active = False
            slot.writer = None
            slot.room = None
            slot.peer = ''
            self._disconnect_count += 1
            logger.log_disconnect(client_id, self._disconnect_count)

            await close_connection(writer)
            return True

    async def set_room(self, client_id: int, room: str) -> bool:
        """Move an active client into a room. No-op for a vanished client."""
        async with self._lock:
            slot = self._active_slot(client_id)
            if slot is None:
                return False
            slot.room = room
            return True

    async def get_room(self, client_id: int) -> Optional[str]:
        async with self._lock:
            slot = self._active_slot(client_id)
            return slot.room if slot else None

    async def lookup_index_by_handle(self, writer: asyncio.StreamWriter) -> Optional[int]:
        """Find the slot index registered for a connection."""
        async with self._lock:
            for slot in self._slots:
                if slot.active and slot.writer is writer:
                    return slot.index
        return None

    async def snapshot(self) -> List[SlotSnapshot]:
        """Point-in-time copy of the whole table, in slot order."""
        async with self._lock:
            return [
                SlotSnapshot(
                    index=slot.index,
                    active=slot.active,
                    client_id=slot.client_id,
                    room=slot.room,
                    peer=slot.peer,
                )
                for slot in self._slots
            ]

    @asynccontextmanager
    async def recipients(
        self,
        room: Optional[str] = None,
        exclude: Optional[asyncio.StreamWriter] = None,
    ) -> AsyncIterator[List[Tuple[int, asyncio.StreamWriter]]]:
        """
        Hold the lock and yield the active connections to deliver to.

        ``room=None`` selects every active slot. The lock stays held for the
        whole ``async with`` body, so selection and delivery form one critical
        section and concurrent broadcasts never interleave. The body must not
        call back into the registry.
        """
        async with self._lock:
            yield [
                (slot.client_id, slot.writer)
                for slot in self._slots
                if slot.active
                and (room is None or slot.room == room)
                and slot.writer is not exclude
            ]
