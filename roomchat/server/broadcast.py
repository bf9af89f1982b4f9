"""
Room broadcast engine.

Fans a line out to every member of a room, or to every connected client,
while holding the registry lock. Delivery is best effort: a recipient whose
write fails is skipped and the rest still get the message. The failed
recipient's own session notices the broken connection on its next read and
unregisters itself.
"""

import asyncio
from typing import Optional

from roomchat.server.registry import ClientRegistry
from roomchat.server.transport import send_line
from roomchat.server.utils.logger import logger


class BroadcastEngine:
    """Room and server-wide fan-out on top of a ClientRegistry."""

    def __init__(self, registry: ClientRegistry):
        self.registry = registry

    async def broadcast_room(self, room: str, message: str,
                             exclude: Optional[asyncio.StreamWriter] = None) -> int:
        """Send to every client in ``room`` except ``exclude``. Returns deliveries made."""
        async with self.registry.recipients(room=room, exclude=exclude) as targets:
            return await self._deliver(targets, message)

    async def broadcast_all(self, message: str) -> int:
        """Send to every connected client regardless of room."""
        async with self.registry.recipients() as targets:
            return await self._deliver(targets, message)

    async def _deliver(self, targets, message: str) -> int:
        delivered = 0
        for client_id, writer in targets:
            try:
                ok = await send_line(writer, message)
            except Exception as e:
                logger.log_send_failure(client_id, e)
                continue
            if ok:
                delivered += 1
            else:
                logger.log_send_failure(client_id, ConnectionError("connection closed"))
        return delivered
