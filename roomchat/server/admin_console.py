"""
Admin console.

Operator-only control plane read from the server's standard input. It is one
more concurrent actor on the registry: it needs no locking of its own because
it only calls the registry's and broadcast engine's guarded operations.
"""

import asyncio
import sys
import threading
from typing import Callable, List

from roomchat.common.constants import AdminCommands
from roomchat.common.protocol_definitions import create_announce_message
from roomchat.server.broadcast import BroadcastEngine
from roomchat.server.registry import ClientRegistry, SlotSnapshot
from roomchat.server.utils.logger import logger

USAGE = "Use /announce <msg> to broadcast to all clients, /list to view clients"


def render_client_list(slots: List[SlotSnapshot]) -> List[str]:
    """Render a registry snapshot, one line per slot."""
    lines = ["Client list:"]
    for slot in slots:
        if slot.active:
            lines.append(f"  id={slot.client_id} peer={slot.peer} room={slot.room or '-'}")
        else:
            lines.append(f"  slot {slot.index + 1} empty")
    return lines


class AdminConsole:
    """Serial /announce and /list commands against the shared registry."""

    def __init__(self, registry: ClientRegistry, broadcaster: BroadcastEngine,
                 output: Callable[[str], None] = print):
        self.registry = registry
        self.broadcaster = broadcaster
        self.output = output

    async def announce_all(self, text: str) -> int:
        delivered = await self.broadcaster.broadcast_all(create_announce_message(text))
        logger.log_announce(text, delivered)
        return delivered

    async def list_clients(self) -> List[str]:
        return render_client_list(await self.registry.snapshot())

    async def handle_command(self, line: str) -> List[str]:
        """Execute one console line and return the text to show the operator."""
        line = line.rstrip('\r\n')
        if not line:
            return []

        if line.startswith(AdminCommands.ANNOUNCE_PREFIX):
            await self.announce_all(line[len(AdminCommands.ANNOUNCE_PREFIX):])
            return []

        if line == AdminCommands.LIST:
            return await self.list_clients()

        return [USAGE]

    def start(self, loop: asyncio.AbstractEventLoop, stream=None) -> threading.Thread:
        """Read commands on a daemon thread so a blocked stdin never holds up shutdown."""
        thread = threading.Thread(
            target=self.read_commands, args=(loop, stream or sys.stdin),
            name='admin-console', daemon=True
        )
        thread.start()
        return thread

    def read_commands(self, loop: asyncio.AbstractEventLoop, stream):
        """Blocking input loop; each command is executed on the server's event loop."""
        for line in stream:
            future = asyncio.run_coroutine_threadsafe(self.handle_command(line), loop)
            try:
                lines = future.result()
            except Exception as e:
                logger.log_error("admin console", e)
                continue
            for out in lines:
                self.output(out)

        logger.info("[Server] Admin console input closed")
