"""
Session handler.

One SessionHandler runs per accepted connection, concurrently with every other
session and with the admin console. It reads lines in arrival order, classifies
them and drives the registry and the broadcast engine:

    CONNECTED (no room) --A/B/C--> IN_ROOM(room) --A/B/C--> IN_ROOM(other)
         |                              |
         +------ EXIT! / EOF / error ---+--> CLOSED
"""

import asyncio
from typing import Optional

from roomchat.common.constants import CommandKind
from roomchat.common.protocol_definitions import (
    decode_line, parse_client_line,
    create_room_prompt_message, create_joined_message, create_user_joined_message,
    create_chat_relay_message, create_invalid_room_message, create_not_in_room_message,
    create_line_too_long_message, create_goodbye_message
)
from roomchat.server.broadcast import BroadcastEngine
from roomchat.server.registry import ClientRegistry
from roomchat.server.transport import close_connection, send_line
from roomchat.server.utils.logger import logger


class SessionState:
    CONNECTED = 'connected'
    IN_ROOM = 'in_room'
    CLOSED = 'closed'


class SessionHandler:
    """Per-connection control loop from registration to unregistration."""

    def __init__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter,
                 registry: ClientRegistry, broadcaster: BroadcastEngine):
        self.reader = reader
        self.writer = writer
        self.registry = registry
        self.broadcaster = broadcaster
        self.client_id: Optional[int] = None
        self.room: Optional[str] = None
        self.state = SessionState.CONNECTED

    async def send(self, text: str) -> bool:
        """Reply to this session's own client."""
        return await send_line(self.writer, text)

    async def run(self):
        """Serve the connection until exit, end of stream or a transport error."""
        index = await self.registry.lookup_index_by_handle(self.writer)
        if index is None:
            # Slot vanished between accept and session start
            self.state = SessionState.CLOSED
            await close_connection(self.writer)
            return
        self.client_id = index + 1

        await self.send(create_room_prompt_message())

        try:
            while self.state != SessionState.CLOSED:
                try:
                    data = await self.reader.readuntil(b'\n')
                except asyncio.IncompleteReadError as e:
                    # End of stream; the last line may lack its newline
                    data = e.partial
                except asyncio.LimitOverrunError:
                    await self.send(create_line_too_long_message())
                    if not await self.skip_line():
                        break
                    continue

                if not data:
                    logger.info(f"[Server] End of stream from client {self.client_id}, closing.")
                    break

                await self.handle_line(decode_line(data))
        except (ConnectionError, OSError) as e:
            logger.warning(f"[Server] Connection error for client {self.client_id}: {e}")
        except asyncio.CancelledError:
            logger.info(f"[Server] Session for client {self.client_id} cancelled")
            raise
        finally:
            self.state = SessionState.CLOSED
            await self.registry.unregister(self.client_id, self.writer)

    async def skip_line(self) -> bool:
        """
        Drop input through the end of an over-long line.

        The rest of the line may still be in flight, so this keeps reading
        until the newline arrives. Returns False if the stream ends first.
        """
        while True:
            try:
                await self.reader.readuntil(b'\n')
                return True
            except asyncio.LimitOverrunError as e:
                await self.reader.readexactly(e.consumed)
            except asyncio.IncompleteReadError:
                return False

    async def handle_line(self, line: str):
        """Apply one received line to the session state."""
        command = parse_client_line(line)

        if command.kind == CommandKind.EMPTY:
            return

        if command.kind == CommandKind.EXIT:
            await self.send(create_goodbye_message())
            await self.registry.unregister(self.client_id, self.writer)
            self.state = SessionState.CLOSED

        elif command.kind == CommandKind.JOIN_ROOM:
            await self.join_room(command.room)

        elif command.kind == CommandKind.INVALID_ROOM:
            await self.send(create_invalid_room_message())

        elif self.room is None:
            await self.send(create_not_in_room_message())

        else:
            await self.relay_chat(command.text)

    async def join_room(self, room: str):
        """Select or switch room. Re-selecting the current room is allowed."""
        if not await self.registry.set_room(self.client_id, room):
            # Slot already freed by a concurrent disconnect
            return

        self.room = room
        self.state = SessionState.IN_ROOM
        logger.log_room_change(self.client_id, room)

        await self.send(create_joined_message(room))
        await self.broadcaster.broadcast_room(
            room, create_user_joined_message(self.client_id, room), exclude=self.writer
        )

    async def relay_chat(self, text: str):
        """Relay a chat line to the rest of the current room."""
        room = await self.registry.get_room(self.client_id)
        if room is None:
            return

        logger.log_chat(self.client_id, room, text)
        await self.broadcaster.broadcast_room(
            room, create_chat_relay_message(self.client_id, room, text), exclude=self.writer
        )
