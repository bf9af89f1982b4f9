#!/usr/bin/env python3
"""
roomchat server - main entry point.

Accepts TCP connections, registers each one in the client registry, rejects
connections beyond capacity, and runs one SessionHandler task per client next
to the admin console.
"""

import argparse
import asyncio
from typing import Optional

from roomchat.common.constants import DEFAULT_SERVER_HOST, DEFAULT_PORT
from roomchat.common.protocol_definitions import create_server_full_message, create_welcome_message
from roomchat.server.admin_console import AdminConsole
from roomchat.server.broadcast import BroadcastEngine
from roomchat.server.registry import ClientRegistry
from roomchat.server.session import SessionHandler
from roomchat.server.transport import close_connection, peer_name, send_line
from roomchat.server.utils.config import ServerConfig
from roomchat.server.utils.logger import logger


class RoomChatServer:
    """Main server class that wires the registry, broadcaster, sessions and console."""

    def __init__(self, config: Optional[ServerConfig] = None):
        self.config = config or ServerConfig()
        self.registry = ClientRegistry(self.config.max_clients)
        self.broadcaster = BroadcastEngine(self.registry)
        self.console = AdminConsole(self.registry, self.broadcaster)
        self.server: Optional[asyncio.AbstractServer] = None

    async def handle_client(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        """Handle individual client connection."""
        peer = peer_name(writer)

        client_id = await self.registry.register(writer)
        if client_id is None:
            logger.log_rejected(peer)
            await send_line(writer, create_server_full_message())
            await close_connection(writer)
            return

        logger.log_connection(peer, client_id)
        await send_line(writer, create_welcome_message(client_id))

        session = SessionHandler(reader, writer, self.registry, self.broadcaster)
        try:
            await session.run()
        except Exception as e:
            logger.log_error(f"session for client {client_id}", e)
            await self.registry.unregister(client_id, writer)

    async def listen(self) -> asyncio.AbstractServer:
        """Bind the listening socket and start accepting connections."""
        self.server = await asyncio.start_server(
            self.handle_client,
            self.config.host,
            self.config.port,
            limit=self.config.line_limit,
        )

        addr = ', '.join(str(sock.getsockname()) for sock in self.server.sockets)
        logger.log_listening(addr)
        return self.server

    async def start(self):
        """Start the server and serve until the process is stopped."""
        server = await self.listen()

        if self.config.console_enabled:
            self.console.start(asyncio.get_running_loop())

        async with server:
            await server.serve_forever()


def main():
    parser = argparse.ArgumentParser(description='roomchat relay server')
    parser.add_argument('--host', type=str, default=DEFAULT_SERVER_HOST,
                        help=f'Host to bind to (default: {DEFAULT_SERVER_HOST})')
    parser.add_argument('--port', type=int, default=DEFAULT_PORT,
                        help=f'TCP port to listen on (default: {DEFAULT_PORT})')
    parser.add_argument('--no-console', action='store_true',
                        help='Do not read admin commands from stdin')

    args = parser.parse_args()

    config = ServerConfig(host=args.host, port=args.port, console_enabled=not args.no_console)
    server = RoomChatServer(config)
    try:
        asyncio.run(server.start())
    except KeyboardInterrupt:
        logger.info("Server shutting down...")
    except OSError as e:
        logger.log_error("server", e)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
