#!/usr/bin/env python3
"""
roomchat client - main entry point.

Bidirectional terminal session with a roomchat server: one task prints every
line the server sends, the other forwards what the user types.

Usage:
    python main_client.py [--server-ip HOST] [--port PORT] [--no-color]
"""

import argparse
import asyncio
import sys
import threading
from typing import Optional

from colorama import init as colorama_init

from roomchat.common.constants import DEFAULT_HOST, DEFAULT_PORT, Commands
from roomchat.common.protocol_definitions import decode_line, encode_line
from roomchat.client.display import Display
from roomchat.client.utils.config import ClientConfig
from roomchat.client.utils.logger import logger


class RoomChatClient:
    """Terminal client: server lines to the screen, typed lines to the server."""

    def __init__(self, config: Optional[ClientConfig] = None, display: Optional[Display] = None,
                 input_stream=None):
        self.config = config or ClientConfig()
        self.display = display or Display(self.config.use_color)
        self.input_stream = input_stream or sys.stdin
        self.reader: Optional[asyncio.StreamReader] = None
        self.writer: Optional[asyncio.StreamWriter] = None
        self.running = False

    async def connect(self) -> bool:
        """Establish connection to the server with retry logic and exponential backoff."""
        retry_count = self.config.retry_attempts
        for attempt in range(1, retry_count + 1):
            try:
                self.reader, self.writer = await asyncio.open_connection(self.config.host, self.config.port)
                logger.log_connection(self.config.host, self.config.port, True)
                self.running = True
                return True
            except OSError as e:
                logger.log_connection(self.config.host, self.config.port, False)
                logger.log_error("connection", e)

                if attempt < retry_count:
                    delay = self.config.retry_delay_base * (2 ** (attempt - 1))
                    logger.info(f"Retrying connection in {delay}s (attempt {attempt}/{retry_count})...")
                    await asyncio.sleep(delay)

        logger.error(f"Failed to connect after {retry_count} attempts")
        return False

    async def receive_loop(self):
        """Print server lines until the server closes the connection."""
        try:
            while self.running:
                data = await self.reader.readline()
                if not data:
                    self.display.show("[Client] Connection closed by server.")
                    break
                self.display.show(decode_line(data))
        except (ConnectionError, OSError) as e:
            logger.log_error("receive", e)
            self.display.show("[Client] Connection closed by server.")
        finally:
            self.running = False

    def _read_input(self, loop: asyncio.AbstractEventLoop, queue: asyncio.Queue):
        """Blocking stdin reader run on a daemon thread; None marks end of input."""
        try:
            for line in self.input_stream:
                loop.call_soon_threadsafe(queue.put_nowait, line)
            loop.call_soon_threadsafe(queue.put_nowait, None)
        except RuntimeError:
            # Event loop already closed
            pass

    async def send_loop(self, queue: asyncio.Queue):
        """Forward typed lines to the server; EXIT! ends the session."""
        try:
            while self.running:
                line = await queue.get()
                if line is None:
                    break

                line = line.rstrip('\r\n')
                if not line:
                    continue

                self.writer.write(encode_line(line))
                await self.writer.drain()

                if line == Commands.EXIT:
                    # Give the server time to answer before closing
                    await asyncio.sleep(self.config.exit_grace)
                    break
        except (ConnectionError, OSError) as e:
            logger.log_error("send", e)
        finally:
            self.running = False

    async def run(self) -> bool:
        """Main client loop. Returns False if the server was unreachable."""
        if not await self.connect():
            return False

        queue: asyncio.Queue = asyncio.Queue()
        threading.Thread(
            target=self._read_input, args=(asyncio.get_running_loop(), queue),
            name='client-input', daemon=True
        ).start()

        receive_task = asyncio.create_task(self.receive_loop())
        send_task = asyncio.create_task(self.send_loop(queue))

        try:
            await asyncio.wait({receive_task, send_task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (receive_task, send_task):
                task.cancel()
            await asyncio.gather(receive_task, send_task, return_exceptions=True)

            self.writer.close()
            try:
                await self.writer.wait_closed()
            except (ConnectionError, OSError):
                pass

            self.display.show("[Client] Exited.")
        return True


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description='roomchat terminal client')
    parser.add_argument('--server-ip', type=str, default=DEFAULT_HOST,
                        help=f'Server IP address (default: {DEFAULT_HOST})')
    parser.add_argument('--port', type=int, default=DEFAULT_PORT,
                        help=f'Server port (default: {DEFAULT_PORT})')
    parser.add_argument('--no-color', action='store_true',
                        help='Print server lines without colours')

    args = parser.parse_args()

    config = ClientConfig(host=args.server_ip, port=args.port, use_color=not args.no_color)
    if config.use_color:
        colorama_init()

    client = RoomChatClient(config)
    try:
        connected = asyncio.run(client.run())
    except KeyboardInterrupt:
        print("\n[Client] Interrupted by user")
        return
    if not connected:
        sys.exit(1)


if __name__ == "__main__":
    main()
