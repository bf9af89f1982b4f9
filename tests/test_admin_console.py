#!/usr/bin/env python3
"""
Unit tests for the admin console commands.
"""

import asyncio
import io
import unittest

from roomchat.server.admin_console import AdminConsole, USAGE
from roomchat.server.broadcast import BroadcastEngine
from roomchat.server.registry import ClientRegistry
from tests.fakes import FakeWriter


class TestAdminConsole(unittest.IsolatedAsyncioTestCase):
    """Test cases for /announce, /list and the usage hint."""

    async def asyncSetUp(self):
        self.registry = ClientRegistry()
        self.broadcaster = BroadcastEngine(self.registry)
        self.printed = []
        self.console = AdminConsole(self.registry, self.broadcaster, output=self.printed.append)

        self.first = FakeWriter(peer=('192.168.1.10', 5001))
        self.second = FakeWriter(peer=('192.168.1.11', 5002))
        await self.registry.register(self.first)
        await self.registry.register(self.second)
        await self.registry.set_room(2, 'C')

    async def test_announce_reaches_every_client(self):
        result = await self.console.handle_command("/announce server restarts soon\n")

        self.assertEqual(result, [])
        self.assertEqual(self.first.lines, ["[ANNOUNCE] server restarts soon"])
        self.assertEqual(self.second.lines, ["[ANNOUNCE] server restarts soon"])

    async def test_list_renders_every_slot(self):
        result = await self.console.handle_command("/list")

        self.assertEqual(result, [
            "Client list:",
            "  id=1 peer=192.168.1.10:5001 room=-",
            "  id=2 peer=192.168.1.11:5002 room=C",
            "  slot 3 empty",
            "  slot 4 empty",
            "  slot 5 empty",
        ])

    async def test_list_after_disconnect(self):
        await self.registry.unregister(1)

        result = await self.console.list_clients()

        self.assertEqual(result[1], "  slot 1 empty")
        self.assertEqual(result[2], "  id=2 peer=192.168.1.11:5002 room=C")

    async def test_unknown_command_shows_usage(self):
        for line in ("hello", "/announce", "/list all", "/LIST"):
            with self.subTest(line=line):
                self.assertEqual(await self.console.handle_command(line), [USAGE])
        self.assertEqual(self.first.lines, [])

    async def test_empty_line_ignored(self):
        self.assertEqual(await self.console.handle_command("\n"), [])

    async def test_read_commands_from_stream(self):
        stream = io.StringIO("/list\n\nbogus\n/announce hi\n")
        loop = asyncio.get_running_loop()

        await asyncio.to_thread(self.console.read_commands, loop, stream)

        self.assertEqual(self.printed[0], "Client list:")
        self.assertEqual(self.printed[-1], USAGE)
        self.assertEqual(len(self.printed), 7)
        self.assertEqual(self.second.lines, ["[ANNOUNCE] hi"])


if __name__ == '__main__':
    unittest.main()
