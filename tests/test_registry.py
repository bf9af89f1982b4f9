#!/usr/bin/env python3
"""
Unit tests for the client registry.

Covers capacity, id assignment and reuse, idempotent unregister, room updates
on vanished clients, and snapshot consistency.
"""

import asyncio
import unittest

from roomchat.common.constants import MAX_CLIENTS
from roomchat.server.registry import ClientRegistry
from tests.fakes import FakeWriter


class TestClientRegistry(unittest.IsolatedAsyncioTestCase):
    """Test cases for ClientRegistry."""

    async def asyncSetUp(self):
        self.registry = ClientRegistry()
        self.writers = [FakeWriter(peer=('10.0.0.1', 40000 + i)) for i in range(MAX_CLIENTS + 1)]

    async def _fill(self):
        return [await self.registry.register(w) for w in self.writers[:MAX_CLIENTS]]

    async def test_register_assigns_ids_by_slot_position(self):
        ids = await self._fill()
        self.assertEqual(ids, [1, 2, 3, 4, 5])
        self.assertEqual(self.registry.active_count, MAX_CLIENTS)

    async def test_new_registration_starts_without_room(self):
        client_id = await self.registry.register(self.writers[0])
        slots = await self.registry.snapshot()
        self.assertTrue(slots[0].active)
        self.assertEqual(slots[0].client_id, client_id)
        self.assertIsNone(slots[0].room)
        self.assertEqual(slots[0].peer, '10.0.0.1:40000')

    async def test_full_registry_rejects_and_is_unchanged(self):
        await self._fill()
        before = await self.registry.snapshot()

        result = await self.registry.register(self.writers[MAX_CLIENTS])

        self.assertIsNone(result)
        self.assertEqual(await self.registry.snapshot(), before)
        self.assertIsNone(await self.registry.lookup_index_by_handle(self.writers[MAX_CLIENTS]))
        self.assertFalse(self.writers[MAX_CLIENTS].closed)

    async def test_freed_slot_is_reused_with_its_own_id(self):
        await self._fill()
        await self.registry.unregister(3)

        newcomer = FakeWriter(peer=('10.0.0.9', 1))
        self.assertEqual(await self.registry.register(newcomer), 3)
        self.assertEqual(await self.registry.lookup_index_by_handle(newcomer), 2)

    async def test_unregister_closes_connection_and_counts_once(self):
        client_id = await self.registry.register(self.writers[0])

        self.assertTrue(await self.registry.unregister(client_id))
        self.assertFalse(await self.registry.unregister(client_id))

        self.assertTrue(self.writers[0].closed)
        self.assertEqual(self.registry.disconnect_count, 1)
        self.assertEqual(self.registry.active_count, 0)

    async def test_concurrent_unregister_race(self):
        client_id = await self.registry.register(self.writers[0])

        results = await asyncio.gather(
            self.registry.unregister(client_id),
            self.registry.unregister(client_id),
        )

        self.assertEqual(sorted(results), [False, True])
        self.assertEqual(self.registry.disconnect_count, 1)

    async def test_unregister_with_stale_writer_spares_reused_slot(self):
        client_id = await self.registry.register(self.writers[0])
        await self.registry.unregister(client_id, self.writers[0])
        newcomer = FakeWriter(peer=('10.0.0.9', 1))
        self.assertEqual(await self.registry.register(newcomer), client_id)

        self.assertFalse(await self.registry.unregister(client_id, self.writers[0]))

        self.assertFalse(newcomer.closed)
        self.assertEqual(await self.registry.lookup_index_by_handle(newcomer), client_id - 1)
        self.assertEqual(self.registry.disconnect_count, 1)

    async def test_unregister_out_of_range_is_noop(self):
        self.assertFalse(await self.registry.unregister(0))
        self.assertFalse(await self.registry.unregister(MAX_CLIENTS + 1))
        self.assertEqual(self.registry.disconnect_count, 0)

    async def test_set_room_and_get_room(self):
        client_id = await self.registry.register(self.writers[0])

        self.assertTrue(await self.registry.set_room(client_id, 'B'))
        self.assertEqual(await self.registry.get_room(client_id), 'B')

    async def test_set_room_on_vanished_client_is_noop(self):
        client_id = await self.registry.register(self.writers[0])
        await self.registry.unregister(client_id)

        self.assertFalse(await self.registry.set_room(client_id, 'A'))
        self.assertIsNone(await self.registry.get_room(client_id))

    async def test_reused_slot_starts_without_room(self):
        client_id = await self.registry.register(self.writers[0])
        await self.registry.set_room(client_id, 'C')
        await self.registry.unregister(client_id)

        await self.registry.register(self.writers[1])
        self.assertIsNone(await self.registry.get_room(client_id))

    async def test_id_stable_across_room_changes(self):
        await self.registry.register(self.writers[0])
        client_id = await self.registry.register(self.writers[1])

        for room in ('A', 'B', 'C', 'A'):
            await self.registry.set_room(client_id, room)
            index = await self.registry.lookup_index_by_handle(self.writers[1])
            self.assertEqual(index + 1, client_id)

    async def test_concurrent_registrations_never_exceed_capacity(self):
        writers = [FakeWriter(peer=('10.0.1.1', i)) for i in range(20)]

        ids = await asyncio.gather(*(self.registry.register(w) for w in writers))

        granted = [i for i in ids if i is not None]
        self.assertEqual(sorted(granted), [1, 2, 3, 4, 5])
        self.assertEqual(ids.count(None), 15)
        self.assertEqual(self.registry.active_count, MAX_CLIENTS)

    async def test_snapshot_lists_every_slot_in_order(self):
        await self.registry.register(self.writers[0])
        await self.registry.register(self.writers[1])
        await self.registry.set_room(2, 'A')
        await self.registry.unregister(1)

        slots = await self.registry.snapshot()

        self.assertEqual([s.index for s in slots], list(range(MAX_CLIENTS)))
        self.assertFalse(slots[0].active)
        self.assertTrue(slots[1].active)
        self.assertEqual(slots[1].room, 'A')
        self.assertEqual(slots[1].client_id, 2)

    async def test_recipients_filters_by_room_and_exclusion(self):
        for w in self.writers[:3]:
            await self.registry.register(w)
        await self.registry.set_room(1, 'A')
        await self.registry.set_room(2, 'B')
        await self.registry.set_room(3, 'A')

        async with self.registry.recipients(room='A', exclude=self.writers[0]) as targets:
            self.assertEqual(targets, [(3, self.writers[2])])

        async with self.registry.recipients() as targets:
            self.assertEqual([client_id for client_id, _ in targets], [1, 2, 3])

    async def test_custom_capacity(self):
        registry = ClientRegistry(capacity=2)
        self.assertEqual(registry.capacity, 2)
        await registry.register(self.writers[0])
        await registry.register(self.writers[1])
        self.assertIsNone(await registry.register(self.writers[2]))


if __name__ == '__main__':
    unittest.main()
