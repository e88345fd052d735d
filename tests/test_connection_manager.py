#!/usr/bin/env python3
"""
Unit tests for the connection manager.

Tests:
- Connection settings handed to the transport
- Bounded reconnection with a fixed delay
- Connection generations
- Teardown removing handlers and closing the transport
"""

import asyncio
import unittest
from unittest.mock import AsyncMock, patch

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from client.connection.connection_manager import ConnectionManager
from client.utils.config import ClientConfig
from common.constants import INBOUND_EVENTS
from common.protocol_definitions import Disconnected
from tests.socket_fakes import FakeClientFactory

ENDPOINT = 'http://chat.test'


class TestConnectionManager(unittest.IsolatedAsyncioTestCase):
    """Test cases for ConnectionManager."""

    def make_manager(self, outcomes=None, drops=(), **config):
        config.setdefault('retry_delay_ms', 0)
        self.factory = FakeClientFactory(outcomes, drops)
        self.events = []
        manager = ConnectionManager(ClientConfig(endpoint=ENDPOINT, **config), self.factory)

        async def sink(generation, event_name, payload):
            self.events.append((generation, event_name, payload))
            if event_name == 'disconnect' and generation == manager.generation:
                manager.on_disconnected(Disconnected(generation=generation))

        manager.set_event_sink(sink)
        return manager

    async def asyncTearDown(self):
        if hasattr(self, 'manager'):
            await self.manager.teardown()

    async def test_connect_uses_transport_settings(self):
        """Test endpoint, transport order and timeout passed to the client."""
        self.manager = self.make_manager()

        self.assertTrue(await self.manager.connect())

        call = self.factory.current.connect_calls[0]
        self.assertEqual(call['url'], ENDPOINT)
        self.assertEqual(call['transports'], ['websocket', 'polling'])
        self.assertEqual(call['wait_timeout'], 20.0)
        self.assertTrue(self.manager.connected)
        self.assertEqual(self.manager.generation, 1)

    async def test_connect_registers_every_inbound_handler(self):
        """Test that a handler exists for each inbound event name."""
        self.manager = self.make_manager()
        await self.manager.connect()
        self.assertEqual(set(self.factory.current.handlers['/']), set(INBOUND_EVENTS))

    async def test_connect_event_is_tagged_with_generation(self):
        """Test that inbound callbacks carry the generation of their connection."""
        self.manager = self.make_manager()
        await self.manager.connect()
        self.assertEqual(self.events, [(1, 'connect', None)])

    async def test_connect_overrides_endpoint(self):
        """Test connect(endpoint) replaces the configured endpoint."""
        self.manager = self.make_manager()
        await self.manager.connect('http://other.test')
        self.assertEqual(self.factory.current.connect_calls[0]['url'], 'http://other.test')

    async def test_retries_are_bounded(self):
        """Test that an unreachable host is tried once plus max_attempts times."""
        self.manager = self.make_manager(outcomes=[False] * 20)

        self.assertFalse(await self.manager.connect())

        self.assertEqual(len(self.factory.clients), 6)
        self.assertFalse(self.manager.connected)
        self.assertEqual(self.manager.generation, 6)

    async def test_no_retry_when_reconnection_disabled(self):
        """Test a single attempt when reconnection is off."""
        self.manager = self.make_manager(outcomes=[False, True], reconnection=False)
        self.assertFalse(await self.manager.connect())
        self.assertEqual(len(self.factory.clients), 1)

    async def test_retry_succeeds_within_attempts(self):
        """Test that a later attempt connects on a new generation."""
        self.manager = self.make_manager(outcomes=[False, False, True])
        self.assertTrue(await self.manager.connect())
        self.assertEqual(self.manager.generation, 3)
        self.assertEqual(len(self.factory.clients), 3)

    async def test_retry_waits_fixed_delay(self):
        """Test that every attempt is preceded by the configured delay."""
        self.manager = self.make_manager(outcomes=[False] * 20, retry_delay_ms=1000)

        with patch('client.connection.connection_manager.asyncio.sleep', new_callable=AsyncMock) as sleep:
            self.assertFalse(await self.manager.connect())

        self.assertEqual(sleep.await_count, 5)
        for call in sleep.await_args_list:
            self.assertEqual(call.args, (1.0,))

    async def test_drop_triggers_reconnect(self):
        """Test that losing the transport reconnects on a new generation."""
        self.manager = self.make_manager()
        await self.manager.connect()
        first = self.factory.current

        await first.drop()
        self.assertFalse(self.manager.connected)

        self.assertTrue(await self.manager.wait_reconnected())
        self.assertEqual(self.manager.generation, 2)
        self.assertIsNot(self.factory.current, first)
        self.assertEqual(first.handlers['/'], {})
        self.assertEqual(first.disconnect_calls, 1)

    async def test_drop_during_connect_leaves_disconnected(self):
        """Test that a transport lost before connect() returns is not reported as connected."""
        self.manager = self.make_manager(drops=[0], reconnection=False)

        self.assertFalse(await self.manager.connect())

        self.assertFalse(self.manager.connected)
        self.assertEqual(len(self.factory.clients), 1)
        self.assertFalse(await self.manager.send('sendMessage', {}))

    async def test_drop_during_connect_retries_once(self):
        """Test that a drop during connect() is retried by a single reconnection loop."""
        self.manager = self.make_manager(drops=[0])

        self.assertTrue(await self.manager.connect())

        self.assertTrue(self.manager.connected)
        self.assertEqual(len(self.factory.clients), 2)
        self.assertEqual(self.manager.generation, 2)

    async def test_late_callback_from_old_connection_keeps_old_generation(self):
        """Test that a superseded handler still reports its own generation."""
        self.manager = self.make_manager()
        await self.manager.connect()
        stale = self.factory.current.handler('message')

        await self.factory.current.drop()
        await self.manager.wait_reconnected()
        await stale({'id': 'late'})

        self.assertEqual(self.events[-1], (1, 'message', {'id': 'late'}))
        self.assertEqual(self.manager.generation, 2)

    async def test_send_emits_on_current_connection(self):
        """Test that send() emits the event and payload."""
        self.manager = self.make_manager()
        await self.manager.connect()

        self.assertTrue(await self.manager.send('authenticate', {'username': 'alice'}))
        self.assertEqual(self.factory.current.emitted, [('authenticate', {'username': 'alice'})])

    async def test_send_without_connection_is_dropped(self):
        """Test that send() before connecting returns False."""
        self.manager = self.make_manager()
        self.assertFalse(await self.manager.send('authenticate', {'username': 'alice'}))

    async def test_send_transport_error_returns_false(self):
        """Test that an emit failure is reported, not raised."""
        self.manager = self.make_manager()
        await self.manager.connect()
        self.factory.current.connected = False
        self.assertFalse(await self.manager.send('sendMessage', {}))

    async def test_teardown_removes_handlers_and_closes(self):
        """Test that teardown deregisters handlers and disconnects."""
        self.manager = self.make_manager()
        await self.manager.connect()
        client = self.factory.current
        stale = client.handler('userList')

        await self.manager.teardown()
        await stale(['ghost'])

        self.assertEqual(client.handlers['/'], {})
        self.assertEqual(client.disconnect_calls, 1)
        self.assertNotIn((1, 'userList', ['ghost']), self.events)
        self.assertTrue(self.manager.disposed)
        self.assertFalse(self.manager.connected)
        self.assertFalse(await self.manager.send('sendMessage', {}))
        self.assertFalse(await self.manager.connect())

    async def test_teardown_is_idempotent(self):
        """Test that a second teardown is a no-op."""
        self.manager = self.make_manager()
        await self.manager.connect()
        await self.manager.teardown()
        await self.manager.teardown()
        self.assertEqual(self.factory.current.disconnect_calls, 1)

    async def test_teardown_cancels_pending_reconnect(self):
        """Test that no new connection is opened after teardown."""
        self.manager = self.make_manager(retry_delay_ms=1000)
        await self.manager.connect()

        await self.factory.current.drop()
        await asyncio.sleep(0)
        await self.manager.teardown()

        self.assertEqual(len(self.factory.clients), 1)
        self.assertFalse(await self.manager.wait_reconnected())


if __name__ == '__main__':
    unittest.main()
