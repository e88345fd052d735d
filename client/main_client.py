#!/usr/bin/env python3
"""
Real-time Chat Client - Synchronization Core

This module integrates the client components (connection, authentication,
presence, timeline, delivery status, event routing) into a single state
container. Rendering layers read immutable snapshots from it and feed it two
actions: submit a username and submit a message.
"""

import asyncio
import sys
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, FrozenSet, Mapping, Optional, Tuple

from common.constants import EventNames
from common.protocol_definitions import DeliveryStatus, TimelineEntry, create_send_message
from client.auth.auth_session import AuthSession
from client.chat.delivery_status import DeliveryStatusTracker
from client.chat.message_timeline import MessageTimeline
from client.connection.connection_manager import ConnectionManager
from client.presence.presence_roster import PresenceRoster
from client.router.event_router import EventRouter
from client.utils.config import ClientConfig
from client.utils.formatting import format_entry, online_count
from client.utils.logger import logger


@dataclass(frozen=True)
class ChatSnapshot:
    """Read-only view of the client state at one point in time."""
    connected: bool
    authenticated: bool
    username: str
    roster: FrozenSet[str]
    timeline: Tuple[TimelineEntry, ...]
    delivery_status_by_id: Mapping[str, DeliveryStatus]


StateListener = Callable[[ChatSnapshot], None]


class ChatClient:
    """Explicit state container; the router and the two user actions are its only writers."""

    def __init__(self, config: ClientConfig = None, client_factory: Callable = None):
        self.config = config or ClientConfig()
        self.connection = ConnectionManager(self.config, client_factory)
        self.session = AuthSession(self.connection)
        self.roster = PresenceRoster()
        self.timeline = MessageTimeline()
        self.tracker = DeliveryStatusTracker(self.session)
        self.router = EventRouter(
            self.connection, self.session, self.roster, self.timeline, self.tracker,
            on_applied=self._on_event_applied
        )
        self.connection.set_event_sink(self.router.handle_raw)

        self._state_listener: Optional[StateListener] = None
        self.closed = False

    def set_state_listener(self, listener: Optional[StateListener]):
        """Set the callback receiving a fresh snapshot after every state change."""
        self._state_listener = listener

    def snapshot(self) -> ChatSnapshot:
        """Build an immutable snapshot of the current state."""
        return ChatSnapshot(
            connected=self.connection.connected,
            authenticated=self.session.authenticated,
            username=self.session.username,
            roster=self.roster.users,
            timeline=self.timeline.entries(),
            delivery_status_by_id=MappingProxyType(self.tracker.statuses()),
        )

    def status_for(self, message_id: str) -> Optional[DeliveryStatus]:
        return self.tracker.status(message_id)

    async def connect(self) -> bool:
        """Establish the transport connection."""
        return await self.connection.connect()

    async def submit_username(self, name: str) -> bool:
        """User action: request authentication as ``name``."""
        if self.closed:
            return False
        sent = await self.session.request_authentication(name)
        if sent:
            self._notify()
        return sent

    async def submit_message_text(self, text: str) -> Optional[str]:
        """
        User action: send a chat message.

        Dropped without feedback when the text is blank, the session is not
        authenticated or there is no active connection. Returns the new
        message id otherwise.
        """
        if self.closed or not text or not text.strip():
            logger.debug("Dropped blank message")
            return None
        if not self.session.can_send():
            logger.debug("Dropped message: not authenticated")
            return None
        if not self.connection.connected:
            logger.debug("Dropped message: not connected")
            return None

        message = self.tracker.begin_send(text)
        await self.connection.send(EventNames.SEND_MESSAGE, create_send_message(message))
        logger.log_message_sent(message.id)
        self._notify()
        return message.id

    def _on_event_applied(self, event):
        self._notify()

    def _notify(self):
        listener = self._state_listener
        if listener is None:
            return
        try:
            listener(self.snapshot())
        except Exception as e:
            logger.log_error("state listener", e)

    async def close(self):
        """Dispose the core: no handler fires and no state changes afterwards."""
        if self.closed:
            return
        self.closed = True
        self._state_listener = None
        self.router.dispose()
        await self.connection.teardown()

    async def run(self, username: str = None):
        """Connect and authenticate, then stay attached until closed."""
        if not await self.connect():
            return
        username = username or self.config.username
        if username:
            await self.submit_username(username)

        try:
            while not self.closed:
                await asyncio.sleep(1)
        except asyncio.CancelledError:
            pass
        finally:
            await self.close()
            logger.info("[INFO] Disconnected from server")

    async def interactive_mode(self, username: str = None):
        """Run the client with chat input read from stdin."""
        self.set_state_listener(_TerminalPrinter())

        if not await self.connect():
            return

        username = username or self.config.username
        if not await self.submit_username(username or ''):
            logger.error("[ERROR] A non-empty username is required")
            await self.close()
            return

        logger.info("[INFO] Type messages to chat (Ctrl+C to exit)")

        loop = asyncio.get_running_loop()
        try:
            while not self.closed:
                user_input = await loop.run_in_executor(None, sys.stdin.readline)
                if not user_input:
                    break
                await self.submit_message_text(user_input.rstrip('\n'))
        except asyncio.CancelledError:
            pass
        finally:
            await self.close()
            logger.info("[INFO] Disconnected from server")


class _TerminalPrinter:
    """State listener printing new timeline entries and receipt changes."""

    def __init__(self):
        self.printed = 0
        self.receipts = {}
        self.online = None

    def __call__(self, snapshot: ChatSnapshot):
        online = online_count(snapshot.roster)
        if snapshot.authenticated and online != self.online:
            self.online = online
            print(f"Online users: {self.online}")

        for entry in snapshot.timeline[self.printed:]:
            status = snapshot.delivery_status_by_id.get(getattr(entry, 'id', None))
            print(format_entry(entry, snapshot.username, status))
            if status is not None:
                self.receipts[entry.id] = status
        self.printed = len(snapshot.timeline)

        for message_id, status in snapshot.delivery_status_by_id.items():
            previous = self.receipts.get(message_id)
            if previous is not None and status > previous:
                print(f"  {message_id}: {status.label}")
                self.receipts[message_id] = status
