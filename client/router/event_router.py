"""
Event router module.

Single inbound dispatch point. Events are applied strictly in the order the
transport delivers them, each to the component that owns the affected state.
"""

from typing import Any, Callable, Optional

from common.protocol_definitions import (
    INBOUND_EVENT_TYPES, InboundEvent, Connected, Disconnected, Authenticated,
    MessageBroadcast, DeliveryAck, ReadAck, RosterPush, UserJoined, UserLeft,
    parse_event
)
from client.utils.logger import logger


class EventRouter:
    """Routes inbound events to connection, session, roster, timeline and tracker."""

    def __init__(self, connection, session, roster, timeline, tracker,
                 on_applied: Optional[Callable[[InboundEvent], None]] = None):
        self.connection = connection
        self.session = session
        self.roster = roster
        self.timeline = timeline
        self.tracker = tracker
        self.on_applied = on_applied
        self._disposed = False

        self._handlers = {
            Connected: self._handle_connected,
            Disconnected: self._handle_disconnected,
            Authenticated: self._handle_authenticated,
            MessageBroadcast: self._handle_message,
            DeliveryAck: self._handle_delivery_ack,
            ReadAck: self._handle_read_ack,
            RosterPush: self._handle_roster_push,
            UserJoined: self._handle_user_joined,
            UserLeft: self._handle_user_left,
        }
        missing = [t.__name__ for t in INBOUND_EVENT_TYPES if t not in self._handlers]
        if missing:
            raise TypeError(f"No handler for inbound events: {', '.join(missing)}")

    async def handle_raw(self, generation: int, event_name: str, payload: Any = None) -> bool:
        """Transport sink: parse and dispatch one raw event."""
        if self._disposed:
            return False
        event = parse_event(event_name, payload, generation)
        if event is None:
            logger.log_unknown_event(event_name)
            return False
        return self.dispatch(event)

    def dispatch(self, event: InboundEvent) -> bool:
        """Apply ``event``. Returns False when it was discarded."""
        if self._disposed:
            return False

        current = self.connection.generation
        if event.generation != current:
            logger.log_stale_event(type(event).__name__, event.generation, current)
            return False

        self._handlers[type(event)](event)

        if self.on_applied is not None:
            self.on_applied(event)
        return True

    def dispose(self):
        """Stop applying events and drop the listener."""
        self._disposed = True
        self.on_applied = None

    @property
    def disposed(self) -> bool:
        return self._disposed

    def _handle_connected(self, event: Connected):
        self.connection.on_connected(event)

    def _handle_disconnected(self, event: Disconnected):
        self.connection.on_disconnected(event)

    def _handle_authenticated(self, event: Authenticated):
        self.session.on_authenticated(event)
        self.roster.replace(event.users)

    def _handle_message(self, event: MessageBroadcast):
        self.timeline.append_chat(event.message)
        self.tracker.on_echo(event.message)

    def _handle_delivery_ack(self, event: DeliveryAck):
        self.tracker.on_delivered(event.message_id)

    def _handle_read_ack(self, event: ReadAck):
        self.tracker.on_read(event.message_id)

    def _handle_roster_push(self, event: RosterPush):
        self.roster.replace(event.users)

    def _handle_user_joined(self, event: UserJoined):
        self.roster.replace(event.users)
        self.timeline.append_user_joined(event.username)

    def _handle_user_left(self, event: UserLeft):
        self.roster.replace(event.users)
        self.timeline.append_user_left(event.username)
