"""
Protocol definitions for the real-time chat client.

This module defines the data model shared by the client components, the
closed set of inbound events and the outbound message structures exchanged
with the chat server.
"""

from typing import Dict, Any, Optional, Tuple, Union
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import IntEnum

from common.constants import EventNames


class DeliveryStatus(IntEnum):
    """Delivery lifecycle of a self-authored message. Ordered."""
    SENDING = 1
    SENT = 2
    RECEIVED = 3
    READ = 4

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class ChatMessage:
    """Chat message structure."""
    id: str
    text: str
    timestamp: str
    sender: str


@dataclass(frozen=True)
class SystemNotice:
    """Locally synthesized join/leave notice."""
    text: str
    timestamp: str


TimelineEntry = Union[ChatMessage, SystemNotice]


# Inbound events. Every event records the connection generation that
# delivered it so late callbacks from a replaced connection can be dropped.

@dataclass(frozen=True)
class Connected:
    """Transport established."""
    generation: int = 0


@dataclass(frozen=True)
class Disconnected:
    """Transport lost."""
    generation: int = 0


@dataclass(frozen=True)
class Authenticated:
    """Handshake accepted, carries the roster snapshot."""
    users: Tuple[str, ...] = ()
    generation: int = 0


@dataclass(frozen=True)
class MessageBroadcast:
    """Chat message fanned out by the server (including our own echo)."""
    message: ChatMessage = None
    generation: int = 0


@dataclass(frozen=True)
class DeliveryAck:
    """Server acknowledged delivery of a message."""
    message_id: Optional[str] = None
    generation: int = 0


@dataclass(frozen=True)
class ReadAck:
    """A recipient read a message."""
    message_id: Optional[str] = None
    generation: int = 0


@dataclass(frozen=True)
class RosterPush:
    """Periodic full roster snapshot."""
    users: Tuple[str, ...] = ()
    generation: int = 0


@dataclass(frozen=True)
class UserJoined:
    """A user joined; carries the full roster after the join."""
    username: str = ''
    users: Tuple[str, ...] = ()
    generation: int = 0


@dataclass(frozen=True)
class UserLeft:
    """A user left; carries the full roster after the leave."""
    username: str = ''
    users: Tuple[str, ...] = ()
    generation: int = 0


InboundEvent = Union[
    Connected, Disconnected, Authenticated, MessageBroadcast,
    DeliveryAck, ReadAck, RosterPush, UserJoined, UserLeft,
]

INBOUND_EVENT_TYPES = (
    Connected, Disconnected, Authenticated, MessageBroadcast,
    DeliveryAck, ReadAck, RosterPush, UserJoined, UserLeft,
)


def iso_now() -> str:
    """Current UTC time as ISO-8601 with milliseconds and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def _as_dict(payload: Any) -> Dict[str, Any]:
    return payload if isinstance(payload, dict) else {}


def _as_users(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, (list, tuple, set, frozenset)):
        return ()
    return tuple(str(user) for user in value)


def _as_text(value: Any) -> str:
    return '' if value is None else str(value)


def parse_message(payload: Any) -> ChatMessage:
    """Build a ChatMessage from a broadcast payload, defaulting missing fields."""
    data = _as_dict(payload)
    return ChatMessage(
        id=_as_text(data.get('id')),
        text=_as_text(data.get('text')),
        timestamp=_as_text(data.get('timestamp')),
        sender=_as_text(data.get('sender')),
    )


def parse_event(name: str, payload: Any = None, generation: int = 0) -> Optional[InboundEvent]:
    """
    Translate a raw transport event into a typed inbound event.

    Unknown event names return None. Payloads are parsed leniently: a missing
    roster is an empty roster, and ``userList`` accepts either a bare list or
    an object with a ``users`` field.
    """
    data = _as_dict(payload)

    if name == EventNames.CONNECT:
        return Connected(generation=generation)
    if name == EventNames.DISCONNECT:
        return Disconnected(generation=generation)
    if name == EventNames.AUTHENTICATED:
        return Authenticated(users=_as_users(data.get('users')), generation=generation)
    if name == EventNames.MESSAGE:
        return MessageBroadcast(message=parse_message(payload), generation=generation)
    if name == EventNames.MESSAGE_RECEIVED:
        return DeliveryAck(message_id=data.get('messageId'), generation=generation)
    if name == EventNames.MESSAGE_READ:
        return ReadAck(message_id=data.get('messageId'), generation=generation)
    if name == EventNames.USER_LIST:
        users = payload if isinstance(payload, (list, tuple)) else data.get('users')
        return RosterPush(users=_as_users(users), generation=generation)
    if name == EventNames.USER_JOINED:
        return UserJoined(username=_as_text(data.get('username')),
                          users=_as_users(data.get('users')), generation=generation)
    if name == EventNames.USER_LEFT:
        return UserLeft(username=_as_text(data.get('username')),
                        users=_as_users(data.get('users')), generation=generation)
    return None


def create_authenticate_message(username: str) -> Dict[str, Any]:
    """Create an authenticate message."""
    return {
        "username": username
    }


def create_send_message(message: ChatMessage) -> Dict[str, Any]:
    """Create a sendMessage payload."""
    return {
        "id": message.id,
        "text": message.text,
        "timestamp": message.timestamp,
        "sender": message.sender
    }
