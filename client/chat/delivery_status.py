"""
Delivery status module.

Tracks the delivery lifecycle of messages sent by the local user:
sending -> sent -> received -> read. Transitions only ever move forward;
acknowledgements for unknown ids or for a status already reached are
absorbed silently.
"""

import time
import uuid
from typing import Dict, Mapping, Optional

from common.constants import MESSAGE_ID_SUFFIX_LENGTH
from common.protocol_definitions import ChatMessage, DeliveryStatus, iso_now
from client.utils.logger import logger


class MessageIdGenerator:
    """
    Generates message ids of the form ``<epoch-ms>-<sequence>-<random>``.

    The sequence makes ids unique within a session even when several sends
    land in the same millisecond; the random suffix keeps concurrent sessions
    of the same user apart.
    """

    def __init__(self, clock=None):
        self._clock = clock or time.time
        self._sequence = 0

    def next_id(self) -> str:
        self._sequence += 1
        millis = int(self._clock() * 1000)
        suffix = uuid.uuid4().hex[:MESSAGE_ID_SUFFIX_LENGTH]
        return f"{millis}-{self._sequence}-{suffix}"


class DeliveryStatusTracker:
    """Maps locally generated message ids to a forward-only delivery status."""

    def __init__(self, session, id_generator: Optional[MessageIdGenerator] = None):
        self.session = session
        self.id_generator = id_generator or MessageIdGenerator()
        self._status: Dict[str, DeliveryStatus] = {}

    def begin_send(self, text: str) -> ChatMessage:
        """Allocate an id, record it as sending and build the outbound message."""
        message_id = self.id_generator.next_id()

        message = ChatMessage(
            id=message_id,
            text=text,
            timestamp=iso_now(),
            sender=self.session.username,
        )
        self._status[message_id] = DeliveryStatus.SENDING
        return message

    def on_echo(self, message: ChatMessage) -> bool:
        """Our own message came back through the broadcast."""
        if not self.session.username or message.sender != self.session.username:
            return False
        return self._advance(message.id, DeliveryStatus.SENT)

    def on_delivered(self, message_id: Optional[str]) -> bool:
        return self._advance(message_id, DeliveryStatus.RECEIVED)

    def on_read(self, message_id: Optional[str]) -> bool:
        return self._advance(message_id, DeliveryStatus.READ)

    def _advance(self, message_id: Optional[str], target: DeliveryStatus) -> bool:
        current = self._status.get(message_id) if message_id else None
        if current is None or current >= target:
            return False
        self._status[message_id] = target
        logger.log_status_change(message_id, current, target)
        return True

    def status(self, message_id: str) -> Optional[DeliveryStatus]:
        """Status for ``message_id``, or None when it is not one of ours."""
        return self._status.get(message_id)

    def statuses(self) -> Mapping[str, DeliveryStatus]:
        return dict(self._status)
