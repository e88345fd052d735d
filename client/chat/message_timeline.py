"""
Message timeline module.

The timeline is the single ordered sequence of displayable entries. Entries
are kept in arrival order and are never reordered or removed.
"""

from typing import List, Tuple

from common.constants import USER_JOINED_TEMPLATE, USER_LEFT_TEMPLATE
from common.protocol_definitions import ChatMessage, SystemNotice, TimelineEntry, iso_now


class MessageTimeline:
    """Append-only sequence of chat messages and system notices."""

    def __init__(self):
        self._entries: List[TimelineEntry] = []

    def append_chat(self, entry: ChatMessage) -> int:
        """Append a chat message. Returns its position."""
        self._entries.append(entry)
        return len(self._entries) - 1

    def append_system_notice(self, text: str) -> SystemNotice:
        """Synthesize and append a system notice stamped with the local time."""
        notice = SystemNotice(text=text, timestamp=iso_now())
        self._entries.append(notice)
        return notice

    def append_user_joined(self, username: str) -> SystemNotice:
        return self.append_system_notice(USER_JOINED_TEMPLATE.format(username=username))

    def append_user_left(self, username: str) -> SystemNotice:
        return self.append_system_notice(USER_LEFT_TEMPLATE.format(username=username))

    def entries(self) -> Tuple[TimelineEntry, ...]:
        """Immutable copy of the entries in display order."""
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
