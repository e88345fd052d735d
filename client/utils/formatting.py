"""
Display helpers for rendering layers.

Pure functions over snapshot data; nothing here mutates client state.
"""

from datetime import datetime
from typing import Iterable, Optional

from common.constants import RECEIPT_SENDING, RECEIPT_SENT, RECEIPT_RECEIVED, RECEIPT_READ
from common.protocol_definitions import ChatMessage, DeliveryStatus, SystemNotice, TimelineEntry

RECEIPTS = {
    DeliveryStatus.SENDING: RECEIPT_SENDING,
    DeliveryStatus.SENT: RECEIPT_SENT,
    DeliveryStatus.RECEIVED: RECEIPT_RECEIVED,
    DeliveryStatus.READ: RECEIPT_READ,
}


def format_timestamp(timestamp: str) -> str:
    """ISO-8601 timestamp as local ``HH:MM``; empty string if unparseable."""
    if not timestamp:
        return ''
    try:
        value = datetime.fromisoformat(timestamp.replace('Z', '+00:00'))
    except ValueError:
        return ''
    if value.tzinfo is not None:
        value = value.astimezone()
    return value.strftime('%H:%M')


def receipt_text(status: Optional[DeliveryStatus]) -> str:
    return RECEIPTS.get(status, '')


def format_entry(entry: TimelineEntry, local_username: str = '',
                 status: Optional[DeliveryStatus] = None) -> str:
    """One line of text for a timeline entry."""
    if isinstance(entry, SystemNotice):
        return f"-- {entry.text} --"

    line = f"[{format_timestamp(entry.timestamp)}] {entry.sender}: {entry.text}"
    if isinstance(entry, ChatMessage) and local_username and entry.sender == local_username:
        receipt = receipt_text(status)
        if receipt:
            line = f"{line}  {receipt}"
    return line


def online_count(roster: Iterable[str]) -> int:
    return len(set(roster))
