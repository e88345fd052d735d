"""
Shared constants for the real-time chat client.

This module contains the protocol event names and transport defaults used
across the client components.
"""

# Network Configuration
DEFAULT_BACKEND_URL = 'https://chat-app-backend-ybjt.onrender.com'

# Transport (fixed settings, see ClientConfig for overrides)
RECONNECTION_ENABLED = True
RECONNECT_ATTEMPTS = 5
RECONNECT_DELAY_MS = 1000
CONNECT_TIMEOUT_MS = 20000
TRANSPORTS = ['websocket', 'polling']

# Message ids
MESSAGE_ID_SUFFIX_LENGTH = 8

# System notices
USER_JOINED_TEMPLATE = '{username} joined the chat'
USER_LEFT_TEMPLATE = '{username} left the chat'


# Event names
class EventNames:
    # Client to Server
    AUTHENTICATE = 'authenticate'
    SEND_MESSAGE = 'sendMessage'

    # Transport lifecycle
    CONNECT = 'connect'
    DISCONNECT = 'disconnect'

    # Server to Client
    AUTHENTICATED = 'authenticated'
    MESSAGE = 'message'
    MESSAGE_RECEIVED = 'messageReceived'
    MESSAGE_READ = 'messageRead'
    USER_LIST = 'userList'
    USER_JOINED = 'userJoined'
    USER_LEFT = 'userLeft'


# Every inbound name the connection registers a handler for
INBOUND_EVENTS = (
    EventNames.CONNECT,
    EventNames.DISCONNECT,
    EventNames.AUTHENTICATED,
    EventNames.MESSAGE,
    EventNames.MESSAGE_RECEIVED,
    EventNames.MESSAGE_READ,
    EventNames.USER_LIST,
    EventNames.USER_JOINED,
    EventNames.USER_LEFT,
)

# Read receipts shown next to self-authored messages
RECEIPT_SENDING = 'Sending...'
RECEIPT_SENT = '✓'
RECEIPT_RECEIVED = '✓✓'
RECEIPT_READ = '✓✓ Read'
