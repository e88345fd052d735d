"""
Common package for the real-time chat client.

Holds the protocol event names, transport defaults and the data model
shared by every client component.
"""
