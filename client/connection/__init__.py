"""
Connection module for the Socket.IO transport.

Handles:
- Opening the transport connection
- Bounded reconnection with a fixed delay
- Connection generations for discarding stale callbacks
- Teardown of handlers and transport
"""
