"""
Authentication module for the username handshake.

Handles:
- Local validation of the chosen username
- The authenticate request
- Tracking whether the handshake was accepted
"""
