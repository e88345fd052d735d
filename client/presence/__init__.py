"""
Presence module for the online-user roster.

Handles:
- Full-snapshot roster replacement
- Read access to the current online users
"""
