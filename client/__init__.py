"""
Client package for the real-time chat client.

This package contains the client-side synchronization core:
- Connection management and reconnection
- Username authentication
- Online presence roster
- Message timeline and delivery status
- Event routing and configuration utilities
"""
