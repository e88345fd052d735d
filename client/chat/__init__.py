"""
Chat module for client-side messaging state.

Handles:
- The append-only message timeline
- Join/leave system notices
- Delivery status of self-authored messages
"""
