"""
Router module for inbound protocol events.

Handles:
- Parsing raw transport events into typed events
- Discarding events from superseded connections
- Dispatching each event kind to the components that own its state
"""
