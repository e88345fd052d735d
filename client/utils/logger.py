"""
Client logging module.

This module handles client-side logging functionality.
"""

import logging
import sys


class ClientLogger:
    """Client logging class."""

    def __init__(self, log_level: int = logging.INFO):
        self.logger = logging.getLogger('chat_client')
        self.logger.setLevel(log_level)

        # Remove existing handlers
        for handler in self.logger.handlers[:]:
            self.logger.removeHandler(handler)

        # Create console handler
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(log_level)

        # Create formatter
        formatter = logging.Formatter(
            '%(asctime)s [%(levelname)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        console_handler.setFormatter(formatter)

        # Add handler to logger
        self.logger.addHandler(console_handler)

    def set_level(self, log_level: int):
        """Change verbosity of the logger and its handlers."""
        self.logger.setLevel(log_level)
        for handler in self.logger.handlers:
            handler.setLevel(log_level)

    def info(self, message: str):
        """Log info message."""
        self.logger.info(message)

    def error(self, message: str):
        """Log error message."""
        self.logger.error(message)

    def warning(self, message: str):
        """Log warning message."""
        self.logger.warning(message)

    def debug(self, message: str):
        """Log debug message."""
        self.logger.debug(message)

    def log_connection(self, endpoint: str, generation: int, success: bool):
        """Log connection attempt."""
        status = "Connected" if success else "Failed to connect"
        self.info(f"{status} to {endpoint} (generation={generation})")

    def log_reconnect_attempt(self, attempt: int, max_attempts: int, delay_ms: int):
        """Log a scheduled reconnection attempt."""
        self.info(f"[INFO] Reconnecting in {delay_ms}ms (attempt {attempt}/{max_attempts})...")

    def log_disconnected(self, generation: int):
        """Log transport loss."""
        self.warning(f"[WARN] Connection lost (generation={generation})")

    def log_auth_request(self, username: str):
        """Log authentication request."""
        self.info(f"[INFO] Authenticating as '{username}'...")

    def log_authenticated(self, username: str, online: int):
        """Log handshake success."""
        self.info(f"[SUCCESS] Authenticated as '{username}' ({online} online)")

    def log_message_sent(self, message_id: str):
        """Log chat message sent."""
        self.debug(f"Chat sent: id={message_id}")

    def log_status_change(self, message_id: str, old_status, new_status):
        """Log a delivery status transition."""
        self.debug(f"Status {message_id}: {old_status.label} -> {new_status.label}")

    def log_stale_event(self, event_name: str, generation: int, current: int):
        """Log an event dropped because its connection was superseded."""
        self.debug(f"Discarded stale '{event_name}' from generation {generation} (current={current})")

    def log_unknown_event(self, event_name: str):
        """Log an ignored event name."""
        self.debug(f"Ignored unknown event '{event_name}'")

    def log_error(self, operation: str, error: Exception):
        """Log error with operation context."""
        self.error(f"Error in {operation}: {error}")


# Global logger instance
logger = ClientLogger()
