"""
Client configuration module.

This module handles client-side configuration settings.
"""

from common.constants import (
    DEFAULT_BACKEND_URL, RECONNECTION_ENABLED, RECONNECT_ATTEMPTS,
    RECONNECT_DELAY_MS, CONNECT_TIMEOUT_MS, TRANSPORTS
)


class ClientConfig:
    """Client configuration class."""

    def __init__(self, endpoint: str = DEFAULT_BACKEND_URL, username: str = None,
                 reconnection: bool = RECONNECTION_ENABLED,
                 max_attempts: int = RECONNECT_ATTEMPTS,
                 retry_delay_ms: int = RECONNECT_DELAY_MS,
                 timeout_ms: int = CONNECT_TIMEOUT_MS,
                 transports: list = None):
        if max_attempts < 0:
            raise ValueError("max_attempts must not be negative")
        if retry_delay_ms < 0:
            raise ValueError("retry_delay_ms must not be negative")
        if timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")

        self.endpoint = endpoint
        self.username = username

        # Connection settings
        self.reconnection = reconnection
        self.max_attempts = max_attempts
        self.retry_delay_ms = retry_delay_ms
        self.timeout_ms = timeout_ms
        self.transports = list(transports) if transports else list(TRANSPORTS)

    @property
    def retry_delay(self) -> float:
        """Delay between reconnection attempts in seconds."""
        return self.retry_delay_ms / 1000

    @property
    def timeout(self) -> float:
        """Connect timeout in seconds."""
        return self.timeout_ms / 1000

    def get_connection_info(self):
        """Get connection information."""
        return {
            'endpoint': self.endpoint,
            'username': self.username
        }

    def get_transport_settings(self):
        """Get transport settings."""
        return {
            'reconnection': self.reconnection,
            'maxAttempts': self.max_attempts,
            'retryDelayMs': self.retry_delay_ms,
            'timeoutMs': self.timeout_ms,
            'transportPreference': list(self.transports)
        }
