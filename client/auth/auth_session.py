"""
Authentication session module.

Performs the username handshake and tracks whether the local user is
authenticated. Sending chat messages is only allowed once authenticated.
"""

from typing import Optional

from common.constants import EventNames
from common.protocol_definitions import Authenticated, create_authenticate_message
from client.utils.logger import logger


class AuthSession:
    """Username handshake state."""

    def __init__(self, connection):
        self.connection = connection
        self.username: str = ''
        self.authenticated: bool = False
        self.authenticated_generation: Optional[int] = None

    async def request_authentication(self, username: str) -> bool:
        """
        Send the authenticate request for ``username``.

        Empty or whitespace-only names are rejected without touching the
        network, as is any request once the session is authenticated. The
        username is kept only if the request was handed to the transport.
        """
        if self.authenticated:
            logger.debug(f"Already authenticated as {self.username}")
            return False
        if not username or not username.strip():
            logger.debug("Rejected empty username")
            return False

        previous, self.username = self.username, username
        logger.log_auth_request(username)
        sent = await self.connection.send(EventNames.AUTHENTICATE,
                                          create_authenticate_message(username))
        if not sent:
            self.username = previous
        return sent

    def on_authenticated(self, event: Authenticated) -> bool:
        """Mark the session authenticated. Only the first reply transitions."""
        if self.authenticated:
            return False
        self.authenticated = True
        self.authenticated_generation = event.generation
        logger.log_authenticated(self.username, len(event.users))
        return True

    def can_send(self) -> bool:
        return self.authenticated and bool(self.username)
