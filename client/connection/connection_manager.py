"""
Connection manager module.

Owns the single Socket.IO connection handle. Every connection attempt uses a
fresh client instance and a new generation number; inbound callbacks are
forwarded to the event sink tagged with the generation they were registered
under so that late events from a replaced connection can be recognised.
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional

import socketio
from socketio import exceptions as socketio_exceptions

from common.constants import INBOUND_EVENTS
from common.protocol_definitions import Connected, Disconnected
from client.utils.config import ClientConfig
from client.utils.logger import logger

EventSink = Callable[[int, str, Any], Awaitable[Any]]

DEFAULT_NAMESPACE = '/'


def create_socketio_client() -> socketio.AsyncClient:
    """Create a transport client. Reconnection is driven by ConnectionManager."""
    return socketio.AsyncClient(reconnection=False, logger=False, engineio_logger=False)


class ConnectionManager:
    """Owns the transport connection and its reconnection policy."""

    def __init__(self, config: Optional[ClientConfig] = None,
                 client_factory: Optional[Callable[[], Any]] = None,
                 sink: Optional[EventSink] = None):
        self.config = config or ClientConfig()
        self._client_factory = client_factory or create_socketio_client
        self._sink = sink
        self._client = None
        self._generation = 0
        self._connected = False
        self._disposed = False
        self._reconnect_task: Optional[asyncio.Task] = None
        self._reconnecting = False

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def disposed(self) -> bool:
        return self._disposed

    def set_event_sink(self, sink: EventSink):
        """Set the single receiver of inbound events."""
        self._sink = sink

    async def connect(self, endpoint: str = None, config: ClientConfig = None) -> bool:
        """
        Open the connection.

        A failed first attempt falls through to the reconnection loop when
        reconnection is enabled. Never raises for transport failures.
        """
        if self._disposed:
            logger.error("[ERROR] connect() called after teardown")
            return False
        if config is not None:
            self.config = config
        if endpoint is not None:
            self.config.endpoint = endpoint

        if await self._open():
            return True
        if self._reconnect_task is not None and not self._reconnect_task.done():
            # The transport dropped during the attempt and already scheduled a retry
            return await self.wait_reconnected()
        if self.config.reconnection:
            return await self._reconnect()
        return False

    async def _open(self) -> bool:
        """Single connection attempt on a new generation."""
        await self._release_client()

        self._generation += 1
        generation = self._generation
        client = self._client_factory()
        for event_name in INBOUND_EVENTS:
            client.on(event_name, self._make_handler(generation, event_name))
        self._client = client

        endpoint = self.config.endpoint
        try:
            await client.connect(
                endpoint,
                transports=list(self.config.transports),
                wait_timeout=self.config.timeout,
            )
        except (socketio_exceptions.ConnectionError, asyncio.TimeoutError, OSError) as e:
            logger.log_connection(endpoint, generation, False)
            logger.log_error("connection", e)
            return False

        if self._disposed or generation != self._generation:
            return False
        if not client.connected:
            self._connected = False
            logger.log_connection(endpoint, generation, False)
            return False

        self._connected = True
        logger.log_connection(endpoint, generation, True)
        return True

    async def _reconnect(self) -> bool:
        """Retry up to ``max_attempts`` times, sleeping ``retry_delay`` before each."""
        self._reconnecting = True
        try:
            max_attempts = self.config.max_attempts
            for attempt in range(1, max_attempts + 1):
                logger.log_reconnect_attempt(attempt, max_attempts, self.config.retry_delay_ms)
                await asyncio.sleep(self.config.retry_delay)
                if self._disposed:
                    return False
                if await self._open():
                    logger.info("[INFO] Reconnected successfully!")
                    return True

            logger.error(f"[ERROR] Failed to reconnect after {max_attempts} attempts")
            return False
        finally:
            self._reconnecting = False

    def _make_handler(self, generation: int, event_name: str):
        async def handler(*args):
            payload = args[0] if args else None
            await self._deliver(generation, event_name, payload)
        return handler

    async def _deliver(self, generation: int, event_name: str, payload: Any):
        if self._disposed or self._sink is None:
            return
        await self._sink(generation, event_name, payload)

    def on_connected(self, event: Connected):
        """Transport reported the connection as established."""
        self._connected = True

    def on_disconnected(self, event: Disconnected):
        """Transport lost: schedule reconnection if allowed."""
        self._connected = False
        logger.log_disconnected(event.generation)
        if self._disposed or not self.config.reconnection or self._reconnecting:
            return
        if self._reconnect_task is not None and not self._reconnect_task.done():
            return
        self._reconnect_task = asyncio.get_running_loop().create_task(self._reconnect())

    async def wait_reconnected(self) -> bool:
        """Wait for a pending reconnection, if any. Returns the connected state."""
        task = self._reconnect_task
        if task is not None and not task.done():
            try:
                await task
            except asyncio.CancelledError:
                pass
        return self._connected

    async def send(self, event_name: str, payload: dict) -> bool:
        """Emit an outbound event on the current connection."""
        if self._disposed or not self._connected or self._client is None:
            logger.debug(f"Dropped '{event_name}': no active connection")
            return False

        try:
            await self._client.emit(event_name, payload)
            return True
        except (socketio_exceptions.SocketIOError, OSError) as e:
            logger.log_error(f"send {event_name}", e)
            return False

    async def _release_client(self):
        """Deregister every handler of the current client and close it."""
        client, self._client = self._client, None
        self._connected = False
        if client is None:
            return

        namespace_handlers = client.handlers.get(DEFAULT_NAMESPACE, {})
        for event_name in INBOUND_EVENTS:
            namespace_handlers.pop(event_name, None)

        try:
            await client.disconnect()
        except Exception as e:
            logger.log_error("disconnect", e)

    async def teardown(self):
        """Close the connection. No callback reaches the sink afterwards."""
        if self._disposed:
            return
        self._disposed = True
        self._sink = None

        task, self._reconnect_task = self._reconnect_task, None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        await self._release_client()
        logger.info("[INFO] Connection closed")
