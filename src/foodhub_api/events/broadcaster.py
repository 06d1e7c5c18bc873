"""Server-Sent Events broadcaster.

The broadcaster owns the registry of open push connections and fans out
JSON events to every one of them. Log records reach it through
BroadcastLogHandler, an ordinary logging handler that is installed on the
root logger at startup and removed at shutdown.

Delivery is best effort: each connection has a bounded queue, a full queue
drops the event for that connection, and late subscribers get no replay.
"""

import asyncio
import itertools
import json
import logging
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any

from foodhub_api.observability.metrics import record_broadcast, record_connection_change

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 100


def format_event(event: dict[str, Any]) -> str:
    """Frame an event per the text/event-stream convention."""
    return f"data: {json.dumps(event, default=str)}\n\n"


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


class Connection:
    """One open push channel.

    Attributes:
        id: Identifier derived from the creation time (ms) and a sequence number
        queue: Frames waiting to be written to the client
    """

    def __init__(self, connection_id: str, loop: asyncio.AbstractEventLoop, max_queue_size: int) -> None:
        self.id = connection_id
        self.loop = loop
        self.queue: asyncio.Queue[str] = asyncio.Queue(maxsize=max_queue_size)

    def _put(self, frame: str) -> bool:
        try:
            self.queue.put_nowait(frame)
        except asyncio.QueueFull:
            return False
        return True

    def deliver(self, frame: str) -> bool:
        """Queue a frame for this connection.

        Safe to call from any thread; frames from other threads are handed
        to the connection's event loop.

        Returns:
            bool: False if the frame was dropped on the calling thread
        """
        if _running_loop() is self.loop:
            return self._put(frame)

        try:
            self.loop.call_soon_threadsafe(self._put, frame)
        except RuntimeError:
            # Loop already closed: the client is gone
            return False
        return True


class EventBroadcaster:
    """Registry of push connections with fan-out delivery."""

    def __init__(self, max_queue_size: int = DEFAULT_QUEUE_SIZE) -> None:
        """Initialize the broadcaster.

        Args:
            max_queue_size: Frames buffered per connection before dropping
        """
        self.max_queue_size = max_queue_size
        self._connections: dict[str, Connection] = {}
        self._sequence = itertools.count(1)
        self._log_handler: BroadcastLogHandler | None = None

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    def connections(self) -> list[Connection]:
        """Snapshot of the open connections in registration order."""
        return list(self._connections.values())

    def subscribe(self) -> Connection:
        """Register a new connection on the running event loop."""
        connection_id = f"{int(time.time() * 1000)}-{next(self._sequence)}"
        connection = Connection(connection_id, asyncio.get_running_loop(), self.max_queue_size)
        self._connections[connection_id] = connection
        record_connection_change(1)
        logger.info(f"Client {connection_id} connected to event stream")
        return connection

    def unsubscribe(self, connection: Connection) -> None:
        """Remove a connection; unknown connections are ignored."""
        if self._connections.pop(connection.id, None) is not None:
            record_connection_change(-1)
            logger.info(f"Client {connection.id} disconnected from event stream")

    def broadcast(self, event: dict[str, Any]) -> int:
        """Send an event to every open connection, in registration order.

        Args:
            event: JSON-serializable envelope with at least a "type" key

        Returns:
            int: Number of connections the event was queued for
        """
        frame = format_event(event)
        delivered = sum(1 for connection in self.connections() if connection.deliver(frame))
        record_broadcast(str(event.get("type", "unknown")), delivered)
        return delivered

    async def stream(
        self,
        is_disconnected: Callable[[], Awaitable[bool]],
        poll_interval: float = 1.0,
    ) -> AsyncIterator[str]:
        """Register a connection and yield its frames until the client disconnects.

        Registration happens on the first iteration, inside the same scope
        that unsubscribes, so a response that is never iterated leaves no
        connection behind.

        Args:
            is_disconnected: Coroutine function reporting whether the peer left
            poll_interval: Seconds between disconnect checks while idle
        """
        connection = self.subscribe()
        try:
            while not await is_disconnected():
                try:
                    frame = await asyncio.wait_for(connection.queue.get(), timeout=poll_interval)
                except TimeoutError:
                    continue
                yield frame
        finally:
            self.unsubscribe(connection)

    def install(self, target: logging.Logger | None = None, level: int = logging.NOTSET) -> "BroadcastLogHandler":
        """Register the broadcaster as a log sink.

        Args:
            target: Logger to attach to (defaults to the root logger)
            level: Minimum level forwarded to clients

        Returns:
            The installed handler
        """
        if self._log_handler is None:
            self._log_handler = BroadcastLogHandler(self, level=level)
            (target or logging.getLogger()).addHandler(self._log_handler)
        return self._log_handler

    def uninstall(self, target: logging.Logger | None = None) -> None:
        """Remove the log sink installed by install()."""
        if self._log_handler is not None:
            (target or logging.getLogger()).removeHandler(self._log_handler)
            self._log_handler = None


class BroadcastLogHandler(logging.Handler):
    """Logging handler that mirrors records to push connections.

    Records at ERROR and above are sent as {"type": "error"}, everything
    else as {"type": "log"}. The broadcaster's own records are skipped so
    connect/disconnect lines stay out of the stream.
    """

    def __init__(self, broadcaster: EventBroadcaster, level: int = logging.NOTSET) -> None:
        super().__init__(level=level)
        self.broadcaster = broadcaster
        self.addFilter(lambda record: not record.name.startswith(__name__))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = record.getMessage()
            if record.exc_info and record.exc_info[1] is not None:
                message = f"{message} {record.exc_info[1]}"
            event_type = "error" if record.levelno >= logging.ERROR else "log"
            self.broadcaster.broadcast({"type": event_type, "message": message})
        except Exception:
            self.handleError(record)
