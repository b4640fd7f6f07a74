"""
TCP gesture server.

Accepts trackpad client connections and runs one isolated
GestureConnectionHandler per connection, up to a configured limit.
"""

import asyncio
import logging

from config import FRAMING_MODE, MAX_CONNECTIONS, MAX_LINE_LENGTH, READ_CHUNK_SIZE, TCP_PORT
from gestures.handler import GestureConnectionHandler
from gestures.interpreter import GestureInterpreter
from gestures.models import ConnectionInfo

logger = logging.getLogger(__name__)


class GestureServer:
    """Accept loop for gesture-stream connections."""

    def __init__(
        self,
        executor,
        interpreter: GestureInterpreter | None = None,
        host: str = "0.0.0.0",
        port: int = TCP_PORT,
        max_connections: int = MAX_CONNECTIONS,
        framing: str = FRAMING_MODE,
        chunk_size: int = READ_CHUNK_SIZE,
        max_line_length: int = MAX_LINE_LENGTH,
    ) -> None:
        self._executor = executor
        self._interpreter = interpreter or GestureInterpreter()
        self._host = host
        self._port = port
        self._max_connections = max_connections
        self._framing = framing
        self._chunk_size = chunk_size
        self._max_line_length = max_line_length
        self._server: asyncio.Server | None = None
        self._handlers: set[GestureConnectionHandler] = set()
        self._tasks: set[asyncio.Task] = set()
        self._event_callbacks: list = []  # async fn(event_type, data)
        self.rejected_count = 0

    @property
    def port(self) -> int:
        """The bound port; differs from the configured one when that was 0."""
        if self._server and self._server.sockets:
            return self._server.sockets[0].getsockname()[1]
        return self._port

    @property
    def max_connections(self) -> int:
        return self._max_connections

    def on_event(self, callback) -> None:
        """Register callback: async fn(event_type: str, data: dict)."""
        self._event_callbacks.append(callback)

    def connections(self) -> list[ConnectionInfo]:
        """Snapshot of the currently active connections."""
        return [h.info.model_copy() for h in self._handlers if h.info is not None]

    async def start(self) -> None:
        """Bind the listener. Raises OSError if the port is unavailable."""
        self._server = await asyncio.start_server(
            self._handle_incoming_connection,
            self._host,
            self._port,
        )
        logger.info(f"Gesture server listening on {self._host}:{self.port}")

    async def stop(self) -> None:
        """Stop accepting and close every active connection."""
        if self._server:
            self._server.close()

        for handler in list(self._handlers):
            await handler.close()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

        if self._server:
            await self._server.wait_closed()
            self._server = None

        logger.info("Gesture server stopped")

    async def _handle_incoming_connection(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        """Handle a new incoming TCP connection."""
        if len(self._handlers) >= self._max_connections:
            peer = writer.get_extra_info("peername")
            logger.warning(
                f"Rejecting connection from {peer}: "
                f"limit of {self._max_connections} connections reached"
            )
            self.rejected_count += 1
            writer.close()
            try:
                await writer.wait_closed()
            except (ConnectionError, OSError):
                pass
            return

        handler = GestureConnectionHandler(
            interpreter=self._interpreter,
            executor=self._executor,
            framing=self._framing,
            chunk_size=self._chunk_size,
            max_line_length=self._max_line_length,
        )
        for cb in self._event_callbacks:
            handler.on_event(cb)

        task = asyncio.current_task()
        self._handlers.add(handler)
        if task is not None:
            self._tasks.add(task)
        try:
            await handler.handle(reader, writer)
        except Exception as e:
            logger.error(f"Gesture handler failed: {e}", exc_info=True)
        finally:
            self._handlers.discard(handler)
            if task is not None:
                self._tasks.discard(task)
