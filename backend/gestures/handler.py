"""
Per-connection gesture stream handling.

Reads framed tokens from one client, maps each to an action and
dispatches it before reading further. Nothing is ever written back.
"""

import asyncio
import logging
import time
import uuid

from config import FRAMING_MODE, MAX_LINE_LENGTH, READ_CHUNK_SIZE
from gestures.framing import LineFramer
from gestures.interpreter import GestureInterpreter
from gestures.models import ConnectionInfo

logger = logging.getLogger(__name__)


class GestureConnectionHandler:
    """Owns one client TCP connection for its whole lifetime."""

    def __init__(
        self,
        interpreter: GestureInterpreter,
        executor,
        framing: str = FRAMING_MODE,
        chunk_size: int = READ_CHUNK_SIZE,
        max_line_length: int = MAX_LINE_LENGTH,
    ) -> None:
        self._interpreter = interpreter
        self._executor = executor
        self._chunk_size = chunk_size
        self._framer = LineFramer(
            max_line_length=max_line_length,
            legacy=(framing == "legacy"),
        )
        self._event_callbacks: list = []  # async fn(event_type, data)
        self._writer: asyncio.StreamWriter | None = None
        self._closing = False
        self.info: ConnectionInfo | None = None

    def on_event(self, callback) -> None:
        """Register callback: async fn(event_type: str, data: dict)."""
        self._event_callbacks.append(callback)

    async def _emit(self, event_type: str, data: dict) -> None:
        for cb in self._event_callbacks:
            try:
                await cb(event_type, data)
            except Exception as e:
                logger.error(f"Event callback error: {e}")

    async def handle(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        """Process tokens until the client closes or the connection fails."""
        self._writer = writer
        peer = writer.get_extra_info("peername")
        peer_address = f"{peer[0]}:{peer[1]}" if peer else "unknown"
        self.info = ConnectionInfo(
            connection_id=str(uuid.uuid4()),
            peer_address=peer_address,
            connected_at=time.time(),
        )
        logger.info(f"Client connected: {peer_address}")
        await self._emit("client_connected", self.info.model_dump())

        try:
            while True:
                try:
                    data = await reader.read(self._chunk_size)
                except (ConnectionError, OSError) as e:
                    logger.info(f"Connection error from {peer_address}: {e}")
                    break

                if not data:
                    if self._closing:
                        # Shut down by us; a half-received token is discarded.
                        break
                    # Client closed; an unterminated final token still counts.
                    for token in self._framer.flush():
                        await self._process_token(token)
                    break

                for token in self._framer.feed(data):
                    await self._process_token(token)
        finally:
            self.info.active = False
            await self.close()
            logger.info(f"Client disconnected: {peer_address}")
            await self._emit("client_disconnected", self.info.model_dump())

    async def _process_token(self, token: str) -> None:
        self.info.tokens_received += 1
        action = self._interpreter.map(token)
        if action is None:
            logger.debug(f"Ignoring unknown gesture token: {token!r}")
            return

        logger.info(f"Received {token!r} -> {action.value}")
        await self._executor.execute(action)
        self.info.actions_dispatched += 1
        await self._emit(
            "gesture_received",
            {
                "connection_id": self.info.connection_id,
                "token": token,
                "action": action.value,
            },
        )

    async def close(self) -> None:
        """Close the underlying connection."""
        self._closing = True
        writer = self._writer
        if writer is None or writer.is_closing():
            return
        writer.close()
        try:
            await writer.wait_closed()
        except (ConnectionError, OSError):
            pass
