"""
WebSocket feed of gesture-stream events.

Each subscriber gets its own bounded queue and sender task, so publishing
from a gesture handler never waits on a WebSocket. A subscriber that falls
behind loses events; one that stops reading is dropped after a send timeout.
"""

import asyncio
import logging
import time
from typing import Literal

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import BaseModel

from config import EVENT_QUEUE_SIZE, EVENT_SEND_TIMEOUT

logger = logging.getLogger(__name__)

EventType = Literal["client_connected", "gesture_received", "client_disconnected"]


class StreamEvent(BaseModel):
    """One event as sent to subscribers."""
    event: EventType
    connection_id: str
    timestamp: float
    data: dict


class EventSubscriber:
    """A WebSocket client, optionally watching a single gesture connection."""

    def __init__(
        self,
        websocket: WebSocket,
        connection_id: str | None = None,
        queue_size: int = EVENT_QUEUE_SIZE,
    ) -> None:
        self.websocket = websocket
        self.connection_id = connection_id
        self.queue: asyncio.Queue[StreamEvent] = asyncio.Queue(maxsize=queue_size)
        self.dropped_events = 0

    def wants(self, event: StreamEvent) -> bool:
        return self.connection_id is None or event.connection_id == self.connection_id

    def offer(self, event: StreamEvent) -> None:
        try:
            self.queue.put_nowait(event)
        except asyncio.QueueFull:
            self.dropped_events += 1

    async def pump(self, send_timeout: float) -> None:
        while True:
            event = await self.queue.get()
            await asyncio.wait_for(
                self.websocket.send_text(event.model_dump_json()), send_timeout
            )


class EventFeed:
    """Fans gesture-server events out to WebSocket subscribers."""

    def __init__(
        self,
        queue_size: int = EVENT_QUEUE_SIZE,
        send_timeout: float = EVENT_SEND_TIMEOUT,
    ) -> None:
        self._queue_size = queue_size
        self._send_timeout = send_timeout
        self._subscribers: set[EventSubscriber] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    async def handle_event(self, event_type: str, data: dict) -> None:
        """Event handler compatible with GestureServer.on_event(); never blocks."""
        event = StreamEvent(
            event=event_type,
            connection_id=data.get("connection_id", ""),
            timestamp=time.time(),
            data=data,
        )
        for subscriber in list(self._subscribers):
            if subscriber.wants(event):
                subscriber.offer(event)

    async def serve(self, websocket: WebSocket, connection_id: str | None = None) -> None:
        """Stream events to `websocket` until it disconnects or stalls."""
        await websocket.accept()
        subscriber = EventSubscriber(websocket, connection_id, self._queue_size)
        self._subscribers.add(subscriber)
        logger.info(
            f"Event subscriber connected"
            f"{f' for {connection_id}' if connection_id else ''}. "
            f"Total: {len(self._subscribers)}"
        )

        sender = asyncio.create_task(subscriber.pump(self._send_timeout))
        receiver = asyncio.create_task(self._receive_until_closed(websocket))
        try:
            done, pending = await asyncio.wait(
                {sender, receiver}, return_when=asyncio.FIRST_COMPLETED
            )
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

            for task in done:
                exc = task.exception()
                if isinstance(exc, asyncio.TimeoutError):
                    logger.warning("Dropping event subscriber that stopped reading")
                elif exc is not None and not isinstance(exc, WebSocketDisconnect):
                    logger.debug(f"Event subscriber closed: {exc}")
        finally:
            self._subscribers.discard(subscriber)
            if subscriber.dropped_events:
                logger.info(f"Subscriber missed {subscriber.dropped_events} events")
            logger.info(f"Event subscriber disconnected. Total: {len(self._subscribers)}")

    @staticmethod
    async def _receive_until_closed(websocket: WebSocket) -> None:
        # Subscribers never send anything meaningful; this only detects disconnects.
        while True:
            await websocket.receive_text()
