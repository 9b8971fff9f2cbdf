"""Change notifier — in-process SSE broadcaster for record table changes."""

import asyncio
import json
import logging
from collections.abc import AsyncGenerator
from typing import Any

from eazyliens.domain.entities import RecordChange

logger = logging.getLogger(__name__)

RECORD_CHANGE_EVENT = "record_change"
SUBSCRIBED_EVENT = "subscribed"


def format_sse(event_type: str, data: dict[str, Any]) -> str:
    return f"event: {event_type}\ndata: {json.dumps(data)}\n\n"


class ChangeNotifier:
    """Manages SSE client connections and broadcasts record changes.

    Each connected client gets its own bounded asyncio.Queue. Publishing pushes
    the event to all queues; a client too slow to drain its queue is
    disconnected and is expected to reconnect and re-fetch.
    """

    def __init__(self, queue_size: int = 100) -> None:
        self._queue_size = queue_size
        self._queues: list[asyncio.Queue[str | None]] = []

    async def subscribe(self) -> AsyncGenerator[str, None]:
        """Subscribe to change events. Yields formatted SSE strings.

        The first event is a ``subscribed`` handshake. The generator
        unsubscribes automatically when the client disconnects.
        """
        queue: asyncio.Queue[str | None] = asyncio.Queue(maxsize=self._queue_size)
        self._queues.append(queue)
        logger.debug("Change subscriber connected (%d total)", len(self._queues))
        try:
            yield format_sse(SUBSCRIBED_EVENT, {"subscribers": len(self._queues)})
            while True:
                event = await queue.get()
                if event is None:
                    break
                yield event
        finally:
            if queue in self._queues:
                self._queues.remove(queue)
            logger.debug("Change subscriber disconnected (%d left)", len(self._queues))

    async def publish(self, change: RecordChange) -> None:
        """Broadcast a record change to all connected clients."""
        await self.broadcast(RECORD_CHANGE_EVENT, change.to_dict())

    async def broadcast(self, event_type: str, data: dict[str, Any]) -> None:
        """Broadcast an SSE event to all connected clients."""
        sse_message = format_sse(event_type, data)
        dead_queues: list[asyncio.Queue[str | None]] = []

        for queue in self._queues:
            try:
                queue.put_nowait(sse_message)
            except asyncio.QueueFull:
                dead_queues.append(queue)
                logger.warning("SSE client queue full — disconnecting")

        for q in dead_queues:
            self._queues.remove(q)
            # Make room for the sentinel so the subscriber loop ends
            while not q.empty():
                q.get_nowait()
            q.put_nowait(None)

    async def shutdown(self) -> None:
        """Disconnect all connected clients."""
        for queue in self._queues:
            while not queue.empty():
                queue.get_nowait()
            queue.put_nowait(None)
        self._queues.clear()

    @property
    def client_count(self) -> int:
        return len(self._queues)
