"""Realtime reconciliation — re-fetch the grid whenever the record table changes.

Holds one subscription to the API's change stream. Change events are
handed to ``on_change`` without waiting for it; a dropped or failed stream
is retried after a fixed delay until ``stop()`` is called.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import Enum

from eazyliens.application.services.change_notifier import RECORD_CHANGE_EVENT, SUBSCRIBED_EVENT
from eazyliens.client.api_client import EazyLiensApiClient
from eazyliens.domain.entities import RecordChange
from eazyliens.domain.exceptions import RemoteOperationError

logger = logging.getLogger(__name__)


class ListenerState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    SUBSCRIBED = "subscribed"
    RECONNECT_PENDING = "reconnect_pending"
    TORN_DOWN = "torn_down"


class RealtimeListener:
    def __init__(
        self,
        api: EazyLiensApiClient,
        on_change: Callable[[RecordChange], Awaitable[None]],
        reconnect_delay: float = 5.0,
    ):
        self._api = api
        self._on_change = on_change
        self._reconnect_delay = reconnect_delay
        self._task: asyncio.Task | None = None
        self._callbacks: set[asyncio.Task] = set()
        self.state = ListenerState.DISCONNECTED
        self.reconnect_attempts = 0

    def start(self) -> None:
        if self._task is not None or self.state == ListenerState.TORN_DOWN:
            return
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Unsubscribe and cancel any pending reconnect. The listener cannot be restarted."""
        self.state = ListenerState.TORN_DOWN
        tasks = list(self._callbacks)
        if self._task is not None:
            tasks.append(self._task)
            self._task = None
        for task in tasks:
            task.cancel()
        for task in tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass
            except Exception:
                logger.exception("Realtime task failed during shutdown")
        self._callbacks.clear()
        logger.debug("Realtime listener torn down")

    async def _run(self) -> None:
        while self.state != ListenerState.TORN_DOWN:
            self.state = ListenerState.CONNECTING
            try:
                async for event in self._api.stream_changes():
                    if event.event == SUBSCRIBED_EVENT:
                        self.state = ListenerState.SUBSCRIBED
                        self.reconnect_attempts = 0
                        logger.info("Subscribed to record changes")
                    elif event.event == RECORD_CHANGE_EVENT:
                        self._dispatch(event.data)
                logger.warning("Record change stream ended")
            except RemoteOperationError as e:
                logger.warning("Record change stream failed: %s", e)

            self.state = ListenerState.RECONNECT_PENDING
            self.reconnect_attempts += 1
            logger.info(
                "Reconnecting to record changes in %.1fs (attempt %d)",
                self._reconnect_delay,
                self.reconnect_attempts,
            )
            await asyncio.sleep(self._reconnect_delay)

    def _dispatch(self, data: dict) -> None:
        try:
            change = RecordChange.from_dict(data)
        except (KeyError, ValueError):
            logger.warning("Ignoring malformed change event: %r", data)
            return
        logger.debug("Record change: %s %s", change.action.value, change.record_id)
        task = asyncio.create_task(self._on_change(change))
        self._callbacks.add(task)
        task.add_done_callback(self._callback_done)

    def _callback_done(self, task: asyncio.Task) -> None:
        self._callbacks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Change handler failed: %s", task.exception())
