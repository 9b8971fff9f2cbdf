"""Trailing-edge debouncer for asyncio callbacks."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


class Debouncer:
    """Runs the most recent call after ``delay`` seconds without a newer one.

    A newer ``call`` drops the pending one while it is still waiting out the
    delay. Once a callback has started it runs to completion; callers that
    care about overlapping runs must discard stale results themselves.
    """

    def __init__(self, delay: float, callback: Callable[[str], Awaitable[None]]):
        self._delay = delay
        self._callback = callback
        self._task: asyncio.Task | None = None
        self._running: set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def call(self, value: str) -> None:
        self.cancel()
        self._task = asyncio.create_task(self._fire(value))

    def cancel(self) -> None:
        """Drop the pending call unless its callback is already running."""
        task, self._task = self._task, None
        if task is not None and not task.done() and task not in self._running:
            task.cancel()

    async def flush(self) -> None:
        """Wait for the pending call, if any, to finish."""
        if self._task is not None:
            try:
                await self._task
            except asyncio.CancelledError:
                pass

    async def _fire(self, value: str) -> None:
        await asyncio.sleep(self._delay)
        task = asyncio.current_task()
        self._running.add(task)
        try:
            await self._callback(value)
        except Exception:
            logger.exception("Debounced callback failed")
        finally:
            self._running.discard(task)
