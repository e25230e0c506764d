"""Periodic background refresh with an overlap guard."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class RefreshScheduler:
    """
    Runs an async job every interval_seconds on the running event loop.

    A tick that fires while the previous run is still in flight is skipped
    and counted. stop() cancels the loop and waits for it to finish.
    """

    def __init__(self, job: Callable[[], Awaitable[object]], interval_seconds: float = 30.0):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._job = job
        self._interval = interval_seconds
        self._task: Optional[asyncio.Task] = None
        self._in_flight: set[asyncio.Task] = set()
        self.is_running = False
        self.skipped_ticks = 0
        self.completed_runs = 0

    @property
    def started(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the background loop; a second call is a no-op."""
        if self.started:
            return
        self._task = asyncio.create_task(self._loop(), name="quote-refresh")
        logger.info("Price refresh scheduled every %.0fs", self._interval)

    async def stop(self) -> None:
        """Cancel the loop and any in-flight run, and wait for both."""
        tasks = [t for t in (self._task, *self._in_flight) if t is not None and not t.done()]
        self._task = None
        for task in tasks:
            task.cancel()
        for task in tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._in_flight.clear()
        self.is_running = False

    async def tick(self) -> bool:
        """Run the job once unless a run is already in flight. Returns True if it ran."""
        if self.is_running:
            self.skipped_ticks += 1
            logger.debug("Refresh still running, skipping tick")
            return False
        self.is_running = True
        try:
            await self._job()
            self.completed_runs += 1
        except Exception:
            logger.exception("Scheduled refresh failed")
        finally:
            self.is_running = False
        return True

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            # Ticks are fired without awaiting so a slow job shows up as skips
            task = asyncio.create_task(self.tick())
            self._in_flight.add(task)
            task.add_done_callback(self._in_flight.discard)
