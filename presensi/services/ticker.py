import asyncio
import inspect
import logging
from typing import Callable, Optional

from presensi.config import settings
from presensi.utils.datetime_utils import utc_now

logger = logging.getLogger(__name__)


class Ticker:
    """
    Periodic callback owned by a single consumer.

    `start()` returns a disposer that cancels the subscription; using the
    ticker as an async context manager disposes it on exit. It never runs
    longer than its owner.
    """

    def __init__(self, interval: Optional[float] = None):
        self.interval = interval if interval is not None else settings.CLOCK_TICK_SECONDS
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, callback: Callable) -> Callable[[], None]:
        """Call `callback(now)` every interval; returns the disposer."""
        if self.running:
            raise RuntimeError("Ticker is already running")

        self._task = asyncio.get_running_loop().create_task(self._run(callback))
        return self.stop

    async def _run(self, callback: Callable):
        while True:
            try:
                result = callback(utc_now())
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.warning(f"Ticker callback failed, stopping: {e}")
                return
            await asyncio.sleep(self.interval)

    def stop(self):
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.stop()
