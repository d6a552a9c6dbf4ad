import asyncio
from typing import Any, Callable, Optional

import structlog

logger = structlog.get_logger()


class ScheduledCall:
    """Cancel token for a callback registered with AsyncioScheduler."""
    def __init__(self, handle: asyncio.TimerHandle):
        self._handle = handle

    @property
    def cancelled(self) -> bool:
        return self._handle.cancelled()

    def cancel(self) -> None:
        self._handle.cancel()


class AsyncioScheduler:
    """
    IScheduler backed by loop.call_later.
    """
    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def schedule_after(self, delay_ms: int, callback: Callable[[], Any]) -> ScheduledCall:
        loop = self._loop or asyncio.get_running_loop()
        handle = loop.call_later(delay_ms / 1000.0, self._run, callback)
        return ScheduledCall(handle)

    @staticmethod
    def _run(callback: Callable[[], Any]) -> None:
        try:
            callback()
        except Exception as e:
            logger.error("scheduled_callback_failed", error=str(e), exc_info=True)
