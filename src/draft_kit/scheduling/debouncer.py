import asyncio
import inspect
import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)


class Debouncer:
    """Single-slot cancellable timer on the running event loop.

    Each `trigger()` cancels the pending timer and starts a new one, so a
    burst of triggers runs the callback once, `delay` seconds after the last
    trigger. Once the timer fires the callback is detached from the slot: a
    later trigger starts a new timer and never cancels a callback that is
    already running.

    The callback may be a plain function or a coroutine function.
    """

    def __init__(
        self,
        delay: float,
        callback: Callable[[], Any],
        *,
        name: str = "debounce",
    ) -> None:
        if delay < 0:
            raise ValueError("delay must be >= 0")
        self.delay = delay
        self.name = name
        self._callback = callback
        self._timer: asyncio.Task[None] | None = None
        self._running: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def trigger(self) -> None:
        """(Re)start the timer. Must be called from inside the event loop."""
        if self.pending:
            logger.debug("Restarting %s timer", self.name)
        self.cancel()
        self._timer = asyncio.get_running_loop().create_task(self._wait_and_fire())

    def cancel(self) -> bool:
        """Drop the pending timer. Returns whether one was pending."""
        timer, self._timer = self._timer, None
        if timer is None or timer.done():
            return False
        timer.cancel()
        return True

    async def flush(self) -> bool:
        """Run the callback now if a timer was pending."""
        if not self.cancel():
            return False
        await self._invoke()
        return True

    async def _wait_and_fire(self) -> None:
        await asyncio.sleep(self.delay)

        # Detach so that a trigger during the callback cannot cancel it
        task = asyncio.current_task()
        self._timer = None
        if task is not None:
            self._running.add(task)
            task.add_done_callback(self._on_done)
        await self._invoke()

    async def _invoke(self) -> None:
        if inspect.iscoroutinefunction(self._callback):
            await self._callback()
        else:
            result = self._callback()
            if inspect.isawaitable(result):
                await result

    def _on_done(self, task: asyncio.Task[None]) -> None:
        self._running.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("%s callback failed", self.name, exc_info=exc)
