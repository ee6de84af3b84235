import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import structlog

logger = structlog.get_logger()


class KeyedDebouncer:
    """Collapse bursts of calls per key into one call after a quiet period.

    Each call for a key restarts that key's timer; only the arguments of the
    last call in a burst reach the callback.
    """

    def __init__(self, delay: float, callback: Callable[..., Awaitable[Any]]) -> None:
        self.delay = delay
        self.callback = callback
        self._pending: dict[str, asyncio.Task] = {}

    def __call__(self, key: str, *args: Any, **kwargs: Any) -> None:
        previous = self._pending.get(key)
        if previous is not None and not previous.done():
            previous.cancel()
        self._pending[key] = asyncio.create_task(self._fire(key, args, kwargs))

    async def _fire(self, key: str, args: tuple, kwargs: dict) -> None:
        await asyncio.sleep(self.delay)
        # Past the sleep, a newer call must not cancel the write in flight
        self._pending.pop(key, None)
        try:
            await self.callback(*args, **kwargs)
        except Exception as e:
            logger.error("Debounced call failed", key=key, error=str(e))

    @property
    def pending(self) -> list[str]:
        return [key for key, task in self._pending.items() if not task.done()]

    async def flush(self) -> None:
        """Wait for every scheduled call to run."""
        while self._pending:
            await asyncio.gather(*self._pending.values(), return_exceptions=True)

    def cancel_all(self) -> None:
        for task in self._pending.values():
            task.cancel()
        self._pending.clear()
