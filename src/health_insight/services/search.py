"""Debounced food search."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from health_insight.domain.nutrition import FoodProduct

SearchFunc = Callable[[str], Awaitable[list[FoodProduct]]]


@dataclass
class DebouncedSearch:
    """Run only the most recent query after a quiet period.

    A new ``submit`` cancels whatever search is still pending; the cancelled
    caller gets ``None`` so it knows its results were superseded.
    """

    search: SearchFunc
    delay_seconds: float = 0.45
    _pending: asyncio.Task[list[FoodProduct]] | None = field(
        default=None, init=False, repr=False
    )

    async def submit(self, query: str) -> list[FoodProduct] | None:
        """Schedule a search and wait for its results."""
        self.cancel()
        if not query.strip():
            return []
        task = asyncio.create_task(self._run(query))
        self._pending = task
        try:
            await asyncio.wait({task})
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            if self._pending is task:
                self._pending = None
        if task.cancelled():
            return None
        return task.result()

    def cancel(self) -> None:
        """Cancel the pending search, if any."""
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    async def _run(self, query: str) -> list[FoodProduct]:
        await asyncio.sleep(self.delay_seconds)
        return await self.search(query)
