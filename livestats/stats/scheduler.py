"""
Refresh Scheduler - periodic aggregation cycles.
"""

import asyncio
import inspect
from typing import Any, Awaitable, Callable

from ..core.logger import get_logger
from ..core.models import AggregatedStats
from .aggregator import StatsAggregator

logger = get_logger(__name__)

StatsCallback = Callable[[AggregatedStats], Any]


class RefreshScheduler:
    """
    Drives StatsAggregator.fetch_all_stats on a fixed interval.

    Each subscription runs as its own asyncio task: one immediate cycle,
    then one cycle per interval until cancelled. A cycle completes before
    the next sleep starts, so cycles of one subscription never overlap.
    """

    def __init__(
        self,
        aggregator: StatsAggregator,
        interval: float | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep
    ):
        """
        Initialize scheduler.

        Args:
            aggregator: Aggregator to drive
            interval: Seconds between cycles (settings.update_interval by default)
            sleep: Awaitable sleep, replaceable in tests
        """
        self.aggregator = aggregator
        self.interval = interval if interval is not None else aggregator.settings.update_interval
        self._sleep = sleep
        self._tasks: set[asyncio.Task] = set()

    @property
    def running(self) -> int:
        """Number of live subscriptions."""
        return sum(1 for t in self._tasks if not t.done())

    async def _notify(self, on_update: StatsCallback, stats: AggregatedStats) -> None:
        try:
            result = on_update(stats)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("Stats update callback failed")

    async def _run(self, on_update: StatsCallback) -> None:
        while True:
            stats = await self.aggregator.fetch_all_stats()
            await self._notify(on_update, stats)
            await self._sleep(self.interval)

    def start_auto_update(self, on_update: StatsCallback) -> Callable[[], None]:
        """
        Start periodic updates. Must be called from a running event loop.

        Args:
            on_update: Called (or awaited) with every new snapshot

        Returns:
            Cancel handle; calling it stops further updates
        """
        task = asyncio.get_running_loop().create_task(self._run(on_update))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.info(f"Auto-update started (every {self.interval:g}s)")

        def cancel() -> None:
            if not task.done():
                task.cancel()
                logger.info("Auto-update cancelled")

        return cancel

    async def stop_all(self) -> None:
        """Cancel every subscription and wait for them to finish."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
