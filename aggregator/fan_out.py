"""
Fan-Out Executor
Resolves a group of structures concurrently and joins the results in input order
"""
import asyncio
from typing import Awaitable, Callable, List, Optional, Sequence, TypeVar
import logging

from core.load_result import LoadResult

from .metrics import DataGroupType, MetricCallbacks


logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class FanOutExecutor:
    """
    Shared execution context for per-group fan-out.

    One task is spawned per item; at most ``max_concurrency`` of them run at
    once across every group sharing the executor. Results come back in the
    order of the items, never in completion order.
    """

    def __init__(self, max_concurrency: Optional[int] = None):
        self.max_concurrency = max_concurrency
        self._semaphore: Optional[asyncio.Semaphore] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    def _limit(self) -> Optional[asyncio.Semaphore]:
        # One semaphore per event loop; an executor may outlive the loop it first ran on.
        if not self.max_concurrency:
            return None
        loop = asyncio.get_running_loop()
        if self._semaphore is None or self._loop is not loop:
            self._semaphore = asyncio.Semaphore(max(1, int(self.max_concurrency)))
            self._loop = loop
        return self._semaphore

    async def run(
        self,
        items: Sequence[T],
        load: Callable[[T], Awaitable[LoadResult[R]]],
        group: DataGroupType,
        metrics: MetricCallbacks,
    ) -> List[LoadResult[R]]:
        """
        Load every item concurrently.

        Args:
            items: ordered items (structure IDs) of one group
            load: coroutine function resolving one item
            group: progress group the items belong to
            metrics: receives one downloaded event per finished item

        Returns:
            One result per item, in item order
        """
        semaphore = self._limit()

        async def _load_one(index: int, item: T) -> LoadResult[R]:
            if semaphore is None:
                result = await load(item)
            else:
                async with semaphore:
                    result = await load(item)
            metrics.report_item_downloaded(group, index)
            return result

        logger.debug(f"Fanning out {len(items)} {group.value} load(s)")
        results = await asyncio.gather(*(_load_one(index, item) for index, item in enumerate(items)))
        return list(results)
