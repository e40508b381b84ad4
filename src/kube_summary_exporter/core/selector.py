# src/kube_summary_exporter/core/selector.py
"""
Resolves a scrape target into the per-node summaries to flatten.

Selection is all-or-nothing: the first failing node fails the whole
selection and cancels every fetch still in flight.
"""

import asyncio
import logging
from typing import List, Optional, Sequence

from ..collectors.base_collector import NodeInventory, StatsSource
from ..models.summary import PerNodeResult

logger = logging.getLogger(__name__)


class NodeSelector:
    """
    Selects nodes through a NodeInventory and fetches their summaries from a StatsSource.
    """

    def __init__(self, inventory: NodeInventory, stats_source: StatsSource, max_concurrency: int = 10):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self._inventory = inventory
        self._stats_source = stats_source
        self._max_concurrency = max_concurrency

    async def resolve_nodes(self, node_name: Optional[str] = None) -> List[str]:
        """
        Returns the nodes a scrape targets: every node of the cluster when
        `node_name` is None, otherwise just the named node once its existence is confirmed.
        """
        if node_name is None:
            return await self._inventory.list_nodes()
        return [await self._inventory.get_node(node_name)]

    async def collect_node_stats(self, node_names: Sequence[str]) -> List[PerNodeResult]:
        """
        Fetches the summaries of `node_names` in parallel.

        Returns:
            List[PerNodeResult]: One result per node, in the order of `node_names`.

        Raises:
            ScrapeError: The first failure among the fetches. The remaining fetches are cancelled.
        """
        if not node_names:
            return []

        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def fetch(node_name: str) -> PerNodeResult:
            async with semaphore:
                summary = await self._stats_source.fetch_summary(node_name)
            return PerNodeResult(node_name=node_name, summary=summary)

        tasks = [asyncio.create_task(fetch(name), name=f"fetch-summary-{name}") for name in node_names]
        try:
            done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
            failed = [task for task in tasks if task in done and not task.cancelled() and task.exception() is not None]
            if failed:
                error = failed[0].exception()
                logger.warning(f"Fetching node stats failed for {len(failed)} of {len(tasks)} nodes: {error}")
                raise error
        finally:
            pending = [task for task in tasks if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        return [task.result() for task in tasks]
