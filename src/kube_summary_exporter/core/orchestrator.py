# src/kube_summary_exporter/core/orchestrator.py
"""
Runs one scrape request end to end:

    received -> resolving-nodes -> fetching-summaries -> flattening -> rendering -> responded
    received -> ... -> failed   (any error before rendering)

Node resolution and summary fetches are bounded by the scraper's timeout hint
and cancelled when the scraper disconnects. Flattening and rendering only
start once every fetch of the request has completed, and work on a registry
that belongs to this request alone.
"""

import asyncio
import logging
import math
import time
from enum import Enum
from typing import Awaitable, Callable, Coroutine, List, Optional

from prometheus_client import generate_latest

from ..models.summary import PerNodeResult
from .exceptions import DeadlineExceeded, ScrapeCancelled, ScrapeError
from .flattener import collect_summary_metrics
from .registry import ScrapeRegistry
from .selector import NodeSelector
from .telemetry import record_scrape

logger = logging.getLogger(__name__)

SCRAPE_TIMEOUT_HEADER = "X-Prometheus-Scrape-Timeout-Seconds"


class ScrapeState(str, Enum):
    RECEIVED = "received"
    RESOLVING_NODES = "resolving-nodes"
    FETCHING_SUMMARIES = "fetching-summaries"
    FLATTENING = "flattening"
    RENDERING = "rendering"
    RESPONDED = "responded"
    FAILED = "failed"


def parse_scrape_timeout(value: Optional[str]) -> Optional[float]:
    """
    Parses the scraper's timeout hint in seconds.

    Returns None (no deadline) when the header is absent, not a number, or not finite.
    """
    if not value:
        return None
    try:
        seconds = float(value)
    except ValueError:
        logger.debug(f"Ignoring unparseable {SCRAPE_TIMEOUT_HEADER} header: {value!r}")
        return None
    if not math.isfinite(seconds):
        return None
    return seconds


class Scrape:
    """State of a single scrape request."""

    def __init__(self, node_name: Optional[str] = None):
        self.node_name = node_name
        self.target = "node" if node_name is not None else "nodes"
        self.state = ScrapeState.RECEIVED
        self.node_count = 0
        self.series_count = 0
        self.started_at = time.monotonic()

    def advance(self, state: ScrapeState) -> None:
        logger.debug(f"Scrape of {self.describe()}: {self.state.value} -> {state.value}")
        self.state = state

    def describe(self) -> str:
        return f"node '{self.node_name}'" if self.node_name is not None else "all nodes"

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.started_at


class ScrapeOrchestrator:
    """
    Ties node selection, flattening and rendering together for each request.
    Keeps no state between requests; the selector's clients are shared read-only.
    """

    def __init__(self, selector: NodeSelector, disconnect_poll_interval: float = 0.5):
        self._selector = selector
        self._poll_interval = disconnect_poll_interval

    async def scrape(
        self,
        node_name: Optional[str] = None,
        timeout: Optional[float] = None,
        is_disconnected: Optional[Callable[[], Awaitable[bool]]] = None,
    ) -> bytes:
        """
        Scrapes every node (node_name is None) or one named node and returns the
        rendered Prometheus text exposition.

        Raises:
            ScrapeError: If resolving the nodes or fetching any summary fails, the
                deadline expires, or the scraper disconnects. Nothing is rendered then.
        """
        scrape = Scrape(node_name)
        try:
            results = await self._run_bounded(self._resolve_and_fetch(scrape), timeout, is_disconnected)

            scrape.advance(ScrapeState.FLATTENING)
            registry = ScrapeRegistry()
            collect_summary_metrics(results, registry)
            scrape.series_count = registry.series_count()
        except ScrapeError as e:
            self._fail(scrape, e)
            raise
        except Exception as e:
            logger.exception(f"Unexpected error while scraping {scrape.describe()}")
            error = ScrapeError(f"unexpected error: {e}")
            self._fail(scrape, error)
            raise error from e

        scrape.advance(ScrapeState.RENDERING)
        body = generate_latest(registry)
        scrape.advance(ScrapeState.RESPONDED)

        record_scrape(scrape.target, "success", scrape.elapsed, scrape.node_count)
        logger.info(
            f"Scraped {scrape.describe()}: {scrape.node_count} nodes, "
            f"{scrape.series_count} series in {scrape.elapsed:.3f}s."
        )
        return body

    async def _resolve_and_fetch(self, scrape: Scrape) -> List[PerNodeResult]:
        scrape.advance(ScrapeState.RESOLVING_NODES)
        node_names = await self._selector.resolve_nodes(scrape.node_name)
        scrape.node_count = len(node_names)

        scrape.advance(ScrapeState.FETCHING_SUMMARIES)
        return await self._selector.collect_node_stats(node_names)

    async def _run_bounded(
        self,
        coro: Coroutine,
        timeout: Optional[float],
        is_disconnected: Optional[Callable[[], Awaitable[bool]]],
    ):
        """Awaits `coro` under the scrape deadline, cancelling it if the scraper goes away."""
        work = asyncio.create_task(coro)
        watcher = None
        if is_disconnected is not None:
            watcher = asyncio.create_task(self._watch_disconnect(work, is_disconnected))
        deadline = asyncio.timeout(timeout)
        try:
            async with deadline:
                return await work
        except TimeoutError as e:
            if not deadline.expired():
                raise
            raise DeadlineExceeded(f"scrape deadline of {timeout:g}s exceeded") from e
        except asyncio.CancelledError:
            if watcher is not None and watcher.done() and not watcher.cancelled() and watcher.result():
                raise ScrapeCancelled("scraper disconnected before the scrape completed") from None
            raise
        finally:
            if watcher is not None:
                watcher.cancel()
            if not work.done():
                work.cancel()

    async def _watch_disconnect(self, work: asyncio.Task, is_disconnected: Callable[[], Awaitable[bool]]) -> bool:
        while not work.done():
            if await is_disconnected():
                logger.info("Scraper disconnected; cancelling in-flight node requests.")
                work.cancel()
                return True
            await asyncio.sleep(self._poll_interval)
        return False

    @staticmethod
    def _fail(scrape: Scrape, error: ScrapeError) -> None:
        scrape.advance(ScrapeState.FAILED)
        record_scrape(scrape.target, type(error).__name__, scrape.elapsed)
        logger.error(f"Scrape of {scrape.describe()} failed after {scrape.elapsed:.3f}s: {error}")
