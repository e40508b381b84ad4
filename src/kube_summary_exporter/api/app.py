# src/kube_summary_exporter/api/app.py
"""
FastAPI application factory for the kube-summary-exporter.

Uses the factory pattern so the app can be created with or without
lifespan management (tests skip Kubernetes client creation and install
their own orchestrator instead).
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from .. import __version__
from ..collectors.node_collector import NodeCollector
from ..collectors.summary_collector import SummaryCollector
from ..core.config import config
from ..core.exceptions import ScrapeError
from ..core.k8s_client import get_core_v1_api
from ..core.orchestrator import ScrapeOrchestrator
from ..core.selector import NodeSelector
from .routers import meta, scrape

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the shared Kubernetes client on startup and close it on shutdown."""
    logger.info(f"Starting kube-summary-exporter {__version__}...")
    api = await get_core_v1_api(config.KUBECONFIG_PATH or None)
    selector = NodeSelector(
        inventory=NodeCollector(api),
        stats_source=SummaryCollector(api),
        max_concurrency=config.MAX_CONCURRENT_FETCHES,
    )
    app.state.orchestrator = ScrapeOrchestrator(selector, disconnect_poll_interval=config.DISCONNECT_POLL_INTERVAL)
    logger.info("Kubernetes client ready.")
    yield
    logger.info("Shutting down kube-summary-exporter...")
    await api.api_client.close()
    logger.info("Kubernetes client closed.")


async def scrape_error_handler(request: Request, exc: ScrapeError) -> PlainTextResponse:
    """Turn any failed scrape into a plain-text 500, as Prometheus expects from a failing target."""
    return PlainTextResponse(f"Error collecting node stats: {exc}", status_code=500)


def create_app(use_lifespan: bool = False, orchestrator: Optional[ScrapeOrchestrator] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        use_lifespan: If True, attach the lifespan handler that creates the
                      Kubernetes client. Set to False for testing.
        orchestrator: Orchestrator to serve scrapes with when the lifespan
                      handler is not used.

    Returns:
        A configured FastAPI application instance.
    """
    app = FastAPI(
        title="Kube Summary Exporter",
        description="Exports kubelet /stats/summary filesystem usage as Prometheus metrics.",
        version=__version__,
        lifespan=lifespan if use_lifespan else None,
    )
    if orchestrator is not None:
        app.state.orchestrator = orchestrator

    app.add_exception_handler(ScrapeError, scrape_error_handler)

    app.include_router(scrape.router, tags=["Scrape"])
    app.include_router(meta.router, tags=["Exporter"])

    return app


def run_server() -> None:
    """Serve the exporter with uvicorn on the configured listen address until interrupted."""
    host, port = config.LISTEN_HOST, config.LISTEN_PORT
    app = create_app(use_lifespan=True)
    logger.info(f"Listening on {host}:{port}")
    level = logging.getLevelNamesMapping()[config.LOG_LEVEL.upper()]
    uvicorn.run(app, host=host, port=port, log_level=level)
