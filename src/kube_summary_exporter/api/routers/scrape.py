# src/kube_summary_exporter/api/routers/scrape.py
"""
API routes that scrape kubelet summaries and answer in Prometheus text format.
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST

from ...core.orchestrator import SCRAPE_TIMEOUT_HEADER, ScrapeOrchestrator, parse_scrape_timeout
from ..dependencies import get_orchestrator

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/nodes", response_class=Response)
async def scrape_all_nodes(
    request: Request,
    orchestrator: ScrapeOrchestrator = Depends(get_orchestrator),
):
    """Return the summary metrics of every node in the cluster."""
    body = await orchestrator.scrape(
        timeout=parse_scrape_timeout(request.headers.get(SCRAPE_TIMEOUT_HEADER)),
        is_disconnected=request.is_disconnected,
    )
    return Response(content=body, media_type=CONTENT_TYPE_LATEST)


@router.get("/node/{node_name}", response_class=Response)
async def scrape_node(
    node_name: str,
    request: Request,
    orchestrator: ScrapeOrchestrator = Depends(get_orchestrator),
):
    """Return the summary metrics of a single node."""
    body = await orchestrator.scrape(
        node_name=node_name,
        timeout=parse_scrape_timeout(request.headers.get(SCRAPE_TIMEOUT_HEADER)),
        is_disconnected=request.is_disconnected,
    )
    return Response(content=body, media_type=CONTENT_TYPE_LATEST)
