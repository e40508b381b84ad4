# src/kube_summary_exporter/api/routers/meta.py
"""
API routes about the exporter itself: the index page and its own metrics.
"""

from fastapi import APIRouter
from fastapi.responses import HTMLResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST

from ...core.telemetry import render_process_metrics

router = APIRouter()

INDEX_HTML = """<html>
    <head><title>Kube Summary Exporter</title></head>
    <body>
        <h1>Kube Summary Exporter</h1>
        <p><a href="/nodes">Retrieve metrics for all nodes</a></p>
        <p><a href="/node/example-node">Retrieve metrics for 'example-node'</a></p>
        <p><a href="/metrics">Metrics</a></p>
    </body>
</html>"""


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def index():
    """Serve the static landing page."""
    return INDEX_HTML


@router.get("/metrics", response_class=Response)
async def exporter_metrics():
    """Expose the exporter's own process and scrape metrics."""
    return Response(content=render_process_metrics(), media_type=CONTENT_TYPE_LATEST)
