# src/kube_summary_exporter/api/dependencies.py
"""
FastAPI dependency injection functions.

The orchestrator is built once at application startup (it wraps the shared
Kubernetes client) and handed to route handlers through Depends(), so tests
can swap it for one driven by in-memory fakes.
"""

import logging

from fastapi import Request

from ..core.orchestrator import ScrapeOrchestrator

logger = logging.getLogger(__name__)


async def get_orchestrator(request: Request) -> ScrapeOrchestrator:
    """Provides the application's ScrapeOrchestrator."""
    return request.app.state.orchestrator
