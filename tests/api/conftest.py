# tests/api/conftest.py
"""
Shared fixtures for API tests.
Uses FastAPI's TestClient with dependency overrides to inject an orchestrator
backed by in-memory fakes instead of a live cluster.
"""

import pytest
from factories import FakeInventory, FakeStatsSource
from fastapi.testclient import TestClient

from kube_summary_exporter.api.app import create_app
from kube_summary_exporter.api.dependencies import get_orchestrator
from kube_summary_exporter.core.orchestrator import ScrapeOrchestrator
from kube_summary_exporter.core.selector import NodeSelector


@pytest.fixture
def stats_source(sample_summaries):
    """Returns a FakeStatsSource serving the sample summaries."""
    return FakeStatsSource(sample_summaries)


@pytest.fixture
def inventory(sample_summaries):
    """Returns a FakeInventory listing the sample nodes."""
    return FakeInventory(list(sample_summaries))


@pytest.fixture
def client(inventory, stats_source):
    """Creates a TestClient with the orchestrator dependency overridden."""
    orchestrator = ScrapeOrchestrator(NodeSelector(inventory, stats_source), disconnect_poll_interval=0.01)
    app = create_app()
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
