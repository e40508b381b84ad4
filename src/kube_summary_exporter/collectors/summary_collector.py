# src/kube_summary_exporter/collectors/summary_collector.py
"""
Fetches kubelet /stats/summary responses through the API server's node proxy
(GET /api/v1/nodes/{node}/proxy/stats/summary).
"""

import asyncio
import logging

import aiohttp
from kubernetes_asyncio import client
from kubernetes_asyncio.client.rest import ApiException
from pydantic import ValidationError

from ..core.exceptions import StatsFetchFailed
from ..models.summary import Summary
from .base_collector import StatsSource

logger = logging.getLogger(__name__)

SUMMARY_PATH = "stats/summary"


class SummaryCollector(StatsSource):
    """
    Reads one node's summary per call. The underlying CoreV1Api is shared
    between concurrent scrapes; this class keeps no per-call state.
    """

    def __init__(self, api: client.CoreV1Api):
        self._api = api

    async def fetch_summary(self, node_name: str) -> Summary:
        logger.debug(f"Querying /{SUMMARY_PATH} for node '{node_name}'...")
        try:
            # The generated client would coerce the JSON body into a str; read the raw bytes instead.
            response = await self._api.connect_get_node_proxy_with_path(
                node_name, SUMMARY_PATH, _preload_content=False
            )
            try:
                body = await response.read()
                status = response.status
            finally:
                response.release()
        except ApiException as e:
            raise StatsFetchFailed(
                node_name, f"error querying /{SUMMARY_PATH} for {node_name}: {e.status} {e.reason}"
            ) from e
        except aiohttp.ClientError as e:
            raise StatsFetchFailed(node_name, f"error querying /{SUMMARY_PATH} for {node_name}: {e}") from e
        except asyncio.TimeoutError as e:
            raise StatsFetchFailed(node_name, f"error querying /{SUMMARY_PATH} for {node_name}: request timed out") from e

        if not 200 <= status <= 299:
            raise StatsFetchFailed(
                node_name,
                f"error querying /{SUMMARY_PATH} for {node_name}: HTTP {status}: "
                f"{body[:200].decode('utf-8', errors='replace')}",
            )

        try:
            summary = Summary.model_validate_json(body)
        except ValidationError as e:
            raise StatsFetchFailed(
                node_name,
                f"error unmarshaling /{SUMMARY_PATH} response for {node_name}: {e.error_count()} invalid fields",
            ) from e

        logger.debug(f"Fetched summary for node '{node_name}' with {len(summary.pods)} pods.")
        return summary
