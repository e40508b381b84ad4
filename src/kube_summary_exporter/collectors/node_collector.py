# src/kube_summary_exporter/collectors/node_collector.py

import asyncio
import logging
from typing import List

import aiohttp
from kubernetes_asyncio import client
from kubernetes_asyncio.client.rest import ApiException

from ..core.exceptions import InventoryUnavailable, NodeNotFound
from .base_collector import NodeInventory

logger = logging.getLogger(__name__)


class NodeCollector(NodeInventory):
    """Lists and looks up nodes through the Kubernetes API server."""

    def __init__(self, api: client.CoreV1Api):
        self._api = api

    async def list_nodes(self) -> List[str]:
        try:
            nodes = await self._api.list_node(watch=False)
        except ApiException as e:
            logger.error(f"Kubernetes API error while listing nodes: {e.reason}")
            raise InventoryUnavailable(f"error enumerating nodes: {e.status} {e.reason}") from e
        except aiohttp.ClientError as e:
            logger.error(f"Could not reach the Kubernetes API while listing nodes: {e}")
            raise InventoryUnavailable(f"error enumerating nodes: {e}") from e
        except asyncio.TimeoutError as e:
            logger.error("Timed out listing nodes from the Kubernetes API.")
            raise InventoryUnavailable("error enumerating nodes: request timed out") from e

        node_names = [node.metadata.name for node in nodes.items or []]
        if not node_names:
            logger.warning("No nodes found in the cluster.")
        logger.debug(f"Listed {len(node_names)} nodes.")
        return node_names

    async def get_node(self, node_name: str) -> str:
        try:
            node = await self._api.read_node(node_name)
        except ApiException as e:
            if e.status == 404:
                logger.warning(f"Requested node '{node_name}' does not exist.")
                raise NodeNotFound(node_name) from e
            logger.error(f"Kubernetes API error while getting node '{node_name}': {e.reason}")
            raise InventoryUnavailable(f"error getting node {node_name}: {e.status} {e.reason}") from e
        except aiohttp.ClientError as e:
            logger.error(f"Could not reach the Kubernetes API while getting node '{node_name}': {e}")
            raise InventoryUnavailable(f"error getting node {node_name}: {e}") from e
        except asyncio.TimeoutError as e:
            logger.error(f"Timed out getting node '{node_name}' from the Kubernetes API.")
            raise InventoryUnavailable(f"error getting node {node_name}: request timed out") from e

        return node.metadata.name
