# src/kube_summary_exporter/collectors/base_collector.py
"""
This module defines the abstract interfaces the scrape pipeline consumes.
Keeping the Kubernetes calls behind them lets the node selector be driven by
any inventory or stats source, including in-memory fakes in tests.
"""

from abc import ABC, abstractmethod
from typing import List

from ..models.summary import Summary


class NodeInventory(ABC):
    """
    Abstract Base Class for cluster node lookups.
    """

    @abstractmethod
    async def list_nodes(self) -> List[str]:
        """
        Returns the names of every node known to the cluster.

        Raises:
            InventoryUnavailable: If the nodes cannot be listed.
        """
        pass

    @abstractmethod
    async def get_node(self, node_name: str) -> str:
        """
        Returns the name of the node after confirming that it exists.

        Raises:
            NodeNotFound: If no such node exists.
            InventoryUnavailable: If the lookup fails for any other reason.
        """
        pass


class StatsSource(ABC):
    """
    Abstract Base Class for per-node summary fetches.
    """

    @abstractmethod
    async def fetch_summary(self, node_name: str) -> Summary:
        """
        Fetches and parses the /stats/summary of one node.

        Raises:
            StatsFetchFailed: If the call fails or the payload is malformed.
        """
        pass
