class SummaryExporterError(Exception):
    """Base exception for kube-summary-exporter."""

    pass


class KubeClientError(SummaryExporterError):
    """Raised when no Kubernetes client configuration could be loaded."""

    pass


class ScrapeError(SummaryExporterError):
    """Base exception for errors that abort a single scrape request."""

    pass


class InventoryUnavailable(ScrapeError):
    """Raised when listing or looking up cluster nodes fails."""

    pass


class NodeNotFound(ScrapeError):
    """Raised when the requested node does not exist."""

    def __init__(self, node_name: str):
        self.node_name = node_name
        super().__init__(f"node {node_name} not found")


class StatsFetchFailed(ScrapeError):
    """Raised when a node's /stats/summary call fails or returns malformed data."""

    def __init__(self, node_name: str, reason: str):
        self.node_name = node_name
        super().__init__(reason)


class DeadlineExceeded(ScrapeError):
    """Raised when the scrape timeout fires before node stats were collected."""

    pass


class ScrapeCancelled(ScrapeError):
    """Raised when the scraper disconnects before the scrape completed."""

    pass
