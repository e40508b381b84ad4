"""Operational metrics of the exporter itself, served on /metrics."""

from prometheus_client import REGISTRY, Counter, Histogram, generate_latest

# Registered in the process-wide default registry, next to the process, platform
# and GC collectors prometheus_client installs there.
SCRAPES_TOTAL = Counter(
    "kube_summary_exporter_scrapes_total",
    "Number of summary scrapes handled, by target and outcome.",
    labelnames=("target", "outcome"),
)
SCRAPE_DURATION_SECONDS = Histogram(
    "kube_summary_exporter_scrape_duration_seconds",
    "Time spent handling a summary scrape, by target.",
    labelnames=("target",),
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)
SCRAPED_NODES_TOTAL = Counter(
    "kube_summary_exporter_scraped_nodes_total",
    "Number of node summaries fetched by successful scrapes.",
)


def record_scrape(target: str, outcome: str, duration_seconds: float, node_count: int = 0) -> None:
    """Records one finished scrape. `outcome` is 'success' or the error class name."""
    SCRAPES_TOTAL.labels(target, outcome).inc()
    SCRAPE_DURATION_SECONDS.labels(target).observe(duration_seconds)
    if node_count:
        SCRAPED_NODES_TOTAL.inc(node_count)


def render_process_metrics() -> bytes:
    return generate_latest(REGISTRY)
