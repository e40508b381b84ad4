# src/kube_summary_exporter/core/registry.py
"""
Metric family schema and the request-scoped scrape registry.

The schema (names, help texts, label names) is built once at import time and
never changes. Values live in a ScrapeRegistry, which is created empty for
each scrape request and dropped once the response is written.
"""

import logging
from enum import Enum
from typing import Dict, Iterator, NamedTuple, Tuple

from prometheus_client import CollectorRegistry, Gauge
from prometheus_client.metrics_core import Metric

logger = logging.getLogger(__name__)

METRICS_NAMESPACE = "kube_summary"

CONTAINER_LABELS = ("node", "pod", "namespace", "name")
POD_LABELS = ("node", "pod", "namespace")
NODE_LABELS = ("node",)


class Scope(str, Enum):
    """The four places of a summary that carry filesystem stats."""

    CONTAINER_LOGS = "container_logs"
    CONTAINER_ROOTFS = "container_rootfs"
    POD_EPHEMERAL_STORAGE = "pod_ephemeral_storage"
    NODE_RUNTIME_IMAGEFS = "node_runtime_imagefs"


# FsStats attribute names, also the metric name suffixes
FS_STATS_FIELDS: Tuple[str, ...] = (
    "available_bytes",
    "capacity_bytes",
    "used_bytes",
    "inodes_free",
    "inodes",
    "inodes_used",
)

SCOPE_LABELS: Dict[Scope, Tuple[str, ...]] = {
    Scope.CONTAINER_LOGS: CONTAINER_LABELS,
    Scope.CONTAINER_ROOTFS: CONTAINER_LABELS,
    Scope.POD_EPHEMERAL_STORAGE: POD_LABELS,
    Scope.NODE_RUNTIME_IMAGEFS: NODE_LABELS,
}

_HELP_TEXTS: Dict[Tuple[Scope, str], str] = {
    (Scope.CONTAINER_LOGS, "available_bytes"): "Number of bytes that aren't consumed by the container logs",
    (Scope.CONTAINER_LOGS, "capacity_bytes"): "Number of bytes that can be consumed by the container logs",
    (Scope.CONTAINER_LOGS, "used_bytes"): "Number of bytes that are consumed by the container logs",
    (Scope.CONTAINER_LOGS, "inodes_free"): "Number of available Inodes for logs",
    (Scope.CONTAINER_LOGS, "inodes"): "Number of Inodes for logs",
    (Scope.CONTAINER_LOGS, "inodes_used"): "Number of used Inodes for logs",
    (Scope.CONTAINER_ROOTFS, "available_bytes"): "Number of bytes that aren't consumed by the container",
    (Scope.CONTAINER_ROOTFS, "capacity_bytes"): "Number of bytes that can be consumed by the container",
    (Scope.CONTAINER_ROOTFS, "used_bytes"): "Number of bytes that are consumed by the container",
    (Scope.CONTAINER_ROOTFS, "inodes_free"): "Number of available Inodes",
    (Scope.CONTAINER_ROOTFS, "inodes"): "Number of Inodes",
    (Scope.CONTAINER_ROOTFS, "inodes_used"): "Number of used Inodes",
    (Scope.POD_EPHEMERAL_STORAGE, "available_bytes"): (
        "Number of bytes of Ephemeral storage that aren't consumed by the pod"
    ),
    (Scope.POD_EPHEMERAL_STORAGE, "capacity_bytes"): (
        "Number of bytes of Ephemeral storage that can be consumed by the pod"
    ),
    (Scope.POD_EPHEMERAL_STORAGE, "used_bytes"): "Number of bytes of Ephemeral storage that are consumed by the pod",
    (Scope.POD_EPHEMERAL_STORAGE, "inodes_free"): "Number of available Inodes for pod Ephemeral storage",
    (Scope.POD_EPHEMERAL_STORAGE, "inodes"): "Number of Inodes for pod Ephemeral storage",
    (Scope.POD_EPHEMERAL_STORAGE, "inodes_used"): "Number of used Inodes for pod Ephemeral storage",
    (Scope.NODE_RUNTIME_IMAGEFS, "available_bytes"): "Number of bytes of node Runtime ImageFS that aren't consumed",
    (Scope.NODE_RUNTIME_IMAGEFS, "capacity_bytes"): "Number of bytes of node Runtime ImageFS that can be consumed",
    (Scope.NODE_RUNTIME_IMAGEFS, "used_bytes"): "Number of bytes of node Runtime ImageFS that are consumed",
    (Scope.NODE_RUNTIME_IMAGEFS, "inodes_free"): "Number of available Inodes for node Runtime ImageFS",
    (Scope.NODE_RUNTIME_IMAGEFS, "inodes"): "Number of Inodes for node Runtime ImageFS",
    (Scope.NODE_RUNTIME_IMAGEFS, "inodes_used"): "Number of used Inodes for node Runtime ImageFS",
}


class MetricFamily(NamedTuple):
    """Immutable declaration of one exported gauge family."""

    scope: Scope
    field: str
    name: str
    documentation: str
    labelnames: Tuple[str, ...]

    @property
    def full_name(self) -> str:
        return f"{METRICS_NAMESPACE}_{self.name}"


def _build_schema() -> Tuple[MetricFamily, ...]:
    families = []
    for scope in Scope:
        for field in FS_STATS_FIELDS:
            families.append(
                MetricFamily(
                    scope=scope,
                    field=field,
                    name=f"{scope.value}_{field}",
                    documentation=_HELP_TEXTS[(scope, field)],
                    labelnames=SCOPE_LABELS[scope],
                )
            )
    return tuple(families)


# Shared by every request; only the values are per request.
METRIC_FAMILIES: Tuple[MetricFamily, ...] = _build_schema()


class ScrapeRegistry:
    """
    A fresh, isolated set of gauges for exactly one scrape request.

    All families of METRIC_FAMILIES are declared on construction. The object
    is itself a collector: handing it to prometheus_client.generate_latest
    renders every family that received at least one series, and nothing for
    the families that stayed empty.
    """

    def __init__(self):
        self.registry = CollectorRegistry(auto_describe=True)
        self._gauges: Dict[Tuple[Scope, str], Gauge] = {}
        for family in METRIC_FAMILIES:
            self._gauges[(family.scope, family.field)] = Gauge(
                family.name,
                family.documentation,
                labelnames=family.labelnames,
                namespace=METRICS_NAMESPACE,
                registry=self.registry,
            )
        logger.debug(f"Declared {len(self._gauges)} metric families for a new scrape.")

    def set(self, scope: Scope, field: str, labels: Tuple[str, ...], value: float) -> None:
        self._gauges[(scope, field)].labels(*labels).set(value)

    def collect(self) -> Iterator[Metric]:
        for metric in self.registry.collect():
            if metric.samples:
                yield metric

    def series_count(self) -> int:
        return sum(len(metric.samples) for metric in self.registry.collect())
