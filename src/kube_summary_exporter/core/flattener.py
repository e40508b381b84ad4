# src/kube_summary_exporter/core/flattener.py
"""
Flattens kubelet summaries into labeled gauge series.

Values are widened from int to float for exposition. Counts up to 2**53 are
represented exactly; the kubelet reports uint64, so larger byte or inode
counts lose their low-order bits.
"""

import logging
from typing import Iterable, Optional, Tuple

from ..models.summary import FsStats, PerNodeResult
from .registry import FS_STATS_FIELDS, ScrapeRegistry, Scope

logger = logging.getLogger(__name__)


def _set_fs_stats(registry: ScrapeRegistry, scope: Scope, labels: Tuple[str, ...], fs: Optional[FsStats]) -> int:
    """Sets one series per reported field of `fs`. Returns the number of series set."""
    if fs is None:
        return 0

    count = 0
    for field in FS_STATS_FIELDS:
        value = getattr(fs, field)
        if value is None:
            continue
        registry.set(scope, field, labels, float(value))
        count += 1
    return count


def collect_summary_metrics(results: Iterable[PerNodeResult], registry: ScrapeRegistry) -> int:
    """
    Populates `registry` from the summaries of `results`.

    Container logs/rootfs are labeled (node, pod, namespace, name), pod ephemeral
    storage (node, pod, namespace) and the node runtime image filesystem (node).
    A field the kubelet did not report produces no series.

    Returns:
        int: The number of series set.
    """
    count = 0
    for entry in results:
        node_name = entry.node_name
        summary = entry.summary

        for pod in summary.pods:
            pod_labels = (node_name, pod.pod_ref.name, pod.pod_ref.namespace)

            for container in pod.containers:
                container_labels = pod_labels + (container.name,)
                count += _set_fs_stats(registry, Scope.CONTAINER_LOGS, container_labels, container.logs)
                count += _set_fs_stats(registry, Scope.CONTAINER_ROOTFS, container_labels, container.rootfs)

            count += _set_fs_stats(registry, Scope.POD_EPHEMERAL_STORAGE, pod_labels, pod.ephemeral_storage)

        runtime = summary.node.runtime
        if runtime is not None:
            count += _set_fs_stats(registry, Scope.NODE_RUNTIME_IMAGEFS, (node_name,), runtime.image_fs)

        logger.debug(f"Flattened summary of node '{node_name}' ({len(summary.pods)} pods).")

    return count
