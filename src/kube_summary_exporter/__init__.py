"""
kube-summary-exporter

Exposes kubelet /stats/summary filesystem usage as Prometheus metrics.
"""

__version__ = "0.4.0"
