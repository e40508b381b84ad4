# tests/api/test_scrape_endpoints.py
"""Tests for the /nodes and /node/{name} scrape endpoints."""

from factories import exposition_samples
from prometheus_client import CONTENT_TYPE_LATEST

from kube_summary_exporter.core.exceptions import InventoryUnavailable


class TestAllNodesEndpoint:
    """Tests for GET /nodes."""

    def test_returns_200_with_prometheus_text(self, client):
        response = client.get("/nodes")

        assert response.status_code == 200
        assert response.headers["content-type"] == CONTENT_TYPE_LATEST

    def test_contains_every_node(self, client):
        body = client.get("/nodes").text
        samples = exposition_samples(body)

        assert samples[("kube_summary_node_runtime_imagefs_used_bytes", (("node", "n1"),))] == 300.0
        assert samples[("kube_summary_node_runtime_imagefs_used_bytes", (("node", "n2"),))] == 123.0
        assert "# TYPE kube_summary_container_logs_used_bytes gauge" in body

    def test_absent_fields_are_not_rendered(self, client):
        samples = exposition_samples(client.get("/nodes").text)
        container = (("name", "c2"), ("namespace", "ns2"), ("node", "n2"), ("pod", "p2"))

        assert ("kube_summary_container_logs_used_bytes", container) in samples
        assert ("kube_summary_container_logs_inodes_free", container) not in samples
        assert ("kube_summary_node_runtime_imagefs_inodes", (("node", "n2"),)) not in samples

    def test_one_failing_node_fails_the_scrape(self, client, stats_source):
        stats_source.failing.add("n2")

        response = client.get("/nodes")

        assert response.status_code == 500
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text.startswith("Error collecting node stats: ")
        assert "kube_summary_" not in response.text

    def test_inventory_failure(self, client, inventory):
        inventory.error = InventoryUnavailable("error enumerating nodes: 403 Forbidden")

        response = client.get("/nodes")

        assert response.status_code == 500
        assert response.text == "Error collecting node stats: error enumerating nodes: 403 Forbidden"

    def test_timeout_header_bounds_the_scrape(self, client, stats_source):
        stats_source.delays["n1"] = 5

        response = client.get("/nodes", headers={"X-Prometheus-Scrape-Timeout-Seconds": "0.05"})

        assert response.status_code == 500
        assert "deadline" in response.text

    def test_unparseable_timeout_header_is_ignored(self, client):
        response = client.get("/nodes", headers={"X-Prometheus-Scrape-Timeout-Seconds": "soon"})

        assert response.status_code == 200


class TestSingleNodeEndpoint:
    """Tests for GET /node/{name}."""

    def test_returns_only_that_node(self, client, stats_source):
        response = client.get("/node/n1")

        assert response.status_code == 200
        assert 'node="n1"' in response.text
        assert 'node="n2"' not in response.text
        assert stats_source.calls == ["n1"]

    def test_scenario_container_labels(self, client):
        samples = exposition_samples(client.get("/node/n2").text)
        container = {"node": "n2", "pod": "p2", "namespace": "ns2", "name": "c2"}

        assert samples[("kube_summary_container_logs_used_bytes", tuple(sorted(container.items())))] == 7.0

    def test_missing_node(self, client, stats_source):
        response = client.get("/node/missing-node")

        assert response.status_code == 500
        assert response.text == "Error collecting node stats: node missing-node not found"
        assert stats_source.calls == []

    def test_stats_fetch_failure(self, client, stats_source):
        stats_source.failing.add("n1")

        response = client.get("/node/n1")

        assert response.status_code == 500
        assert "error querying /stats/summary for n1" in response.text
