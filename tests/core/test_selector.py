# tests/core/test_selector.py
"""Tests for node resolution and the all-or-nothing summary fetch."""

import pytest
from factories import FakeInventory, FakeStatsSource

from kube_summary_exporter.core.exceptions import InventoryUnavailable, NodeNotFound, StatsFetchFailed
from kube_summary_exporter.core.selector import NodeSelector


async def _select(selector, node_name=None):
    return await selector.collect_node_stats(await selector.resolve_nodes(node_name))


class TestResolveNodes:
    async def test_all_nodes(self, sample_summaries):
        selector = NodeSelector(FakeInventory(["n1", "n2"]), FakeStatsSource(sample_summaries))

        assert await selector.resolve_nodes() == ["n1", "n2"]

    async def test_single_node(self, sample_summaries):
        selector = NodeSelector(FakeInventory(["n1", "n2"]), FakeStatsSource(sample_summaries))

        assert await selector.resolve_nodes("n2") == ["n2"]

    async def test_missing_node(self, sample_summaries):
        selector = NodeSelector(FakeInventory(["n1"]), FakeStatsSource(sample_summaries))

        with pytest.raises(NodeNotFound):
            await selector.resolve_nodes("missing-node")

    async def test_inventory_failure(self, sample_summaries):
        inventory = FakeInventory([], error=InventoryUnavailable("error enumerating nodes: 503"))
        stats = FakeStatsSource(sample_summaries)
        selector = NodeSelector(inventory, stats)

        with pytest.raises(InventoryUnavailable):
            await _select(selector)
        assert stats.calls == []


class TestCollectNodeStats:
    async def test_results_follow_inventory_order(self, sample_summaries):
        stats = FakeStatsSource(sample_summaries, delays={"n1": 0.05})
        selector = NodeSelector(FakeInventory(["n1", "n2"]), stats)

        results = await _select(selector)

        assert [result.node_name for result in results] == ["n1", "n2"]
        assert results[0].summary is sample_summaries["n1"]
        assert results[1].summary is sample_summaries["n2"]

    async def test_single_node_fetches_only_that_node(self, sample_summaries):
        stats = FakeStatsSource(sample_summaries)
        selector = NodeSelector(FakeInventory(["n1", "n2"]), stats)

        results = await _select(selector, "n2")

        assert [result.node_name for result in results] == ["n2"]
        assert stats.calls == ["n2"]

    async def test_missing_node_fetches_nothing(self, sample_summaries):
        stats = FakeStatsSource(sample_summaries)
        selector = NodeSelector(FakeInventory(["n1"]), stats)

        with pytest.raises(NodeNotFound):
            await _select(selector, "missing-node")
        assert stats.calls == []

    async def test_no_nodes(self, sample_summaries):
        selector = NodeSelector(FakeInventory([]), FakeStatsSource(sample_summaries))

        assert await _select(selector) == []

    async def test_one_failing_node_fails_everything(self, sample_summaries):
        stats = FakeStatsSource(sample_summaries, failing=["n2"])
        selector = NodeSelector(FakeInventory(["n1", "n2"]), stats)

        with pytest.raises(StatsFetchFailed) as exc_info:
            await _select(selector)
        assert exc_info.value.node_name == "n2"

    async def test_first_failure_cancels_in_flight_fetches(self, sample_summaries):
        summaries = dict(sample_summaries, n3=sample_summaries["n1"])
        stats = FakeStatsSource(summaries, failing=["n2"], delays={"n1": 10, "n3": 10})
        selector = NodeSelector(FakeInventory(["n1", "n2", "n3"]), stats)

        with pytest.raises(StatsFetchFailed):
            await _select(selector)
        assert sorted(stats.cancelled) == ["n1", "n3"]

    async def test_concurrency_is_bounded(self, sample_summaries):
        summaries = {f"node-{i}": sample_summaries["n1"] for i in range(5)}
        stats = FakeStatsSource(summaries, delays={name: 0.01 for name in summaries})
        selector = NodeSelector(FakeInventory(list(summaries)), stats, max_concurrency=2)

        results = await _select(selector)

        assert len(results) == 5
        assert stats.max_in_flight == 2

    def test_rejects_invalid_concurrency(self, sample_summaries):
        with pytest.raises(ValueError):
            NodeSelector(FakeInventory([]), FakeStatsSource(sample_summaries), max_concurrency=0)
