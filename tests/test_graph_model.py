#!/usr/bin/env python3
"""
Graph Model Tests

Node registry, scoping and edge deduplication of the in-memory graph.
"""

import pytest

from rback.libs.graph.model import Edge, Graph


class TestNodes:
    """Test get-or-create node semantics"""

    def test_node_is_created_once(self):
        g = Graph(name="root")

        first = g.node("sa-a", label="a")
        second = g.node("sa-a", label="other")

        assert first is second
        assert first.label == "a"

    def test_node_keeps_declaring_scope(self):
        """A key referenced from another scope resolves to the first declaration"""
        g = Graph(name="root")
        ns = g.subgraph("ns1")

        declared = ns.node("sa-a")
        referenced = g.node("sa-a")

        assert referenced is declared
        assert declared.scope == "ns1"
        assert "sa-a" in ns.nodes
        assert "sa-a" not in g.nodes

    def test_label_defaults_to_key(self):
        assert Graph().node("rb-x").label == "rb-x"

    def test_registry_is_shared_by_the_tree(self):
        g = Graph()
        inner = g.subgraph("a").subgraph("b")
        inner.node("k")

        assert g.has_node("k")
        assert g.get_node("k").scope == "b"
        assert inner.root is g


class TestSubgraphs:
    """Test nested subgraphs"""

    def test_subgraph_is_created_once(self):
        g = Graph()

        assert g.subgraph("ns1") is g.subgraph("ns1")

    def test_subgraph_is_a_cluster_by_default(self):
        g = Graph()

        assert g.subgraph("ns1").cluster
        assert not g.subgraph("plain", cluster=False).cluster


class TestEdges:
    """Test edge creation"""

    def test_edge_between_known_nodes(self):
        g = Graph()
        a = g.node("a")
        g.node("b")

        edge = g.edge(a, "b", "binding")

        assert edge == Edge("a", "b", "binding")
        assert g.edge_set() == {("a", "b", "binding")}

    def test_duplicate_edges_collapse_across_scopes(self):
        g = Graph()
        ns = g.subgraph("ns1")
        ns.node("a")
        ns.node("b")

        ns.edge("a", "b")
        g.edge("a", "b")

        assert list(g.iter_edges()) == [Edge("a", "b")]
        assert g.edges == []

    def test_distinct_labels_are_distinct_edges(self):
        g = Graph()
        g.node("a")
        g.node("b")

        g.edge("a", "b", "rb1")
        g.edge("a", "b", "rb2")

        assert len(g.edge_set()) == 2

    def test_empty_label_is_no_label(self):
        g = Graph()
        g.node("a")
        g.node("b")

        assert g.edge("a", "b", "").label is None

    def test_unknown_endpoint(self):
        g = Graph()
        g.node("a")

        with pytest.raises(KeyError):
            g.edge("a", "missing")

    def test_iteration_follows_creation_order(self):
        g = Graph()
        for key in ("c", "a", "b"):
            g.node(key)
        g.edge("c", "a")
        g.edge("a", "b")

        assert [n.key for n in g.iter_nodes()] == ["c", "a", "b"]
        assert [(e.tail, e.head) for e in g.iter_edges()] == [("c", "a"), ("a", "b")]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
