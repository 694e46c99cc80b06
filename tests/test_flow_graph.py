# tests/test_flow_graph.py
"""Tests for FlowGraph construction, serialisation and DOT output."""

import json

import pytest

from graph_grouper.errors import GraphFormatError
from graph_grouper.flow_graph import FlowGraph, GraphView
from tests.conftest import DIAMOND, make_graph


class TestConstruction:

    def test_edge_order_is_kept(self):
        g = FlowGraph.from_edges(4, [(0, 2), (0, 1), (1, 3), (2, 3)])
        assert list(g.successors(0)) == [2, 1]
        assert list(g.predecessors(3)) == [1, 2]

    def test_parallel_edges_are_kept(self):
        g = FlowGraph.from_edges(2, [(0, 1), (0, 1)])
        assert list(g.successors(0)) == [1, 1]
        assert list(g.edges()) == [(0, 1), (0, 1)]

    def test_bad_entry(self):
        with pytest.raises(ValueError):
            FlowGraph(3, entry=3)

    def test_bad_edge_endpoint(self):
        g = FlowGraph(2)
        with pytest.raises(IndexError):
            g.add_edge(0, 2)

    def test_satisfies_graph_view(self):
        assert isinstance(make_graph(*DIAMOND), GraphView)

    def test_comments(self):
        g = FlowGraph(2)
        g.set_comment(0, "entry block")
        g.set_comment(1, "shared", repeatable=True)
        assert g.comment(0) == "entry block"
        assert g.comment(0, repeatable=True) is None
        assert g.comment(1, repeatable=True) == "shared"
        g.set_comment(0, "")
        assert g.comment(0) is None

    def test_reachable(self):
        g = FlowGraph.from_edges(4, [(0, 1), (2, 3)])
        assert g.reachable() == {0, 1}
        assert g.reachable(2) == {2, 3}
        assert FlowGraph(0).reachable() == set()


class TestSerialisation:

    def test_round_trip(self):
        g = make_graph(3, [(0, 1), (1, 2), (2, 1)], comments={1: "GG:stop"},
                       repeatable={2: "tail"})
        clone = FlowGraph.from_dict(json.loads(json.dumps(g.to_dict())))
        assert list(clone.edges()) == list(g.edges())
        assert clone.comment(1) == "GG:stop"
        assert clone.comment(2, repeatable=True) == "tail"
        assert clone.entry == 0

    def test_entry_defaults_to_zero(self):
        g = FlowGraph.from_dict({"nodes": [{"id": 1}, {"id": 0}], "edges": [[1, 0]]})
        assert g.entry == 0
        assert g.size == 2

    @pytest.mark.parametrize("doc", [
        [],
        {"edges": []},
        {"nodes": [{"id": 0}, {"id": 0}]},
        {"nodes": [{"id": 1}]},
        {"nodes": [{"id": "0"}]},
        {"nodes": [{"id": True}]},
        {"nodes": [{"id": 0}], "entry": 1},
        {"nodes": [{"id": 0}], "edges": [[0, 1]]},
        {"nodes": [{"id": 0}], "edges": [[0]]},
        {"nodes": [{"id": 0}], "edges": {}},
        {"nodes": [{"id": 0, "comment": 5}]},
    ])
    def test_malformed_documents(self, doc):
        with pytest.raises(GraphFormatError):
            FlowGraph.from_dict(doc)

    def test_load_and_dump(self, tmp_path):
        g = make_graph(*DIAMOND, comments={3: "join"})
        path = tmp_path / "g.json"
        g.dump(path)
        loaded = FlowGraph.load(path)
        assert list(loaded.edges()) == list(g.edges())
        assert loaded.comment(3) == "join"

    def test_load_invalid_json_names_file(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{nope", encoding="utf-8")
        with pytest.raises(GraphFormatError) as info:
            FlowGraph.load(path)
        assert "broken.json" in str(info.value)


class TestDot:

    def test_plain_graph(self):
        dot = make_graph(*DIAMOND).to_dot(title="diamond")
        assert dot.startswith("digraph FlowGraph {")
        assert 'label="diamond";' in dot
        assert "n0 -> n1;" in dot
        assert "n2 -> n3;" in dot
        assert dot.rstrip().endswith("}")

    def test_groups_become_clusters(self):
        g = make_graph(*DIAMOND)
        dot = g.to_dot(groups=[((0, 1), 'say "hi"')])
        assert "subgraph cluster_0 {" in dot
        assert 'label="say \\"hi\\"";' in dot
        # each node is declared exactly once
        assert dot.count("n1 [label=") == 1
        assert dot.count("n3 [label=") == 1

    def test_comment_in_label(self):
        g = make_graph(2, [(0, 1)], comments={1: "line1\nline2"})
        assert 'n1 [label="1\\nline1\\nline2"];' in g.to_dot()
