# tests/conftest.py
"""
Shared graph builders and fixtures for the graph-grouper test suite.

Graphs are described as ``(size, edges)`` pairs with entry node 0 unless
stated otherwise.  ``brute_force_dominators`` gives an independent oracle
based on the textbook definition: *d* dominates *n* iff *n* cannot be
reached from the entry once *d* is removed.
"""

import json
from collections import deque
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional, Set, Tuple

import pytest

from graph_grouper.flow_graph import FlowGraph


# ── Builders ──────────────────────────────────────────────────────

def make_graph(
    size: int,
    edges: Iterable[Tuple[int, int]],
    entry: int = 0,
    comments: Optional[Mapping[int, str]] = None,
    repeatable: Optional[Mapping[int, str]] = None,
) -> FlowGraph:
    g = FlowGraph.from_edges(size, edges, entry=entry)
    for node, text in (comments or {}).items():
        g.set_comment(node, text)
    for node, text in (repeatable or {}).items():
        g.set_comment(node, text, repeatable=True)
    return g


def write_graph(directory: Path, graph: FlowGraph, name: str = "graph.json") -> Path:
    path = directory / name
    path.write_text(json.dumps(graph.to_dict()), encoding="utf-8")
    return path


def _reachable_without(graph: FlowGraph, removed: Optional[int]) -> Set[int]:
    if graph.entry == removed:
        return set()
    seen = {graph.entry}
    queue = deque([graph.entry])
    while queue:
        n = queue.popleft()
        for s in graph.successors(n):
            if s != removed and s not in seen:
                seen.add(s)
                queue.append(s)
    return seen


def brute_force_dominators(graph: FlowGraph) -> Dict[int, Set[int]]:
    """Dominators of every node reachable from the entry."""
    reachable = _reachable_without(graph, None)
    result: Dict[int, Set[int]] = {n: {n} for n in reachable}
    for d in reachable:
        still = _reachable_without(graph, d)
        for n in reachable:
            if n != d and n not in still:
                result[n].add(d)
    return result


# ── Named graphs ──────────────────────────────────────────────────

CHAIN = (4, [(0, 1), (1, 2), (2, 3)])
DIAMOND = (4, [(0, 1), (0, 2), (1, 3), (2, 3)])
# 0 -> 1 <-> 2 -> 3 : a loop with header 1
LOOP = (4, [(0, 1), (1, 2), (2, 1), (2, 3)])
SELF_LOOP = (3, [(0, 1), (1, 1), (1, 2)])

# A small function-shaped CFG:
#
#        0
#        |
#        1 <-----+
#       / \      |
#      2   3     |
#       \ /      |
#        4 ------+
#        |
#        5
#       / \
#      6   7
#
NESTED = (8, [
    (0, 1), (1, 2), (1, 3), (2, 4), (3, 4), (4, 1), (4, 5),
    (5, 6), (5, 7),
])

# Irreducible: two entries into the 1/2 cycle.
IRREDUCIBLE = (4, [(0, 1), (0, 2), (1, 2), (2, 1), (2, 3)])

ALL_GRAPHS = {
    "chain": CHAIN,
    "diamond": DIAMOND,
    "loop": LOOP,
    "self_loop": SELF_LOOP,
    "nested": NESTED,
    "irreducible": IRREDUCIBLE,
}


@pytest.fixture
def chain() -> FlowGraph:
    return make_graph(*CHAIN)


@pytest.fixture
def diamond() -> FlowGraph:
    return make_graph(*DIAMOND)


@pytest.fixture
def loop_graph() -> FlowGraph:
    return make_graph(*LOOP)


@pytest.fixture
def nested() -> FlowGraph:
    return make_graph(*NESTED)


@pytest.fixture(params=sorted(ALL_GRAPHS))
def any_graph(request) -> FlowGraph:
    return make_graph(*ALL_GRAPHS[request.param])
