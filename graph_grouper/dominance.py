# graph_grouper/dominance.py
"""
Dominator sets for a single-entry flow graph.

Node *d* dominates node *n* if every path from the entry node to *n*
passes through *d*.  Every node dominates itself and the entry node
dominates every reachable node.

``DominanceTable`` uses the classical iterative data-flow formulation
(Aho, Lam, Sethi, Ullman, "Compilers", 2e, §9.6.1):

    Dom(entry) = {entry}
    Dom(n)     = {n} ∪ ⋂ Dom(p)   for p in preds(n)

starting from the "everything dominates everything" upper bound and
repeating full passes until nothing changes.  Each set only ever shrinks
and always keeps its own node, so the descent is finite.

Intersections are applied one predecessor at a time, in place, against
the *current* value of the predecessor's set, so a pass can already see
refinements made earlier in the same pass.  The fixed point is the same
as with a frozen per-pass snapshot; only the pass count can differ.

A non-entry node without predecessors is never refined and keeps the full
set: unreachable code is reported as dominated by every node.

Usage::

    from graph_grouper.flow_graph import FlowGraph
    from graph_grouper.dominance import DominanceTable

    g = FlowGraph.from_edges(4, [(0, 1), (0, 2), (1, 3), (2, 3)])
    doms = DominanceTable(g)
    doms.dominates(0, 3)   # True
    doms.dominates(1, 3)   # False
"""

from __future__ import annotations

import logging
from typing import FrozenSet, List

from graph_grouper.bitset import BitSet
from graph_grouper.flow_graph import GraphView

logger = logging.getLogger(__name__)


class DominanceTable:
    """Per-node dominator sets, computed once at construction.

    The table is immutable afterwards and is only meaningful for as long as
    the graph it was built from keeps its shape.

    Attributes
    ----------
    size : int
        Number of nodes in the analysed graph.
    entry : int
        The entry node.
    passes : int
        Full passes over the graph until the fixed point, counting the
        final pass in which nothing changed.
    history : list[list[int]]
        Only filled with ``record_history=True``: the dominator-set size of
        every node, first for the initial state and then after each pass.
    """

    def __init__(self, graph: GraphView, record_history: bool = False):
        self.size: int = graph.size
        self.entry: int = graph.entry
        self.passes: int = 0
        self.history: List[List[int]] = []
        self._doms: List[BitSet] = self._compute(graph, record_history)

    # ---- public API --------------------------------------------------

    def dominates(self, a: int, b: int) -> bool:
        """Return True if *a* dominates *b*."""
        return a in self._doms[b]

    def strictly_dominates(self, a: int, b: int) -> bool:
        return a != b and a in self._doms[b]

    def dominators(self, node: int) -> FrozenSet[int]:
        """All nodes that dominate *node*, itself included."""
        return frozenset(self._doms[node])

    def dominated_by(self, node: int) -> List[int]:
        """All nodes that *node* dominates, in ascending order."""
        return [n for n in range(self.size) if node in self._doms[n]]

    def __len__(self) -> int:
        return self.size

    def __repr__(self) -> str:
        return (
            f"DominanceTable(nodes={self.size}, entry={self.entry}, "
            f"passes={self.passes})"
        )

    # ---- fixed-point iteration ---------------------------------------

    def _compute(self, graph: GraphView, record_history: bool) -> List[BitSet]:
        n_nodes = graph.size
        if n_nodes == 0:
            return []
        entry = graph.entry

        doms = [BitSet.full(n_nodes) for _ in range(n_nodes)]
        doms[entry] = BitSet.of(n_nodes, entry)
        if record_history:
            self.history.append([len(d) for d in doms])

        changed = True
        while changed:
            changed = False
            self.passes += 1
            for node in range(n_nodes):
                if node == entry:
                    continue
                current = doms[node]
                for pred in graph.predecessors(node):
                    # Sets only shrink, so a change is a drop in population.
                    before = len(current)
                    current &= doms[pred]
                    current.add(node)
                    if len(current) != before:
                        changed = True
            if record_history:
                self.history.append([len(d) for d in doms])

        logger.debug(
            "Dominator sets for %d nodes converged after %d pass(es)",
            n_nodes, self.passes,
        )
        return doms
