# graph_grouper/region.py
"""
Dominance-guided region selection.

Starting from a node *s*, a region grows depth-first along successor
edges.  A successor joins the region only if it

* is not already in the region,
* is dominated by *s*, and
* is not a boundary node.

Boundary nodes stop growth: their successors are never explored.  If *s*
itself is a boundary node the region is empty.

The dominance test keeps the region to code that *s* owns; a node that
can also be reached along a path bypassing *s* stays outside.  Membership
depends only on dominance and the boundary predicate; successor order
only decides the insertion order of the result.

The traversal keeps an explicit stack of successor iterators rather than
recursing, so deep graphs do not hit the interpreter's recursion limit.
Insertion order is the preorder of the equivalent recursive walk.
"""

from __future__ import annotations

import logging
from collections.abc import Set as AbstractSet
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple

from graph_grouper.boundary import BoundaryPredicate
from graph_grouper.dominance import DominanceTable
from graph_grouper.flow_graph import GraphView

logger = logging.getLogger(__name__)


def never_boundary(node: int) -> bool:
    return False


class RegionSet(AbstractSet):
    """Ordered set of region nodes.

    Iteration follows insertion order.  Compares equal to any set with the
    same members.
    """

    def __init__(self, start: int, nodes: Iterable[int] = ()):
        self.start = start
        self._members: Dict[int, None] = dict.fromkeys(nodes)

    @classmethod
    def _from_iterable(cls, it: Iterable[int]) -> Set[int]:
        # Results of ``&``, ``|`` and ``-`` have no start node.
        return set(it)

    def _add(self, node: int) -> None:
        self._members[node] = None

    @property
    def nodes(self) -> Tuple[int, ...]:
        return tuple(self._members)

    def __contains__(self, node: object) -> bool:
        return node in self._members

    def __iter__(self) -> Iterator[int]:
        return iter(self._members)

    def __len__(self) -> int:
        return len(self._members)

    def __repr__(self) -> str:
        return f"RegionSet(start={self.start}, nodes={list(self._members)})"


class RegionSelector:
    """Select regions from one graph, reusing a single ``DominanceTable``.

    Parameters
    ----------
    graph:
        The graph the table was computed from.
    table:
        Dominator sets for *graph*; built on demand when omitted.
    """

    def __init__(self, graph: GraphView, table: Optional[DominanceTable] = None):
        self.graph = graph
        self.table = table if table is not None else DominanceTable(graph)

    def select(
        self,
        start: int,
        is_boundary: BoundaryPredicate = never_boundary,
        include_boundary: bool = False,
    ) -> RegionSet:
        """Return the region owned by *start*.

        With *include_boundary* a boundary node reached from inside the
        region is added to it, though still not explored past.  The start
        node is never added when it is itself a boundary.
        """
        verdicts: Dict[int, bool] = {}

        def boundary(node: int) -> bool:
            if node not in verdicts:
                verdicts[node] = bool(is_boundary(node))
            return verdicts[node]

        region = RegionSet(start)
        if boundary(start):
            logger.debug("Start node %d is a boundary; region is empty", start)
            return region

        graph, table = self.graph, self.table
        region._add(start)
        visited: Set[int] = {start}
        stack: List[Iterator[int]] = [iter(graph.successors(start))]
        while stack:
            succ = next(stack[-1], None)
            if succ is None:
                stack.pop()
                continue
            if succ in visited or not table.dominates(start, succ):
                continue
            visited.add(succ)
            if boundary(succ):
                if include_boundary:
                    region._add(succ)
                continue
            region._add(succ)
            stack.append(iter(graph.successors(succ)))

        logger.debug(
            "Region from node %d: %d node(s) %s", start, len(region), region.nodes
        )
        return region


def select_region(
    graph: GraphView,
    table: DominanceTable,
    start: int,
    is_boundary: BoundaryPredicate = never_boundary,
    include_boundary: bool = False,
) -> RegionSet:
    """One-shot form of ``RegionSelector(graph, table).select(...)``."""
    return RegionSelector(graph, table).select(
        start, is_boundary, include_boundary=include_boundary
    )
