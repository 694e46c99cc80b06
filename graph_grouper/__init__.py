"""
graph_grouper: Dominance-Guided Node Grouping for Flow Graphs
==============================================================

Collapse the part of a control-flow graph that a node *owns* into one
labelled group.  "Owns" means dominates: every path from the entry node
to a grouped node goes through the start node.  Growth stops at nodes
marked as boundaries (by default, nodes whose comment contains
``GG:stop``).

Core modules
------------
bitset
    Dense fixed-width bit-vectors.
flow_graph
    The ``GraphView`` protocol and the in-memory ``FlowGraph``.
dominance
    ``DominanceTable``: iterative dominator sets.
region
    ``RegionSelector``: dominance-pruned depth-first region growth.
boundary
    Boundary predicates (comment markers, explicit node sets).
grouping
    The end-to-end "group from selected node" command and a reference host.

Quick start
-----------
>>> from graph_grouper import FlowGraph, DominanceTable, select_region
>>> g = FlowGraph.from_edges(4, [(0, 1), (0, 2), (1, 3), (2, 3)])
>>> doms = DominanceTable(g)
>>> doms.dominates(1, 3)
False
>>> sorted(select_region(g, doms, 0))
[0, 1, 2, 3]
"""

from __future__ import annotations

import logging
from typing import List

from graph_grouper.bitset import BitSet
from graph_grouper.boundary import any_of, comment_marker, node_set
from graph_grouper.config import DEFAULT_STOP_MARKER, GrouperConfig
from graph_grouper.dominance import DominanceTable
from graph_grouper.errors import ConfigError, GraphFormatError, GraphGrouperError
from graph_grouper.flow_graph import FlowGraph, GraphView
from graph_grouper.grouping import (
    GraphHost,
    InMemoryHost,
    NodeGroup,
    default_group_text,
    group_from_selection,
    group_nodes,
)
from graph_grouper.region import RegionSelector, RegionSet, select_region

__version__ = "0.1.0"
__license__ = "MIT"

__all__: List[str] = [
    "BitSet",
    "ConfigError",
    "DEFAULT_STOP_MARKER",
    "DominanceTable",
    "FlowGraph",
    "GraphFormatError",
    "GraphGrouperError",
    "GraphHost",
    "GraphView",
    "GrouperConfig",
    "InMemoryHost",
    "NodeGroup",
    "RegionSelector",
    "RegionSet",
    "any_of",
    "comment_marker",
    "default_group_text",
    "group_from_selection",
    "group_nodes",
    "node_set",
    "select_region",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())
