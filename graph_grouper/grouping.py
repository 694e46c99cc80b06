# graph_grouper/grouping.py
"""
graph_grouper.grouping
======================

The "group from the selected node" command, written against an abstract
host.

A host is whatever owns the live graph display: it supplies a graph
snapshot, the currently selected node and a way to ask the user for text,
and it is the one that actually collapses the chosen nodes into a labelled
group.  ``group_from_selection`` only decides *which* nodes and *what*
label.

Workflow::

    1. take a graph snapshot           (none  -> message, abort)
    2. read the selected node          (< 0   -> warning, abort)
    3. ask for the group label         (empty -> message, abort)
    4. build the DominanceTable
    5. select the region from the selected node
    6. hand (nodes, label) to host.create_group

An aborted command never calls ``create_group``.

``InMemoryHost`` is a complete host over a ``FlowGraph`` used by the CLI
and the tests.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import (
    Any, Callable, Dict, List, Optional, Protocol, Sequence,
    Tuple, Union,
)

from graph_grouper.boundary import comment_marker
from graph_grouper.config import GrouperConfig
from graph_grouper.dominance import DominanceTable
from graph_grouper.flow_graph import FlowGraph
from graph_grouper.region import RegionSelector

logger = logging.getLogger(__name__)

NO_SELECTION = -1


class AnnotatedGraph(Protocol):
    """A graph view whose nodes carry host comments."""

    @property
    def size(self) -> int: ...

    @property
    def entry(self) -> int: ...

    def predecessors(self, node: int) -> Sequence[int]: ...

    def successors(self, node: int) -> Sequence[int]: ...

    def comment(self, node: int, repeatable: bool = False) -> Optional[str]: ...


class GraphHost(Protocol):
    """What the grouping command needs from its host."""

    def graph(self) -> Optional[AnnotatedGraph]: ...

    def current_node(self) -> int: ...

    def ask_text(self, default: str, prompt: str) -> Optional[str]: ...

    def create_group(self, nodes: Sequence[int], text: str) -> None: ...

    def msg(self, text: str) -> None: ...

    def warning(self, text: str) -> None: ...


@dataclass(frozen=True)
class NodeGroup:
    """A set of nodes collapsed under one label."""
    nodes: Tuple[int, ...]
    text: str

    def to_dict(self) -> Dict[str, Any]:
        return {"nodes": list(self.nodes), "text": self.text}


def default_group_text(
    graph: AnnotatedGraph, node: int, fallback: str = "group text",
) -> str:
    """Suggested label: the node's comment, else its repeatable comment."""
    return graph.comment(node) or graph.comment(node, repeatable=True) or fallback


def group_from_selection(
    host: GraphHost, config: Optional[GrouperConfig] = None,
) -> Optional[NodeGroup]:
    """Group every node the selected node owns, up to the stop markers.

    Returns the created group, or ``None`` when the command was abandoned.
    """
    config = config or GrouperConfig()

    graph = host.graph()
    if graph is None:
        host.msg("graph is null")
        return None

    start = host.current_node()
    logger.info("graph size = %d cur_node = %d", graph.size, start)
    if start < 0:
        host.warning("Please select a node to start grouping from.")
        return None

    text = host.ask_text(
        default_group_text(graph, start, config.fallback_label), config.prompt
    )
    if not text:
        host.msg("Cancelling as no group text was entered.")
        return None
    text = text[:config.max_label_length]

    table = DominanceTable(graph)
    is_boundary = comment_marker(
        graph, config.stop_marker, repeatable=config.search_repeatable_comments
    )
    region = RegionSelector(graph, table).select(
        start, is_boundary, include_boundary=config.include_boundary
    )
    if not region:
        logger.info("Selected node %d is a stop node; the group is empty", start)

    group = NodeGroup(region.nodes, text)
    host.create_group(group.nodes, group.text)
    logger.info("Created group %r with %d node(s)", text, len(group.nodes))
    return group


# ===========================================================================
#  Reference host
# ===========================================================================

Answer = Union[Optional[str], Callable[[str, str], Optional[str]]]


@dataclass
class InMemoryHost:
    """A ``GraphHost`` over a ``FlowGraph``.

    *answer* is either the label text to return from ``ask_text`` (``None``
    or ``""`` to cancel) or a callable ``(default, prompt) -> text``.
    """
    flow_graph: Optional[FlowGraph]
    selection: int = NO_SELECTION
    answer: Answer = None
    groups: List[NodeGroup] = field(default_factory=list)
    messages: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def graph(self) -> Optional[FlowGraph]:
        return self.flow_graph

    def current_node(self) -> int:
        return self.selection

    def ask_text(self, default: str, prompt: str) -> Optional[str]:
        if callable(self.answer):
            return self.answer(default, prompt)
        return self.answer

    def create_group(self, nodes: Sequence[int], text: str) -> None:
        self.groups.append(NodeGroup(tuple(nodes), text))

    def msg(self, text: str) -> None:
        self.messages.append(text)

    def warning(self, text: str) -> None:
        logger.warning("%s", text)
        self.warnings.append(text)

    def to_dot(self, title: Optional[str] = None) -> str:
        if self.flow_graph is None:
            return "digraph FlowGraph {\n}"
        return self.flow_graph.to_dot(
            title, groups=[(g.nodes, g.text) for g in self.groups]
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = (
            self.flow_graph.to_dict() if self.flow_graph is not None else {}
        )
        data["groups"] = [g.to_dict() for g in self.groups]
        return data


def group_nodes(
    graph: FlowGraph,
    start: int,
    text: str,
    config: Optional[GrouperConfig] = None,
) -> Tuple[Optional[NodeGroup], InMemoryHost]:
    """Run ``group_from_selection`` on *graph* with a fixed selection and label."""
    host = InMemoryHost(graph, selection=start, answer=text)
    return group_from_selection(host, config), host
