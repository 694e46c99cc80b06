# graph_grouper/flow_graph.py
"""
graph_grouper.flow_graph
========================

The graph view the analyses run over, plus an in-memory implementation.

Analyses program against the structural ``GraphView`` protocol, so any
host object exposing a node count, an entry node and ordered
predecessor/successor lists can be analysed directly.  ``FlowGraph`` is
the concrete graph used by the CLI, the reference host and the tests.

Nodes are the integers ``0 .. size-1``.  Edge order is significant: the
successor list of a node is the order in which region selection explores
it, and the predecessor list is the order in which dominator sets are
intersected.

Serialised form (JSON)::

    {
      "entry": 0,
      "nodes": [
        {"id": 0, "comment": "loop header", "repeatable_comment": ""},
        {"id": 1, "comment": "GG:stop"}
      ],
      "edges": [[0, 1], [1, 0]]
    }
"""

from __future__ import annotations

import json
import logging
from collections import deque
from pathlib import Path
from typing import (
    Any, Deque, Dict, Iterable, Iterator, List, Mapping, Optional,
    Protocol, Sequence, Set, Tuple, Union, runtime_checkable,
)

from graph_grouper.errors import GraphFormatError

logger = logging.getLogger(__name__)

Edge = Tuple[int, int]


@runtime_checkable
class GraphView(Protocol):
    """Read-only view of a single-entry directed graph."""

    @property
    def size(self) -> int: ...

    @property
    def entry(self) -> int: ...

    def predecessors(self, node: int) -> Sequence[int]: ...

    def successors(self, node: int) -> Sequence[int]: ...


class FlowGraph:
    """A directed multigraph over the nodes ``0 .. size-1``.

    Attributes
    ----------
    size : int
        Number of nodes.
    entry : int
        The single entry node.
    """

    def __init__(self, size: int, entry: int = 0):
        if size < 0:
            raise ValueError(f"graph size must be non-negative, got {size}")
        if size and not 0 <= entry < size:
            raise ValueError(f"entry node {entry} out of range for {size} nodes")
        self._size = size
        self._entry = entry
        self._succs: List[List[int]] = [[] for _ in range(size)]
        self._preds: List[List[int]] = [[] for _ in range(size)]
        self._comments: Dict[int, str] = {}
        self._repeatable: Dict[int, str] = {}

    @classmethod
    def from_edges(
        cls, size: int, edges: Iterable[Edge], entry: int = 0,
    ) -> "FlowGraph":
        g = cls(size, entry)
        for src, dst in edges:
            g.add_edge(src, dst)
        return g

    # ---- GraphView ---------------------------------------------------

    @property
    def size(self) -> int:
        return self._size

    @property
    def entry(self) -> int:
        return self._entry

    def predecessors(self, node: int) -> Sequence[int]:
        return self._preds[node]

    def successors(self, node: int) -> Sequence[int]:
        return self._succs[node]

    # ---- construction ------------------------------------------------

    def _check(self, node: int) -> None:
        if not 0 <= node < self._size:
            raise IndexError(f"node {node} out of range for {self._size} nodes")

    def add_edge(self, src: int, dst: int) -> None:
        """Append ``src -> dst``; parallel edges are kept."""
        self._check(src)
        self._check(dst)
        self._succs[src].append(dst)
        self._preds[dst].append(src)

    def set_comment(self, node: int, text: str, repeatable: bool = False) -> None:
        self._check(node)
        table = self._repeatable if repeatable else self._comments
        if text:
            table[node] = text
        else:
            table.pop(node, None)

    def comment(self, node: int, repeatable: bool = False) -> Optional[str]:
        """The node's comment, or ``None`` when it has none."""
        table = self._repeatable if repeatable else self._comments
        return table.get(node)

    # ---- queries -----------------------------------------------------

    def nodes(self) -> range:
        return range(self._size)

    def edges(self) -> Iterator[Edge]:
        for src, succs in enumerate(self._succs):
            for dst in succs:
                yield (src, dst)

    def reachable(self, start: Optional[int] = None) -> Set[int]:
        """Nodes reachable from *start* (default: the entry node)."""
        if not self._size:
            return set()
        origin = self._entry if start is None else start
        visited: Set[int] = {origin}
        worklist: Deque[int] = deque([origin])
        while worklist:
            n = worklist.popleft()
            for s in self._succs[n]:
                if s not in visited:
                    visited.add(s)
                    worklist.append(s)
        return visited

    # ---- serialisation -----------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Dictionary suitable for ``json.dumps``."""
        nodes: List[Dict[str, Any]] = []
        for n in self.nodes():
            entry: Dict[str, Any] = {"id": n}
            if n in self._comments:
                entry["comment"] = self._comments[n]
            if n in self._repeatable:
                entry["repeatable_comment"] = self._repeatable[n]
            nodes.append(entry)
        return {
            "entry": self._entry,
            "nodes": nodes,
            "edges": [list(e) for e in self.edges()],
        }

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any], source: Optional[str] = None,
    ) -> "FlowGraph":
        if not isinstance(data, Mapping):
            raise GraphFormatError("graph document must be an object", source)
        raw_nodes = data.get("nodes")
        if not isinstance(raw_nodes, list):
            raise GraphFormatError("'nodes' must be a list", source)

        ids: List[int] = []
        for raw in raw_nodes:
            if not isinstance(raw, Mapping) or not _is_int(raw.get("id")):
                raise GraphFormatError(
                    f"every node needs an integer 'id': {raw!r}", source
                )
            ids.append(raw["id"])
        if sorted(ids) != list(range(len(ids))):
            raise GraphFormatError(
                "node ids must be exactly 0..N-1 without duplicates", source
            )

        entry = data.get("entry", 0)
        if not _is_int(entry) or (ids and not 0 <= entry < len(ids)):
            raise GraphFormatError(f"invalid entry node: {entry!r}", source)

        g = cls(len(ids), entry)
        for raw in raw_nodes:
            for key, repeatable in (("comment", False),
                                    ("repeatable_comment", True)):
                text = raw.get(key)
                if text is None:
                    continue
                if not isinstance(text, str):
                    raise GraphFormatError(
                        f"node {raw['id']}: '{key}' must be a string", source
                    )
                g.set_comment(raw["id"], text, repeatable=repeatable)

        raw_edges = data.get("edges", [])
        if not isinstance(raw_edges, list):
            raise GraphFormatError("'edges' must be a list", source)
        for raw in raw_edges:
            if (not isinstance(raw, (list, tuple)) or len(raw) != 2
                    or not all(_is_int(x) and 0 <= x < g.size for x in raw)):
                raise GraphFormatError(f"invalid edge: {raw!r}", source)
            g.add_edge(raw[0], raw[1])

        logger.debug(
            "Loaded graph%s: %d nodes, %d edges, entry=%d",
            f" from {source}" if source else "", g.size, len(raw_edges), entry,
        )
        return g

    @classmethod
    def load(cls, path: Union[str, Path]) -> "FlowGraph":
        p = Path(path)
        try:
            data = json.loads(p.read_text(encoding="utf-8"))
        except UnicodeDecodeError as exc:
            raise GraphFormatError(f"not valid UTF-8: {exc}", str(p)) from exc
        except json.JSONDecodeError as exc:
            raise GraphFormatError(f"invalid JSON: {exc}", str(p)) from exc
        return cls.from_dict(data, source=str(p))

    def dump(self, path: Union[str, Path]) -> None:
        Path(path).write_text(
            json.dumps(self.to_dict(), indent=2) + "\n", encoding="utf-8"
        )

    def to_dot(
        self,
        title: Optional[str] = None,
        groups: Iterable[Tuple[Sequence[int], str]] = (),
    ) -> str:
        """Return a Graphviz DOT representation of this graph.

        *groups* is a sequence of ``(nodes, text)`` pairs; each one is drawn
        as a labelled cluster.  A node belongs to at most one cluster, the
        first one listing it.
        """
        lines = ["digraph FlowGraph {"]
        if title:
            lines.append(f'  label="{_dot_escape(title)}";')
        lines.append("  node [shape=box, fontname=monospace, fontsize=10];")

        placed: Set[int] = set()
        for index, (members, text) in enumerate(groups):
            lines.append(f"  subgraph cluster_{index} {{")
            lines.append(f'    label="{_dot_escape(text)}";')
            lines.append('    style=filled; fillcolor="#eeeeff";')
            for n in members:
                if n not in placed:
                    placed.add(n)
                    lines.append(f"    {self._dot_node(n)}")
            lines.append("  }")

        for n in self.nodes():
            if n not in placed:
                lines.append(f"  {self._dot_node(n)}")
        for src, dst in self.edges():
            lines.append(f"  n{src} -> n{dst};")
        lines.append("}")
        return "\n".join(lines)

    def _dot_node(self, n: int) -> str:
        label = f"{n}"
        cmt = self._comments.get(n)
        if cmt:
            label += "\\n" + _dot_escape(cmt)
        color = ""
        if n == self._entry:
            color = ', style=filled, fillcolor="#ccffcc"'
        return f'n{n} [label="{label}"{color}];'

    def __repr__(self) -> str:
        return (
            f"FlowGraph(nodes={self._size}, "
            f"edges={sum(len(s) for s in self._succs)}, entry={self._entry})"
        )


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _dot_escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
