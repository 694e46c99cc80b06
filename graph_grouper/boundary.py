# graph_grouper/boundary.py
"""
Boundary predicates for region selection.

A boundary ("stop") node ends region growth.  Hosts usually mark one by
putting a tag such as ``GG:stop`` into the comment on the node's first
address; ``comment_marker`` reads exactly that.  The other helpers build
predicates from explicit node collections or combine existing ones.
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional, Protocol

from graph_grouper.config import DEFAULT_STOP_MARKER

BoundaryPredicate = Callable[[int], bool]


class CommentSource(Protocol):
    def comment(self, node: int, repeatable: bool = False) -> Optional[str]: ...


def comment_marker(
    graph: CommentSource,
    marker: str = DEFAULT_STOP_MARKER,
    repeatable: bool = False,
) -> BoundaryPredicate:
    """Predicate: the node's comment contains *marker*.

    With *repeatable* the node's repeatable comment is searched as well.
    """
    def is_boundary(node: int) -> bool:
        if marker in (graph.comment(node) or ""):
            return True
        return repeatable and marker in (graph.comment(node, repeatable=True) or "")

    return is_boundary


def node_set(nodes: Iterable[int]) -> BoundaryPredicate:
    """Predicate: the node is one of *nodes*."""
    members = frozenset(nodes)
    return members.__contains__


def any_of(*predicates: BoundaryPredicate) -> BoundaryPredicate:
    """Predicate: at least one of *predicates* holds."""
    return lambda node: any(p(node) for p in predicates)
