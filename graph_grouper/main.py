#!/usr/bin/env python3
"""graph_grouper/main.py: CLI entry-point for graph-grouper.

Usage examples
--------------
    # Print the dominators of every node
    graph-grouper dominators cfg.json

    # Print the region node 3 owns, stopping at node 7 and GG:stop nodes
    graph-grouper select cfg.json --start 3 --stop 7

    # Collapse the region into a labelled group and render it
    graph-grouper group cfg.json --start 3 --label "init" -f dot -o out.dot

Exit codes
----------
    0   Success.
    1   Command abandoned (no label entered).
    2   Infrastructure failure (missing file, bad graph, bad config, ...).
    130 Interrupted (Ctrl-C).

``python -m graph_grouper`` runs the same :func:`main`.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import textwrap
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, TextIO

from graph_grouper import __version__
from graph_grouper.boundary import any_of, comment_marker, node_set
from graph_grouper.config import GrouperConfig
from graph_grouper.dominance import DominanceTable
from graph_grouper.errors import GraphGrouperError
from graph_grouper.flow_graph import FlowGraph
from graph_grouper.grouping import InMemoryHost, group_from_selection
from graph_grouper.region import RegionSelector

_log = logging.getLogger("graph_grouper")

EXIT_OK: int = 0
EXIT_CANCELLED: int = 1
EXIT_INFRA: int = 2
EXIT_INTERRUPTED: int = 130


# ===========================================================================
# Utility helpers
# ===========================================================================

def _configure_logging(verbosity: int) -> None:
    """Set up the ``graph_grouper`` logger.

    0 → WARNING, 1 → INFO, 2+ → DEBUG.
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    handler.set_name("graph_grouper.cli")
    root = logging.getLogger("graph_grouper")
    root.setLevel(level)
    # Repeated main() calls (tests, embedding) replace the CLI handler.
    for old in [h for h in root.handlers if h.get_name() == "graph_grouper.cli"]:
        root.removeHandler(old)
    root.addHandler(handler)


def _resolve_path(raw: str, label: str = "file") -> Path:
    """Resolve *raw* to an absolute ``Path``, raising on missing files."""
    p = Path(raw).expanduser().resolve()
    if not p.exists():
        _log.error("%s not found: %s", label, p)
        raise SystemExit(EXIT_INFRA)
    return p


def _open_output(dest: Optional[str]) -> TextIO:
    """``None`` or ``"-"`` → stdout; otherwise open *dest* for writing."""
    if dest is None or dest == "-":
        return sys.stdout
    p = Path(dest).expanduser().resolve()
    p.parent.mkdir(parents=True, exist_ok=True)
    return open(p, "w", encoding="utf-8")


def _write(dest: Optional[str], text: str) -> None:
    out = _open_output(dest)
    try:
        out.write(text if text.endswith("\n") else text + "\n")
    finally:
        if out is not sys.stdout:
            out.close()


def _load_config(args: argparse.Namespace) -> GrouperConfig:
    config = GrouperConfig()
    if args.config:
        config = GrouperConfig.load(_resolve_path(args.config, "config file"))
    return config.with_overrides(
        stop_marker=getattr(args, "marker", None),
        include_boundary=True if getattr(args, "include_boundary", False) else None,
    )


def _load_graph(args: argparse.Namespace) -> FlowGraph:
    path = _resolve_path(args.graph, "graph file")
    _log.info("Loading graph: %s", path)
    return FlowGraph.load(path)


def _check_node(graph: FlowGraph, node: int, label: str) -> None:
    if not 0 <= node < graph.size:
        _log.error("%s %d out of range (graph has %d nodes)", label, node, graph.size)
        raise SystemExit(EXIT_INFRA)


# ===========================================================================
# Sub-command implementations
# ===========================================================================

def cmd_dominators(args: argparse.Namespace) -> int:
    """Print the dominator set of every node (or of ``--node``)."""
    graph = _load_graph(args)
    table = DominanceTable(graph)
    _log.info("Converged after %d pass(es)", table.passes)

    nodes: Sequence[int] = graph.nodes()
    if args.node is not None:
        _check_node(graph, args.node, "node")
        nodes = [args.node]

    doms = {n: sorted(table.dominators(n)) for n in nodes}
    if args.format == "json":
        _write(args.output, json.dumps({str(n): d for n, d in doms.items()}, indent=2))
    else:
        _write(args.output, "\n".join(
            f"{n}: {' '.join(map(str, d))}" for n, d in doms.items()
        ))
    return EXIT_OK


def cmd_select(args: argparse.Namespace) -> int:
    """Print the region owned by ``--start``."""
    config = _load_config(args)
    graph = _load_graph(args)
    _check_node(graph, args.start, "start node")
    for stop in args.stop:
        _check_node(graph, stop, "stop node")

    is_boundary = any_of(
        comment_marker(graph, config.stop_marker,
                       repeatable=config.search_repeatable_comments),
        node_set(args.stop),
    )
    region = RegionSelector(graph).select(
        args.start, is_boundary, include_boundary=config.include_boundary
    )
    if args.format == "json":
        _write(args.output, json.dumps(
            {"start": args.start, "nodes": list(region.nodes)}, indent=2
        ))
    else:
        _write(args.output, "\n".join(map(str, region.nodes)))
    return EXIT_OK


def _stdin_prompt(default: str, prompt: str) -> Optional[str]:
    """Read a label from stdin; empty line → *default*, EOF → cancel."""
    sys.stderr.write(f"{prompt} [{default}]: ")
    sys.stderr.flush()
    line = sys.stdin.readline()
    if not line:
        return None
    return line.rstrip("\r\n") or default


def cmd_group(args: argparse.Namespace) -> int:
    """Collapse the region owned by ``--start`` into a labelled group."""
    config = _load_config(args)
    graph = _load_graph(args)
    _check_node(graph, args.start, "start node")

    host = InMemoryHost(
        graph,
        selection=args.start,
        answer=args.label if args.label is not None else _stdin_prompt,
    )
    group = group_from_selection(host, config)
    for text in host.messages:
        sys.stderr.write(text + "\n")
    if group is None:
        return EXIT_CANCELLED

    if args.format == "dot":
        _write(args.output, host.to_dot(title=args.title))
    else:
        payload: Dict[str, Any] = host.to_dict()
        _write(args.output, json.dumps(payload, indent=2))
    return EXIT_OK


# ===========================================================================
# Argument parser construction
# ===========================================================================

def _build_parser() -> argparse.ArgumentParser:
    """Construct the full CLI argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="graph-grouper",
        description=(
            "Group the nodes a flow-graph node dominates into one labelled\n"
            "group, stopping at nodes marked as boundaries."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            examples:
              graph-grouper dominators cfg.json
              graph-grouper select cfg.json --start 3 --stop 7
              graph-grouper group cfg.json --start 3 --label init -f dot
        """),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v info, -vv debug).",
    )
    parser.add_argument(
        "-c", "--config",
        metavar="FILE",
        default=None,
        help="JSON configuration file.",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )

    def _add_graph_arg(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "graph",
            metavar="GRAPH",
            help="Graph file (JSON).",
        )

    def _add_output_args(p: argparse.ArgumentParser, formats: List[str]) -> None:
        p.add_argument(
            "-o", "--output",
            default=None,
            metavar="FILE",
            help='Output file ("-" or omit for stdout).',
        )
        p.add_argument(
            "-f", "--format",
            choices=formats,
            default=formats[0],
            help=f"Output format (default: {formats[0]}).",
        )

    def _add_selection_args(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "-s", "--start",
            type=int,
            required=True,
            metavar="N",
            help="Node to grow the region from.",
        )
        p.add_argument(
            "--marker",
            default=None,
            metavar="TEXT",
            help="Comment text marking stop nodes (default: GG:stop).",
        )
        p.add_argument(
            "--include-boundary",
            action="store_true",
            help="Add reached stop nodes to the region (not past them).",
        )

    # --- dominators ---------------------------------------------------------
    p_doms = subparsers.add_parser(
        "dominators",
        aliases=["doms"],
        help="Print dominator sets.",
    )
    _add_graph_arg(p_doms)
    p_doms.add_argument(
        "-n", "--node",
        type=int,
        default=None,
        metavar="N",
        help="Only print the dominators of this node.",
    )
    _add_output_args(p_doms, ["text", "json"])
    p_doms.set_defaults(func=cmd_dominators)

    # --- select -------------------------------------------------------------
    p_select = subparsers.add_parser(
        "select",
        help="Print the region a node owns.",
    )
    _add_graph_arg(p_select)
    _add_selection_args(p_select)
    p_select.add_argument(
        "--stop",
        type=int,
        nargs="*",
        default=[],
        metavar="N",
        help="Extra stop nodes besides the comment-marked ones.",
    )
    _add_output_args(p_select, ["text", "json"])
    p_select.set_defaults(func=cmd_select)

    # --- group --------------------------------------------------------------
    p_group = subparsers.add_parser(
        "group",
        help="Collapse a node's region into a labelled group.",
        description=(
            "Run the full grouping command: suggest a label from the start "
            "node's comment, read the label, select the region and record "
            "the group."
        ),
    )
    _add_graph_arg(p_group)
    _add_selection_args(p_group)
    p_group.add_argument(
        "-l", "--label",
        default=None,
        metavar="TEXT",
        help="Group label; read from stdin when omitted.",
    )
    p_group.add_argument(
        "--title",
        default=None,
        metavar="TEXT",
        help="Graph title for DOT output.",
    )
    _add_output_args(p_group, ["json", "dot"])
    p_group.set_defaults(func=cmd_group)

    return parser


# ===========================================================================
# Main entry point
# ===========================================================================

def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the graph-grouper CLI and return its exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)

    if not hasattr(args, "func"):
        parser.print_help(sys.stderr)
        return EXIT_INFRA

    try:
        return args.func(args)
    except KeyboardInterrupt:
        _log.info("Interrupted by user.")
        return EXIT_INTERRUPTED
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else EXIT_INFRA
    except GraphGrouperError as exc:
        _log.error("%s", exc)
        return EXIT_INFRA
    except OSError as exc:
        _log.error("I/O error: %s", exc)
        return EXIT_INFRA


if __name__ == "__main__":
    raise SystemExit(main())
