# graph_grouper/errors.py
"""
Exception types for graph-grouper.

The dominance and region algorithms operate on trusted input and raise
nothing of their own; everything here belongs to the edges of the
package, where graphs and configuration are read from outside.

Hierarchy::

    GraphGrouperError
    ├── GraphFormatError   - malformed graph document
    └── ConfigError        - invalid configuration values or keys
"""

from __future__ import annotations

from typing import List, Optional


class GraphGrouperError(Exception):
    """Base class for all graph-grouper errors."""


class GraphFormatError(GraphGrouperError):
    """A serialised graph could not be turned into a ``FlowGraph``."""

    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source
        if source:
            message = f"{source}: {message}"
        super().__init__(message)


class ConfigError(GraphGrouperError):
    """Configuration failed validation.

    ``problems`` lists every individual complaint.
    """

    def __init__(self, problems: List[str]):
        self.problems = list(problems)
        super().__init__("; ".join(self.problems) or "invalid configuration")
