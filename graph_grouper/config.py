# graph_grouper/config.py
"""Tuning knobs for the grouping command."""

from __future__ import annotations

import dataclasses
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Mapping, Union

from graph_grouper.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_STOP_MARKER = "GG:stop"


@dataclass(frozen=True)
class GrouperConfig:
    """Configuration for ``group_from_selection`` and the CLI."""
    stop_marker: str = DEFAULT_STOP_MARKER
    search_repeatable_comments: bool = False
    include_boundary: bool = False
    max_label_length: int = 2048
    prompt: str = "Please enter group text"
    fallback_label: str = "group text"

    def validate(self) -> List[str]:
        """Return a list of validation problems (empty if valid)."""
        problems: List[str] = []
        if not self.stop_marker:
            problems.append("stop_marker must be a non-empty string")
        if self.max_label_length <= 0:
            problems.append("max_label_length must be positive")
        if not self.prompt:
            problems.append("prompt must be a non-empty string")
        return problems

    def with_overrides(self, **overrides: Any) -> "GrouperConfig":
        """Return a copy with every non-``None`` override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return _checked(dataclasses.replace(self, **changes)) if changes else self

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "GrouperConfig":
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError([f"unknown config key: {k}" for k in unknown])
        defaults = cls()
        problems: List[str] = []
        for key, value in data.items():
            expected = type(getattr(defaults, key))
            # bool is an int subclass; reject it where an int is wanted.
            if not isinstance(value, expected) or (
                expected is int and isinstance(value, bool)
            ):
                problems.append(
                    f"{key} must be of type {expected.__name__}, "
                    f"got {type(value).__name__}"
                )
        if problems:
            raise ConfigError(problems)
        return _checked(cls(**data))

    @classmethod
    def load(cls, path: Union[str, Path]) -> "GrouperConfig":
        """Read a JSON configuration file."""
        p = Path(path)
        logger.debug("Loading configuration from %s", p)
        try:
            data = json.loads(p.read_text(encoding="utf-8"))
        except UnicodeDecodeError as exc:
            raise ConfigError([f"{p}: not valid UTF-8: {exc}"]) from exc
        except json.JSONDecodeError as exc:
            raise ConfigError([f"{p}: invalid JSON: {exc}"]) from exc
        if not isinstance(data, dict):
            raise ConfigError([f"{p}: top-level value must be an object"])
        return cls.from_mapping(data)


def _checked(config: GrouperConfig) -> GrouperConfig:
    problems = config.validate()
    if problems:
        raise ConfigError(problems)
    return config
