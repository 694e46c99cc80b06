# tests/test_config.py
"""Tests for GrouperConfig."""

import json

import pytest

from graph_grouper.config import DEFAULT_STOP_MARKER, GrouperConfig
from graph_grouper.errors import ConfigError


class TestDefaults:

    def test_defaults_are_valid(self):
        config = GrouperConfig()
        assert config.validate() == []
        assert config.stop_marker == DEFAULT_STOP_MARKER == "GG:stop"
        assert config.max_label_length == 2048
        assert config.prompt == "Please enter group text"
        assert not config.include_boundary

    def test_validate_reports_every_problem(self):
        config = GrouperConfig(stop_marker="", max_label_length=0)
        assert len(config.validate()) == 2


class TestFromMapping:

    def test_values_applied(self):
        config = GrouperConfig.from_mapping(
            {"stop_marker": "END", "include_boundary": True}
        )
        assert config.stop_marker == "END"
        assert config.include_boundary

    def test_unknown_key(self):
        with pytest.raises(ConfigError) as info:
            GrouperConfig.from_mapping({"stop": "END"})
        assert info.value.problems == ["unknown config key: stop"]

    @pytest.mark.parametrize("data", [
        {"max_label_length": "10"},
        {"max_label_length": True},
        {"include_boundary": 1},
        {"stop_marker": None},
    ])
    def test_wrong_types(self, data):
        with pytest.raises(ConfigError):
            GrouperConfig.from_mapping(data)

    def test_invalid_value(self):
        with pytest.raises(ConfigError):
            GrouperConfig.from_mapping({"max_label_length": -1})


class TestLoad:

    def test_load(self, tmp_path):
        path = tmp_path / "grouper.json"
        path.write_text(json.dumps({"prompt": "Label?"}), encoding="utf-8")
        assert GrouperConfig.load(path).prompt == "Label?"

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "grouper.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(ConfigError):
            GrouperConfig.load(path)

    def test_non_object(self, tmp_path):
        path = tmp_path / "grouper.json"
        path.write_text("[1]", encoding="utf-8")
        with pytest.raises(ConfigError):
            GrouperConfig.load(path)


class TestOverrides:

    def test_none_is_ignored(self):
        config = GrouperConfig()
        assert config.with_overrides(stop_marker=None) is config

    def test_override_applied(self):
        config = GrouperConfig().with_overrides(stop_marker="X", include_boundary=True)
        assert config.stop_marker == "X"
        assert config.include_boundary

    def test_override_validated(self):
        with pytest.raises(ConfigError):
            GrouperConfig().with_overrides(stop_marker="")
