# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for YAML loader utilities."""

from pathlib import Path

import pytest

from src.core.config.yaml_loader import YAMLLoadError, deep_merge, load_yaml


class TestLoadYaml:
    """Tests for load_yaml."""

    def test_mapping_is_returned(self, tmp_path: Path) -> None:
        """Verify a mapping file is parsed into a dict."""
        path = tmp_path / "struggle.yaml"
        path.write_text("alerts:\n  cooldown_hours: 12\n", encoding="utf-8")

        assert load_yaml(path) == {"alerts": {"cooldown_hours": 12}}

    def test_empty_file_is_empty_mapping(self, tmp_path: Path) -> None:
        """Verify an empty file gives an empty dict."""
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")

        assert load_yaml(path) == {}

    def test_missing_file(self, tmp_path: Path) -> None:
        """Verify a missing file raises YAMLLoadError with the path."""
        path = tmp_path / "missing.yaml"

        with pytest.raises(YAMLLoadError) as exc_info:
            load_yaml(path)

        assert exc_info.value.path == path
        assert "does not exist" in exc_info.value.reason

    def test_directory_is_not_a_file(self, tmp_path: Path) -> None:
        """Verify a directory path is rejected."""
        with pytest.raises(YAMLLoadError):
            load_yaml(tmp_path)

    def test_invalid_syntax(self, tmp_path: Path) -> None:
        """Verify malformed YAML raises YAMLLoadError."""
        path = tmp_path / "broken.yaml"
        path.write_text("weights: [0.25, 0.2\n", encoding="utf-8")

        with pytest.raises(YAMLLoadError) as exc_info:
            load_yaml(path)

        assert "Invalid YAML" in exc_info.value.reason

    def test_non_mapping_root(self, tmp_path: Path) -> None:
        """Verify a list at the root is rejected."""
        path = tmp_path / "list.yaml"
        path.write_text("- one\n- two\n", encoding="utf-8")

        with pytest.raises(YAMLLoadError) as exc_info:
            load_yaml(path)

        assert "list" in exc_info.value.reason


class TestDeepMerge:
    """Tests for deep_merge."""

    def test_nested_keys_are_merged(self) -> None:
        """Verify nested mappings merge key by key."""
        base = {"alerts": {"cooldown_hours": 24, "critical_score": 9.0}}
        override = {"alerts": {"cooldown_hours": 12}}

        assert deep_merge(base, override) == {
            "alerts": {"cooldown_hours": 12, "critical_score": 9.0}
        }

    def test_lists_are_replaced(self) -> None:
        """Verify override lists replace rather than extend."""
        base = {"markers": ["hint", "help"]}

        assert deep_merge(base, {"markers": ["stuck"]}) == {"markers": ["stuck"]}

    def test_inputs_are_not_modified(self) -> None:
        """Verify neither argument is mutated."""
        base = {"scoring": {"high": 7}}
        override = {"scoring": {"medium": 4}}

        deep_merge(base, override)

        assert base == {"scoring": {"high": 7}}
        assert override == {"scoring": {"medium": 4}}
