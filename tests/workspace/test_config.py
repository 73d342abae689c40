# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the workspace configuration module."""

from pathlib import Path

import pytest

from draftgen.workspace import (
    WORKSPACE_CONFIG_FILENAME,
    WorkspaceConfig,
    WorkspaceConfigError,
    dump_workspace_config,
    load_workspace_config,
)

# ###############
# Helpers
# ###############


def _write_config(tmp_path: Path, content: str) -> Path:
    """Write a workspace config file and return its path."""
    config_file = tmp_path / WORKSPACE_CONFIG_FILENAME
    config_file.write_text(content, encoding="utf-8")
    return config_file


# ###############
# Normal Cases
# ###############


def test_minimal_config(tmp_path: Path) -> None:
    """A config with only the archive uses defaults for everything else."""
    config = load_workspace_config(_write_config(tmp_path, "archive: export/project.zip\n"))

    assert isinstance(config, WorkspaceConfig)
    assert config.archive == "export/project.zip"
    assert config.output_directory == "draftgen-output"
    assert config.runtime_module == "draftgen_runtime"
    assert config.supported_export_version == "1.0"
    assert config.log_level == "INFO"


def test_full_config(tmp_path: Path) -> None:
    """All optional fields are read."""
    content = """\
archive: game.zip
output-directory: generated
runtime-module: game.runtime
supported-export-version: "2.1"
log-level: debug
"""
    config = load_workspace_config(_write_config(tmp_path, content))
    assert config.output_directory == "generated"
    assert config.runtime_module == "game.runtime"
    assert config.supported_export_version == "2.1"
    assert config.log_level == "DEBUG"


def test_unquoted_version_is_accepted(tmp_path: Path) -> None:
    """An unquoted version that YAML reads as a number is converted back to text."""
    config = load_workspace_config(_write_config(tmp_path, "archive: a.zip\nsupported-export-version: 1.5\n"))
    assert config.supported_export_version == "1.5"


def test_dump_round_trip(tmp_path: Path) -> None:
    """A dumped configuration loads back unchanged."""
    original = WorkspaceConfig(archive="a.zip", output_directory="out", runtime_module="rt", log_level="WARNING")
    restored = load_workspace_config(_write_config(tmp_path, dump_workspace_config(original)))
    assert restored == original


# ###############
# Error Cases
# ###############


def test_missing_file(tmp_path: Path) -> None:
    """A missing config file raises WorkspaceConfigError."""
    with pytest.raises(WorkspaceConfigError, match="not found"):
        load_workspace_config(tmp_path / WORKSPACE_CONFIG_FILENAME)


@pytest.mark.parametrize(
    ("content", "message"),
    [
        ("archive: [unclosed\n", "Invalid YAML"),
        ("- just\n- a list\n", "YAML mapping"),
        ("output-directory: out\n", "missing required field 'archive'"),
        ("archive: ''\n", "non-empty string"),
        ("archive: a.zip\noutput-directory: 5\n", "non-empty string"),
        ("archive: a.zip\nruntime-module: not a module\n", "dotted module name"),
        ("archive: a.zip\nlog-level: loud\n", "log-level"),
    ],
)
def test_invalid_config(tmp_path: Path, content: str, message: str) -> None:
    """Invalid configurations raise WorkspaceConfigError with a helpful message."""
    with pytest.raises(WorkspaceConfigError, match=message):
        load_workspace_config(_write_config(tmp_path, content))
