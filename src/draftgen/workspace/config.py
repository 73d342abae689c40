# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML parser for the draftgen workspace configuration file."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

# ###############
# Public Interface
# ###############

WORKSPACE_CONFIG_FILENAME = ".draftgen-workspace.yaml"
DEFAULT_OUTPUT_DIRECTORY = "draftgen-output"
DEFAULT_RUNTIME_MODULE = "draftgen_runtime"
DEFAULT_SUPPORTED_EXPORT_VERSION = "1.0"
DEFAULT_LOG_LEVEL = "INFO"


class WorkspaceConfigError(Exception):
    """Raised when a workspace configuration file is invalid or cannot be loaded."""


@dataclass
class WorkspaceConfig:
    """The parsed configuration for a draftgen workspace.

    Attributes:
        archive: Path (relative to the workspace root) of the project archive.
        output_directory: Relative path for generated sources and the import data snapshot.
        runtime_module: Module the generated code imports its base classes from.
        supported_export_version: Export format version this workspace expects.
        log_level: Name of the logging level used by the command-line tool.
    """

    archive: str
    output_directory: str = DEFAULT_OUTPUT_DIRECTORY
    runtime_module: str = DEFAULT_RUNTIME_MODULE
    supported_export_version: str = DEFAULT_SUPPORTED_EXPORT_VERSION
    log_level: str = DEFAULT_LOG_LEVEL


def load_workspace_config(path: Path) -> WorkspaceConfig:
    """Load and parse a draftgen workspace configuration file.

    Args:
        path: Path to the `.draftgen-workspace.yaml` file.

    Returns:
        A WorkspaceConfig instance populated from the file.

    Raises:
        WorkspaceConfigError: If the file cannot be read or the configuration is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise WorkspaceConfigError(f"Workspace config file not found: {path}") from None
    except OSError as exc:
        raise WorkspaceConfigError(f"Cannot read workspace config file: {exc}") from exc

    return _parse_workspace_config(text, source_label=str(path))


def dump_workspace_config(config: WorkspaceConfig) -> str:
    """Return the YAML text of *config*, as written by ``draftgen init``."""
    data = {
        "archive": config.archive,
        "output-directory": config.output_directory,
        "runtime-module": config.runtime_module,
        "supported-export-version": config.supported_export_version,
        "log-level": config.log_level,
    }
    return yaml.safe_dump(data, sort_keys=False)


# ################
# Implementation
# ################

_OPTIONAL_FIELDS: tuple[tuple[str, str], ...] = (
    ("output-directory", "output_directory"),
    ("runtime-module", "runtime_module"),
    ("supported-export-version", "supported_export_version"),
    ("log-level", "log_level"),
)

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


def _parse_workspace_config(text: str, source_label: str = "<string>") -> WorkspaceConfig:
    """Parse workspace config YAML text into a WorkspaceConfig.

    Args:
        text: Raw YAML content.
        source_label: Human-readable label used in error messages (e.g. the file path).

    Returns:
        A WorkspaceConfig instance.

    Raises:
        WorkspaceConfigError: If the YAML is invalid or required fields are missing.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise WorkspaceConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if not isinstance(data, dict):
        raise WorkspaceConfigError(f"{source_label}: workspace config must be a YAML mapping")

    config = WorkspaceConfig(archive=_require_string(data, "archive", source_label))
    for key, attribute in _OPTIONAL_FIELDS:
        if key in data:
            setattr(config, attribute, _require_string(data, key, source_label))

    if not all(part.isidentifier() for part in config.runtime_module.split(".")):
        raise WorkspaceConfigError(f"{source_label}: 'runtime-module' must be a dotted module name")
    config.log_level = config.log_level.upper()
    if config.log_level not in _LOG_LEVELS:
        raise WorkspaceConfigError(f"{source_label}: unknown 'log-level' {config.log_level!r}")
    return config


def _require_string(mapping: dict[str, object], key: str, source_label: str) -> str:
    """Extract a required string field from a mapping, raising WorkspaceConfigError if missing."""
    if key not in mapping:
        raise WorkspaceConfigError(f"{source_label}: missing required field '{key}'")
    value = mapping[key]
    if isinstance(value, (int, float)) and not isinstance(value, bool) and key == "supported-export-version":
        # An unquoted version such as 1.0 is read as a number.
        return str(value)
    if not isinstance(value, str) or not value.strip():
        raise WorkspaceConfigError(f"{source_label}: '{key}' must be a non-empty string")
    return value
