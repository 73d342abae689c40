# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Workspace configuration for draftgen."""

from draftgen.workspace.config import (
    WORKSPACE_CONFIG_FILENAME,
    WorkspaceConfig,
    WorkspaceConfigError,
    dump_workspace_config,
    load_workspace_config,
)

__all__ = [
    "WORKSPACE_CONFIG_FILENAME",
    "WorkspaceConfig",
    "WorkspaceConfigError",
    "dump_workspace_config",
    "load_workspace_config",
]
