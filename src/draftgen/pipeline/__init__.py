# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Pipeline entry points, status query, import coordination and asset materialization."""

from draftgen.pipeline.coordinator import ImportCoordinator
from draftgen.pipeline.materializer import (
    AssetInfo,
    AssetMaterializationError,
    AssetMaterializer,
    AssetRequest,
    JsonAssetMaterializer,
)
from draftgen.pipeline.pipeline import (
    ImportReport,
    ImportStatus,
    PipelineConfig,
    check_import_status,
    force_complete_reimport,
    regenerate_assets,
    reimport_changes,
    set_package_default,
)
from draftgen.pipeline.watcher import GeneratedCodeWatcher

__all__ = [
    "AssetInfo",
    "AssetMaterializationError",
    "AssetMaterializer",
    "AssetRequest",
    "GeneratedCodeWatcher",
    "ImportCoordinator",
    "ImportReport",
    "ImportStatus",
    "JsonAssetMaterializer",
    "PipelineConfig",
    "check_import_status",
    "force_complete_reimport",
    "regenerate_assets",
    "reimport_changes",
    "set_package_default",
]
