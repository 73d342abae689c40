# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Import pipeline front half: archive reading, model building, scripts and change detection."""

from draftgen.importer.archive import ArchiveError, open_archive, write_archive
from draftgen.importer.builder import BuildResult, MalformedData, apply_package_settings, build_model, import_domain
from draftgen.importer.changes import ChangeSet, compute_hashes, detect_changes
from draftgen.importer.import_data import ImportDataError, read_import_data, write_import_data
from draftgen.importer.scripts import gather_scripts, register_methods, translate_fragment

__all__ = [
    "ArchiveError",
    "open_archive",
    "write_archive",
    "BuildResult",
    "MalformedData",
    "apply_package_settings",
    "build_model",
    "import_domain",
    "ChangeSet",
    "compute_hashes",
    "detect_changes",
    "ImportDataError",
    "read_import_data",
    "write_import_data",
    "gather_scripts",
    "register_methods",
    "translate_fragment",
]
