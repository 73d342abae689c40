# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Incremental import workflow for project archives.

One pass reads the archive, builds a fresh model, compares its per-domain
hashes with the ones stored in the previous snapshot and regenerates only the
targets owned by dirty domains. Every file is replaced atomically. A domain's
stored hash is only updated when all of its targets were rendered and
written, so a failed domain stays dirty and is retried on the next pass.

An :class:`~draftgen.importer.archive.ArchiveError` aborts the pass before
anything is written: the previous snapshot and all generated files stay as
they were.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from draftgen.codegen.generator import DEFAULT_RUNTIME_MODULE, generate, plan_targets
from draftgen.importer.archive import open_archive
from draftgen.importer.builder import build_model
from draftgen.importer.changes import COUPLED_DOMAINS, compute_hashes, detect_changes
from draftgen.importer.import_data import (
    IMPORT_DATA_FILENAME,
    ImportDataError,
    atomic_write_text,
    read_import_data,
    write_import_data,
)
from draftgen.model.entities import ImportData
from draftgen.model.types import Domain
from draftgen.pipeline.materializer import (
    AssetMaterializationError,
    AssetMaterializer,
    JsonAssetMaterializer,
    materialize_all,
    required_asset_names,
)
from draftgen.validation.checks import validate
from draftgen.workspace.config import WorkspaceConfig

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

SOURCE_DIRECTORY = "source"
ASSETS_DIRECTORY = "assets"
PACKAGE_INIT = "__init__.py"


class ImportStatus(str, Enum):
    """Result of :func:`check_import_status`."""

    VALID = "Valid"
    IMPORT_DATA_ASSET_MISSING = "ImportDataAssetMissing"
    REQUIRED_FILE_MISSING = "RequiredFileMissing"
    REQUIRED_ASSET_MISSING = "RequiredAssetMissing"


@dataclass
class PipelineConfig:
    """Everything a pipeline entry point needs; there is no global state.

    Attributes:
        archive_path: The project archive to import.
        output_dir: Root of the generated output and the snapshot.
        runtime_module: Module the generated code imports its base classes from.
        supported_export_version: Expected export version, ``None`` to skip the check.
        materializer: Receives the asset requests after each pass, if set.
    """

    archive_path: Path
    output_dir: Path
    runtime_module: str = DEFAULT_RUNTIME_MODULE
    supported_export_version: str | None = None
    materializer: AssetMaterializer | None = None

    @property
    def source_dir(self) -> Path:
        return self.output_dir / SOURCE_DIRECTORY

    @property
    def import_data_path(self) -> Path:
        return self.output_dir / IMPORT_DATA_FILENAME

    @classmethod
    def from_workspace(cls, root: Path, config: WorkspaceConfig) -> PipelineConfig:
        """Resolve a workspace configuration against the workspace *root*.

        The reference JSON materializer writes into ``<output>/assets``.
        """
        output_dir = root / config.output_directory
        return cls(
            archive_path=root / config.archive,
            output_dir=output_dir,
            runtime_module=config.runtime_module,
            supported_export_version=config.supported_export_version,
            materializer=JsonAssetMaterializer(output_dir / ASSETS_DIRECTORY, output_dir / SOURCE_DIRECTORY),
        )


@dataclass
class ImportReport:
    """Summary of one pipeline pass.

    Attributes:
        dirty: Domains regenerated in this pass, in tracking order.
        written: Targets written.
        failed: Target name to error message for targets not written.
        removed: Stale targets deleted.
        malformed: Domains whose document could not be parsed.
        warnings: Model warnings, e.g. an export version mismatch.
        materialized: Assets created or updated.
        asset_errors: Messages of failed asset materializations.
    """

    dirty: list[Domain] = field(default_factory=list)
    written: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)
    removed: list[str] = field(default_factory=list)
    malformed: dict[Domain, str] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)
    materialized: list[str] = field(default_factory=list)
    asset_errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True if nothing failed in this pass."""
        return not (self.failed or self.malformed or self.asset_errors)


def reimport_changes(config: PipelineConfig) -> ImportReport:
    """Import the archive and regenerate the targets of the dirty domains only."""
    return _run_import(config, force=False)


def force_complete_reimport(config: PipelineConfig) -> ImportReport:
    """Import the archive and regenerate every target."""
    return _run_import(config, force=True)


def regenerate_assets(config: PipelineConfig) -> ImportReport:
    """Materialize all assets from the stored snapshot without reading the archive.

    Raises:
        ImportDataError: If there is no readable snapshot.
    """
    model = read_import_data(config.import_data_path)
    report = ImportReport()
    if config.materializer is None:
        report.warnings.append("No asset materializer configured.")
        return report
    report.materialized, report.asset_errors = materialize_all(config.materializer, model)
    return report


def check_import_status(config: PipelineConfig) -> ImportStatus:
    """Check that the snapshot, the generated files and the assets are all present.

    Returns:
        ``ImportDataAssetMissing`` without a readable snapshot,
        ``RequiredFileMissing`` if a generated file is missing or an asset is
        invalid, ``RequiredAssetMissing`` if a required asset does not exist
        or two packages map to the same asset name,
        ``Valid`` otherwise.
    """
    try:
        model = read_import_data(config.import_data_path)
    except ImportDataError as exc:
        logger.debug("No usable import data: %s", exc)
        return ImportStatus.IMPORT_DATA_ASSET_MISSING

    for target in plan_targets(model, runtime_module=config.runtime_module):
        if not (config.source_dir / target.name).exists():
            logger.debug("Generated file %s is missing", target.name)
            return ImportStatus.REQUIRED_FILE_MISSING

    if config.materializer is None:
        return ImportStatus.VALID
    assets = config.materializer.list_assets()
    if any(not asset.valid for asset in assets):
        return ImportStatus.REQUIRED_FILE_MISSING
    try:
        required = required_asset_names(model)
    except AssetMaterializationError as exc:
        logger.debug("Required assets cannot be named: %s", exc)
        return ImportStatus.REQUIRED_ASSET_MISSING
    if not required <= {asset.name for asset in assets}:
        return ImportStatus.REQUIRED_ASSET_MISSING
    return ImportStatus.VALID


def set_package_default(config: PipelineConfig, package_name: str, is_default: bool) -> ImportData:
    """Override whether *package_name* is loaded by default and store it in the snapshot.

    The override survives reimports; the next pass regenerates the database.

    Raises:
        ImportDataError: If there is no readable snapshot.
        KeyError: If the snapshot has no package of that name.
    """
    model = read_import_data(config.import_data_path)
    package = model.find_package(package_name)
    if package is None:
        raise KeyError(package_name)
    model.package_load_settings[package_name] = is_default
    package.is_default_package = is_default
    write_import_data(model, config.import_data_path)
    logger.info("Package '%s' default load set to %s", package_name, is_default)
    return model


# ################
# Implementation
# ################


def _run_import(config: PipelineConfig, *, force: bool) -> ImportReport:
    documents = open_archive(config.archive_path)
    report = ImportReport()
    previous = _load_previous(config, report)

    result = build_model(documents, previous)
    model = result.model
    report.malformed = dict(result.malformed)
    report.warnings.extend(validate(model, config.supported_export_version).messages)
    for warning in report.warnings:
        logger.warning("%s", warning)

    stored = _stored_hashes(previous, model)
    hashes = compute_hashes(model)
    changes = detect_changes(hashes, stored, force=force, exclude=result.malformed)
    report.dirty = changes.ordered_dirty()
    logger.info("Dirty domains: %s", ", ".join(d.value for d in report.dirty) or "none")

    generation = generate(model, changes.dirty, runtime_module=config.runtime_module)
    report.failed = dict(generation.failures)
    for name, text in generation.documents.items():
        try:
            atomic_write_text(config.source_dir / name, text)
        except OSError as exc:
            logger.error("Cannot write %s: %s", name, exc)
            report.failed[name] = str(exc)
        else:
            report.written.append(name)
    _ensure_package_init(config.source_dir)

    failed_domains: set[Domain] = set()
    for name in report.failed:
        failed_domains.update(generation.owners[name])
    for source, coupled in COUPLED_DOMAINS.items():
        if failed_domains.intersection(coupled):
            failed_domains.add(source)
    new_hashes = dict(stored)
    for domain in changes.dirty - failed_domains:
        new_hashes[domain] = hashes[domain]
    model.settings.domain_hashes = new_hashes

    planned = [t.name for t in plan_targets(model, runtime_module=config.runtime_module)]
    kept_stale = _remove_stale(config, model.generated_targets, planned, report)
    model.generated_targets = planned + kept_stale

    write_import_data(model, config.import_data_path)
    model.has_cached_version = True

    if config.materializer is not None:
        report.materialized, report.asset_errors = materialize_all(config.materializer, model)

    logger.info(
        "Import finished: %d written, %d failed, %d removed",
        len(report.written),
        len(report.failed),
        len(report.removed),
    )
    return report


def _load_previous(config: PipelineConfig, report: ImportReport) -> ImportData | None:
    if not config.import_data_path.exists():
        return None
    try:
        return read_import_data(config.import_data_path)
    except ImportDataError as exc:
        message = f"Ignoring unreadable import data: {exc}"
        report.warnings.append(message)
        return None


def _stored_hashes(previous: ImportData | None, model: ImportData) -> dict[Domain, str]:
    """Return the hashes of *previous* if it belongs to the same project as *model*."""
    if previous is None or previous.project is None or model.project is None:
        return {}
    same = (previous.project.guid, previous.project.technical_name, previous.project.name) == (
        model.project.guid,
        model.project.technical_name,
        model.project.name,
    )
    return dict(previous.settings.domain_hashes) if same else {}


def _remove_stale(config: PipelineConfig, previous: list[str], planned: list[str], report: ImportReport) -> list[str]:
    """Delete targets of earlier passes that the current model no longer produces.

    Nothing is deleted while any domain or target failed in this pass; the
    stale names are returned so a later pass can remove them.
    """
    stale = [name for name in previous if name not in set(planned)]
    if not stale:
        return []
    if report.failed or report.malformed:
        logger.info("Keeping %d stale file(s) until the import succeeds", len(stale))
        return stale
    for name in stale:
        (config.source_dir / name).unlink(missing_ok=True)
        report.removed.append(name)
        logger.info("Removed stale file %s", name)
    return []


def _ensure_package_init(source_dir: Path) -> None:
    init = source_dir / PACKAGE_INIT
    if not init.exists():
        atomic_write_text(init, "")
