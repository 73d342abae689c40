# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""End-to-end tests for the incremental import pipeline."""

from pathlib import Path
from typing import Any

import pytest

from draftgen.importer.archive import ArchiveError, write_archive
from draftgen.importer.import_data import ImportDataError, read_import_data
from draftgen.model import TRACKED_DOMAINS, Domain
from draftgen.pipeline import (
    ImportStatus,
    JsonAssetMaterializer,
    PipelineConfig,
    check_import_status,
    force_complete_reimport,
    regenerate_assets,
    reimport_changes,
    set_package_default,
)

ALL_TARGETS = [
    "demo_gv_game.py",
    "demo_global_variables.py",
    "demo_type_flow_fragment.py",
    "demo_type_dialogue_fragment.py",
    "demo_type_condition.py",
    "demo_type_instruction.py",
    "demo_object_types.py",
    "demo_database.py",
    "demo_methods_provider.py",
    "demo_expresso_scripts.py",
    "demo_strings_en.csv",
    "demo_strings_de.csv",
]

# ###############
# Helpers
# ###############


def _config(archive_path: Path, *, assets: bool = False, version: str | None = None) -> PipelineConfig:
    output = archive_path.parent / "out"
    materializer = JsonAssetMaterializer(output / "assets", output / "source") if assets else None
    return PipelineConfig(
        archive_path=archive_path,
        output_dir=output,
        supported_export_version=version,
        materializer=materializer,
    )


def _source_files(config: PipelineConfig) -> dict[str, bytes]:
    return {p.name: p.read_bytes() for p in sorted(config.source_dir.iterdir())}


def _stored_hashes(config: PipelineConfig) -> dict[Domain, str]:
    return read_import_data(config.import_data_path).settings.domain_hashes


# ###############
# Full and incremental passes
# ###############


def test_first_import_generates_everything(archive_path: Path) -> None:
    """Without a snapshot every domain is dirty and every target is written."""
    config = _config(archive_path)
    report = reimport_changes(config)

    assert report.ok
    assert report.dirty == list(TRACKED_DOMAINS)
    assert report.written == ALL_TARGETS
    assert set(_source_files(config)) == set(ALL_TARGETS) | {"__init__.py"}
    assert set(_stored_hashes(config)) == set(TRACKED_DOMAINS)


def test_generated_global_variable_default(archive_path: Path) -> None:
    """The Game.IntValue variable with archive value "5" is emitted with the integer 5."""
    config = _config(archive_path)
    reimport_changes(config)
    text = (config.source_dir / "demo_gv_game.py").read_text(encoding="utf-8")
    assert 'self.IntValue = IntVariable("Game.IntValue", 5, description="A counter")' in text
    aggregate = (config.source_dir / "demo_global_variables.py").read_text(encoding="utf-8")
    assert "self.Game = DemoGameVariables()" in aggregate


def test_second_import_is_a_no_op(archive_path: Path) -> None:
    """Importing an unchanged archive again writes nothing and changes no file."""
    config = _config(archive_path)
    reimport_changes(config)
    before = _source_files(config)
    snapshot = config.import_data_path.read_bytes()

    report = reimport_changes(config)

    assert report.dirty == []
    assert report.written == []
    assert report.removed == []
    assert _source_files(config) == before
    assert config.import_data_path.read_bytes() == snapshot


def test_force_complete_reimport_rewrites_identical_files(archive_path: Path) -> None:
    """A forced pass regenerates every target with byte-identical content."""
    config = _config(archive_path)
    reimport_changes(config)
    before = _source_files(config)

    report = force_complete_reimport(config)

    assert report.written == ALL_TARGETS
    assert _source_files(config) == before


def test_hierarchy_only_change(archive_path: Path, documents: dict[str, Any]) -> None:
    """A hierarchy edit dirties only the hierarchy, which owns no generated file."""
    config = _config(archive_path)
    reimport_changes(config)
    documents["Hierarchy"]["TechnicalName"] = "Renamed"
    write_archive(archive_path, documents)

    report = reimport_changes(config)

    assert report.dirty == [Domain.HIERARCHY]
    assert report.written == []


def test_object_definition_change_regenerates_global_variables(archive_path: Path, documents: dict[str, Any]) -> None:
    """Object type changes also regenerate the global variable modules."""
    config = _config(archive_path)
    reimport_changes(config)
    documents["ObjectDefinitions"]["Types"][1]["Properties"][0]["Tooltip"] = "Who talks"
    write_archive(archive_path, documents)

    report = reimport_changes(config)

    assert report.dirty == [Domain.GLOBAL_VARIABLES, Domain.OBJECT_DEFINITIONS]
    assert report.written == ALL_TARGETS[:7]


def test_project_identity_change_regenerates_everything(archive_path: Path, documents: dict[str, Any]) -> None:
    """Stored hashes of a different project are ignored."""
    config = _config(archive_path)
    reimport_changes(config)
    documents["Project"]["Guid"] = "0x02"
    write_archive(archive_path, documents)

    assert reimport_changes(config).dirty == list(TRACKED_DOMAINS)


def test_unreadable_snapshot_is_a_warning(archive_path: Path) -> None:
    """A corrupt snapshot is ignored with a warning; the pass regenerates everything."""
    config = _config(archive_path)
    config.import_data_path.parent.mkdir(parents=True)
    config.import_data_path.write_text("garbage", encoding="utf-8")

    report = reimport_changes(config)

    assert report.dirty == list(TRACKED_DOMAINS)
    assert any("Ignoring unreadable import data" in w for w in report.warnings)
    assert read_import_data(config.import_data_path).has_cached_version


def test_export_version_mismatch_is_reported(archive_path: Path) -> None:
    """A different export version is a warning, not a failure."""
    report = reimport_changes(_config(archive_path, version="2.0"))
    assert report.ok
    assert report.warnings == ["Archive export version '1.0' differs from the supported version '2.0'."]


# ###############
# Failures
# ###############


def test_archive_error_writes_nothing(tmp_path: Path) -> None:
    """A missing archive aborts before any output exists."""
    config = _config(tmp_path / "missing.zip")
    with pytest.raises(ArchiveError):
        reimport_changes(config)
    assert not config.output_dir.exists()


def test_corrupt_archive_keeps_previous_state(archive_path: Path) -> None:
    """A corrupt archive leaves the snapshot and generated files untouched."""
    config = _config(archive_path)
    reimport_changes(config)
    before = _source_files(config)
    snapshot = config.import_data_path.read_bytes()
    archive_path.write_text("not a zip", encoding="utf-8")

    with pytest.raises(ArchiveError):
        reimport_changes(config)

    assert _source_files(config) == before
    assert config.import_data_path.read_bytes() == snapshot


def test_malformed_domain_is_skipped(archive_path: Path, documents: dict[str, Any]) -> None:
    """A malformed document keeps its previous output and stored hash."""
    config = _config(archive_path)
    reimport_changes(config)
    stored = _stored_hashes(config)
    documents["Packages"] = "broken"
    documents["Languages"]["fr"] = {"LanguageName": "French"}
    write_archive(archive_path, documents)

    report = reimport_changes(config)

    assert set(report.malformed) == {Domain.PACKAGES}
    assert not report.ok
    assert "demo_database.py" not in report.written
    assert "demo_strings_fr.csv" in report.written
    assert _stored_hashes(config)[Domain.PACKAGES] == stored[Domain.PACKAGES]
    assert read_import_data(config.import_data_path).imported_package_names() == ["Main", "Extra"]


def test_collision_keeps_domain_dirty(archive_path: Path, documents: dict[str, Any]) -> None:
    """A failed target withholds the hashes of its domain and of the coupled source domain."""
    documents["GlobalVariables"].append(
        {"Namespace": "Other", "Variables": [{"Variable": "Foo"}, {"Variable": "Foo "}]},
    )
    write_archive(archive_path, documents)
    config = _config(archive_path)

    report = reimport_changes(config)

    assert set(report.failed) == {"demo_gv_other.py"}
    assert "demo_gv_game.py" in report.written
    stored = _stored_hashes(config)
    assert Domain.GLOBAL_VARIABLES not in stored
    assert Domain.OBJECT_DEFINITIONS not in stored
    assert Domain.PACKAGES in stored

    second = reimport_changes(config)
    assert second.dirty == [Domain.GLOBAL_VARIABLES, Domain.OBJECT_DEFINITIONS]


# ###############
# Stale targets
# ###############


def test_stale_targets_are_removed(archive_path: Path, documents: dict[str, Any]) -> None:
    """Targets the model no longer produces are deleted after a successful pass."""
    config = _config(archive_path)
    reimport_changes(config)
    del documents["Languages"]["de"]
    write_archive(archive_path, documents)

    report = reimport_changes(config)

    assert report.removed == ["demo_strings_de.csv"]
    assert not (config.source_dir / "demo_strings_de.csv").exists()
    assert "demo_strings_de.csv" not in read_import_data(config.import_data_path).generated_targets


def test_stale_targets_survive_failed_pass(archive_path: Path, documents: dict[str, Any]) -> None:
    """While anything fails, stale targets stay on disk and remain recorded."""
    config = _config(archive_path)
    reimport_changes(config)
    del documents["Languages"]["de"]
    documents["GlobalVariables"][0]["Variables"].append({"Variable": "IntValue "})
    write_archive(archive_path, documents)

    report = reimport_changes(config)

    assert report.failed
    assert report.removed == []
    assert (config.source_dir / "demo_strings_de.csv").exists()
    assert "demo_strings_de.csv" in read_import_data(config.import_data_path).generated_targets


# ###############
# Package load overrides
# ###############


def test_package_default_override(archive_path: Path) -> None:
    """An override is stored in the snapshot and regenerates the database on the next pass."""
    config = _config(archive_path)
    reimport_changes(config)

    set_package_default(config, "Extra", True)
    assert read_import_data(config.import_data_path).package_load_settings["Extra"] is True

    report = reimport_changes(config)
    assert report.dirty == [Domain.PACKAGES]
    assert report.written == ["demo_database.py"]
    text = (config.source_dir / "demo_database.py").read_text(encoding="utf-8")
    assert 'PackageInfo(name="Extra", id="0x11", is_default=True),' in text


def test_package_default_unknown_package(archive_path: Path) -> None:
    """Overriding a package that does not exist raises KeyError."""
    config = _config(archive_path)
    reimport_changes(config)
    with pytest.raises(KeyError):
        set_package_default(config, "Nope", True)


def test_package_default_requires_snapshot(archive_path: Path) -> None:
    """Without a snapshot there is nothing to override."""
    with pytest.raises(ImportDataError):
        set_package_default(_config(archive_path), "Main", False)


# ###############
# Status and assets
# ###############


def test_status_without_snapshot(archive_path: Path) -> None:
    """Without a snapshot the import data asset is missing."""
    assert check_import_status(_config(archive_path)) is ImportStatus.IMPORT_DATA_ASSET_MISSING


def test_status_after_import(archive_path: Path) -> None:
    """A complete import is valid, with or without a materializer."""
    config = _config(archive_path)
    reimport_changes(config)
    assert check_import_status(config) is ImportStatus.VALID

    with_assets = _config(archive_path, assets=True)
    report = reimport_changes(with_assets)
    assert report.materialized == ["DemoGlobalVariables", "DemoDatabase", "Package_Main", "Package_Extra"]
    assert check_import_status(with_assets) is ImportStatus.VALID


def test_status_missing_generated_file(archive_path: Path) -> None:
    """A deleted generated file is reported."""
    config = _config(archive_path)
    reimport_changes(config)
    (config.source_dir / "demo_object_types.py").unlink()
    assert check_import_status(config) is ImportStatus.REQUIRED_FILE_MISSING


def test_status_missing_and_invalid_assets(archive_path: Path) -> None:
    """A missing asset and an unreadable asset are reported differently."""
    config = _config(archive_path, assets=True)
    reimport_changes(config)
    assets = config.output_dir / "assets"

    (assets / "Package_Extra.asset.json").unlink()
    assert check_import_status(config) is ImportStatus.REQUIRED_ASSET_MISSING

    (assets / "DemoDatabase.asset.json").write_text("{", encoding="utf-8")
    assert check_import_status(config) is ImportStatus.REQUIRED_FILE_MISSING


def test_regenerate_assets_from_snapshot(archive_path: Path) -> None:
    """Assets are recreated from the snapshot without reading the archive."""
    config = _config(archive_path, assets=True)
    reimport_changes(config)
    for asset in (config.output_dir / "assets").iterdir():
        asset.unlink()
    archive_path.unlink()

    report = regenerate_assets(config)

    assert report.asset_errors == []
    assert len(report.materialized) == 4
    assert check_import_status(config) is ImportStatus.VALID


def test_regenerate_assets_requires_snapshot(archive_path: Path) -> None:
    """Regenerating assets without a snapshot raises ImportDataError."""
    with pytest.raises(ImportDataError):
        regenerate_assets(_config(archive_path, assets=True))


def test_colliding_package_assets_are_reported(archive_path: Path, documents: dict[str, Any]) -> None:
    """Two packages sharing an asset name fail materialization and the status is not valid."""
    documents["Packages"][0]["Name"] = "A B"
    documents["Packages"][1]["Name"] = "A_B"
    write_archive(archive_path, documents)
    config = _config(archive_path, assets=True)

    report = reimport_changes(config)

    assert not report.ok
    assert report.materialized == []
    assert len(report.asset_errors) == 1
    assert check_import_status(config) is ImportStatus.REQUIRED_ASSET_MISSING
