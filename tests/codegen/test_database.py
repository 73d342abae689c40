# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the database glue module."""

import ast
from typing import Any

from draftgen.codegen.database import database_class_name, render_database
from draftgen.importer.builder import build_model
from draftgen.model import ImportData, ProjectDef


def test_render_database_lists_packages(documents: dict[str, Any]) -> None:
    """Every package appears with its id and default-load flag, in archive order."""
    model = build_model(documents).model
    text = render_database(model, "demo_global_variables", "DemoGlobalVariables", "draftgen_runtime")

    assert "from draftgen_runtime import DatabaseBase, PackageInfo" in text
    assert "from .demo_global_variables import DemoGlobalVariables" in text
    assert "class DemoDatabase(DatabaseBase):" in text
    assert 'project_guid = "0x01"' in text
    main = 'PackageInfo(name="Main", id="0x10", is_default=True, description="Main package"),'
    extra = 'PackageInfo(name="Extra", id="0x11", is_default=False),'
    assert text.index(main) < text.index(extra)
    assert database_class_name(model) == "DemoDatabase"
    ast.parse(text)


def test_render_database_reflects_load_overrides(documents: dict[str, Any]) -> None:
    """User overrides applied to the model show up in the module."""
    previous = build_model(documents).model
    previous.package_load_settings["Extra"] = True
    model = build_model(documents, previous).model
    text = render_database(model, "demo_global_variables", "DemoGlobalVariables", "rt")
    assert 'PackageInfo(name="Extra", id="0x11", is_default=True),' in text


def test_render_database_without_packages() -> None:
    """A project without packages has an empty package tuple."""
    model = ImportData(project=ProjectDef(name="P", guid="1"))
    text = render_database(model, "p_global_variables", "PGlobalVariables", "rt")
    assert "packages: tuple[PackageInfo, ...] = ()" in text
    ast.parse(text)
