# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Emits the database glue module that lists the imported packages."""

from __future__ import annotations

from draftgen.codegen.identifiers import class_prefix
from draftgen.codegen.writer import CodeWriter, docstring, header, python_literal
from draftgen.model.entities import ImportData

# ###############
# Public Interface
# ###############


def database_class_name(model: ImportData) -> str:
    return f"{class_prefix(model.project)}Database"


def render_database(
    model: ImportData,
    global_variables_module: str,
    global_variables_class: str,
    runtime_module: str,
) -> str:
    """Render the database module of *model*.

    The database class names the project, references the global variables
    class and lists every package with its id and default-load flag, in
    archive order.
    """
    project = model.project
    w = CodeWriter()
    header(w, project, "Database glue referencing the imported packages.")
    w.blank()
    w.line(f"from {runtime_module} import DatabaseBase, PackageInfo")
    w.blank()
    w.line(f"from .{global_variables_module} import {global_variables_class}")
    w.blank(2)
    with w.block(f"class {database_class_name(model)}(DatabaseBase):"):
        docstring(w, "Packages of the project and their default-load flags.")
        w.blank()
        w.line(f"project_name = {python_literal(project.name if project else '')}")
        w.line(f"project_guid = {python_literal(project.guid if project else '')}")
        w.line(f"global_variables_class = {global_variables_class}")
        if not model.packages:
            w.line("packages: tuple[PackageInfo, ...] = ()")
            return w.text()
        with w.block("packages: tuple[PackageInfo, ...] = ("):
            for package in model.packages:
                args = [
                    f"name={python_literal(package.name)}",
                    f"id={python_literal(package.id)}",
                    f"is_default={python_literal(package.is_default_package)}",
                ]
                if package.description:
                    args.append(f"description={python_literal(package.description)}")
                w.line(f"PackageInfo({', '.join(args)}),")
        w.line(")")
    return w.text()
