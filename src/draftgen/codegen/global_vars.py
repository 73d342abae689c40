# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Emits the global variable modules.

One module per namespace defines a variable set class with one member per
variable. The aggregate module defines the project's global variables class
holding exactly one instance of every namespace class.
"""

from __future__ import annotations

from draftgen.codegen.identifiers import NameCollision, check_unique, check_unique_mapped, class_prefix
from draftgen.codegen.writer import CodeWriter, docstring, header, python_literal
from draftgen.model.entities import GlobalVariableNamespace, ImportData
from draftgen.model.types import VariableType

# ###############
# Public Interface
# ###############

VARIABLE_CLASSES: dict[VariableType, str] = {
    VariableType.BOOLEAN: "BoolVariable",
    VariableType.INTEGER: "IntVariable",
    VariableType.STRING: "StringVariable",
    VariableType.MULTI_LANGUAGE_STRING: "MultiLanguageStringVariable",
}


def aggregate_class_name(model: ImportData) -> str:
    return f"{class_prefix(model.project)}GlobalVariables"


def render_namespace(model: ImportData, namespace: GlobalVariableNamespace, runtime_module: str) -> str:
    """Render the module defining the variable set class of *namespace*.

    Raises:
        NameCollision: If two variables map to the same member name, or a
            variable maps to a member the base class already uses.
    """
    scope = f"namespace '{namespace.namespace}'"
    members = check_unique(scope, [v.variable for v in namespace.variables])
    for name, identifier in members.items():
        if identifier in _VARIABLE_SET_MEMBERS:
            raise NameCollision(scope, [name, f"{identifier} (variable set member)"], identifier)

    used = sorted({VARIABLE_CLASSES[v.type] for v in namespace.variables} | {"VariableSet"})
    w = CodeWriter()
    header(w, model.project, f"Global variables of namespace {namespace.namespace}.")
    w.blank()
    w.line(f"from {runtime_module} import {', '.join(used)}")
    w.blank(2)
    with w.block(f"class {namespace.type_name}(VariableSet):"):
        docstring(w, namespace.description or f"Variables of namespace {namespace.namespace}.")
        w.blank()
        w.line(f"namespace = {python_literal(namespace.namespace)}")
        w.blank()
        with w.block("def __init__(self) -> None:"):
            w.line("super().__init__()")
            for variable in namespace.variables:
                identifier = members[variable.variable]
                qualified = python_literal(f"{namespace.namespace}.{variable.variable}")
                args = [qualified, python_literal(variable.value)]
                if variable.description:
                    args.append(f"description={python_literal(variable.description)}")
                w.line(f"self.{identifier} = {VARIABLE_CLASSES[variable.type]}({', '.join(args)})")
                w.line(f"self.variables.append(self.{identifier})")
    return w.text()


def render_aggregate(model: ImportData, module_names: dict[str, str], runtime_module: str) -> str:
    """Render the module holding one instance of every namespace class.

    Args:
        model: The import data model.
        module_names: Namespace name to the module name of its class.
        runtime_module: Module providing the runtime base classes.

    Raises:
        NameCollision: If two namespaces map to the same member, class or
            module name.
    """
    namespaces = model.global_variables
    members = check_unique("global variable namespaces", [ns.namespace for ns in namespaces])
    check_unique_mapped("global variable classes", [ns.namespace for ns in namespaces], _type_name_of(model))
    check_unique_mapped("global variable modules", [ns.namespace for ns in namespaces], module_names.__getitem__)
    for name, identifier in members.items():
        if identifier in _AGGREGATE_MEMBERS:
            raise NameCollision("global variable namespaces", [name, f"{identifier} (container member)"], identifier)

    w = CodeWriter()
    header(w, model.project, "Global variables of the project, one instance per namespace.")
    w.blank()
    w.line(f"from {runtime_module} import GlobalVariablesBase")
    if namespaces:
        w.blank()
        for ns in namespaces:
            w.line(f"from .{module_names[ns.namespace]} import {ns.type_name}")
    w.blank(2)
    with w.block(f"class {aggregate_class_name(model)}(GlobalVariablesBase):"):
        docstring(w, f"All global variables of project {_project_label(model)}.")
        w.blank()
        with w.block("def __init__(self) -> None:"):
            w.line("super().__init__()")
            for ns in namespaces:
                identifier = members[ns.namespace]
                w.line(f"self.{identifier} = {ns.type_name}()")
                w.line(f"self.variable_sets.append(self.{identifier})")
    return w.text()


# ################
# Implementation
# ################

_VARIABLE_SET_MEMBERS = frozenset({"namespace", "variables"})
_AGGREGATE_MEMBERS = frozenset({"variable_sets"})


def _type_name_of(model: ImportData):
    by_name = {ns.namespace: ns.type_name for ns in model.global_variables}
    return by_name.__getitem__


def _project_label(model: ImportData) -> str:
    if model.project is None:
        return "unnamed"
    return model.project.name or model.project.technical_name or model.project.guid
