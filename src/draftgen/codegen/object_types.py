# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Emits one class module per object type and the type registry module."""

from __future__ import annotations

from draftgen.codegen.identifiers import NameCollision, check_unique, class_prefix
from draftgen.codegen.writer import CodeWriter, docstring, header, python_literal
from draftgen.model.entities import Capabilities, ImportData, ObjectTypeDefinition

# ###############
# Public Interface
# ###############

ROOT_BASE_CLASS = "ObjectBase"


def annotation_for(type_name: str) -> str:
    """Return the Python annotation used for a property or parameter of *type_name*."""
    return _ANNOTATIONS.get(type_name.strip().lower(), "object")


def type_class_names(model: ImportData) -> dict[str, str]:
    """Map every object type name to its generated class name.

    Raises:
        NameCollision: If two types map to the same class name.
    """
    prefix = class_prefix(model.project)
    types = model.object_definitions.types
    by_class = check_unique("object types", [t.effective_class_name for t in types])
    names = {t.type: f"{prefix}{by_class[t.effective_class_name]}" for t in types}
    seen: dict[str, str] = {}
    for type_def in types:
        class_name = names[type_def.type]
        if class_name in seen:
            raise NameCollision("object types", [seen[class_name], type_def.type], class_name)
        seen[class_name] = type_def.type
    return names


def render_type(
    model: ImportData,
    type_def: ObjectTypeDefinition,
    module_names: dict[str, str],
    runtime_module: str,
) -> str:
    """Render the module defining the class of *type_def*.

    The base class is the class of the parent type when the parent is defined
    in the archive, the runtime root class otherwise.

    Raises:
        NameCollision: If class names collide, or two properties map to the
            same member name.
    """
    class_names = type_class_names(model)
    scope = f"object type '{type_def.type}'"
    members = check_unique(scope, [p.property for p in type_def.properties])
    for name, identifier in members.items():
        if identifier in _CLASS_MEMBERS:
            raise NameCollision(scope, [name, f"{identifier} (class member)"], identifier)

    parent = type_def.inherits_from
    parent_defined = bool(parent) and parent in class_names and parent != type_def.type
    base = class_names[parent] if parent_defined else ROOT_BASE_CLASS

    w = CodeWriter()
    header(w, model.project, f"Object type {type_def.type}.")
    w.blank()
    runtime_names = ["Capabilities"] if parent_defined else ["Capabilities", ROOT_BASE_CLASS]
    w.line(f"from {runtime_module} import {', '.join(runtime_names)}")
    if parent_defined:
        w.blank()
        w.line(f"from .{module_names[parent]} import {base}")
    w.blank(2)
    with w.block(f"class {class_names[type_def.type]}({base}):"):
        docstring(w, f"Objects of type {type_def.type}.")
        w.blank()
        w.line(f"type_name = {python_literal(type_def.type)}")
        w.line(f"capabilities = {_capabilities_literal(type_def.capabilities)}")
        if type_def.properties:
            w.blank()
        for prop in type_def.properties:
            if prop.tooltip:
                w.line(f"# {' '.join(prop.tooltip.split())}")
            w.line(f"{members[prop.property]}: {annotation_for(prop.type)}")
    return w.text()


def render_registry(model: ImportData, module_names: dict[str, str]) -> str:
    """Render the module mapping every object type name to its class.

    Raises:
        NameCollision: If class names collide.
    """
    class_names = type_class_names(model)
    types = model.object_definitions.types
    w = CodeWriter()
    header(w, model.project, "Registry of all generated object type classes.")
    if types:
        w.blank()
        for type_def in types:
            w.line(f"from .{module_names[type_def.type]} import {class_names[type_def.type]}")
    w.blank()
    if not types:
        w.line("OBJECT_TYPES: dict[str, type] = {}")
        return w.text()
    with w.block("OBJECT_TYPES: dict[str, type] = {"):
        for type_def in types:
            w.line(f"{python_literal(type_def.type)}: {class_names[type_def.type]},")
    w.line("}")
    return w.text()


# ################
# Implementation
# ################

_CLASS_MEMBERS = frozenset({"type_name", "capabilities"})

_ANNOTATIONS: dict[str, str] = {
    "bool": "bool",
    "boolean": "bool",
    "int": "int",
    "integer": "int",
    "int32": "int",
    "int64": "int",
    "float": "float",
    "double": "float",
    "number": "float",
    "string": "str",
    "text": "str",
    "ftext": "str",
    "fstring": "str",
    "multilanguagestring": "str",
    "scriptcondition": "str",
    "scriptinstruction": "str",
    "array": "list",
    "list": "list",
}


def _capabilities_literal(capabilities: Capabilities) -> str:
    flags = [f"{name}={python_literal(value)}" for name, value in capabilities.model_dump().items() if value]
    return f"Capabilities({', '.join(flags)})"
