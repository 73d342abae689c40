# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Builds the import data model from the documents of an archive.

Each domain is parsed into its typed slice on its own. A document that does
not have the expected shape fails only its own domain with
:class:`MalformedData`; the previous slice (or an empty one) is kept and the
remaining documents are still parsed.

Document shapes:

* ``Settings``, ``Project``: objects.
* ``GlobalVariables``: list of namespaces.
* ``ObjectDefinitions``: object with ``Types`` (list) and ``Texts`` (object).
* ``Packages``: list of packages.
* ``ScriptMethods``: list of methods.
* ``Hierarchy``: nested node object (``Id``, ``TechnicalName``, ``Type``,
  ``Children``) or ``null`` for an empty hierarchy.
* ``Languages``: object mapping culture name to language definition.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any

from pydantic import TypeAdapter, ValidationError

from draftgen.codegen.identifiers import class_prefix, sanitize_identifier
from draftgen.importer.archive import ArchiveError
from draftgen.importer.scripts import gather_scripts, register_methods
from draftgen.model.entities import (
    Capabilities,
    GlobalVariableNamespace,
    ImportData,
    LanguageDef,
    ObjectDefinitions,
    ObjectTypeDefinition,
    PackageDef,
    ProjectDef,
    Settings,
    UserMethod,
)
from draftgen.model.hierarchy import Hierarchy, HierarchyNode
from draftgen.model.types import DOCUMENT_DOMAINS, Domain

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

REQUIRED_DOCUMENTS: tuple[Domain, ...] = (Domain.SETTINGS, Domain.PROJECT)


class MalformedData(Exception):
    """Raised when the document of one domain does not have the expected shape.

    Attributes:
        domain: The domain whose document could not be parsed.
    """

    def __init__(self, domain: Domain, message: str) -> None:
        super().__init__(f"Malformed {domain.value} data: {message}")
        self.domain = domain


@dataclass
class BuildResult:
    """Outcome of building a model from all archive documents.

    Attributes:
        model: The freshly built model.
        malformed: Domains whose document failed to parse, with the reason.
    """

    model: ImportData
    malformed: dict[Domain, str] = field(default_factory=dict)


def import_domain(domain: Domain, data: Any, model: ImportData) -> ImportData:
    """Parse *data* as the document of *domain* and return the updated model.

    Only the slice belonging to *domain* is replaced; *model* itself is never
    modified.

    Raises:
        MalformedData: If *data* does not have the shape of *domain*.
    """
    importer = _IMPORTERS.get(domain)
    if importer is None:
        raise ValueError(f"Domain {domain.value} is not read from a document")
    try:
        update = importer(data, model)
    except (ValidationError, ValueError, TypeError) as exc:
        raise MalformedData(domain, _describe(exc)) from exc
    return model.model_copy(update=update)


def build_model(documents: dict[str, Any], previous: ImportData | None = None) -> BuildResult:
    """Build a complete model from the documents of an archive.

    Args:
        documents: Mapping from document name to parsed JSON, as returned by
            :func:`~draftgen.importer.archive.open_archive`.
        previous: The previous snapshot, if any. It provides the fallback slice
            for malformed domains and the user's package load overrides.

    Returns:
        The new model and the malformed domains.

    Raises:
        ArchiveError: If a required document is missing or malformed.
    """
    for domain in REQUIRED_DOCUMENTS:
        if domain.value not in documents:
            raise ArchiveError(f"Archive has no '{domain.value}' document")

    model = ImportData()
    malformed: dict[Domain, str] = {}
    for domain in DOCUMENT_DOMAINS:
        data = documents.get(domain.value, _EMPTY_DOCUMENTS.get(domain))
        try:
            model = import_domain(domain, data, model)
        except MalformedData as exc:
            if domain in REQUIRED_DOCUMENTS:
                raise ArchiveError(str(exc)) from exc
            logger.warning("%s", exc)
            malformed[domain] = str(exc)
            model = _restore_slice(domain, model, previous)

    if Domain.OBJECT_DEFINITIONS in malformed:
        malformed[Domain.OBJECT_DEFINITIONS_TEXT] = malformed[Domain.OBJECT_DEFINITIONS]

    model.parent_children_cache = model.hierarchy.parent_children_cache()
    model.user_methods = register_methods(model.user_methods)
    model.script_fragments = gather_scripts(model)
    if previous is not None:
        model.package_load_settings = dict(previous.package_load_settings)
        model.generated_targets = list(previous.generated_targets)
    apply_package_settings(model)

    logger.info(
        "Built model: %d namespace(s), %d object type(s), %d package(s), %d script fragment(s)",
        len(model.global_variables),
        len(model.object_definitions.types),
        len(model.packages),
        len(model.script_fragments),
    )
    return BuildResult(model=model, malformed=malformed)


def apply_package_settings(model: ImportData) -> None:
    """Reconcile the package load overrides with the packages of *model*.

    Overrides of packages that no longer exist are dropped, new packages get
    an override equal to their exported default, and then every override is
    applied onto the packages.
    """
    names = set(model.imported_package_names())
    settings = {name: flag for name, flag in model.package_load_settings.items() if name in names}
    for package in model.packages:
        settings.setdefault(package.name, package.is_default_package)
    model.package_load_settings = settings
    for package in model.packages:
        package.is_default_package = settings[package.name]


def compute_capabilities(definitions: ObjectDefinitions, type_name: str) -> Capabilities:
    """Derive the capability flags of *type_name* from its and its ancestors' properties."""
    declared: set[str] = set()
    for type_def in definitions.ancestry(type_name):
        declared.update(p.property for p in type_def.properties)
    return Capabilities(
        has_display_name="DisplayName" in declared,
        has_text="Text" in declared,
        has_speaker="Speaker" in declared,
        has_preview_image="PreviewImage" in declared,
        has_color="Color" in declared,
    )


# ################
# Implementation
# ################

_EMPTY_DOCUMENTS: dict[Domain, Any] = {
    Domain.LANGUAGES: {},
    Domain.GLOBAL_VARIABLES: [],
    Domain.OBJECT_DEFINITIONS: {},
    Domain.PACKAGES: [],
    Domain.SCRIPT_METHODS: [],
    Domain.HIERARCHY: None,
}

_NAMESPACES = TypeAdapter(list[GlobalVariableNamespace])
_PACKAGES = TypeAdapter(list[PackageDef])
_METHODS = TypeAdapter(list[UserMethod])
_LANGUAGES = TypeAdapter(dict[str, LanguageDef])


def _import_settings(data: Any, model: ImportData) -> dict[str, Any]:
    _require(data, dict, "an object")
    settings = Settings.model_validate({k: v for k, v in data.items() if k != "domain_hashes"})
    return {"settings": settings}


def _import_project(data: Any, model: ImportData) -> dict[str, Any]:
    _require(data, dict, "an object")
    return {"project": ProjectDef.model_validate(data)}


def _import_languages(data: Any, model: ImportData) -> dict[str, Any]:
    _require(data, dict, "an object")
    return {"languages": _LANGUAGES.validate_python(data)}


def _import_global_variables(data: Any, model: ImportData) -> dict[str, Any]:
    _require(data, list, "a list")
    namespaces = _NAMESPACES.validate_python(data)
    _check_no_duplicates("namespace", [ns.namespace for ns in namespaces])
    for namespace in namespaces:
        scope = f"variable in namespace '{namespace.namespace}'"
        _check_no_duplicates(scope, [v.variable for v in namespace.variables])
        for variable in namespace.variables:
            sanitize_identifier(variable.variable)
    prefix = class_prefix(model.project)
    named = [
        ns.model_copy(update={"type_name": f"{prefix}{sanitize_identifier(ns.namespace)}Variables"})
        for ns in namespaces
    ]
    return {"global_variables": named}


def _import_object_definitions(data: Any, model: ImportData) -> dict[str, Any]:
    _require(data, dict, "an object")
    definitions = ObjectDefinitions.model_validate(data)
    _check_no_duplicates("object type", [t.type for t in definitions.types])
    _check_acyclic(definitions)
    types: list[ObjectTypeDefinition] = []
    for type_def in definitions.types:
        capabilities = compute_capabilities(definitions, type_def.type)
        types.append(type_def.model_copy(update={"capabilities": capabilities}))
    return {"object_definitions": definitions.model_copy(update={"types": types})}


def _import_packages(data: Any, model: ImportData) -> dict[str, Any]:
    _require(data, list, "a list")
    packages = _PACKAGES.validate_python(data)
    _check_no_duplicates("package", [p.name for p in packages])
    return {"packages": packages}


def _import_script_methods(data: Any, model: ImportData) -> dict[str, Any]:
    _require(data, list, "a list")
    return {"user_methods": _METHODS.validate_python(data)}


def _import_hierarchy(data: Any, model: ImportData) -> dict[str, Any]:
    if data is None or data == {}:
        return {"hierarchy": Hierarchy()}
    _require(data, dict, "an object")
    nodes: dict[str, HierarchyNode] = {}
    stack: list[dict[str, Any]] = [data]
    while stack:
        raw = stack.pop()
        _require(raw, dict, "a node object")
        node_id = raw.get("Id")
        if not isinstance(node_id, str) or not node_id:
            raise ValueError("hierarchy node without 'Id'")
        if node_id in nodes:
            raise ValueError(f"hierarchy node '{node_id}' appears more than once")
        children = raw.get("Children") or []
        _require(children, list, "a list of children")
        for child in children:
            _require(child, dict, "a node object")
        nodes[node_id] = HierarchyNode(
            id=node_id,
            technical_name=raw.get("TechnicalName", ""),
            type=raw.get("Type", ""),
            children=[child.get("Id", "") for child in children],
        )
        stack.extend(reversed(children))
    return {"hierarchy": Hierarchy(root_id=data["Id"], nodes=nodes)}


_IMPORTERS = {
    Domain.SETTINGS: _import_settings,
    Domain.PROJECT: _import_project,
    Domain.LANGUAGES: _import_languages,
    Domain.GLOBAL_VARIABLES: _import_global_variables,
    Domain.OBJECT_DEFINITIONS: _import_object_definitions,
    Domain.PACKAGES: _import_packages,
    Domain.SCRIPT_METHODS: _import_script_methods,
    Domain.HIERARCHY: _import_hierarchy,
}

# Model fields that make up the slice of each document domain.
_SLICES: dict[Domain, tuple[str, ...]] = {
    Domain.LANGUAGES: ("languages",),
    Domain.GLOBAL_VARIABLES: ("global_variables",),
    Domain.OBJECT_DEFINITIONS: ("object_definitions",),
    Domain.PACKAGES: ("packages",),
    Domain.SCRIPT_METHODS: ("user_methods",),
    Domain.HIERARCHY: ("hierarchy",),
}


def _restore_slice(domain: Domain, model: ImportData, previous: ImportData | None) -> ImportData:
    """Return *model* with the slice of *domain* taken from *previous* (or left empty)."""
    if previous is None:
        return model
    update = {name: copy.deepcopy(getattr(previous, name)) for name in _SLICES.get(domain, ())}
    return model.model_copy(update=update)


def _require(value: Any, kind: type, description: str) -> None:
    if not isinstance(value, kind):
        raise TypeError(f"expected {description}, got {type(value).__name__}")


def _check_no_duplicates(what: str, names: list[str]) -> None:
    seen: set[str] = set()
    for name in names:
        if name in seen:
            raise ValueError(f"duplicate {what} '{name}'")
        seen.add(name)


def _check_acyclic(definitions: ObjectDefinitions) -> None:
    parents = {t.type: t.inherits_from for t in definitions.types}
    for start in parents:
        seen = {start}
        current = parents[start]
        while current in parents:
            if current in seen:
                raise ValueError(f"object type '{start}' has a cyclic inheritance chain")
            seen.add(current)
            current = parents[current]


def _describe(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        return f"{location}: {first['msg']}" if location else first["msg"]
    return str(exc)
