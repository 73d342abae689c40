# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Import data model for draftgen (settings, variables, object types, packages, etc.)."""

from draftgen.model.entities import (
    Capabilities,
    GlobalVariableNamespace,
    ImportData,
    LanguageDef,
    LocalizedText,
    MethodParameter,
    ObjectDefinitions,
    ObjectTypeDefinition,
    PackageDef,
    PackageObject,
    ProjectDef,
    PropertyDef,
    Settings,
    TextEntry,
    UserMethod,
    Variable,
)
from draftgen.model.fragments import ScriptFragment, ScriptFragmentSet
from draftgen.model.hierarchy import Hierarchy, HierarchyNode, add_child_to_parent_cache
from draftgen.model.types import DOCUMENT_DOMAINS, TRACKED_DOMAINS, Domain, ScriptKind, VariableType

__all__ = [
    # Enumerations
    "Domain",
    "DOCUMENT_DOMAINS",
    "TRACKED_DOMAINS",
    "ScriptKind",
    "VariableType",
    # Entities
    "Settings",
    "ProjectDef",
    "Variable",
    "GlobalVariableNamespace",
    "PropertyDef",
    "Capabilities",
    "ObjectTypeDefinition",
    "LocalizedText",
    "TextEntry",
    "ObjectDefinitions",
    "PackageObject",
    "PackageDef",
    "MethodParameter",
    "UserMethod",
    "LanguageDef",
    "ImportData",
    # Hierarchy
    "Hierarchy",
    "HierarchyNode",
    "add_child_to_parent_cache",
    # Scripts
    "ScriptFragment",
    "ScriptFragmentSet",
]
