# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Core entities of the draftgen import data model.

Entities parsed from the archive declare the archive's keys as aliases. With
``populate_by_name`` enabled the same classes also load the snapshot that
draftgen writes with its own field names.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic import Field as _Field

from draftgen.model.fragments import ScriptFragmentSet
from draftgen.model.hierarchy import Hierarchy
from draftgen.model.types import Domain, VariableType

# ###############
# Public Interface
# ###############


class _ArchiveModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class Settings(_ArchiveModel):
    """Generation flags, the export format version and the stored domain hashes."""

    text_formatter: str = _Field("", alias="set_TextFormatter")
    # If false, no expresso scripts or methods provider module is generated.
    use_script_support: bool = _Field(False, alias="set_UseScriptSupport")
    included_nodes: str = _Field("", alias="set_IncludedNodes")
    rule_set_id: str = _Field("", alias="RuleSetId")
    export_version: str = _Field("", alias="ExportVersion")
    # Carried for completeness, not used by the generator.
    localization: bool = _Field(False, alias="set_Localization")
    domain_hashes: dict[Domain, str] = _Field(default_factory=dict)


class ProjectDef(_ArchiveModel):
    """Project metadata."""

    name: str = _Field("", alias="Name")
    detail_name: str = _Field("", alias="DetailName")
    guid: str = _Field(alias="Guid", min_length=1)
    technical_name: str = _Field("", alias="TechnicalName")


class Variable(_ArchiveModel):
    """A single global variable with a default value matching its type."""

    variable: str = _Field(alias="Variable", min_length=1)
    type: VariableType = _Field(VariableType.STRING, alias="Type")
    value: bool | int | str = _Field("", alias="Value")
    description: str = _Field("", alias="Description")

    @model_validator(mode="after")
    def _coerce_value(self) -> Variable:
        self.value = _coerce_variable_value(self.type, self.value, self.variable)
        return self


class GlobalVariableNamespace(_ArchiveModel):
    """A named group of global variables.

    ``type_name`` is the class name emitted for the namespace; it is derived
    while building the model and is not read from the archive.
    """

    namespace: str = _Field(alias="Namespace", min_length=1)
    description: str = _Field("", alias="Description")
    variables: list[Variable] = _Field(default_factory=list, alias="Variables")
    type_name: str = ""


class PropertyDef(_ArchiveModel):
    """A property declared by an object type."""

    property: str = _Field(alias="Property", min_length=1)
    type: str = _Field("", alias="Type")
    tooltip: str = _Field("", alias="Tooltip")


class Capabilities(BaseModel):
    """What an object type offers, computed once when the model is built."""

    model_config = ConfigDict(frozen=True)

    has_display_name: bool = False
    has_text: bool = False
    has_speaker: bool = False
    has_preview_image: bool = False
    has_color: bool = False


class ObjectTypeDefinition(_ArchiveModel):
    """An object type of the authoring tool."""

    type: str = _Field(alias="Type", min_length=1)
    class_name: str = _Field("", alias="Class")
    inherits_from: str = _Field("", alias="InheritsFrom")
    properties: list[PropertyDef] = _Field(default_factory=list, alias="Properties")
    capabilities: Capabilities = _Field(default_factory=Capabilities)

    @property
    def effective_class_name(self) -> str:
        return self.class_name or self.type


class LocalizedText(_ArchiveModel):
    """The text of one localization key in one language."""

    text: str = _Field("", alias="Text")
    vo_asset: str = _Field("", alias="VOAsset")


class TextEntry(_ArchiveModel):
    """A localization key with its per-culture content."""

    context: str = _Field("", alias="Context")
    content: dict[str, LocalizedText] = _Field(default_factory=dict, alias="Content")


class ObjectDefinitions(_ArchiveModel):
    """Object types and the localized texts that belong to them."""

    types: list[ObjectTypeDefinition] = _Field(default_factory=list, alias="Types")
    texts: dict[str, TextEntry] = _Field(default_factory=dict, alias="Texts")

    def find_type(self, type_name: str) -> ObjectTypeDefinition | None:
        for type_def in self.types:
            if type_def.type == type_name:
                return type_def
        return None

    def ancestry(self, type_name: str) -> list[ObjectTypeDefinition]:
        """Return the defined type and its defined ancestors, most derived first."""
        chain: list[ObjectTypeDefinition] = []
        current = self.find_type(type_name)
        while current is not None and current not in chain:
            chain.append(current)
            current = self.find_type(current.inherits_from) if current.inherits_from else None
        return chain


class PackageObject(_ArchiveModel):
    """An object instance stored in a package."""

    type: str = _Field(alias="Type", min_length=1)
    properties: dict[str, Any] = _Field(default_factory=dict, alias="Properties")

    @property
    def id(self) -> str:
        value = self.properties.get("Id", "")
        return value if isinstance(value, str) else str(value)


class PackageDef(_ArchiveModel):
    """A named group of object instances."""

    name: str = _Field(alias="Name", min_length=1)
    id: str = _Field("", alias="Id")
    description: str = _Field("", alias="Description")
    is_default_package: bool = _Field(False, alias="IsDefaultPackage")
    objects: list[PackageObject] = _Field(default_factory=list, alias="Objects")


class MethodParameter(_ArchiveModel):
    """A typed parameter of a user method."""

    name: str = _Field(alias="Param", min_length=1)
    type: str = _Field(alias="Type", min_length=1)


class UserMethod(_ArchiveModel):
    """A user-declared method callable from script fragments.

    ``is_overloaded`` and ``call_name`` are computed by the method registry.
    """

    name: str = _Field(alias="Name", min_length=1)
    return_type: str = _Field("void", alias="ReturnType")
    parameters: list[MethodParameter] = _Field(default_factory=list, alias="Parameters")
    is_overloaded: bool = False
    call_name: str = ""

    @property
    def argument_list(self) -> list[str]:
        return [p.name for p in self.parameters]

    @property
    def original_parameter_types(self) -> list[str]:
        return [p.type for p in self.parameters]


class LanguageDef(_ArchiveModel):
    """A language the project is localized into."""

    articy_language_id: str = _Field("", alias="ArticyLanguageId")
    language_name: str = _Field("", alias="LanguageName")
    is_voice_over: bool = _Field(False, alias="IsVoiceOver")


class ImportData(BaseModel):
    """The complete import data model of one project."""

    settings: Settings = _Field(default_factory=Settings)
    project: ProjectDef | None = None
    global_variables: list[GlobalVariableNamespace] = _Field(default_factory=list)
    object_definitions: ObjectDefinitions = _Field(default_factory=ObjectDefinitions)
    packages: list[PackageDef] = _Field(default_factory=list)
    user_methods: list[UserMethod] = _Field(default_factory=list)
    hierarchy: Hierarchy = _Field(default_factory=Hierarchy)
    languages: dict[str, LanguageDef] = _Field(default_factory=dict)
    script_fragments: ScriptFragmentSet = _Field(default_factory=ScriptFragmentSet)
    parent_children_cache: dict[str, list[str]] = _Field(default_factory=dict)
    # User overrides that live outside the archive and survive a reimport.
    package_load_settings: dict[str, bool] = _Field(default_factory=dict)
    generated_targets: list[str] = _Field(default_factory=list)
    has_cached_version: bool = False

    def find_namespace(self, name: str) -> GlobalVariableNamespace | None:
        for namespace in self.global_variables:
            if namespace.namespace == name:
                return namespace
        return None

    def find_package(self, name: str) -> PackageDef | None:
        for package in self.packages:
            if package.name == name:
                return package
        return None

    def imported_package_names(self) -> list[str]:
        return [p.name for p in self.packages]


# ################
# Implementation
# ################


def _coerce_variable_value(var_type: VariableType, value: bool | int | str, name: str) -> bool | int | str:
    """Convert an archive value to the Python type matching *var_type*."""
    if var_type is VariableType.BOOLEAN:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in ("true", "false"):
            return value.strip().lower() == "true"
        if isinstance(value, str) and value.strip() == "":
            return False
        raise ValueError(f"variable '{name}': {value!r} is not a boolean value")
    if var_type is VariableType.INTEGER:
        if isinstance(value, bool):
            raise ValueError(f"variable '{name}': {value!r} is not an integer value")
        if isinstance(value, int):
            return value
        text = value.strip()
        if text == "":
            return 0
        try:
            return int(text, 10)
        except ValueError:
            raise ValueError(f"variable '{name}': {value!r} is not an integer value") from None
    if isinstance(value, bool):
        raise ValueError(f"variable '{name}': {value!r} is not a string value")
    return str(value)
