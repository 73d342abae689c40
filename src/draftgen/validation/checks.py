# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Consistency checks for a built import data model.

These checks run after the model has been built and report conditions that
do not stop generation but usually point at an export problem.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from draftgen.model.entities import ImportData

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class ValidationWarning:
    """A non-fatal issue found in the model.

    Attributes:
        message: Human-readable description of the warning.
    """

    message: str


@dataclass
class ValidationResult:
    """Result of running the model checks.

    Attributes:
        warnings: Non-fatal issues found during validation.
    """

    warnings: list[ValidationWarning] = field(default_factory=list)

    @property
    def messages(self) -> list[str]:
        return [w.message for w in self.warnings]


def validate(model: ImportData, supported_export_version: str | None = None) -> ValidationResult:
    """Run all checks on *model*.

    Checks performed:

    1. **Export version**: the archive's export version differs from
       *supported_export_version* (skipped when that is ``None``).
    2. **Unknown object types**: a package object uses a type that the object
       definitions do not declare.
    3. **Unknown base types**: an object type inherits from a type that is not
       declared; its class derives from the runtime root class instead.
    4. **Duplicate object ids**: two package objects share one id.
    5. **Unknown cultures**: a text has content for a culture that is not a
       project language.
    6. **Untranslatable scripts**: a script fragment could not be translated
       and will raise when executed.

    Args:
        model: The built model.
        supported_export_version: The export version the workspace expects.

    Returns:
        A :class:`ValidationResult` containing any warnings found.
    """
    result = ValidationResult()
    result.warnings.extend(_check_export_version(model, supported_export_version))
    result.warnings.extend(_check_object_types(model))
    result.warnings.extend(_check_base_types(model))
    result.warnings.extend(_check_duplicate_ids(model))
    result.warnings.extend(_check_cultures(model))
    result.warnings.extend(_check_scripts(model))
    return result


# ################
# Implementation
# ################


def _check_export_version(model: ImportData, supported: str | None) -> list[ValidationWarning]:
    exported = model.settings.export_version
    if supported is None or exported == supported:
        return []
    return [
        ValidationWarning(
            message=f"Archive export version '{exported}' differs from the supported version '{supported}'."
        )
    ]


def _check_object_types(model: ImportData) -> list[ValidationWarning]:
    if not model.object_definitions.types:
        return []
    known = {t.type for t in model.object_definitions.types}
    warnings: list[ValidationWarning] = []
    reported: set[str] = set()
    for package in model.packages:
        for obj in package.objects:
            if obj.type not in known and obj.type not in reported:
                reported.add(obj.type)
                warnings.append(
                    ValidationWarning(
                        message=f"Package '{package.name}' contains objects of undeclared type '{obj.type}'."
                    )
                )
    return warnings


def _check_base_types(model: ImportData) -> list[ValidationWarning]:
    known = {t.type for t in model.object_definitions.types}
    return [
        ValidationWarning(
            message=f"Object type '{t.type}' inherits from undeclared type '{t.inherits_from}'; "
            "it derives from the runtime root class."
        )
        for t in model.object_definitions.types
        if t.inherits_from and t.inherits_from not in known
    ]


def _check_duplicate_ids(model: ImportData) -> list[ValidationWarning]:
    owners: dict[str, str] = {}
    warnings: list[ValidationWarning] = []
    for package in model.packages:
        for obj in package.objects:
            if not obj.id:
                continue
            if obj.id in owners:
                warnings.append(
                    ValidationWarning(
                        message=f"Object id '{obj.id}' appears in package '{owners[obj.id]}' "
                        f"and again in package '{package.name}'."
                    )
                )
            else:
                owners[obj.id] = package.name
    return warnings


def _check_cultures(model: ImportData) -> list[ValidationWarning]:
    if not model.languages:
        return []
    unknown: list[str] = []
    for entry in model.object_definitions.texts.values():
        for culture in entry.content:
            if culture not in model.languages and culture not in unknown:
                unknown.append(culture)
    return [ValidationWarning(message=f"Texts contain content for unknown culture '{c}'.") for c in unknown]


def _check_scripts(model: ImportData) -> list[ValidationWarning]:
    failed = [f for f in model.script_fragments.fragments if not f.parsed_text]
    if not failed:
        return []
    return [ValidationWarning(message=f"{len(failed)} script fragment(s) could not be translated.")]
