# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Enumerations shared across the draftgen import data model."""

from __future__ import annotations

from enum import Enum

# ###############
# Public Interface
# ###############


class Domain(str, Enum):
    """A named slice of the import data model.

    The value doubles as the key of the corresponding document in the
    archive manifest (for domains that come from a document of their own).
    """

    SETTINGS = "Settings"
    PROJECT = "Project"
    GLOBAL_VARIABLES = "GlobalVariables"
    OBJECT_DEFINITIONS = "ObjectDefinitions"
    OBJECT_DEFINITIONS_TEXT = "ObjectDefinitionsText"
    PACKAGES = "Packages"
    SCRIPT_FRAGMENTS = "ScriptFragments"
    SCRIPT_METHODS = "ScriptMethods"
    HIERARCHY = "Hierarchy"
    LANGUAGES = "Languages"


# Domains carrying a content hash used for change detection.
TRACKED_DOMAINS: tuple[Domain, ...] = (
    Domain.GLOBAL_VARIABLES,
    Domain.OBJECT_DEFINITIONS,
    Domain.OBJECT_DEFINITIONS_TEXT,
    Domain.PACKAGES,
    Domain.SCRIPT_FRAGMENTS,
    Domain.SCRIPT_METHODS,
    Domain.HIERARCHY,
    Domain.LANGUAGES,
)

# Domains read from an archive document, in import order.
DOCUMENT_DOMAINS: tuple[Domain, ...] = (
    Domain.SETTINGS,
    Domain.PROJECT,
    Domain.LANGUAGES,
    Domain.GLOBAL_VARIABLES,
    Domain.OBJECT_DEFINITIONS,
    Domain.PACKAGES,
    Domain.SCRIPT_METHODS,
    Domain.HIERARCHY,
)


class VariableType(str, Enum):
    """Data types a global variable can have."""

    BOOLEAN = "Boolean"
    INTEGER = "Integer"
    STRING = "String"
    MULTI_LANGUAGE_STRING = "MultiLanguageString"


class ScriptKind(str, Enum):
    """Property types that mark a property as carrying script text."""

    CONDITION = "ScriptCondition"
    INSTRUCTION = "ScriptInstruction"
