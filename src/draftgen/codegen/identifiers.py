# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Identifier sanitization and collision detection for generated code.

Source names from the archive are free text. Before they are used as Python
identifiers they are mapped to valid identifier text; two distinct source
names that map to the same identifier within one scope are an error, never a
silent rename.
"""

from __future__ import annotations

import keyword
import re
from collections.abc import Callable, Iterable

from draftgen.model.entities import ProjectDef

# ###############
# Public Interface
# ###############


class NameCollision(Exception):
    """Raised when distinct source names map to the same generated identifier.

    Attributes:
        scope: Human-readable description of where the collision happened.
        names: The colliding source names, in source order.
        identifier: The identifier they all map to.
    """

    def __init__(self, scope: str, names: list[str], identifier: str) -> None:
        quoted = ", ".join(repr(n) for n in names)
        super().__init__(f"Name collision in {scope}: {quoted} all map to '{identifier}'")
        self.scope = scope
        self.names = names
        self.identifier = identifier


def sanitize_identifier(name: str) -> str:
    """Map *name* to a valid Python identifier.

    Surrounding whitespace is trimmed, every character that is not valid in an
    identifier becomes ``_``, a leading digit is prefixed with ``_`` and
    reserved words get a trailing ``_``.

    Raises:
        ValueError: If *name* is empty after trimming.
    """
    text = name.strip()
    if not text:
        raise ValueError(f"Cannot derive an identifier from {name!r}")
    text = _INVALID_CHARS.sub("_", text)
    if text[0].isdigit():
        text = "_" + text
    if keyword.iskeyword(text) or keyword.issoftkeyword(text) or text in _RESERVED:
        text += "_"
    return text


def snake_case(name: str) -> str:
    """Return a lower-case, underscore separated form of *name* for module names.

    The result is a valid identifier; a leading digit keeps its ``_`` prefix.
    """
    text = sanitize_identifier(name)
    text = _CAMEL_BOUNDARY.sub(r"\1_\2", text)
    text = _ACRONYM_BOUNDARY.sub(r"\1_\2", text)
    text = re.sub(r"_+", "_", text.lower()).strip("_")
    if text[:1].isdigit():
        return "_" + text
    return text or "_"


def check_unique(scope: str, names: Iterable[str]) -> dict[str, str]:
    """Sanitize *names* and fail if two of them map to the same identifier.

    Args:
        scope: Description of the scope used in the error message.
        names: Source names in source order.

    Returns:
        Mapping from source name to its identifier, in source order.

    Raises:
        NameCollision: If two distinct source names map to one identifier.
    """
    return check_unique_mapped(scope, names, sanitize_identifier)


def check_unique_mapped(scope: str, names: Iterable[str], mapper: Callable[[str], str]) -> dict[str, str]:
    """Like :func:`check_unique` but with a custom *mapper* from name to identifier."""
    result: dict[str, str] = {}
    by_identifier: dict[str, list[str]] = {}
    for name in names:
        identifier = mapper(name)
        result[name] = identifier
        owners = by_identifier.setdefault(identifier, [])
        if name not in owners:
            owners.append(name)
    for identifier, owners in by_identifier.items():
        if len(owners) > 1:
            raise NameCollision(scope, owners, identifier)
    return result


def class_prefix(project: ProjectDef | None) -> str:
    """Return the prefix used for all generated class names of *project*."""
    if project is None:
        return "Draft"
    return sanitize_identifier(project.technical_name.strip() or project.name.strip() or "Draft")


def module_prefix(project: ProjectDef | None) -> str:
    """Return the prefix used for all generated module names of *project*."""
    return snake_case(class_prefix(project))


def file_component(name: str) -> str:
    """Return *name* reduced to characters that are safe in a file name."""
    return re.sub(r"[^A-Za-z0-9_-]", "_", name.strip()) or "_"


# ################
# Implementation
# ################

_INVALID_CHARS = re.compile(r"\W", re.ASCII)
_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_ACRONYM_BOUNDARY = re.compile(r"([A-Z])([A-Z][a-z])")

# Names that would shadow something generated classes rely on.
_RESERVED: frozenset[str] = frozenset({"self", "cls"})
