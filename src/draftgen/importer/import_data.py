# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Serialization and deserialization of the persisted import data snapshot.

The snapshot holds the complete model of the last import pass, including the
per-domain hashes in ``settings.domain_hashes`` and the user's package load
overrides. It is stored as JSON; the format is versioned so future schema
changes can be detected.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from draftgen.model.entities import ImportData

# ###############
# Public Interface
# ###############

IMPORT_DATA_FORMAT_VERSION = "1"
IMPORT_DATA_FILENAME = "import_data.json"


class ImportDataError(Exception):
    """Raised when a snapshot cannot be read or has an unsupported format."""


def serialize(model: ImportData) -> str:
    """Serialize *model* to a JSON string with a format version marker."""
    document: dict[str, Any] = {"v": IMPORT_DATA_FORMAT_VERSION, "data": model.model_dump(mode="json")}
    return json.dumps(document, indent=1, ensure_ascii=False) + "\n"


def deserialize(data: str) -> ImportData:
    """Deserialize a snapshot from a JSON string.

    Args:
        data: JSON string produced by :func:`serialize`.

    Returns:
        The reconstructed model, with ``has_cached_version`` set.

    Raises:
        ImportDataError: If the text is not valid JSON, the format version is
            not recognised, or the content does not match the model.
    """
    try:
        obj = json.loads(data)
    except json.JSONDecodeError as exc:
        raise ImportDataError(f"Import data is not valid JSON: {exc}") from exc
    if not isinstance(obj, dict):
        raise ImportDataError("Import data must be a JSON object")
    version = obj.get("v")
    if version != IMPORT_DATA_FORMAT_VERSION:
        raise ImportDataError(f"Unsupported import data format version: {version!r}")
    try:
        model = ImportData.model_validate(obj.get("data", {}))
    except ValidationError as exc:
        raise ImportDataError(f"Import data does not match the model: {exc}") from exc
    model.has_cached_version = True
    return model


def write_import_data(model: ImportData, path: Path) -> None:
    """Atomically write the snapshot of *model* to *path*."""
    atomic_write_text(path, serialize(model))


def read_import_data(path: Path) -> ImportData:
    """Read and deserialize the snapshot at *path*.

    Raises:
        ImportDataError: If the file cannot be read or parsed.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ImportDataError(f"Cannot read import data '{path}': {exc}") from exc
    return deserialize(text)


def atomic_write_text(path: Path, text: str) -> None:
    """Write *text* to *path* so that readers see either the old or the new content.

    The text goes to a temporary file in the same directory which then
    replaces *path*.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(text)
        os.replace(temp_name, path)
    except BaseException:
        Path(temp_name).unlink(missing_ok=True)
        raise
