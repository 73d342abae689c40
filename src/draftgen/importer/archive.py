# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Reader for project archives exported by the authoring tool.

An archive is a zip file with a ``manifest.json`` at its root. Every top-level
manifest entry is one document. The entry is either the document itself
(inline JSON) or a reference ``{"FileName": "<member>"}`` to another member of
the archive holding the document as JSON.
"""

from __future__ import annotations

import json
import logging
import zipfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

MANIFEST_NAME = "manifest.json"


class ArchiveError(Exception):
    """Raised when an archive is missing, unreadable, or structurally corrupt."""


def open_archive(path: Path) -> dict[str, Any]:
    """Read all documents of the archive at *path*.

    Args:
        path: Path to the archive file.

    Returns:
        Mapping from document name (manifest key) to its parsed JSON value,
        in manifest order.

    Raises:
        ArchiveError: If the archive does not exist, is not a valid zip file,
            has no manifest, references a missing member, or contains invalid
            JSON.
    """
    if not path.exists():
        raise ArchiveError(f"Archive not found: {path}")

    try:
        with zipfile.ZipFile(path) as archive:
            manifest = _read_json_member(archive, MANIFEST_NAME, path)
            if not isinstance(manifest, dict):
                raise ArchiveError(f"{path}: '{MANIFEST_NAME}' must be a JSON object")
            documents: dict[str, Any] = {}
            for name, entry in manifest.items():
                if _is_file_reference(entry):
                    documents[name] = _read_json_member(archive, entry["FileName"], path)
                else:
                    documents[name] = entry
    except zipfile.BadZipFile as exc:
        raise ArchiveError(f"Archive '{path}' is not a valid zip file: {exc}") from exc
    except OSError as exc:
        raise ArchiveError(f"Cannot read archive '{path}': {exc}") from exc

    logger.debug("Read %d document(s) from %s", len(documents), path)
    return documents


def write_archive(path: Path, documents: dict[str, Any], *, inline: tuple[str, ...] = ("Settings", "Project")) -> None:
    """Write *documents* as an archive at *path*.

    Documents named in *inline* are stored inside the manifest; all others are
    stored as separate members referenced by file name. Used to produce test
    fixtures and to repackage exports.
    """
    manifest: dict[str, Any] = {}
    members: dict[str, Any] = {}
    for name, document in documents.items():
        if name in inline:
            manifest[name] = document
        else:
            file_name = f"{name.lower()}.json"
            manifest[name] = {"FileName": file_name}
            members[file_name] = document

    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        archive.writestr(MANIFEST_NAME, json.dumps(manifest, indent=2))
        for file_name, document in members.items():
            archive.writestr(file_name, json.dumps(document, indent=2))


# ################
# Implementation
# ################


def _is_file_reference(entry: Any) -> bool:
    return isinstance(entry, dict) and set(entry) == {"FileName"} and isinstance(entry["FileName"], str)


def _read_json_member(archive: zipfile.ZipFile, member: str, path: Path) -> Any:
    """Read and parse one JSON member, mapping every failure to ArchiveError."""
    try:
        raw = archive.read(member)
    except KeyError:
        raise ArchiveError(f"Archive '{path}' has no member '{member}'") from None
    try:
        return json.loads(raw.decode("utf-8-sig"))
    except UnicodeDecodeError as exc:
        raise ArchiveError(f"Member '{member}' of '{path}' is not UTF-8 text: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ArchiveError(f"Member '{member}' of '{path}' is not valid JSON: {exc}") from exc
