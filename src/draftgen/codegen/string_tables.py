# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Emits one CSV string table per language."""

from __future__ import annotations

import csv
import io

from draftgen.model.entities import ImportData, LocalizedText

# ###############
# Public Interface
# ###############


def render_string_table(model: ImportData, culture: str) -> str:
    """Render the string table of *culture* as CSV.

    Columns are ``Key`` and ``SourceString``, plus ``VOAsset`` for voice-over
    languages. Keys keep archive order. A key without content for *culture*
    falls back to the first language of the project, then to an empty string.
    """
    language = model.languages.get(culture)
    voice_over = language is not None and language.is_voice_over
    fallback = next(iter(model.languages), None)

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(["Key", "SourceString", "VOAsset"] if voice_over else ["Key", "SourceString"])
    for key, entry in model.object_definitions.texts.items():
        text = _lookup(entry.content, culture, fallback)
        row = [key, text.text]
        if voice_over:
            row.append(text.vo_asset)
        writer.writerow(row)
    return buffer.getvalue()


# ################
# Implementation
# ################


def _lookup(content: dict[str, LocalizedText], culture: str, fallback: str | None) -> LocalizedText:
    if culture in content:
        return content[culture]
    if fallback is not None and fallback in content:
        return content[fallback]
    return LocalizedText()
