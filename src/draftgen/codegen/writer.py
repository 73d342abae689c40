# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Line-oriented text builder and literal formatting for generated modules."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from draftgen.model.entities import ProjectDef

# ###############
# Public Interface
# ###############

INDENT = "    "


class CodeWriter:
    """Accumulates lines of Python source with managed indentation."""

    def __init__(self) -> None:
        self._lines: list[str] = []
        self._level = 0

    def line(self, text: str = "") -> None:
        """Append one line at the current indentation (blank lines carry no indent)."""
        self._lines.append(f"{INDENT * self._level}{text}" if text else "")

    def lines(self, text: str) -> None:
        """Append every line of a multi-line *text* at the current indentation."""
        for part in text.splitlines():
            self.line(part)

    def blank(self, count: int = 1) -> None:
        for _ in range(count):
            self.line()

    @contextmanager
    def block(self, header: str) -> Iterator[None]:
        """Write *header* and indent everything written inside the context."""
        self.line(header)
        self._level += 1
        try:
            yield
        finally:
            self._level -= 1

    def text(self) -> str:
        """Return the accumulated source, ending with exactly one newline."""
        lines = list(self._lines)
        while lines and not lines[-1]:
            lines.pop()
        return "\n".join(lines) + "\n"


def header(writer: CodeWriter, project: ProjectDef | None, summary: str) -> None:
    """Write the standard generated-module header."""
    name = project.name if project is not None and project.name else "unnamed"
    writer.line(f"# Generated by draftgen for project {python_literal(name)}. Do not edit.")
    writer.line(f'"""{_docstring_text(summary)}"""')
    writer.blank()
    writer.line("from __future__ import annotations")


def python_literal(value: bool | int | float | str | None) -> str:
    """Return the Python literal for *value*.

    ``ast.literal_eval`` of the result yields *value* again.
    """
    if value is None or isinstance(value, bool):
        return repr(value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return repr(value)
    if isinstance(value, str):
        return _string_literal(value)
    raise TypeError(f"No literal form for {type(value).__name__}")


def docstring(writer: CodeWriter, text: str) -> None:
    """Write *text* as a one-line docstring if it is not empty."""
    cleaned = _docstring_text(text)
    if cleaned:
        writer.line(f'"""{cleaned}"""')


# ################
# Implementation
# ################


def _string_literal(value: str) -> str:
    """Double-quoted literal with backslashes, quotes and control characters escaped."""
    out: list[str] = ['"']
    for ch in value:
        if ch == "\\":
            out.append("\\\\")
        elif ch == '"':
            out.append('\\"')
        elif ch == "\n":
            out.append("\\n")
        elif ch == "\r":
            out.append("\\r")
        elif ch == "\t":
            out.append("\\t")
        elif ord(ch) < 0x20 or ord(ch) == 0x7F or 0xD800 <= ord(ch) <= 0xDFFF:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(ch)
    out.append('"')
    return "".join(out)


def _docstring_text(text: str) -> str:
    """Collapse *text* to one line that is safe inside a triple-quoted docstring."""
    single = " ".join(text.split())
    return single.replace("\\", "\\\\").replace('"', '\\"')
