# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Script fragments and the value-keyed set that stores them."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, PrivateAttr
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############


class ScriptFragment(BaseModel):
    """A unit of authored script text.

    Two fragments are the same fragment when their original text and their
    instruction flag match; the translated text does not take part in identity.
    """

    model_config = ConfigDict(frozen=True)

    original_text: str
    parsed_text: str = ""
    is_instruction: bool = False

    @property
    def key(self) -> tuple[str, bool]:
        return (self.original_text, self.is_instruction)


class ScriptFragmentSet(BaseModel):
    """Insertion-ordered set of fragments keyed on ``(original_text, is_instruction)``."""

    fragments: list[ScriptFragment] = _Field(default_factory=list)

    _keys: set[tuple[str, bool]] = PrivateAttr(default_factory=set)

    def model_post_init(self, __context: Any) -> None:
        deduplicated: list[ScriptFragment] = []
        for fragment in self.fragments:
            if fragment.key not in self._keys:
                self._keys.add(fragment.key)
                deduplicated.append(fragment)
        self.fragments = deduplicated

    def add(self, fragment: ScriptFragment) -> bool:
        """Insert *fragment*; return False if an equal fragment is already present."""
        if fragment.key in self._keys:
            return False
        self._keys.add(fragment.key)
        self.fragments.append(fragment)
        return True

    def contains(self, original_text: str, is_instruction: bool) -> bool:
        return (original_text, is_instruction) in self._keys

    def sorted(self) -> list[ScriptFragment]:
        """Return the fragments in canonical order: conditions first, then by text."""
        return sorted(self.fragments, key=lambda f: (f.is_instruction, f.original_text))

    def __len__(self) -> int:
        return len(self.fragments)
