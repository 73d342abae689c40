# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Code generator: turns model slices into Python modules and string tables."""

from draftgen.codegen.generator import DEFAULT_RUNTIME_MODULE, GenerationResult, Target, generate, plan_targets
from draftgen.codegen.identifiers import NameCollision, sanitize_identifier
from draftgen.codegen.writer import python_literal

__all__ = [
    "DEFAULT_RUNTIME_MODULE",
    "GenerationResult",
    "NameCollision",
    "Target",
    "generate",
    "plan_targets",
    "python_literal",
    "sanitize_identifier",
]
