# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Consistency checks for draftgen models (unknown types, version mismatch, etc.)."""

from draftgen.validation.checks import (
    ValidationResult,
    ValidationWarning,
    validate,
)

__all__ = [
    "ValidationResult",
    "ValidationWarning",
    "validate",
]
