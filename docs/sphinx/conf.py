# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Sphinx configuration for the draftgen documentation."""

project = "draftgen"
author = "Draftgen Contributors"
release = "0.1.0"

extensions: list[str] = ["sphinx.ext.autodoc"]

html_theme = "alabaster"
