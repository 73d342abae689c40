# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Plans generation targets and renders the ones owned by dirty domains.

Generation is a pure function of the model: the same model always yields
byte-identical documents. Each target names the domains it is derived from;
a target is rendered only when at least one of its owners is dirty. A
failure to render one target (a name collision) never stops the others.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection
from dataclasses import dataclass, field

from draftgen.codegen.database import render_database
from draftgen.codegen.global_vars import aggregate_class_name, render_aggregate, render_namespace
from draftgen.codegen.identifiers import NameCollision, file_component, module_prefix, snake_case
from draftgen.codegen.object_types import render_registry, render_type
from draftgen.codegen.scripts import render_expresso_scripts, render_methods_provider
from draftgen.codegen.string_tables import render_string_table
from draftgen.model.entities import ImportData
from draftgen.model.types import Domain

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

DEFAULT_RUNTIME_MODULE = "draftgen_runtime"


@dataclass(frozen=True)
class Target:
    """One generated document.

    Attributes:
        name: File name of the document inside the source directory.
        owners: Domains the document is derived from.
        render: Produces the document text; may raise NameCollision.
        source: Archive name the document is derived from, if it is derived
            from a single namespace, type or language.
    """

    name: str
    owners: frozenset[Domain]
    render: Callable[[], str] = field(compare=False, repr=False)
    source: str = ""


@dataclass
class GenerationResult:
    """Outcome of one generation run.

    Attributes:
        documents: Target name to rendered text, for every target that was
            rendered successfully.
        failures: Target name to error message, for every target that failed.
        owners: Target name to its owning domains, for every rendered or
            failed target.
    """

    documents: dict[str, str] = field(default_factory=dict)
    failures: dict[str, str] = field(default_factory=dict)
    owners: dict[str, frozenset[Domain]] = field(default_factory=dict)

    def failed_domains(self) -> set[Domain]:
        """Return every domain that owns at least one failed target."""
        failed: set[Domain] = set()
        for name in self.failures:
            failed.update(self.owners[name])
        return failed


def plan_targets(model: ImportData, *, runtime_module: str = DEFAULT_RUNTIME_MODULE) -> list[Target]:
    """List every target *model* produces, in a stable order."""
    prefix = module_prefix(model.project)
    gv_module = f"{prefix}_global_variables"
    ns_modules = {ns.namespace: f"{prefix}_gv_{_module_part(ns.namespace)}" for ns in model.global_variables}
    type_modules = {t.type: f"{prefix}_type_{_module_part(t.type)}" for t in model.object_definitions.types}

    targets: list[Target] = []
    gv_owners = frozenset({Domain.GLOBAL_VARIABLES})
    for ns in model.global_variables:
        targets.append(
            Target(
                f"{ns_modules[ns.namespace]}.py",
                gv_owners,
                _bind(render_namespace, model, ns, runtime_module),
                source=ns.namespace,
            )
        )
    targets.append(Target(f"{gv_module}.py", gv_owners, _bind(render_aggregate, model, ns_modules, runtime_module)))

    type_owners = frozenset({Domain.OBJECT_DEFINITIONS})
    for type_def in model.object_definitions.types:
        render = _bind(render_type, model, type_def, type_modules, runtime_module)
        targets.append(Target(f"{type_modules[type_def.type]}.py", type_owners, render, source=type_def.type))
    targets.append(Target(f"{prefix}_object_types.py", type_owners, _bind(render_registry, model, type_modules)))

    targets.append(
        Target(
            f"{prefix}_database.py",
            frozenset({Domain.PACKAGES}),
            _bind(render_database, model, gv_module, aggregate_class_name(model), runtime_module),
        )
    )

    if model.settings.use_script_support:
        targets.append(
            Target(
                f"{prefix}_methods_provider.py",
                frozenset({Domain.SCRIPT_METHODS}),
                _bind(render_methods_provider, model),
            )
        )
        targets.append(
            Target(
                f"{prefix}_expresso_scripts.py",
                frozenset({Domain.SCRIPT_FRAGMENTS, Domain.SCRIPT_METHODS}),
                _bind(render_expresso_scripts, model, runtime_module),
            )
        )

    text_owners = frozenset({Domain.OBJECT_DEFINITIONS_TEXT, Domain.LANGUAGES})
    for culture in model.languages:
        targets.append(
            Target(
                f"{prefix}_strings_{file_component(culture)}.csv",
                text_owners,
                _bind(render_string_table, model, culture),
                source=culture,
            )
        )
    return targets


def generate(
    model: ImportData,
    dirty: Collection[Domain],
    *,
    runtime_module: str = DEFAULT_RUNTIME_MODULE,
) -> GenerationResult:
    """Render every target of *model* that has a dirty owner.

    Args:
        model: The import data model.
        dirty: Domains whose targets must be regenerated.
        runtime_module: Module the generated code imports its base classes from.

    Returns:
        The rendered documents and the failed targets.
    """
    result = GenerationResult()
    targets = plan_targets(model, runtime_module=runtime_module)
    duplicates = _duplicate_names(targets)
    for target in targets:
        if not target.owners & set(dirty):
            continue
        result.owners[target.name] = target.owners
        try:
            if target.name in duplicates:
                raise NameCollision("generated files", duplicates[target.name], target.name)
            result.documents[target.name] = target.render()
        except (NameCollision, ValueError) as exc:
            logger.warning("Cannot generate %s: %s", target.name, exc)
            result.failures[target.name] = str(exc)
    logger.debug("Rendered %d target(s), %d failure(s)", len(result.documents), len(result.failures))
    return result


# ################
# Implementation
# ################


def _bind(function: Callable[..., str], *args: object) -> Callable[[], str]:
    return lambda: function(*args)


def _module_part(name: str) -> str:
    try:
        return snake_case(name)
    except ValueError:
        return "_"


def _duplicate_names(targets: list[Target]) -> dict[str, list[str]]:
    """Map every target name that occurs more than once to the source names behind it."""
    sources: dict[str, list[str]] = {}
    for target in targets:
        sources.setdefault(target.name, []).append(target.source or target.name)
    return {name: names for name, names in sources.items() if len(names) > 1}
