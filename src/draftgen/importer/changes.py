# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Content-hash based change detection per model domain."""

from __future__ import annotations

import hashlib
import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from draftgen.model.entities import ImportData
from draftgen.model.types import TRACKED_DOMAINS, Domain

# ###############
# Public Interface
# ###############

# Dirtiness of the key domain also makes the value domains dirty.
COUPLED_DOMAINS: dict[Domain, tuple[Domain, ...]] = {
    Domain.OBJECT_DEFINITIONS: (Domain.GLOBAL_VARIABLES,),
}


@dataclass
class ChangeSet:
    """Result of comparing current hashes with the stored ones.

    Attributes:
        dirty: Every domain that needs regeneration, including coupled ones.
        changed: Domains whose own hash differs or has never been stored.
        hashes: The current hash of every tracked domain.
    """

    dirty: set[Domain] = field(default_factory=set)
    changed: set[Domain] = field(default_factory=set)
    hashes: dict[Domain, str] = field(default_factory=dict)

    def is_dirty(self, domain: Domain) -> bool:
        return domain in self.dirty

    def ordered_dirty(self) -> list[Domain]:
        """Return the dirty domains in tracking order."""
        return [d for d in TRACKED_DOMAINS if d in self.dirty]


def domain_hash(model: ImportData, domain: Domain) -> str:
    """Return the SHA-256 hex digest of the canonical form of one domain slice."""
    payload = json.dumps(_slice(model, domain), sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def compute_hashes(model: ImportData) -> dict[Domain, str]:
    """Hash every tracked domain of *model*."""
    return {domain: domain_hash(model, domain) for domain in TRACKED_DOMAINS}


def detect_changes(
    hashes: Mapping[Domain, str],
    stored: Mapping[Domain, str],
    *,
    force: bool = False,
    exclude: Iterable[Domain] = (),
) -> ChangeSet:
    """Determine which domains are dirty.

    A domain is changed when its hash differs from the stored one or no hash
    was stored. Coupling then adds dependent domains. Domains in *exclude*
    (malformed ones) are never reported dirty.

    Args:
        hashes: Current hashes, as returned by :func:`compute_hashes`.
        stored: Hashes persisted by the last successful generation.
        force: Treat every tracked domain as changed.
        exclude: Domains that must not be regenerated in this pass.
    """
    excluded = set(exclude)
    changed = {
        domain
        for domain in TRACKED_DOMAINS
        if domain not in excluded and (force or stored.get(domain) != hashes.get(domain))
    }
    dirty = set(changed)
    for source, targets in COUPLED_DOMAINS.items():
        if source in changed:
            dirty.update(t for t in targets if t not in excluded)
    return ChangeSet(dirty=dirty, changed=changed, hashes=dict(hashes))


# ################
# Implementation
# ################


def _slice(model: ImportData, domain: Domain) -> Any:
    """Return the JSON-compatible representation of the slice of *domain*."""
    if domain is Domain.GLOBAL_VARIABLES:
        return [ns.model_dump(mode="json") for ns in model.global_variables]
    if domain is Domain.OBJECT_DEFINITIONS:
        return [t.model_dump(mode="json") for t in model.object_definitions.types]
    if domain is Domain.OBJECT_DEFINITIONS_TEXT:
        return {key: entry.model_dump(mode="json") for key, entry in model.object_definitions.texts.items()}
    if domain is Domain.PACKAGES:
        return [p.model_dump(mode="json") for p in model.packages]
    if domain is Domain.SCRIPT_FRAGMENTS:
        return {
            "use_script_support": model.settings.use_script_support,
            "fragments": [f.model_dump(mode="json") for f in model.script_fragments.sorted()],
        }
    if domain is Domain.SCRIPT_METHODS:
        return {
            "use_script_support": model.settings.use_script_support,
            "methods": [m.model_dump(mode="json") for m in model.user_methods],
        }
    if domain is Domain.HIERARCHY:
        return model.hierarchy.model_dump(mode="json")
    if domain is Domain.LANGUAGES:
        return {culture: lang.model_dump(mode="json") for culture, lang in model.languages.items()}
    raise ValueError(f"Domain {domain.value} is not tracked")
