# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Interface to the asset materializer and a JSON reference implementation.

After generation the runtime needs persisted objects built from the model:
the global variables, the database and one asset per package. A
materializer receives one :class:`AssetRequest` per such object. Failures are
reported to the caller and never retried.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Protocol

from draftgen.codegen.database import database_class_name
from draftgen.codegen.global_vars import aggregate_class_name
from draftgen.codegen.identifiers import NameCollision, check_unique_mapped, file_component, module_prefix
from draftgen.importer.import_data import atomic_write_text
from draftgen.model.entities import ImportData

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

ASSET_SUFFIX = ".asset.json"
ASSET_FORMAT_VERSION = "1"

KIND_GLOBAL_VARIABLES = "global_variables"
KIND_DATABASE = "database"
KIND_PACKAGE = "package"


class AssetMaterializationError(Exception):
    """Raised when an asset cannot be created or updated."""


@dataclass(frozen=True)
class AssetRequest:
    """One runtime object to create or update.

    Attributes:
        name: Unique asset name.
        kind: One of the ``KIND_*`` constants.
        class_module: File name of the generated module providing the class.
        class_name: Name of the generated class the asset instantiates.
        data: JSON-compatible payload taken from the model.
    """

    name: str
    kind: str
    class_module: str
    class_name: str
    data: dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class AssetInfo:
    """A materialized asset as reported by :meth:`AssetMaterializer.list_assets`."""

    name: str
    kind: str
    valid: bool


class AssetMaterializer(Protocol):
    """Creates persisted runtime objects from generated classes and model data."""

    def materialize(self, request: AssetRequest) -> None:
        """Create or update the asset described by *request*.

        Raises:
            AssetMaterializationError: If the asset cannot be written.
        """
        ...

    def list_assets(self) -> list[AssetInfo]:
        """Return every asset that currently exists."""
        ...


def asset_requests(model: ImportData) -> list[AssetRequest]:
    """Compute the assets *model* requires, in a stable order.

    Raises:
        AssetMaterializationError: If two packages map to the same asset name.
    """
    prefix = module_prefix(model.project)
    try:
        package_assets = check_unique_mapped("package assets", [p.name for p in model.packages], _package_asset_name)
    except NameCollision as exc:
        raise AssetMaterializationError(str(exc)) from exc
    database_module = f"{prefix}_database.py"
    requests = [
        AssetRequest(
            name=aggregate_class_name(model),
            kind=KIND_GLOBAL_VARIABLES,
            class_module=f"{prefix}_global_variables.py",
            class_name=aggregate_class_name(model),
            data={
                "namespaces": [
                    {"namespace": ns.namespace, "variables": {v.variable: v.value for v in ns.variables}}
                    for ns in model.global_variables
                ]
            },
        ),
        AssetRequest(
            name=database_class_name(model),
            kind=KIND_DATABASE,
            class_module=database_module,
            class_name=database_class_name(model),
            data={"packages": [p.name for p in model.packages], "defaults": dict(model.package_load_settings)},
        ),
    ]
    for package in model.packages:
        requests.append(
            AssetRequest(
                name=package_assets[package.name],
                kind=KIND_PACKAGE,
                class_module=database_module,
                class_name="PackageInfo",
                data={
                    "name": package.name,
                    "id": package.id,
                    "is_default": package.is_default_package,
                    "objects": [obj.model_dump(mode="json") for obj in package.objects],
                },
            )
        )
    return requests


def required_asset_names(model: ImportData) -> set[str]:
    """Return the names of the assets that must exist for a complete import.

    Raises:
        AssetMaterializationError: If two packages map to the same asset name.
    """
    return {request.name for request in asset_requests(model)}


class JsonAssetMaterializer:
    """Writes one JSON document per asset into a directory.

    An asset is valid when its document is readable and the generated module
    of its class exists in the source directory.
    """

    def __init__(self, directory: Path, source_dir: Path) -> None:
        self._directory = directory
        self._source_dir = source_dir

    def materialize(self, request: AssetRequest) -> None:
        if not (self._source_dir / request.class_module).exists():
            raise AssetMaterializationError(
                f"Cannot materialize '{request.name}': class module '{request.class_module}' does not exist"
            )
        document = {"v": ASSET_FORMAT_VERSION, **asdict(request)}
        path = self._directory / f"{request.name}{ASSET_SUFFIX}"
        try:
            atomic_write_text(path, json.dumps(document, indent=1, sort_keys=True, ensure_ascii=False) + "\n")
        except OSError as exc:
            raise AssetMaterializationError(f"Cannot write asset '{path}': {exc}") from exc
        logger.debug("Materialized %s", path)

    def list_assets(self) -> list[AssetInfo]:
        if not self._directory.is_dir():
            return []
        assets: list[AssetInfo] = []
        for path in sorted(self._directory.glob(f"*{ASSET_SUFFIX}")):
            assets.append(self._inspect(path))
        return assets

    def _inspect(self, path: Path) -> AssetInfo:
        name = path.name[: -len(ASSET_SUFFIX)]
        try:
            document = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Asset %s is unreadable: %s", path, exc)
            return AssetInfo(name=name, kind="", valid=False)
        if not isinstance(document, dict) or document.get("v") != ASSET_FORMAT_VERSION:
            return AssetInfo(name=name, kind="", valid=False)
        class_module = document.get("class_module")
        valid = isinstance(class_module, str) and (self._source_dir / class_module).exists()
        return AssetInfo(name=name, kind=str(document.get("kind", "")), valid=valid)


def materialize_all(materializer: AssetMaterializer, model: ImportData) -> tuple[list[str], list[str]]:
    """Materialize every asset of *model*.

    Nothing is materialized when the asset names of *model* collide.

    Returns:
        The names of the materialized assets and the error messages of the
        failed ones.
    """
    try:
        requests = asset_requests(model)
    except AssetMaterializationError as exc:
        logger.error("%s", exc)
        return [], [str(exc)]
    done: list[str] = []
    errors: list[str] = []
    for request in requests:
        try:
            materializer.materialize(request)
        except AssetMaterializationError as exc:
            logger.error("%s", exc)
            errors.append(str(exc))
        else:
            done.append(request.name)
    return done, errors


# ################
# Implementation
# ################


def _package_asset_name(package_name: str) -> str:
    return f"Package_{file_component(package_name)}"
