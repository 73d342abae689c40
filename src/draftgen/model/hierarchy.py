# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Arena representation of the project hierarchy.

All nodes live in one table keyed by id; children are referenced by id and
the root is identified by its stored id. No node holds a reference to its
parent or to another node object.
"""

from __future__ import annotations

from collections.abc import Iterator

from pydantic import BaseModel, model_validator
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############


class HierarchyNode(BaseModel):
    """A single node of the hierarchy tree."""

    id: str
    technical_name: str = ""
    type: str = ""
    children: list[str] = _Field(default_factory=list)


class Hierarchy(BaseModel):
    """A strict tree of hierarchy nodes, or an empty hierarchy.

    Invariants (checked on construction): the root has no parent, every other
    node has exactly one parent, every child id refers to a known node, and
    every node is reachable from the root.
    """

    root_id: str | None = None
    nodes: dict[str, HierarchyNode] = _Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_tree(self) -> Hierarchy:
        if self.root_id is None:
            if self.nodes:
                raise ValueError("hierarchy has nodes but no root")
            return self
        if self.root_id not in self.nodes:
            raise ValueError(f"hierarchy root '{self.root_id}' is not a known node")

        parents: dict[str, str] = {}
        for node in self.nodes.values():
            for child in node.children:
                if child not in self.nodes:
                    raise ValueError(f"node '{node.id}' references unknown child '{child}'")
                if child == self.root_id:
                    raise ValueError(f"hierarchy root '{child}' cannot be a child of '{node.id}'")
                if child in parents:
                    raise ValueError(f"node '{child}' has more than one parent ('{parents[child]}', '{node.id}')")
                parents[child] = node.id

        # With one parent per node, a node is unreachable only if it sits on a cycle
        # or below one.
        reached = sum(1 for _ in self._iter_ids())
        if reached != len(self.nodes):
            raise ValueError("hierarchy contains nodes that are not reachable from the root")
        return self

    @property
    def is_empty(self) -> bool:
        return self.root_id is None

    @property
    def root(self) -> HierarchyNode | None:
        if self.root_id is None:
            return None
        return self.nodes[self.root_id]

    def get(self, node_id: str) -> HierarchyNode | None:
        return self.nodes.get(node_id)

    def walk(self) -> Iterator[HierarchyNode]:
        """Yield all nodes in depth-first pre-order, children in declared order."""
        for node_id in self._iter_ids():
            yield self.nodes[node_id]

    def parent_children_cache(self) -> dict[str, list[str]]:
        """Build the parent -> ordered children index for all nodes with children."""
        cache: dict[str, list[str]] = {}
        for node in self.walk():
            for child in node.children:
                add_child_to_parent_cache(cache, node.id, child)
        return cache

    def _iter_ids(self) -> Iterator[str]:
        if self.root_id is None:
            return
        stack = [self.root_id]
        seen: set[str] = set()
        while stack:
            node_id = stack.pop()
            if node_id in seen:
                continue
            seen.add(node_id)
            yield node_id
            stack.extend(reversed(self.nodes[node_id].children))


def add_child_to_parent_cache(cache: dict[str, list[str]], parent: str, child: str) -> None:
    """Append *child* to the children of *parent*, ignoring duplicates."""
    children = cache.setdefault(parent, [])
    if child not in children:
        children.append(child)
