# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""High-level tests demonstrating how to construct the draftgen import data model."""

import pytest
from pydantic import ValidationError

from draftgen.model import (
    Capabilities,
    Domain,
    GlobalVariableNamespace,
    Hierarchy,
    HierarchyNode,
    ImportData,
    ObjectDefinitions,
    ObjectTypeDefinition,
    PackageDef,
    PackageObject,
    ProjectDef,
    ScriptFragment,
    ScriptFragmentSet,
    Settings,
    UserMethod,
    Variable,
    VariableType,
    add_child_to_parent_cache,
)

# -------- settings and project --------


def test_settings_from_archive_keys() -> None:
    """Settings accept the archive's key names."""
    settings = Settings.model_validate({"set_UseScriptSupport": True, "ExportVersion": "1.2"})
    assert settings.use_script_support is True
    assert settings.export_version == "1.2"
    assert settings.domain_hashes == {}


def test_settings_from_field_names() -> None:
    """Settings also accept their own field names, as written to the snapshot."""
    settings = Settings.model_validate({"use_script_support": True, "domain_hashes": {"Packages": "abc"}})
    assert settings.use_script_support is True
    assert settings.domain_hashes == {Domain.PACKAGES: "abc"}


def test_project_requires_guid() -> None:
    """A project without a guid is rejected."""
    with pytest.raises(ValidationError):
        ProjectDef.model_validate({"Name": "Demo", "Guid": ""})
    with pytest.raises(ValidationError):
        ProjectDef.model_validate({"Name": "Demo"})


# -------- variables --------


@pytest.mark.parametrize(
    ("var_type", "raw", "expected"),
    [
        ("Boolean", "True", True),
        ("Boolean", "false", False),
        ("Boolean", True, True),
        ("Boolean", "", False),
        ("Integer", "5", 5),
        ("Integer", "-12", -12),
        ("Integer", 7, 7),
        ("Integer", "", 0),
        ("String", "text", "text"),
        ("MultiLanguageString", "key", "key"),
    ],
)
def test_variable_value_is_coerced(var_type: str, raw: object, expected: object) -> None:
    """Archive values are converted to the Python type matching the variable type."""
    variable = Variable.model_validate({"Variable": "X", "Type": var_type, "Value": raw})
    assert variable.value == expected
    assert type(variable.value) is type(expected)


@pytest.mark.parametrize(
    ("var_type", "raw"),
    [("Boolean", "maybe"), ("Integer", "five"), ("Integer", True), ("String", False)],
)
def test_variable_value_mismatch_is_rejected(var_type: str, raw: object) -> None:
    """A value that does not fit the variable type is a validation error."""
    with pytest.raises(ValidationError):
        Variable.model_validate({"Variable": "X", "Type": var_type, "Value": raw})


def test_namespace_keeps_variable_order() -> None:
    """Variables stay in source order."""
    ns = GlobalVariableNamespace.model_validate(
        {
            "Namespace": "Game",
            "Variables": [
                {"Variable": "Zeta", "Type": "Integer", "Value": 1},
                {"Variable": "Alpha", "Type": "Integer", "Value": 2},
            ],
        }
    )
    assert [v.variable for v in ns.variables] == ["Zeta", "Alpha"]
    assert ns.variables[0].type == VariableType.INTEGER


# -------- object definitions --------


def test_effective_class_name_defaults_to_type() -> None:
    """Without a class name the type name is used."""
    assert ObjectTypeDefinition(type="Entity").effective_class_name == "Entity"
    assert ObjectTypeDefinition(type="Entity", class_name="Character").effective_class_name == "Character"


def test_ancestry_follows_defined_types_only() -> None:
    """The ancestry stops at the first parent that is not defined."""
    definitions = ObjectDefinitions(
        types=[
            ObjectTypeDefinition(type="Base", inherits_from="ArticyObject"),
            ObjectTypeDefinition(type="Middle", inherits_from="Base"),
            ObjectTypeDefinition(type="Leaf", inherits_from="Middle"),
        ]
    )
    assert [t.type for t in definitions.ancestry("Leaf")] == ["Leaf", "Middle", "Base"]
    assert definitions.ancestry("Unknown") == []


def test_capabilities_are_frozen() -> None:
    """Capability flags cannot be changed after construction."""
    capabilities = Capabilities(has_text=True)
    with pytest.raises(ValidationError):
        capabilities.has_text = False  # type: ignore[misc]


# -------- packages and methods --------


def test_package_object_id_comes_from_properties() -> None:
    """The id of a package object is its Id property."""
    obj = PackageObject.model_validate({"Type": "Entity", "Properties": {"Id": "0x42"}})
    assert obj.id == "0x42"
    assert PackageObject(type="Entity").id == ""


def test_user_method_argument_list() -> None:
    """Argument names and original parameter types are derived from the parameters."""
    method = UserMethod.model_validate(
        {
            "Name": "getValue",
            "ReturnType": "int",
            "Parameters": [{"Param": "index", "Type": "int"}, {"Param": "key", "Type": "string"}],
        }
    )
    assert method.argument_list == ["index", "key"]
    assert method.original_parameter_types == ["int", "string"]
    assert method.is_overloaded is False


def test_import_data_lookup_helpers() -> None:
    """Namespaces and packages can be looked up by name."""
    model = ImportData(
        global_variables=[GlobalVariableNamespace(namespace="Game")],
        packages=[PackageDef(name="Main"), PackageDef(name="Extra")],
    )
    assert model.find_namespace("Game") is model.global_variables[0]
    assert model.find_namespace("Other") is None
    assert model.find_package("Extra") is model.packages[1]
    assert model.imported_package_names() == ["Main", "Extra"]


# -------- hierarchy --------


def _tree() -> Hierarchy:
    return Hierarchy(
        root_id="r",
        nodes={
            "r": HierarchyNode(id="r", children=["a", "b"]),
            "a": HierarchyNode(id="a", children=["c"]),
            "b": HierarchyNode(id="b"),
            "c": HierarchyNode(id="c"),
        },
    )


def test_hierarchy_walk_is_preorder() -> None:
    """Walking visits parents before children, children in declared order."""
    assert [n.id for n in _tree().walk()] == ["r", "a", "c", "b"]


def test_hierarchy_parent_children_cache() -> None:
    """The cache maps every parent to its ordered children."""
    assert _tree().parent_children_cache() == {"r": ["a", "b"], "a": ["c"]}


def test_empty_hierarchy() -> None:
    """An empty hierarchy has no root and walks nothing."""
    hierarchy = Hierarchy()
    assert hierarchy.is_empty
    assert hierarchy.root is None
    assert list(hierarchy.walk()) == []


@pytest.mark.parametrize(
    "nodes",
    [
        {"r": HierarchyNode(id="r", children=["x"])},
        {"r": HierarchyNode(id="r", children=["a", "a"]), "a": HierarchyNode(id="a")},
        {"r": HierarchyNode(id="r"), "a": HierarchyNode(id="a", children=["r"])},
        {"r": HierarchyNode(id="r"), "a": HierarchyNode(id="a", children=["b"]), "b": HierarchyNode(id="b")},
        {
            "r": HierarchyNode(id="r"),
            "a": HierarchyNode(id="a", children=["b"]),
            "b": HierarchyNode(id="b", children=["a"]),
        },
    ],
    ids=["unknown-child", "two-parents", "root-as-child", "unreachable", "cycle"],
)
def test_invalid_hierarchy_is_rejected(nodes: dict[str, HierarchyNode]) -> None:
    """Hierarchies that are not a strict tree fail validation."""
    with pytest.raises(ValidationError):
        Hierarchy(root_id="r", nodes=nodes)


def test_add_child_to_parent_cache_ignores_duplicates() -> None:
    """Adding the same child twice keeps one entry."""
    cache: dict[str, list[str]] = {}
    add_child_to_parent_cache(cache, "p", "c")
    add_child_to_parent_cache(cache, "p", "c")
    add_child_to_parent_cache(cache, "p", "d")
    assert cache == {"p": ["c", "d"]}


# -------- script fragments --------


def test_fragment_set_deduplicates_on_text_and_kind() -> None:
    """Adding an equal fragment is a no-op; the parsed text does not take part in identity."""
    fragments = ScriptFragmentSet()
    assert fragments.add(ScriptFragment(original_text="a > 1", parsed_text="self.a > 1"))
    assert not fragments.add(ScriptFragment(original_text="a > 1", parsed_text="other"))
    assert fragments.add(ScriptFragment(original_text="a > 1", is_instruction=True))
    assert len(fragments) == 2
    assert fragments.fragments[0].parsed_text == "self.a > 1"


def test_fragment_set_sorted_is_canonical() -> None:
    """Sorted order is conditions first, then by text, regardless of insertion order."""
    fragments = ScriptFragmentSet()
    fragments.add(ScriptFragment(original_text="b", is_instruction=True))
    fragments.add(ScriptFragment(original_text="z"))
    fragments.add(ScriptFragment(original_text="a", is_instruction=True))
    fragments.add(ScriptFragment(original_text="c"))
    assert [(f.original_text, f.is_instruction) for f in fragments.sorted()] == [
        ("c", False),
        ("z", False),
        ("a", True),
        ("b", True),
    ]


def test_fragment_set_round_trips_through_dump() -> None:
    """A dumped fragment set loads back with its lookup index rebuilt."""
    fragments = ScriptFragmentSet()
    fragments.add(ScriptFragment(original_text="x", parsed_text="self.x"))
    restored = ScriptFragmentSet.model_validate(fragments.model_dump())
    assert restored.contains("x", False)
    assert not restored.add(ScriptFragment(original_text="x"))
