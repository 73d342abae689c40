# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Shared fixtures: a small but complete project archive."""

import copy
from pathlib import Path
from typing import Any

import pytest

from draftgen.importer.archive import write_archive

# ###############
# Sample Project
# ###############

SAMPLE_DOCUMENTS: dict[str, Any] = {
    "Settings": {
        "set_TextFormatter": "",
        "set_UseScriptSupport": True,
        "set_IncludedNodes": "",
        "RuleSetId": "rules-1",
        "ExportVersion": "1.0",
        "set_Localization": False,
    },
    "Project": {
        "Name": "Demo Game",
        "DetailName": "Demo",
        "Guid": "0x01",
        "TechnicalName": "Demo",
    },
    "GlobalVariables": [
        {
            "Namespace": "Game",
            "Description": "Game state",
            "Variables": [
                {"Variable": "IntValue", "Type": "Integer", "Value": "5", "Description": "A counter"},
                {"Variable": "Flag", "Type": "Boolean", "Value": "True"},
                {"Variable": "Name", "Type": "String", "Value": 'Hero "A"'},
            ],
        }
    ],
    "ObjectDefinitions": {
        "Types": [
            {
                "Type": "FlowFragment",
                "Class": "FlowFragment",
                "InheritsFrom": "",
                "Properties": [
                    {"Property": "DisplayName", "Type": "String", "Tooltip": "Shown name"},
                    {"Property": "Text", "Type": "String"},
                ],
            },
            {
                "Type": "DialogueFragment",
                "InheritsFrom": "FlowFragment",
                "Properties": [{"Property": "Speaker", "Type": "String"}],
            },
            {"Type": "Condition", "Properties": [{"Property": "Expression", "Type": "ScriptCondition"}]},
            {"Type": "Instruction", "Properties": [{"Property": "Expression", "Type": "ScriptInstruction"}]},
        ],
        "Texts": {
            "DFr_1.Text": {
                "Context": "",
                "Content": {"en": {"Text": "Hello"}, "de": {"Text": "Hallo", "VOAsset": "vo/hallo.wav"}},
            },
            "DFr_2.Text": {"Content": {"en": {"Text": "Bye"}}},
        },
    },
    "Packages": [
        {
            "Name": "Main",
            "Id": "0x10",
            "Description": "Main package",
            "IsDefaultPackage": True,
            "Objects": [
                {
                    "Type": "FlowFragment",
                    "Properties": {
                        "Id": "0x100",
                        "TechnicalName": "Start",
                        "InputPins": [{"Text": "Game.IntValue > 3"}],
                        "OutputPins": [{"Text": "Game.IntValue++"}],
                    },
                },
                {"Type": "Condition", "Properties": {"Id": "0x101", "Expression": "Game.Flag && !done"}},
                {
                    "Type": "Instruction",
                    "Properties": {"Id": "0x102", "Expression": "Game.IntValue = 1; setFlag(true)"},
                },
            ],
        },
        {"Name": "Extra", "Id": "0x11", "IsDefaultPackage": False, "Objects": []},
    ],
    "ScriptMethods": [
        {"Name": "setFlag", "ReturnType": "void", "Parameters": [{"Param": "value", "Type": "bool"}]},
        {"Name": "getValue", "ReturnType": "int", "Parameters": [{"Param": "key", "Type": "string"}]},
        {
            "Name": "getValue",
            "ReturnType": "int",
            "Parameters": [{"Param": "index", "Type": "int"}, {"Param": "key", "Type": "string"}],
        },
    ],
    "Hierarchy": {
        "Id": "0x1",
        "TechnicalName": "Root",
        "Type": "Project",
        "Children": [
            {"Id": "0x102", "Type": "Instruction", "Children": []},
            {"Id": "0x100", "Type": "FlowFragment"},
            {"Id": "0x101"},
        ],
    },
    "Languages": {
        "en": {"ArticyLanguageId": "en", "LanguageName": "English", "IsVoiceOver": False},
        "de": {"ArticyLanguageId": "de", "LanguageName": "German", "IsVoiceOver": True},
    },
}


@pytest.fixture
def documents() -> dict[str, Any]:
    """A fresh, mutable copy of the sample archive documents."""
    return copy.deepcopy(SAMPLE_DOCUMENTS)


@pytest.fixture
def archive_path(tmp_path: Path, documents: dict[str, Any]) -> Path:
    """The sample documents written as an archive file."""
    path = tmp_path / "project.zip"
    write_archive(path, documents)
    return path
