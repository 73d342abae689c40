# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Emits the methods provider protocol and the expresso scripts module.

Both modules exist only when script support is enabled in the settings.
"""

from __future__ import annotations

from draftgen.codegen.identifiers import NameCollision, check_unique, class_prefix, sanitize_identifier
from draftgen.codegen.object_types import annotation_for
from draftgen.codegen.writer import CodeWriter, docstring, header, python_literal
from draftgen.model.entities import ImportData, UserMethod
from draftgen.model.fragments import ScriptFragment

# ###############
# Public Interface
# ###############


def provider_class_name(model: ImportData) -> str:
    return f"{class_prefix(model.project)}MethodsProvider"


def scripts_class_name(model: ImportData) -> str:
    return f"{class_prefix(model.project)}ExpressoScripts"


def method_call_names(methods: list[UserMethod]) -> dict[int, str]:
    """Map the index of every method to its sanitized call name.

    Raises:
        NameCollision: If two methods end up with the same call name.
    """
    result: dict[int, str] = {}
    owners: dict[str, int] = {}
    for index, method in enumerate(methods):
        identifier = sanitize_identifier(method.call_name or method.name)
        if identifier in owners:
            other = methods[owners[identifier]]
            raise NameCollision("script methods", [_signature(other), _signature(method)], identifier)
        owners[identifier] = index
        result[index] = identifier
    return result


def render_methods_provider(model: ImportData) -> str:
    """Render the protocol a host implements to provide the user methods.

    Overloaded methods appear once per overload under their call name.
    """
    call_names = method_call_names(model.user_methods)
    w = CodeWriter()
    header(w, model.project, "Methods that expresso scripts can call.")
    w.blank()
    w.line("from typing import Protocol")
    w.blank(2)
    with w.block(f"class {provider_class_name(model)}(Protocol):"):
        docstring(w, "Implemented by the host to provide the user methods of the project.")
        if not model.user_methods:
            w.blank()
            w.line("pass")
        for index, method in enumerate(model.user_methods):
            w.blank()
            w.line(f"def {call_names[index]}({_parameter_list(method)}) -> {_return_annotation(method)}: ...")
    return w.text()


def render_expresso_scripts(model: ImportData, runtime_module: str) -> str:
    """Render the module holding every script fragment as a method.

    Fragments are laid out in canonical order (conditions first, then by
    text) so the module does not depend on traversal order. Every method
    name gets a dispatch method that forwards to the methods provider;
    overloads are selected by argument count and argument types.
    """
    fragments = model.script_fragments.sorted()
    conditions = [f for f in fragments if not f.is_instruction]
    instructions = [f for f in fragments if f.is_instruction]
    call_names = method_call_names(model.user_methods)
    groups = _method_groups(model.user_methods)
    dispatch_names = check_unique("script method dispatch", list(groups))
    for name, identifier in dispatch_names.items():
        if identifier in _SCRIPTS_MEMBERS or identifier.startswith(("_condition_", "_instruction_")):
            raise NameCollision("script method dispatch", [name, f"{identifier} (scripts member)"], identifier)

    w = CodeWriter()
    header(w, model.project, "Translated expresso script fragments.")
    w.blank()
    w.line("from typing import Any")
    w.blank()
    w.line(f"from {runtime_module} import ExpressoScriptsBase")
    if any(len(members) > 1 for members in groups.values()):
        w.blank(2)
        with w.block("def _matches(args: tuple[Any, ...], types: tuple[type, ...]) -> bool:"):
            w.line("return all(isinstance(arg, kind) for arg, kind in zip(args, types))")
    w.blank(2)
    with w.block(f"class {scripts_class_name(model)}(ExpressoScriptsBase):"):
        docstring(w, "Conditions and instructions of the project, keyed by their original text.")
        w.blank()
        with w.block("def __init__(self, gv: Any = None, methods_provider: Any = None) -> None:"):
            w.line("super().__init__(gv, methods_provider)")
            _fragment_table(w, "conditions", "_condition", conditions)
            _fragment_table(w, "instructions", "_instruction", instructions)
        for index, fragment in enumerate(conditions):
            w.blank()
            _fragment_method(w, f"_condition_{index}", fragment)
        for index, fragment in enumerate(instructions):
            w.blank()
            _fragment_method(w, f"_instruction_{index}", fragment)
        for name, indices in groups.items():
            w.blank()
            _dispatch_method(w, dispatch_names[name], model.user_methods, indices, call_names)
    return w.text()


# ################
# Implementation
# ################

_SCRIPTS_MEMBERS = frozenset({"gv", "methods_provider", "conditions", "instructions"})


def _signature(method: UserMethod) -> str:
    return f"{method.name}({', '.join(method.original_parameter_types)})"


def _method_groups(methods: list[UserMethod]) -> dict[str, list[int]]:
    groups: dict[str, list[int]] = {}
    for index, method in enumerate(methods):
        groups.setdefault(method.name, []).append(index)
    return groups


def _parameter_names(method: UserMethod) -> list[str]:
    names = check_unique(f"parameters of method '{method.name}'", method.argument_list)
    for name, identifier in names.items():
        if identifier == "self_":
            raise NameCollision(f"parameters of method '{method.name}'", [name, "self"], identifier)
    return [names[p.name] for p in method.parameters]


def _parameter_list(method: UserMethod) -> str:
    names = _parameter_names(method)
    parts = ["self"] + [f"{n}: {annotation_for(p.type)}" for n, p in zip(names, method.parameters)]
    return ", ".join(parts)


def _return_annotation(method: UserMethod) -> str:
    if method.return_type.strip().lower() in ("", "void"):
        return "None"
    return annotation_for(method.return_type)


def _fragment_table(w: CodeWriter, attribute: str, prefix: str, fragments: list[ScriptFragment]) -> None:
    if not fragments:
        w.line(f"self.{attribute} = {{}}")
        return
    with w.block(f"self.{attribute} = {{"):
        for index, fragment in enumerate(fragments):
            w.line(f"{python_literal(fragment.original_text)}: self.{prefix}_{index},")
    w.line("}")


def _fragment_method(w: CodeWriter, name: str, fragment: ScriptFragment) -> None:
    returns = "None" if fragment.is_instruction else "bool"
    with w.block(f"def {name}(self) -> {returns}:"):
        if not fragment.parsed_text:
            kind = "instruction" if fragment.is_instruction else "condition"
            message = python_literal(f"Script {kind} could not be translated: {fragment.original_text}")
            w.line(f"raise SyntaxError({message})")
        elif fragment.is_instruction:
            w.lines(fragment.parsed_text)
        else:
            w.line(f"return bool({fragment.parsed_text})")


def _dispatch_method(
    w: CodeWriter,
    name: str,
    methods: list[UserMethod],
    indices: list[int],
    call_names: dict[int, str],
) -> None:
    if len(indices) == 1:
        method = methods[indices[0]]
        params = _parameter_names(method)
        signature = ", ".join(["self"] + [f"{p}: Any" for p in params])
        with w.block(f"def {name}({signature}) -> Any:"):
            w.line(f"return self.methods_provider.{call_names[indices[0]]}({', '.join(params)})")
        return

    with w.block(f"def {name}(self, *args: Any) -> Any:"):
        for index in indices:
            method = methods[index]
            types = [annotation_for(p.type) for p in method.parameters]
            condition = f"len(args) == {len(types)}"
            if types:
                condition += f" and _matches(args, ({', '.join(types)},))"
            with w.block(f"if {condition}:"):
                w.line(f"return self.methods_provider.{call_names[index]}(*args)")
        message = python_literal(f"No overload of '{methods[indices[0]].name}' accepts the given arguments")
        w.line(f"raise TypeError({message})")
