# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Script fragment gathering and the user method registry.

Script text authored in the tool (conditions on input pins, instructions on
output pins, and properties whose type marks them as scripts) is collected
into a set of unique fragments. Each fragment is translated from expresso
into Python once, here, so the generator only has to lay the result out.
"""

from __future__ import annotations

import ast
import logging
from collections.abc import Iterator, Mapping

from draftgen.codegen.identifiers import sanitize_identifier
from draftgen.importer.lexer import LexerError, Token, TokenType, tokenize
from draftgen.model.entities import ImportData, PackageObject, UserMethod
from draftgen.model.fragments import ScriptFragment, ScriptFragmentSet
from draftgen.model.types import ScriptKind

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

# Raw namespace name -> (namespace identifier, raw variable name -> variable identifier).
NamespaceTable = Mapping[str, tuple[str, Mapping[str, str]]]


class FragmentTranslationError(Exception):
    """Raised when a fragment cannot be translated into valid Python."""


def gather_scripts(model: ImportData) -> ScriptFragmentSet:
    """Collect every script fragment of *model* into a deduplicated set.

    Package objects are visited in hierarchy pre-order; objects that do not
    appear in the hierarchy follow in package order. Each object contributes
    the properties its type declares as script conditions or instructions,
    the texts of its input pins (conditions) and of its output pins
    (instructions). Texts that occur more than once are stored once.
    """
    namespaces = namespace_table(model)
    fragments = ScriptFragmentSet()
    for obj in _iter_objects(model):
        for text, is_instruction in _object_scripts(model, obj):
            add_script_fragment(fragments, text, is_instruction, namespaces)
    return fragments


def add_script_fragment(
    fragments: ScriptFragmentSet,
    text: str,
    is_instruction: bool,
    namespaces: NamespaceTable,
) -> bool:
    """Translate *text* and insert it into *fragments* unless already present.

    Returns:
        True if a new fragment was stored, False if it was a duplicate.
    """
    if fragments.contains(text, is_instruction):
        return False
    try:
        parsed = translate_fragment(text, is_instruction, namespaces)
    except FragmentTranslationError as exc:
        kind = "instruction" if is_instruction else "condition"
        logger.warning("Script %s %r cannot be translated: %s", kind, text, exc)
        parsed = ""
    return fragments.add(ScriptFragment(original_text=text, parsed_text=parsed, is_instruction=is_instruction))


def translate_fragment(text: str, is_instruction: bool, namespaces: NamespaceTable) -> str:
    """Translate expresso *text* into Python source.

    Conditions become a single expression, instructions a block of statements
    separated by newlines. Global variable references ``Namespace.Variable``
    become ``self.gv.<Namespace>.<Variable>.value``; any other name is looked
    up on ``self``.

    Raises:
        FragmentTranslationError: If the text cannot be scanned or the result
            is not valid Python.
    """
    try:
        tokens = tokenize(text)
    except LexerError as exc:
        raise FragmentTranslationError(str(exc)) from exc

    statements = [s for s in _split_statements(tokens) if s]
    translated = [_translate_statement(s, namespaces) for s in statements]

    if is_instruction:
        source = "\n".join(translated) if translated else "pass"
        mode = "exec"
    else:
        if len(translated) > 1:
            raise FragmentTranslationError("a condition must be a single expression")
        source = translated[0] if translated else "True"
        mode = "eval"

    try:
        ast.parse(source, mode=mode)
    except SyntaxError as exc:
        raise FragmentTranslationError(f"translation {source!r} is not valid Python: {exc.msg}") from exc
    return source


def namespace_table(model: ImportData) -> dict[str, tuple[str, dict[str, str]]]:
    """Build the lookup table used to recognise global variable references."""
    table: dict[str, tuple[str, dict[str, str]]] = {}
    for namespace in model.global_variables:
        table[namespace.namespace] = (
            sanitize_identifier(namespace.namespace),
            {v.variable: sanitize_identifier(v.variable) for v in namespace.variables},
        )
    return table


def register_methods(methods: list[UserMethod]) -> list[UserMethod]:
    """Compute the overload flag and call name of every method.

    Methods are grouped by declared name; every member of a group with more
    than one method is overloaded and is called through a name derived from
    its parameter types, e.g. ``getValue_int_string``.

    Returns:
        New method objects in the original order.
    """
    counts: dict[str, int] = {}
    for method in methods:
        counts[method.name] = counts.get(method.name, 0) + 1

    registered: list[UserMethod] = []
    for method in methods:
        overloaded = counts[method.name] > 1
        call_name = "_".join([method.name, *method.original_parameter_types]) if overloaded else method.name
        registered.append(method.model_copy(update={"is_overloaded": overloaded, "call_name": call_name}))
    return registered


# ################
# Implementation
# ################

_PIN_KINDS: tuple[tuple[str, bool], ...] = (("InputPins", False), ("OutputPins", True))

_KEYWORD_TEXT: dict[TokenType, str] = {
    TokenType.TRUE: "True",
    TokenType.FALSE: "False",
    TokenType.NULL: "None",
    TokenType.AND: "and",
    TokenType.OR: "or",
    TokenType.NOT: "not",
}

# Tokens that never have a space on their left / right in the output.
_TIGHT_LEFT = frozenset({TokenType.RPAREN, TokenType.COMMA, TokenType.DOT})
_TIGHT_RIGHT = frozenset({TokenType.LPAREN, TokenType.DOT})


def _iter_objects(model: ImportData) -> Iterator[PackageObject]:
    by_id: dict[str, PackageObject] = {}
    for package in model.packages:
        for obj in package.objects:
            if obj.id and obj.id not in by_id:
                by_id[obj.id] = obj

    visited: set[int] = set()
    for node in model.hierarchy.walk():
        obj = by_id.get(node.id)
        if obj is not None and id(obj) not in visited:
            visited.add(id(obj))
            yield obj
    for package in model.packages:
        for obj in package.objects:
            if id(obj) not in visited:
                visited.add(id(obj))
                yield obj


def _object_scripts(model: ImportData, obj: PackageObject) -> Iterator[tuple[str, bool]]:
    """Yield ``(text, is_instruction)`` for every script-bearing location of *obj*."""
    for type_def in model.object_definitions.ancestry(obj.type):
        for prop in type_def.properties:
            if prop.type not in (ScriptKind.CONDITION.value, ScriptKind.INSTRUCTION.value):
                continue
            value = obj.properties.get(prop.property)
            if isinstance(value, str) and value.strip():
                yield value, prop.type == ScriptKind.INSTRUCTION.value

    for pin_key, is_instruction in _PIN_KINDS:
        pins = obj.properties.get(pin_key)
        if not isinstance(pins, list):
            continue
        for pin in pins:
            if not isinstance(pin, dict):
                continue
            text = pin.get("Text")
            if isinstance(text, str) and text.strip():
                yield text, is_instruction


def _split_statements(tokens: list[Token]) -> list[list[Token]]:
    statements: list[list[Token]] = [[]]
    for token in tokens:
        if token.type is TokenType.EOF:
            break
        if token.type is TokenType.SEMICOLON:
            statements.append([])
        else:
            statements[-1].append(token)
    return statements


def _translate_statement(tokens: list[Token], namespaces: NamespaceTable) -> str:
    prefix_step = ""
    if tokens[0].type in (TokenType.INCREMENT, TokenType.DECREMENT):
        prefix_step = " += 1" if tokens[0].type is TokenType.INCREMENT else " -= 1"
        tokens = tokens[1:]

    out: list[str] = []
    last_type: TokenType | None = None
    i = 0
    while i < len(tokens):
        token = tokens[i]
        text, consumed = _translate_token(tokens, i, last_type, namespaces)
        is_call = token.type is TokenType.LPAREN and last_type in (TokenType.IDENTIFIER, TokenType.RPAREN)
        if out and not is_call and token.type not in _TIGHT_LEFT and last_type not in _TIGHT_RIGHT:
            out.append(" ")
        out.append(text)
        last_type = TokenType.IDENTIFIER if consumed > 1 else token.type
        i += consumed
    return "".join(out) + prefix_step


def _translate_token(
    tokens: list[Token],
    index: int,
    last_type: TokenType | None,
    namespaces: NamespaceTable,
) -> tuple[str, int]:
    """Translate the token at *index*; return the text and the number of tokens consumed."""
    token = tokens[index]
    if token.type is TokenType.IDENTIFIER:
        identifier = _identifier(token)
        if last_type is TokenType.DOT:
            return identifier, 1
        variable = _variable_reference(tokens, index, namespaces)
        if variable is not None:
            return variable, 3
        return f"self.{identifier}", 1
    if token.type in _KEYWORD_TEXT:
        return _KEYWORD_TEXT[token.type], 1
    if token.type is TokenType.INCREMENT:
        return "+= 1", 1
    if token.type is TokenType.DECREMENT:
        return "-= 1", 1
    if token.type is TokenType.STRING:
        return repr(token.value), 1
    return token.value, 1


def _variable_reference(tokens: list[Token], index: int, namespaces: NamespaceTable) -> str | None:
    if index + 2 >= len(tokens):
        return None
    ns_token, dot, var_token = tokens[index], tokens[index + 1], tokens[index + 2]
    if dot.type is not TokenType.DOT or var_token.type is not TokenType.IDENTIFIER:
        return None
    entry = namespaces.get(ns_token.value)
    if entry is None:
        return None
    ns_identifier, variables = entry
    var_identifier = variables.get(var_token.value)
    if var_identifier is None:
        return None
    return f"self.gv.{ns_identifier}.{var_identifier}.value"


def _identifier(token: Token) -> str:
    try:
        return sanitize_identifier(token.value)
    except ValueError as exc:
        raise FragmentTranslationError(str(exc)) from exc
