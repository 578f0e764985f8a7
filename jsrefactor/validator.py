"""Grammar validity checks for :mod:`jsrefactor.js_ast` trees.

The checker is structural: every node field must hold a value of the kind its
schema annotation names, identifiers must follow the lexical rules for
JavaScript names, and a handful of grammar rules that the schema cannot
express (declaration arity, literal ranges, operator sets) are verified per
node kind.  It is used to gate candidate rewrites, so it must stay pure.
"""

from __future__ import annotations

import math
import re
from functools import lru_cache
from typing import Dict, List, Union, get_args, get_origin, get_type_hints

from . import js_ast as js

RESERVED_WORDS = frozenset(
    {
        "break", "case", "catch", "class", "const", "continue", "debugger",
        "default", "delete", "do", "else", "enum", "export", "extends", "false",
        "finally", "for", "function", "if", "import", "in", "instanceof", "new",
        "null", "return", "super", "switch", "this", "throw", "true", "try",
        "typeof", "var", "void", "while", "with",
    }
)

BINARY_OPERATORS = frozenset(
    {
        ",", "||", "&&", "??", "|", "^", "&", "==", "!=", "===", "!==", "<", ">",
        "<=", ">=", "in", "instanceof", "<<", ">>", ">>>", "+", "-", "*", "/",
        "%", "**",
    }
)
UNARY_OPERATORS = frozenset({"+", "-", "!", "~", "typeof", "void", "delete"})
UPDATE_OPERATORS = frozenset({"++", "--"})
COMPOUND_OPERATORS = frozenset(
    {
        "+=", "-=", "*=", "/=", "%=", "**=", "<<=", ">>=", ">>>=", "|=", "^=",
        "&=", "||=", "&&=", "??=",
    }
)
VARIABLE_KINDS = frozenset({"var", "let", "const"})
_REGEX_FLAGS = re.compile(r"^[dgimsuvy]*$")
_JOINERS = str.maketrans({"$": "_", "\u200c": "_", "\u200d": "_"})


def is_identifier_name(value: str) -> bool:
    """True for any IdentifierName, reserved words included."""

    if not value or value[0] in "\u200c\u200d":
        return False
    return value.translate(_JOINERS).isidentifier()


def is_valid_identifier(value: str) -> bool:
    """True for names usable as bindings or references."""

    return is_identifier_name(value) and value not in RESERVED_WORDS


@lru_cache(maxsize=None)
def _schema(kind: type) -> Dict[str, object]:
    return get_type_hints(kind, vars(js))


def _matches(value: object, hint: object) -> bool:
    origin = get_origin(hint)
    if origin is Union:
        return any(_matches(value, arg) for arg in get_args(hint))
    if origin is list:
        (item_hint,) = get_args(hint)
        return isinstance(value, list) and all(_matches(item, item_hint) for item in value)
    if hint is type(None):
        return value is None
    if hint is bool:
        return isinstance(value, bool)
    if hint in (int, float, str):
        return isinstance(value, hint) and not isinstance(value, bool)
    if hint is js.Node:
        # Member objects and call callees: any expression, or ``super``.
        return isinstance(value, (js.Expression, js.Super))
    return isinstance(value, hint)


def _check_node(node: js.Node, errors: List[str]) -> None:
    for name, hint in _schema(type(node)).items():
        value = getattr(node, name)
        if not _matches(value, hint):
            errors.append(f"{node.type}.{name}: unexpected {type(value).__name__}")

    if isinstance(node, (js.BindingIdentifier, js.AssignmentTargetIdentifier, js.IdentifierExpression)):
        if not is_valid_identifier(node.name):
            errors.append(f"{node.type}: invalid identifier {node.name!r}")
    elif isinstance(node, (js.StaticMemberExpression, js.StaticMemberAssignmentTarget)):
        if not is_identifier_name(node.property):
            errors.append(f"{node.type}: invalid property name {node.property!r}")
    elif isinstance(node, (js.LabeledStatement, js.BreakStatement, js.ContinueStatement)):
        if node.label is not None and not is_valid_identifier(node.label):
            errors.append(f"{node.type}: invalid label {node.label!r}")
    elif isinstance(node, js.LiteralNumericExpression):
        if isinstance(node.value, float) and not math.isfinite(node.value):
            errors.append(f"{node.type}: value must be finite")
        elif node.value < 0:
            errors.append(f"{node.type}: value must be non-negative")
    elif isinstance(node, js.LiteralRegExpExpression):
        if not node.pattern or not _REGEX_FLAGS.match(node.flags):
            errors.append(f"{node.type}: malformed regular expression")
        elif len(set(node.flags)) != len(node.flags):
            errors.append(f"{node.type}: duplicate regular expression flag")
    elif isinstance(node, js.BinaryExpression):
        if node.operator not in BINARY_OPERATORS:
            errors.append(f"{node.type}: unknown operator {node.operator!r}")
    elif isinstance(node, js.UnaryExpression):
        if node.operator not in UNARY_OPERATORS:
            errors.append(f"{node.type}: unknown operator {node.operator!r}")
    elif isinstance(node, js.UpdateExpression):
        if node.operator not in UPDATE_OPERATORS:
            errors.append(f"{node.type}: unknown operator {node.operator!r}")
    elif isinstance(node, js.CompoundAssignmentExpression):
        if node.operator not in COMPOUND_OPERATORS:
            errors.append(f"{node.type}: unknown operator {node.operator!r}")
    elif isinstance(node, js.VariableDeclaration):
        if node.kind not in VARIABLE_KINDS:
            errors.append(f"{node.type}: unknown kind {node.kind!r}")
        if not node.declarators:
            errors.append(f"{node.type}: needs at least one declarator")
    elif isinstance(node, js.VariableDeclarationStatement):
        _check_initialized(node.declaration, errors)
    elif isinstance(node, js.ForStatement):
        if isinstance(node.init, js.VariableDeclaration):
            _check_initialized(node.init, errors)
    elif isinstance(node, (js.ForInStatement, js.ForOfStatement)):
        if isinstance(node.left, js.VariableDeclaration):
            declarators = node.left.declarators
            if len(declarators) != 1 or declarators[0].init is not None:
                errors.append(f"{node.type}: head declares exactly one uninitialized binding")
    elif isinstance(node, js.TemplateExpression):
        if not node.elements or not all(
            isinstance(item, js.TemplateElement) == (index % 2 == 0)
            for index, item in enumerate(node.elements)
        ) or len(node.elements) % 2 == 0:
            errors.append(f"{node.type}: elements must alternate, starting and ending with text")
    elif isinstance(node, js.SwitchStatement):
        defaults = sum(isinstance(case, js.SwitchDefault) for case in node.cases)
        if defaults > 1:
            errors.append(f"{node.type}: more than one default clause")


def _check_initialized(declaration: js.VariableDeclaration, errors: List[str]) -> None:
    for declarator in declaration.declarators:
        if declarator.init is not None:
            continue
        if declaration.kind == "const":
            errors.append("VariableDeclarator: const declarations need an initializer")
        elif not isinstance(declarator.binding, js.BindingIdentifier):
            errors.append("VariableDeclarator: destructuring declarations need an initializer")


def validate(node: js.Node) -> List[str]:
    """Return a list of grammar errors for ``node`` and its descendants."""

    if not isinstance(node, js.Node):
        raise TypeError(f"Unsupported node: {node!r}")
    errors: List[str] = []
    for current in js.walk(node):
        _check_node(current, errors)
    return errors


def is_valid(node: js.Node) -> bool:
    return not validate(node)


__all__ = [
    "RESERVED_WORDS",
    "is_identifier_name",
    "is_valid",
    "is_valid_identifier",
    "validate",
]
