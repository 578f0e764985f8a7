from __future__ import annotations

import pytest

from jsrefactor import js_ast as js
from jsrefactor.validator import is_identifier_name, is_valid, is_valid_identifier, validate


@pytest.mark.parametrize("name", ["a", "_b", "$", "a$b", "café", "x1"])
def test_identifier_names(name: str) -> None:
    assert is_identifier_name(name)
    assert is_valid_identifier(name)


@pytest.mark.parametrize("name", ["", "2b", "b c", "a-b", "\u200cx"])
def test_bad_identifier_names(name: str) -> None:
    assert not is_identifier_name(name)


def test_reserved_words_are_names_but_not_identifiers() -> None:
    assert is_identifier_name("if")
    assert not is_valid_identifier("if")
    assert not is_valid_identifier("null")


def test_static_member_property_must_be_an_identifier_name() -> None:
    obj = js.IdentifierExpression(name="a")
    assert is_valid(js.StaticMemberExpression(object=obj, property="b"))
    assert is_valid(js.StaticMemberExpression(object=obj, property="class"))
    assert not is_valid(js.StaticMemberExpression(object=obj, property="2b"))
    assert not is_valid(js.StaticMemberAssignmentTarget(object=obj, property="b c"))


def test_reserved_word_reference_is_invalid() -> None:
    errors = validate(js.IdentifierExpression(name="while"))
    assert errors == ["IdentifierExpression: invalid identifier 'while'"]


def test_field_kinds_are_checked() -> None:
    statement = js.ExpressionStatement(expression=js.DebuggerStatement())
    assert validate(statement) == ["ExpressionStatement.expression: unexpected DebuggerStatement"]


def test_numeric_literals() -> None:
    assert is_valid(js.LiteralNumericExpression(value=0))
    assert is_valid(js.LiteralNumericExpression(value=1.5))
    assert not is_valid(js.LiteralNumericExpression(value=-1))
    assert not is_valid(js.LiteralNumericExpression(value=float("inf")))
    assert not is_valid(js.LiteralNumericExpression(value=True))


def test_declaration_rules() -> None:
    binding = js.BindingIdentifier(name="x")
    empty = js.VariableDeclaration(kind="let", declarators=[])
    assert not is_valid(js.VariableDeclarationStatement(declaration=empty))

    const = js.VariableDeclaration(kind="const", declarators=[js.VariableDeclarator(binding=binding)])
    assert not is_valid(js.VariableDeclarationStatement(declaration=const))

    let = js.VariableDeclaration(kind="let", declarators=[js.VariableDeclarator(binding=binding)])
    assert is_valid(js.VariableDeclarationStatement(declaration=let))


def test_parsed_programs_are_valid(parse) -> None:
    tree = parse(
        """
        "use strict";
        label: for (const [k, v] of Object.entries({a: 1, ...rest})) { if (k) continue label; }
        class A extends B { constructor() { super(); } static get x() { return `t${1}`; } }
        switch (x) { case 1: break; default: }
        """
    )
    assert validate(tree) == []


def test_validate_rejects_non_nodes() -> None:
    with pytest.raises(TypeError):
        validate("x")  # type: ignore[arg-type]
