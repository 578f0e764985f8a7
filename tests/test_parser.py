from __future__ import annotations

import pytest

from jsrefactor import js_ast as js
from jsrefactor.exceptions import ParseError, UnsupportedSyntaxError
from jsrefactor.parser import decode_string_literal, parse_number


def test_identifiers_are_split_by_role(parse) -> None:
    tree = parse("var a = b; a = c; a.d = 1;")
    declaration, assignment, member = tree.statements
    assert isinstance(declaration.declaration.declarators[0].binding, js.BindingIdentifier)
    assert isinstance(declaration.declaration.declarators[0].init, js.IdentifierExpression)
    assert isinstance(assignment.expression.binding, js.AssignmentTargetIdentifier)
    assert isinstance(member.expression.binding, js.StaticMemberAssignmentTarget)


def test_sequences_nest_to_the_left(parse) -> None:
    (statement,) = parse("1, 2, 3;").statements
    outer = statement.expression
    assert isinstance(outer, js.BinaryExpression) and outer.operator == ","
    assert outer.right == js.LiteralNumericExpression(value=3)
    assert isinstance(outer.left, js.BinaryExpression)
    assert outer.left.left == js.LiteralNumericExpression(value=1)


def test_parentheses_disappear(parse) -> None:
    assert parse("(a);") == parse("a;")
    assert parse("x = ((1));") == parse("x = 1;")


def test_directives_only_in_the_prologue(parse) -> None:
    tree = parse('"use strict"; "also"; a(); "not";')
    assert [d.raw_value for d in tree.directives] == ["use strict", "also"]
    assert isinstance(tree.statements[-1].expression, js.LiteralStringExpression)


def test_computed_and_static_members(parse) -> None:
    (statement,) = parse('a["b"];').statements
    member = statement.expression
    assert isinstance(member, js.ComputedMemberExpression)
    assert member.expression == js.LiteralStringExpression(value="b")


def test_string_decoding() -> None:
    assert decode_string_literal(r"'a\nb'") == "a\nb"
    assert decode_string_literal(r'"\x41B\u{43}"') == "ABC"
    assert decode_string_literal('"a\\\nb"') == "ab"
    assert decode_string_literal(r"'\''") == "'"


@pytest.mark.parametrize(
    "text, value",
    [("0", 0), ("1_000", 1000), ("0x1F", 31), ("0o17", 15), ("0b101", 5), ("017", 15), ("1.5", 1.5), ("1e3", 1000)],
)
def test_number_parsing(text: str, value) -> None:
    assert parse_number(text) == value


def test_bigint_is_unsupported() -> None:
    with pytest.raises(UnsupportedSyntaxError):
        parse_number("10n")


def test_syntax_error_reports_position(parse) -> None:
    with pytest.raises(ParseError) as excinfo:
        parse("let = ;\nfoo(")
    assert excinfo.value.line is not None
    assert excinfo.value.column is not None


@pytest.mark.parametrize("source", ["a?.b;", "import x from 'y';", "class A { #p = 1; }"])
def test_unsupported_constructs(parse, source: str) -> None:
    with pytest.raises(UnsupportedSyntaxError):
        parse(source)
