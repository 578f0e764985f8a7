from __future__ import annotations

import pytest

from jsrefactor import js_ast as js
from jsrefactor.codegen import format_number, format_property_key, quote_string, to_source

ROUND_TRIP_SOURCES = [
    "a = (b, c);",
    "x = (a + b) * c - d / (e - f);",
    "x = a ** -b; y = (-a) ** b;",
    "x = (a ?? b) || c;",
    "x = a ? b : c ? d : e; y = (a ? b : c) ? d : e;",
    "(function () {})(); (() => {})();",
    "({a: 1}).a; ({}).toString();",
    "x = () => ({a: 1});",
    "new (f())(); new a.b.C(); new (a().b)();",
    "if (a) if (b) c(); else d();",
    "for (var i = (0 in o); i < 1; i++) ;",
    "for (const k in o) {} for (x of [1, 2]) {}",
    "let [a, , b = 2, ...c] = d; ({x, y: [z] = []} = e);",
    "label: while (1) { break label; }",
    "do x++; while (x < 3);",
    "try { a(); } catch { b(); } finally { c(); }",
    "switch (a) { case 1: b(); break; default: c(); }",
    "class A extends (B, C) { static m(...args) {} get [k]() {} set v(x) {} }",
    "async function* g() { yield* h(); await i; }",
    "x = `a${b}c`; tag`x${y}`;",
    "x = /ab+c/gi; y = typeof z; w = void 0; delete o[k];",
    "x = - -y; y = + +z; z = -(-1);",
    "(1).toString(); 1.5.toFixed();",
    '"use strict"; ("not a directive");',
    "let x = {'a-b': 1, 2: 2, if: 3, get: 4};",
    "a = b = c; a += b ||= c;",
]


@pytest.mark.parametrize("source", ROUND_TRIP_SOURCES)
def test_printed_source_reparses_to_the_same_tree(parse, source: str) -> None:
    tree = parse(source)
    printed = to_source(tree)
    assert parse(printed) == tree
    assert to_source(parse(printed)) == printed


def test_indentation_and_layout(parse) -> None:
    tree = parse("function f(a){if(a){return 1}else return 2}")
    assert to_source(tree, indent="    ") == (
        "function f(a) {\n"
        "    if (a) {\n"
        "        return 1;\n"
        "    } else\n"
        "        return 2;\n"
        "}"
    )


def test_statement_and_expression_entry_points() -> None:
    expr = js.BinaryExpression(
        left=js.IdentifierExpression(name="a"),
        operator="+",
        right=js.LiteralNumericExpression(value=1),
    )
    assert to_source(expr) == "a + 1"
    assert to_source(js.ExpressionStatement(expression=expr)) == "a + 1;"
    with pytest.raises(TypeError):
        to_source(js.Directive(raw_value="x"))


def test_string_quoting() -> None:
    assert quote_string('a"b') == '"a\\"b"'
    assert quote_string("line\nbreak") == '"line\\nbreak"'
    assert quote_string("\x00") == '"\\x00"'
    assert quote_string("\u2028") == '"\\u2028"'


def test_number_formatting() -> None:
    assert format_number(1) == "1"
    assert format_number(2.0) == "2"
    assert format_number(0.5) == "0.5"
    assert format_number(float("inf")) == "2e308"
    with pytest.raises(TypeError):
        format_number(True)


def test_property_keys() -> None:
    assert format_property_key("a") == "a"
    assert format_property_key("if") == "if"
    assert format_property_key("10") == "10"
    assert format_property_key("010") == '"010"'
    assert format_property_key("a-b") == '"a-b"'
