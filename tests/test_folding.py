"""Literal folding and computed-to-static conversion."""

from __future__ import annotations

import pytest

from jsrefactor import js_ast as js
from jsrefactor.passes import folding
from jsrefactor.passes.rewrite import RewriteRule, apply_rule
from jsrefactor.refactor import refactor
from jsrefactor.session import RefactorSession


def test_expand_boolean(same_tree) -> None:
    script = refactor("if (!0 || !1) true")
    script.expand_boolean()
    same_tree(script.raw(), "if (true || false) true")


@pytest.mark.parametrize("source", ["x = !2", "x = !false", "x = !a", "x = -0"])
def test_expand_boolean_leaves_other_negations(same_tree, source: str) -> None:
    session = RefactorSession(source)
    assert folding.expand_boolean(session) == 0
    same_tree(session.tree, source)


def test_compress_comma_operators(same_tree) -> None:
    script = refactor("let a=(1,2,3,4)")
    script.compress_comma_operators()
    same_tree(script.raw(), "let a=4;")
    assert script.print() == "let a = 4;"


def test_comma_with_side_effects_keeps_them(same_tree) -> None:
    session = RefactorSession("x = (1, f()); y = (f(), 1, 2);")
    assert folding.compress_comma_operators(session) == 1
    same_tree(session.tree, "x = f(); y = (f(), 1, 2);")


def test_compress_conditional_expressions(same_tree) -> None:
    script = refactor("let a=true ? 1 : 2;")
    script.compress_conditional_expressions()
    same_tree(script.raw(), "let a=1;")


@pytest.mark.parametrize(
    "source, expected",
    [
        ('x = "" ? a : b', "x = b"),
        ('x = "0" ? a : b', "x = a"),
        ("x = 0 ? a : b", "x = b"),
        ("x = null ? a : b", "x = b"),
        ("x = /re/ ? a : b", "x = a"),
        ("x = 1 ? (0 ? a : b) : c", "x = b"),
        ("x = y ? 1 : 2", "x = y ? 1 : 2"),
    ],
)
def test_conditional_uses_javascript_truthiness(same_tree, source: str, expected: str) -> None:
    session = RefactorSession(source)
    folding.compress_conditional_expressions(session)
    same_tree(session.tree, expected)


def test_computed_members_become_static(same_tree) -> None:
    script = refactor('a["b"]["c"];a["b"]["c"]=2')
    script.convert_computed_to_static()
    same_tree(script.raw(), "a.b.c;a.b.c=2")


def test_invalid_static_member_is_not_produced(same_tree) -> None:
    script = refactor('a["2b"] = 2')
    script.convert_computed_to_static()
    same_tree(script.raw(), 'a["2b"] = 2')


def test_computed_property_names_become_static(same_tree) -> None:
    script = refactor('a = {["b"]:2}')
    script.convert_computed_to_static()
    same_tree(script.raw(), "a = {b:2}")


def test_reserved_words_are_valid_property_names(same_tree) -> None:
    session = RefactorSession('a["if"]; a["b c"]; ({["__proto__"]: 1});')
    folding.convert_computed_to_static(session)
    same_tree(session.tree, 'a.if; a["b c"]; ({["__proto__"]: 1});')


def test_rewriting_is_idempotent() -> None:
    source = 'x = (1, true) ? a["b"] : c; y = !0;'
    session = RefactorSession(source)
    assert folding.compress_comma_operators(session) == 1
    assert folding.compress_conditional_expressions(session) == 1
    assert folding.convert_computed_to_static(session) == 1
    assert folding.expand_boolean(session) == 1
    before = session.print()
    for action in (
        folding.compress_comma_operators,
        folding.compress_conditional_expressions,
        folding.convert_computed_to_static,
        folding.expand_boolean,
    ):
        assert action(session) == 0
    assert session.print() == before == "x = a.b;\ny = true;"


def test_rejected_candidates_keep_the_original() -> None:
    session = RefactorSession("x = y;")
    rule = RewriteRule(
        "bad_name",
        "IdentifierExpression",
        lambda node: js.IdentifierExpression(name="not valid"),
    )
    assert apply_rule(session, rule) == 0
    assert session.print() == "x = y;"


def test_custom_validator_is_consulted() -> None:
    session = RefactorSession("x = 1;")
    rule = RewriteRule(
        "double",
        "LiteralNumericExpression[value=1]",
        lambda node: js.LiteralNumericExpression(value=2),
        validate=lambda candidate: candidate.value < 2,
    )
    assert apply_rule(session, rule) == 0
    assert session.print() == "x = 1;"


def test_folding_stays_inside_the_selection(same_tree) -> None:
    script = refactor("x = (1, 2); f = function () { y = (1, 2); };")
    script("FunctionExpression").compress_comma_operators()
    same_tree(script.raw(), "x = (1, 2); f = function () { y = 2; };")


def test_selected_node_is_followed_through_its_own_rewrite(same_tree) -> None:
    script = refactor("a = true ? (false ? b : c) : d; e = true ? f : g;")
    selection = script("AssignmentExpression[binding.name=a] > ConditionalExpression")
    selection.compress_conditional_expressions()
    same_tree(script.raw(), "a = c; e = true ? f : g;")
    assert [node.type for node in selection] == ["IdentifierExpression"]


def test_empty_selection_changes_nothing(same_tree) -> None:
    source = "x = !0 ? a['b'] : (1, c);"
    script = refactor(source)
    empty = script("WhileStatement")
    empty.expand_boolean().compress_conditional_expressions()
    empty.compress_comma_operators().convert_computed_to_static()
    same_tree(script.raw(), source)


@pytest.mark.parametrize(
    "source",
    [
        "(0, obj.m)();",
        "(0, obj['m'])(1);",
        "(0, eval)(src);",
    ],
)
def test_comma_callee_keeps_its_call_semantics(same_tree, source: str) -> None:
    session = RefactorSession(source)
    assert folding.compress_comma_operators(session) == 0
    same_tree(session.tree, source)


def test_comma_callee_without_receiver_is_folded(same_tree) -> None:
    session = RefactorSession("(0, f)(); (1, 2, obj.m)();")
    assert folding.compress_comma_operators(session) == 2
    same_tree(session.tree, "f(); (2, obj.m)();")
