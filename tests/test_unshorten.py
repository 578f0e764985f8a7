from __future__ import annotations

import pytest

from jsrefactor import js_ast as js
from jsrefactor.exceptions import InconsistentStateError
from jsrefactor.refactor import refactor
from jsrefactor.passes.unshorten import unshorten
from jsrefactor.session import RefactorSession


def test_unshorten_variable_declarations(same_tree) -> None:
    script = refactor("let a=2,r=require;r()")
    script('VariableDeclarator[init.name="require"]').unshorten()
    same_tree(script.raw(), "let a=2;require()")


def test_unshorten_prints_without_the_alias() -> None:
    script = refactor("let a=2,r=require;r()")
    script('VariableDeclarator[init.name="require"]').unshorten()
    assert script.print() == "let a = 2;\nrequire();"


def test_single_declarator_statement_is_removed(same_tree) -> None:
    script = refactor("var log = console; log.info(1); function f() { log.warn(2); }")
    script('VariableDeclarator[init.name="console"]').unshorten()
    same_tree(script.raw(), "console.info(1); function f() { console.warn(2); }")


def test_writes_to_the_alias_are_renamed_too(same_tree) -> None:
    script = refactor("let w = window; w = 3; w.x++;")
    script('VariableDeclarator[binding.name="w"]').unshorten()
    same_tree(script.raw(), "window = 3; window.x++;")


def test_emptied_for_init_is_dropped(same_tree) -> None:
    script = refactor("for (var i = j; i < 3; i++) {}")
    script('VariableDeclarator[init.name="j"]').unshorten()
    same_tree(script.raw(), "for (; j < 3; j++) {}")


def test_non_identifier_initializer_is_skipped(same_tree) -> None:
    source = 'let r = require("fs"); r.readFileSync();'
    session = RefactorSession(source)
    plan = unshorten(session, session.query("VariableDeclarator"))
    assert plan == []
    same_tree(session.tree, source)


def test_non_declarators_are_skipped(same_tree) -> None:
    source = "let a = b; a();"
    session = RefactorSession(source)
    plan = unshorten(session, session.query("IdentifierExpression"))
    assert plan == []
    same_tree(session.tree, source)


def test_destructuring_declarator_is_skipped(same_tree) -> None:
    source = "let {a} = b; a();"
    session = RefactorSession(source)
    assert unshorten(session, session.query("VariableDeclarator")) == []
    same_tree(session.tree, source)


def test_plan_names_alias_and_target() -> None:
    session = RefactorSession("const d = document; d.body;")
    plan = unshorten(session, session.query("VariableDeclarator"))
    assert [(item.original, item.new_name) for item in plan] == [("d", "document")]
    assert session.print() == "document.body;"


def test_alias_of_an_alias_follows_the_chain() -> None:
    session = RefactorSession("var a = b, c = a; c(); a();")
    plan = unshorten(session, session.query("VariableDeclarator"))
    assert [(item.original, item.new_name) for item in plan] == [("a", "b"), ("c", "b")]
    assert session.print() == "b();\nb();"


def test_alias_declared_before_its_target_alias() -> None:
    session = RefactorSession("var c = a, a = b; c();")
    unshorten(session, session.query("VariableDeclarator"))
    assert session.print() == "b();"


def test_declarator_outside_the_analysed_tree_raises() -> None:
    session = RefactorSession("let a = b; a();")
    stray = js.VariableDeclarator(
        binding=js.BindingIdentifier(name="x"),
        init=js.IdentifierExpression(name="y"),
    )
    with pytest.raises(InconsistentStateError):
        unshorten(session, [stray])
