from __future__ import annotations

from jsrefactor.passes.debug_inject import inject_debug
from jsrefactor.refactor import refactor
from jsrefactor.session import RefactorSession


def test_debug_inserts_debugger_statements(same_tree) -> None:
    script = refactor("b = _ => foo(); c = _ => {bar()}; a.x = function(){b();c();}")
    script("FunctionExpression, ArrowExpression").debug()
    same_tree(
        script.raw(),
        "b = _ => {debugger; return foo()}; c = _ => {debugger; bar()}; a.x = function(){debugger;b();c();}",
    )


def test_empty_bodies_and_methods(same_tree) -> None:
    source = "function f() {} class A { m() { return 1; } get g() {} }"
    session = RefactorSession(source)
    count = inject_debug(session, session.query("FunctionDeclaration, Method, Getter"))
    assert count == 3
    same_tree(
        session.tree,
        "function f() { debugger; } class A { m() { debugger; return 1; } get g() { debugger; } }",
    )


def test_directives_stay_first(same_tree) -> None:
    session = RefactorSession('function f() { "use strict"; }')
    inject_debug(session, session.query("FunctionDeclaration"))
    same_tree(session.tree, 'function f() { "use strict"; debugger; }')


def test_non_functions_are_ignored(same_tree) -> None:
    source = "x = 1;"
    session = RefactorSession(source)
    assert inject_debug(session, session.query("ExpressionStatement, LiteralNumericExpression")) == 0
    same_tree(session.tree, source)
