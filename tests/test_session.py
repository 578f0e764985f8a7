from __future__ import annotations

import pytest

from jsrefactor import js_ast as js
from jsrefactor.exceptions import InconsistentStateError
from jsrefactor.session import RefactorSession, build_parent_map


def test_parent_map_links_fields_and_list_slots() -> None:
    session = RefactorSession("a; b(c);")
    (second,) = session.query("CallExpression")
    link = session.parent_of(second)
    assert isinstance(link.parent, js.ExpressionStatement)
    assert link.field == "expression" and link.index is None

    statement = session.tree.statements[1]
    link = session.parent_of(statement)
    assert link.parent is session.tree and link.field == "statements" and link.index == 1


def test_parent_of_unknown_node_raises() -> None:
    session = RefactorSession("a;")
    with pytest.raises(InconsistentStateError):
        session.parent_of(js.IdentifierExpression(name="a"))


def test_replace_with_node_and_callable() -> None:
    session = RefactorSession("a; b; c;")
    assert session.replace("IdentifierExpression[name=a]", js.IdentifierExpression(name="x")) == 1
    replaced = session.replace(
        "IdentifierExpression",
        lambda node: js.IdentifierExpression(name=node.name.upper()) if node.name != "c" else node,
    )
    assert replaced == 2
    assert session.print() == "X;\nB;\nc;"


def test_replace_invalidates_cached_tables() -> None:
    session = RefactorSession("a;")
    before = session.lookup_table
    session.replace("IdentifierExpression", js.IdentifierExpression(name="b"))
    assert session.lookup_table is not before
    assert "b" in session.lookup_table.scope.variables


def test_replace_recursive_runs_to_a_fixpoint() -> None:
    session = RefactorSession("x = 1 + 1 + 1 + 1;")

    def fold(node):
        if isinstance(node.left, js.LiteralNumericExpression) and isinstance(
            node.right, js.LiteralNumericExpression
        ):
            return js.LiteralNumericExpression(value=node.left.value + node.right.value)
        return node

    assert session.replace_recursive('BinaryExpression[operator="+"]', fold) == 3
    assert session.print() == "x = 4;"


def test_replace_recursive_that_never_settles_raises() -> None:
    session = RefactorSession("a;", max_rounds=5)
    with pytest.raises(InconsistentStateError):
        session.replace_recursive("IdentifierExpression", lambda node: js.IdentifierExpression(name="a"))


def test_queued_insertions_and_deletions() -> None:
    session = RefactorSession("a(); b(); c();")
    first, second, third = session.tree.statements
    session.prepend(first, js.DebuggerStatement())
    session.insert_after(second, js.EmptyStatement())
    session.queue_deletion(third)
    session.queue_deletion(third)
    assert session.pending == 4
    # Nothing changes until the commit.
    assert len(session.tree.statements) == 3
    assert session.commit() == 4 - 1
    assert session.print() == "debugger;\na();\nb();\n;"
    assert session.pending == 0


def test_deleting_optional_and_required_fields() -> None:
    session = RefactorSession("function f() { return 1; } x = 2;")
    (value,) = session.query("ReturnStatement > LiteralNumericExpression")
    session.queue_deletion(value)
    session.commit()
    assert session.print().startswith("function f() {\n  return;\n}")

    (required,) = session.query("AssignmentExpression > LiteralNumericExpression")
    session.queue_deletion(required)
    with pytest.raises(InconsistentStateError):
        session.commit()


def test_conditional_cleanup_removes_empty_declarations() -> None:
    session = RefactorSession("let a = 1; if (x) var b = 2; for (var c = 0;;) break;")
    for declarator in session.query("VariableDeclarator"):
        session.queue_deletion(declarator)
    removed = session.conditional_cleanup()
    assert removed == 3
    assert session.print() == "if (x)\n  ;\nfor (;;)\n  break;"


def test_build_parent_map_covers_every_non_root_node() -> None:
    session = RefactorSession("function f(a, [b, , c]) { return a ? b : c; }")
    parents = build_parent_map(session.tree)
    nodes = list(js.walk(session.tree))
    assert len(parents) == len(nodes) - 1


def test_rejects_non_script_roots() -> None:
    with pytest.raises(TypeError):
        RefactorSession(js.IdentifierExpression(name="a"))  # type: ignore[arg-type]
