from __future__ import annotations

import pytest

from jsrefactor import js_ast as js
from jsrefactor.exceptions import SelectorError
from jsrefactor.query import compile_selector, query


@pytest.fixture
def tree(parse):
    return parse(
        """
        let a = 1, r = require;
        function f(x) { return x ? "yes" : g(0); }
        obj.prop = [1, 2];
        i++;
        """
    )


def _names(nodes):
    return [getattr(node, "name", None) for node in nodes]


def test_kind_selector_in_document_order(tree) -> None:
    found = query(tree, "VariableDeclarator")
    assert [node.binding.name for node in found] == ["a", "r"]


def test_attribute_path_and_value(tree) -> None:
    (found,) = query(tree, 'VariableDeclarator[init.name="require"]')
    assert found.binding.name == "r"
    assert query(tree, "VariableDeclarator[init.name=require]") == [found]


def test_type_attribute_and_not_equal(tree) -> None:
    assert len(query(tree, 'VariableDeclarator[init.type="IdentifierExpression"]')) == 1
    assert len(query(tree, 'VariableDeclarator[init.type!="IdentifierExpression"]')) == 1


def test_presence_and_camel_case_fields(tree) -> None:
    assert len(query(tree, "UpdateExpression[isPrefix=false]")) == 1
    assert query(tree, "UpdateExpression[isPrefix=0]") == []
    assert len(query(tree, "FunctionDeclaration[name]")) == 1


def test_numbers_and_strings(tree) -> None:
    assert len(query(tree, "LiteralNumericExpression[value=1]")) == 2
    assert len(query(tree, 'LiteralStringExpression[value="yes"]')) == 1
    assert len(query(tree, "ArrayExpression[elements.length=2]")) == 1


def test_alternatives_keep_document_order(tree) -> None:
    found = query(tree, "ReturnStatement, VariableDeclarationStatement")
    assert [node.type for node in found] == ["VariableDeclarationStatement", "ReturnStatement"]


def test_descendant_and_child_combinators(tree) -> None:
    assert _names(query(tree, "FunctionDeclaration IdentifierExpression")) == ["x", "g"]
    assert _names(query(tree, "CallExpression > IdentifierExpression")) == ["g"]
    assert query(tree, "FunctionDeclaration > IdentifierExpression") == []


def test_wildcard_matches_everything(tree) -> None:
    assert len(query(tree, "*")) == sum(1 for _ in js.walk(tree))


def test_root_is_included(tree) -> None:
    assert query(tree, "Script") == [tree]


@pytest.mark.parametrize(
    "selector",
    ["", "Nope", "[", "A[b=]", "VariableDeclarator[init.name='x'", "Script >", "Script $"],
)
def test_malformed_selectors(selector: str) -> None:
    with pytest.raises(SelectorError):
        compile_selector(selector)
