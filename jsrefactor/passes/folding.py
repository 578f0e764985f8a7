"""Literal folding and normalisation rules built on :mod:`.rewrite`."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple, TYPE_CHECKING

from .. import js_ast as js
from .rewrite import RewriteRule, apply_rules

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..pipeline import Context
    from ..session import ParentLink, RefactorSession


LOG = logging.getLogger(__name__)

# Keys whose static spelling means something different from the computed one.
_SPECIAL_PROPERTY_KEYS = frozenset({"__proto__", "constructor"})


def fold_conditional(node: js.Node) -> Optional[js.Node]:
    if not isinstance(node, js.ConditionalExpression) or not js.is_literal(node.test):
        return None
    return node.consequent if js.literal_truthiness(node.test) else node.alternate


def fold_comma(node: js.Node) -> Optional[js.Node]:
    if not isinstance(node, js.BinaryExpression) or node.operator != ",":
        return None
    if not js.is_literal(node.left):
        return None
    return node.right


def expand_negated_number(node: js.Node) -> Optional[js.Node]:
    if not isinstance(node, js.UnaryExpression) or node.operator != "!":
        return None
    operand = node.operand
    if not isinstance(operand, js.LiteralNumericExpression):
        return None
    if operand.value == 0:
        return js.LiteralBooleanExpression(value=True)
    if operand.value == 1:
        return js.LiteralBooleanExpression(value=False)
    return None


def static_member(node: js.Node) -> Optional[js.Node]:
    if isinstance(node, js.ComputedMemberExpression) and isinstance(
        node.expression, js.LiteralStringExpression
    ):
        return js.StaticMemberExpression(object=node.object, property=node.expression.value)
    return None


def static_member_target(node: js.Node) -> Optional[js.Node]:
    if isinstance(node, js.ComputedMemberAssignmentTarget) and isinstance(
        node.expression, js.LiteralStringExpression
    ):
        return js.StaticMemberAssignmentTarget(object=node.object, property=node.expression.value)
    return None


def static_property_name(node: js.Node) -> Optional[js.Node]:
    if not isinstance(node, js.ComputedPropertyName):
        return None
    if not isinstance(node.expression, js.LiteralStringExpression):
        return None
    if node.expression.value in _SPECIAL_PROPERTY_KEYS:
        return None
    return js.StaticPropertyName(value=node.expression.value)


def keeps_call_receiver(node: js.Node, link: "ParentLink") -> bool:
    """Whether dropping the sequence would change how the callee is invoked.

    ``(0, obj.m)()`` calls ``m`` without ``obj`` as ``this`` and
    ``(0, eval)(src)`` is an indirect eval; both lose that when unwrapped.
    """

    parent = link.parent
    if not (
        (isinstance(parent, js.CallExpression) and link.field == "callee")
        or (isinstance(parent, js.TemplateExpression) and link.field == "tag")
    ):
        return False
    callee = node.right
    if isinstance(callee, (js.StaticMemberExpression, js.ComputedMemberExpression)):
        return True
    return isinstance(callee, js.IdentifierExpression) and callee.name == "eval"


CONDITIONAL_RULES: Tuple[RewriteRule, ...] = (
    RewriteRule("fold_conditional", "ConditionalExpression", fold_conditional),
)
COMMA_RULES: Tuple[RewriteRule, ...] = (
    RewriteRule(
        "fold_comma",
        'BinaryExpression[operator=","]',
        fold_comma,
        keep=keeps_call_receiver,
    ),
)
BOOLEAN_RULES: Tuple[RewriteRule, ...] = (
    RewriteRule("expand_true", 'UnaryExpression[operator="!"][operand.value=0]', expand_negated_number),
    RewriteRule("expand_false", 'UnaryExpression[operator="!"][operand.value=1]', expand_negated_number),
)
COMPUTED_RULES: Tuple[RewriteRule, ...] = (
    RewriteRule(
        "static_member",
        'ComputedMemberExpression[expression.type="LiteralStringExpression"]',
        static_member,
    ),
    RewriteRule(
        "static_member_target",
        'ComputedMemberAssignmentTarget[expression.type="LiteralStringExpression"]',
        static_member_target,
    ),
    RewriteRule(
        "static_property_name",
        'ComputedPropertyName[expression.type="LiteralStringExpression"]',
        static_property_name,
    ),
)


def compress_conditional_expressions(session: "RefactorSession", roots: Optional[List[js.Node]] = None) -> int:
    return apply_rules(session, CONDITIONAL_RULES, roots)


def compress_comma_operators(session: "RefactorSession", roots: Optional[List[js.Node]] = None) -> int:
    return apply_rules(session, COMMA_RULES, roots)


def expand_boolean(session: "RefactorSession", roots: Optional[List[js.Node]] = None) -> int:
    count = apply_rules(session, BOOLEAN_RULES, roots)
    session.conditional_cleanup()
    return count


def convert_computed_to_static(session: "RefactorSession", roots: Optional[List[js.Node]] = None) -> int:
    return apply_rules(session, COMPUTED_RULES, roots)


def _run(ctx: "Context", action) -> Dict[str, object]:
    session = ctx.require_session()
    folded = action(session)
    return {"folded": folded, "changed": folded > 0}


def run_expand_boolean(ctx: "Context") -> Dict[str, object]:
    return _run(ctx, expand_boolean)


def run_compress_conditionals(ctx: "Context") -> Dict[str, object]:
    return _run(ctx, compress_conditional_expressions)


def run_compress_commas(ctx: "Context") -> Dict[str, object]:
    return _run(ctx, compress_comma_operators)


def run_computed_to_static(ctx: "Context") -> Dict[str, object]:
    return _run(ctx, convert_computed_to_static)


__all__ = [
    "BOOLEAN_RULES",
    "COMMA_RULES",
    "COMPUTED_RULES",
    "CONDITIONAL_RULES",
    "compress_comma_operators",
    "compress_conditional_expressions",
    "convert_computed_to_static",
    "expand_boolean",
    "fold_comma",
    "fold_conditional",
    "keeps_call_receiver",
    "run_compress_commas",
    "run_compress_conditionals",
    "run_computed_to_static",
    "run_expand_boolean",
]
