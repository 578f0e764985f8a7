"""Propose / validate / commit rewriting driven by selectors."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, TYPE_CHECKING

from .. import js_ast as js
from ..validator import is_valid

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..session import ParentLink, RefactorSession


LOG = logging.getLogger(__name__)

Proposer = Callable[[js.Node], Optional[js.Node]]
Validator = Callable[[js.Node], bool]
Guard = Callable[[js.Node, "ParentLink"], bool]


@dataclass(frozen=True)
class RewriteRule:
    """A structural rewrite.

    ``propose`` is pure: it inspects a matched node and returns a candidate
    replacement or ``None``.  ``validate`` decides whether the candidate may
    be committed; rejected candidates leave the original node in place.
    ``keep`` sees the matched node and where it sits, and can veto the
    rewrite for that position.
    """

    name: str
    selector: str
    propose: Proposer
    validate: Validator = is_valid
    keep: Optional[Guard] = None

    def rewrite(self, node: js.Node) -> js.Node:
        candidate = self.propose(node)
        if candidate is None or not self.validate(candidate):
            return node
        return candidate


def apply_rule(
    session: "RefactorSession",
    rule: RewriteRule,
    roots: Optional[List[js.Node]] = None,
) -> int:
    """Apply ``rule`` until a rescan commits nothing; returns the commit count.

    ``roots`` limits the rewrite to those subtrees, see
    :meth:`~jsrefactor.session.RefactorSession.replace_recursive`.
    """

    def rewrite(node: js.Node) -> js.Node:
        if rule.keep is not None and rule.keep(node, session.parent_of(node)):
            return node
        return rule.rewrite(node)

    count = session.replace_recursive(rule.selector, rewrite, roots=roots)
    if count:
        LOG.debug("rule %s rewrote %d node(s)", rule.name, count)
    return count


def apply_rules(
    session: "RefactorSession",
    rules: Iterable[RewriteRule],
    roots: Optional[List[js.Node]] = None,
) -> int:
    return sum(apply_rule(session, rule, roots) for rule in rules)


__all__ = ["RewriteRule", "apply_rule", "apply_rules"]
