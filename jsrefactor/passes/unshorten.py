"""Inline ``short = long`` aliases back to the name they abbreviate."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, TYPE_CHECKING

from .. import js_ast as js
from ..scope import LookupTable, Variable
from .renaming import PlannedRename, apply_renames, mapping

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..pipeline import Context
    from ..session import RefactorSession


LOG = logging.getLogger(__name__)


def _merge_into(table: LookupTable, alias: Variable, target: Variable) -> None:
    """Make ``target`` own every occurrence of ``alias`` so later renames carry them."""

    target.declarations.extend(alias.declarations)
    target.references.extend(alias.references)
    for node in alias.occurrences():
        table.variable_map[id(node)] = target


def unshorten(session: "RefactorSession", nodes: Iterable[js.Node]) -> List[PlannedRename]:
    """Merge each selected alias declarator into the identifier it is initialised with.

    Every declaration and reference of the alias takes the initialiser's name
    and the declarator is deleted; declaration statements left empty are
    removed by the session cleanup.  Nodes that are not simple
    ``name = identifier`` declarators are skipped.  The target name is not
    checked for shadowing by another binding visible at the alias' uses.
    """

    table = session.lookup_table
    plan: List[PlannedRename] = []
    for node in nodes:
        if not isinstance(node, js.VariableDeclarator):
            LOG.debug("unshorten: skipping non-VariableDeclarator %s", node.type)
            continue
        if not isinstance(node.init, js.IdentifierExpression):
            kind = node.init.type if node.init is not None else "missing"
            LOG.debug("unshorten: skipping declarator with %s initializer", kind)
            continue
        if not isinstance(node.binding, js.BindingIdentifier):
            LOG.debug("unshorten: skipping destructuring %s", node.binding.type)
            continue
        variable = table.lookup(node.binding)
        target = table.lookup(node.init)
        # An earlier alias in this batch may already have renamed the initializer.
        item = PlannedRename(variable, node.init.name, scope_type="alias")
        apply_renames(session, [item])
        if target is not variable:
            _merge_into(table, variable, target)
        plan.append(item)
        session.queue_deletion(node)

    removed = session.conditional_cleanup()
    LOG.debug("unshorten merged %d alias(es), cleanup removed %d statement(s)", len(plan), removed)
    return plan


def run(ctx: "Context") -> Dict[str, object]:
    selector = ctx.options.get("unshorten_selector")
    if not selector:
        return {"skipped": True, "reason": "no selector"}
    session = ctx.require_session()
    plan = unshorten(session, session.query(selector))
    return {
        "selector": selector,
        "unshortened": len(plan),
        "mapping": mapping(plan),
    }


__all__ = ["run", "unshorten"]
